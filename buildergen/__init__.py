"""
buildergen - Generate record types with fluent companion builders

Describe a record once, with directives on the declaration and its fields,
and buildergen writes the boilerplate: read-only accessors, a companion
builder with one ``with_<field>`` setter per field, and optionally a
validating ``build()`` that reports the first missing required field.

Example:
    from typing import Annotated, List
    from buildergen import declaration, expose, defaultable, generate_validator
    from buildergen import emit_schema, schema_from_classes

    @declaration(generate_validator)
    class Agent:
        public_key: Annotated[str, expose]
        known_enemies: Annotated[List[str], expose]
        role: Annotated[str, expose, defaultable]

    module_source = emit_schema(schema_from_classes(Agent)).source
    # AgentBuilder().with_public_key("k").with_known_enemies([]).build().role == ""
"""

__version__ = "1.0.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"
__license__ = "MIT"

from .directives import (
    custom_name,
    defaultable,
    expose,
    generate_validator,
    parse_directives,
)
from .emitter import (
    Diagnostic,
    EmissionResult,
    GeneratedUnit,
    emit_declaration,
    emit_schema,
    load_generated,
    render_module,
)
from .config import GeneratorConfig
from .errors import (
    BuildergenError,
    DuplicateDeclaration,
    DuplicateField,
    GenerationError,
    InvalidIdentifier,
    MalformedDirectiveArgument,
    SchemaError,
    UnderivableDefault,
    UnrecognizedGenericShape,
    UnsupportedShape,
)
from .frontend import (
    declaration,
    declaration_from_class,
    load_schema,
    schema_from_classes,
    schema_from_dict,
)
from .runtime import ABSENT, ConstructionError, MissingField
from .schema import (
    Annotation,
    DeclarationKind,
    Field,
    Opaque,
    Schema,
    SequenceOf,
    SourceLocation,
    Text,
    TypeDeclaration,
)

__all__ = [
    "ABSENT",
    "Annotation",
    "BuildergenError",
    "ConstructionError",
    "DeclarationKind",
    "Diagnostic",
    "DuplicateDeclaration",
    "DuplicateField",
    "EmissionResult",
    "Field",
    "GeneratedUnit",
    "GenerationError",
    "GeneratorConfig",
    "InvalidIdentifier",
    "MalformedDirectiveArgument",
    "MissingField",
    "Opaque",
    "Schema",
    "SchemaError",
    "SequenceOf",
    "SourceLocation",
    "Text",
    "TypeDeclaration",
    "UnderivableDefault",
    "UnrecognizedGenericShape",
    "UnsupportedShape",
    "custom_name",
    "declaration",
    "declaration_from_class",
    "defaultable",
    "emit_declaration",
    "emit_schema",
    "expose",
    "generate_validator",
    "load_generated",
    "load_schema",
    "parse_directives",
    "render_module",
    "schema_from_classes",
    "schema_from_dict",
]
