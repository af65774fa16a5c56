"""
Declaration frontends.

Two ways to describe the types to generate:

JSON schema documents::

    {
      "imports": ["from decimal import Decimal"],
      "declarations": [
        {
          "name": "Organization",
          "directives": ["generate-validator", {"name": "custom-name", "value": "OrgBuilder"}],
          "fields": [{"name": "org_id", "type": "str", "directives": ["expose"]}]
        }
      ]
    }

Python class stubs::

    @declaration(generate_validator, custom_name("OrgBuilder"))
    class Organization:
        org_id: Annotated[str, expose]

Both produce :class:`~buildergen.schema.TypeDeclaration` values. Field types
are kept as written (type expression text or live hint) and resolved to
shapes per declaration by the emitter.
"""

import inspect
import json
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .errors import SchemaError
from .logging import get_logger
from .schema import Annotation, DeclarationKind, Field, Schema, SourceLocation, TypeDeclaration

logger = get_logger(__name__)

DIRECTIVES_ATTR = "__buildergen_directives__"

KIND_NAMES = {
    "record": DeclarationKind.RECORD,
    "struct": DeclarationKind.RECORD,
    "variant": DeclarationKind.VARIANT,
    "enum": DeclarationKind.VARIANT,
    "union": DeclarationKind.VARIANT,
}


# --- JSON Schema Documents ---
def _expect(value: Any, kind: type, what: str, location: SourceLocation) -> Any:
    if not isinstance(value, kind):
        raise SchemaError(f"{what} must be {_json_name(kind)}, got {_json_name(type(value))}", location)
    return value


def _json_name(kind: type) -> str:
    return {dict: "an object", list: "an array", str: "a string", bool: "a boolean",
            int: "a number", float: "a number", type(None): "null"}.get(kind, kind.__name__)


def _annotation_from_json(entry: Any, location: SourceLocation) -> Annotation:
    if isinstance(entry, str):
        return Annotation(entry, (), location)
    _expect(entry, dict, "directive", location)
    if "name" not in entry:
        raise SchemaError("directive object needs a 'name'", location)
    name = _expect(entry["name"], str, "directive name", location)
    unknown = sorted(set(entry) - {"name", "value", "args"})
    if unknown:
        raise SchemaError(f"unknown directive keys: {', '.join(unknown)}", location)
    if "value" in entry and "args" in entry:
        raise SchemaError("directive takes either 'value' or 'args', not both", location)
    if "value" in entry:
        return Annotation(name, (entry["value"],), location)
    args = _expect(entry.get("args", []), list, "directive args", location)
    return Annotation(name, tuple(args), location)


def _annotations_from_json(entries: Any, location: SourceLocation) -> Tuple[Annotation, ...]:
    _expect(entries, list, "directives", location)
    return tuple(
        _annotation_from_json(entry, location.child(f"directives[{i}]"))
        for i, entry in enumerate(entries)
    )


def _field_from_json(data: Any, location: SourceLocation) -> Field:
    _expect(data, dict, "field", location)
    for key in ("name", "type"):
        if key not in data:
            raise SchemaError(f"field needs a '{key}'", location)
    name = _expect(data["name"], str, "field name", location)
    type_text = _expect(data["type"], str, "field type", location)
    annotations = _annotations_from_json(data.get("directives", []), location)
    return Field(name, type_text, annotations, location)


def _declaration_from_json(data: Any, location: SourceLocation) -> TypeDeclaration:
    _expect(data, dict, "declaration", location)
    if "name" not in data:
        raise SchemaError("declaration needs a 'name'", location)
    name = _expect(data["name"], str, "declaration name", location)

    kind_name = _expect(data.get("kind", "record"), str, "declaration kind", location)
    if kind_name.lower() not in KIND_NAMES:
        raise SchemaError(
            f"unknown declaration kind '{kind_name}'; expected one of {', '.join(sorted(KIND_NAMES))}",
            location,
        )

    fields = _expect(data.get("fields", []), list, "fields", location)
    return TypeDeclaration(
        name=name,
        fields=tuple(
            _field_from_json(f, location.child(f"fields[{i}]")) for i, f in enumerate(fields)
        ),
        annotations=_annotations_from_json(data.get("directives", []), location),
        kind=KIND_NAMES[kind_name.lower()],
        location=location,
    )


def schema_from_dict(data: Any, path: Optional[str] = None) -> Schema:
    """Build a schema from a decoded JSON document."""
    root = SourceLocation(path)
    _expect(data, dict, "schema", root)
    if "declarations" not in data:
        raise SchemaError("schema needs a 'declarations' array", root)

    imports = _expect(data.get("imports", []), list, "imports", root.child("imports"))
    for i, statement in enumerate(imports):
        _expect(statement, str, "import", root.child(f"imports[{i}]"))

    declarations = _expect(data["declarations"], list, "declarations", root)
    schema = Schema(
        declarations=tuple(
            _declaration_from_json(d, root.child(f"declarations[{i}]"))
            for i, d in enumerate(declarations)
        ),
        imports=tuple(imports),
        location=root,
    )
    logger.debug(f"Read {len(schema.declarations)} declarations from {path or '<dict>'}")
    return schema


def load_schema(path: Union[str, Path]) -> Schema:
    """Read a JSON schema document from disk."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SchemaError(f"cannot read schema: {e}", SourceLocation(str(path))) from e
    except json.JSONDecodeError as e:
        raise SchemaError(
            f"invalid JSON: {e.msg}", SourceLocation(str(path), e.lineno, e.colno)
        ) from e
    return schema_from_dict(data, str(path))


# --- Python Class Stubs ---
def declaration(*directives: Annotation) -> Callable[[type], type]:
    """Decorator attaching declaration-level directives to a class stub."""
    if not all(isinstance(d, Annotation) for d in directives):
        raise TypeError("declaration directives must be Annotation instances.")

    def decorator(cls: type) -> type:
        setattr(cls, DIRECTIVES_ATTR, tuple(directives))
        return cls

    return decorator


def _class_location(cls: type) -> SourceLocation:
    try:
        path = inspect.getsourcefile(cls)
        line = inspect.getsourcelines(cls)[1]
    except (OSError, TypeError):
        return SourceLocation(pointer=cls.__qualname__)
    return SourceLocation(path, line, pointer=cls.__qualname__)


def declaration_from_class(cls: type) -> TypeDeclaration:
    """
    Read a declaration from a class stub.

    Field order is annotation order, base classes first. Field directives
    are the :class:`Annotation` items in ``Annotated[...]`` metadata; other
    metadata is ignored. ``Enum`` subclasses become variant declarations.
    """
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__name__}")

    location = _class_location(cls)
    annotations = tuple(
        replace(a, location=a.location or location) for a in cls.__dict__.get(DIRECTIVES_ATTR, ())
    )

    if issubclass(cls, Enum):
        return TypeDeclaration(cls.__name__, (), annotations, DeclarationKind.VARIANT, location)

    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise SchemaError(f"cannot resolve annotations of {cls.__qualname__}: {e}", location) from e

    fields: List[Field] = []
    for name, hint in hints.items():
        if get_origin(hint) is ClassVar:
            continue
        field_location = location.child(name)
        field_annotations: Tuple[Annotation, ...] = ()
        if get_origin(hint) is Annotated:
            args = get_args(hint)
            hint = args[0]
            field_annotations = tuple(
                replace(m, location=m.location or field_location)
                for m in args[1:]
                if isinstance(m, Annotation)
            )
        fields.append(Field(name, hint, field_annotations, field_location))

    return TypeDeclaration(cls.__name__, tuple(fields), annotations, DeclarationKind.RECORD, location)


def schema_from_classes(*classes: type, imports: Tuple[str, ...] = ()) -> Schema:
    """Build a schema from class stubs, in the order given."""
    return Schema(tuple(declaration_from_class(cls) for cls in classes), tuple(imports))


def field_metadata(cls: type) -> Dict[str, Tuple[Annotation, ...]]:
    """Directives attached to each field of a class stub."""
    return {f.name: f.annotations for f in declaration_from_class(cls).fields}
