"""
Directive parsing.

Directives are statically enumerated annotations that change what the
generator emits. Each level (declaration, field) recognizes its own
vocabulary; anything else is ignored so schemas can carry metadata meant
for other tools.
"""

import keyword
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import (
    DuplicateField,
    InvalidIdentifier,
    MalformedDirectiveArgument,
    UnsupportedShape,
)
from .logging import get_logger
from .schema import Annotation, DeclarationKind, Field, SourceLocation, TypeDeclaration

logger = get_logger(__name__)

CUSTOM_NAME = "custom-name"
GENERATE_VALIDATOR = "generate-validator"
EXPOSE = "expose"
DEFAULTABLE = "defaultable"

DECLARATION_DIRECTIVES = frozenset({CUSTOM_NAME, GENERATE_VALIDATOR})
FIELD_DIRECTIVES = frozenset({EXPOSE, DEFAULTABLE})

# Field names whose `_<name>` slot would shadow CompanionBuilder internals, plus `self`
RESERVED_FIELD_NAMES = frozenset({"self", "fields", "replace"})

# Older attribute spellings, still accepted
LEGACY_ALIASES: Dict[str, str] = {
    "builder-name": CUSTOM_NAME,
    "gen-build-impl": GENERATE_VALIDATOR,
    "getter": EXPOSE,
    "optional": DEFAULTABLE,
}


def canonical_name(name: str) -> str:
    """Normalize a directive name: ``custom_name`` and ``builder_name`` become ``custom-name``."""
    normalized = name.strip().lower().replace("_", "-")
    return LEGACY_ALIASES.get(normalized, normalized)


# --- Directive Markers ---
# Usable directly as ``Annotated`` metadata or ``@declaration`` arguments.
expose = Annotation(EXPOSE)
defaultable = Annotation(DEFAULTABLE)
generate_validator = Annotation(GENERATE_VALIDATOR)


def custom_name(name: str) -> Annotation:
    """Directive overriding the companion type name."""
    return Annotation(CUSTOM_NAME, (name,))


# --- Parsed Directive Sets ---
@dataclass(frozen=True)
class DeclarationDirectives:
    custom_name: Optional[str] = None
    generate_validator: bool = False


@dataclass(frozen=True)
class FieldDirectives:
    expose: bool = False
    defaultable: bool = False


@dataclass(frozen=True)
class ParsedDeclaration:
    """A declaration together with the directives found on it and its fields."""

    declaration: TypeDeclaration
    directives: DeclarationDirectives
    field_directives: Tuple[FieldDirectives, ...]

    @property
    def name(self) -> str:
        return self.declaration.name

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self.declaration.fields

    @property
    def companion_name(self) -> str:
        return self.directives.custom_name or f"{self.declaration.name}Builder"

    def field_items(self) -> Tuple[Tuple[Field, FieldDirectives], ...]:
        return tuple(zip(self.declaration.fields, self.field_directives))


def is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _string_argument(annotation: Annotation, fallback: Optional[SourceLocation]) -> str:
    location = annotation.location or fallback
    if not annotation.args:
        raise MalformedDirectiveArgument(annotation.name, "expected a string argument", location)
    if len(annotation.args) > 1:
        raise MalformedDirectiveArgument(
            annotation.name, f"expected one argument, got {len(annotation.args)}", location
        )
    value = annotation.args[0]
    if not isinstance(value, str):
        raise MalformedDirectiveArgument(
            annotation.name, f"expected a string, got {type(value).__name__}", location
        )
    return value


def parse_declaration_directives(declaration: TypeDeclaration) -> DeclarationDirectives:
    """Extract the declaration-level directive set from a declaration's annotations."""
    if declaration.kind is not DeclarationKind.RECORD:
        raise UnsupportedShape(declaration.name, declaration.kind.value, declaration.location)

    name: Optional[str] = None
    validator = False
    for annotation in declaration.annotations:
        directive = canonical_name(annotation.name)
        if directive == CUSTOM_NAME:
            value = _string_argument(annotation, declaration.location)
            if not is_identifier(value):
                raise MalformedDirectiveArgument(
                    annotation.name,
                    f"'{value}' is not a valid type name",
                    annotation.location or declaration.location,
                )
            # First custom name wins
            if name is None:
                name = value
        elif directive == GENERATE_VALIDATOR:
            validator = True
        elif directive in FIELD_DIRECTIVES:
            logger.debug(f"Ignoring field directive '{annotation.name}' on declaration '{declaration.name}'")
        else:
            logger.debug(f"Ignoring unrecognized directive '{annotation.name}' on declaration '{declaration.name}'")
    return DeclarationDirectives(custom_name=name, generate_validator=validator)


def parse_field_directives(field: Field) -> FieldDirectives:
    """Extract the field-level directive set from a field's annotations."""
    exposed = False
    optional = False
    for annotation in field.annotations:
        directive = canonical_name(annotation.name)
        if directive == EXPOSE:
            exposed = True
        elif directive == DEFAULTABLE:
            optional = True
        elif directive in DECLARATION_DIRECTIVES:
            logger.debug(f"Ignoring declaration directive '{annotation.name}' on field '{field.name}'")
        else:
            logger.debug(f"Ignoring unrecognized directive '{annotation.name}' on field '{field.name}'")
    return FieldDirectives(expose=exposed, defaultable=optional)


def parse_directives(declaration: TypeDeclaration) -> ParsedDeclaration:
    """Parse every directive of a declaration and check its names are usable."""
    if not is_identifier(declaration.name):
        raise InvalidIdentifier(declaration.name, "type", declaration.location)

    directives = parse_declaration_directives(declaration)

    seen = set()
    field_directives = []
    for field in declaration.fields:
        location = field.location or declaration.location
        if (
            not is_identifier(field.name)
            or field.name.startswith("_")
            or field.name in RESERVED_FIELD_NAMES
        ):
            raise InvalidIdentifier(field.name, "field", location)
        if field.name in seen:
            raise DuplicateField(declaration.name, field.name, location)
        seen.add(field.name)
        field_directives.append(parse_field_directives(field))

    parsed = ParsedDeclaration(declaration, directives, tuple(field_directives))
    if parsed.companion_name == declaration.name:
        raise MalformedDirectiveArgument(
            CUSTOM_NAME, "companion name must differ from the record name", declaration.location
        )
    return parsed
