"""Declaration model handed to the generator by a declaration parser."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union


# --- Source Locations ---
@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration, field or annotation came from."""

    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    pointer: Optional[str] = None

    def child(self, pointer: str) -> "SourceLocation":
        """Return a location nested under this one (e.g. ``fields[2]``)."""
        if self.pointer:
            pointer = f"{self.pointer}.{pointer}"
        return SourceLocation(self.path, self.line, self.column, pointer)

    def __str__(self) -> str:
        where = self.path or "<schema>"
        if self.line is not None:
            where = f"{where}:{self.line}"
            if self.column is not None:
                where = f"{where}:{self.column}"
        if self.pointer:
            where = f"{where} ({self.pointer})"
        return where


# --- Annotation Metadata ---
@dataclass(frozen=True)
class Annotation:
    """A raw piece of annotation metadata, recognized or not."""

    name: str
    args: Tuple[Any, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        if self.args:
            return f"Annotation({self.name!r}, {self.args!r})"
        return f"Annotation({self.name!r})"


# --- Type Descriptors ---
@dataclass(frozen=True)
class Text:
    """The text type."""


@dataclass(frozen=True)
class SequenceOf:
    """A sequence whose elements all have one declared type."""

    element: "TypeDescriptor"


@dataclass(frozen=True)
class Opaque:
    """Any other type, referenced by a Python type expression."""

    ref: str


TypeDescriptor = Union[Text, SequenceOf, Opaque]


# --- Declarations ---
class DeclarationKind(Enum):
    """Shape of a declared type."""

    RECORD = "record"
    VARIANT = "variant"


@dataclass(frozen=True)
class Field:
    name: str
    # A TypeDescriptor, or type expression text / a live hint still to be resolved
    type: Any
    annotations: Tuple[Annotation, ...] = ()
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class TypeDeclaration:
    """A named type with ordered fields and its declaration-level metadata."""

    name: str
    fields: Tuple[Field, ...] = ()
    annotations: Tuple[Annotation, ...] = ()
    kind: DeclarationKind = DeclarationKind.RECORD
    location: Optional[SourceLocation] = None

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class Schema:
    """Declarations emitted together into one module, plus the imports they need."""

    declarations: Tuple[TypeDeclaration, ...] = ()
    imports: Tuple[str, ...] = field(default_factory=tuple)
    location: Optional[SourceLocation] = None
