"""
Exception hierarchy for generation-time failures.

Every error raised while turning a declaration into code derives from
``GenerationError`` and carries the source location it is anchored to.
The construction-time ``MissingField`` error belongs to generated code and
lives in :mod:`buildergen.runtime`.
"""

from typing import Any, Dict, Optional

from .schema import SourceLocation


class BuildergenError(Exception):
    """Base exception for all buildergen errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class SchemaError(BuildergenError):
    """
    Raised when a schema document or configuration file is structurally invalid.

    This covers problems the declaration parser finds before any directive is
    looked at: missing keys, wrong JSON types, unreadable files.
    """

    def __init__(self, message: str, location: Optional[SourceLocation] = None) -> None:
        details = {"location": str(location)} if location else None
        super().__init__(message, details)
        self.location = location


class GenerationError(BuildergenError):
    """
    Raised when code cannot be emitted for a declaration.

    Generation errors abort emission of the offending declaration only;
    the emission driver reports them as diagnostics and moves on.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.location = location


class UnsupportedShape(GenerationError):
    """Raised when a builder is requested for something that is not a record."""

    def __init__(self, name: str, kind: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"builder is only compatible with records, '{name}' is a {kind}",
            location,
            {"declaration": name, "kind": kind},
        )
        self.name = name
        self.kind = kind


class MalformedDirectiveArgument(GenerationError):
    """Raised when a directive that takes an argument is given a bad one."""

    def __init__(self, directive: str, reason: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"malformed argument for directive '{directive}': {reason}",
            location,
            {"directive": directive},
        )
        self.directive = directive
        self.reason = reason


class UnrecognizedGenericShape(GenerationError):
    """Raised when the element type of a sequence cannot be recovered."""

    def __init__(self, type_text: str, reason: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"type '{type_text}' does not have a recognizable generic: {reason}",
            location,
            {"type": type_text},
        )
        self.type_text = type_text
        self.reason = reason


class DuplicateField(GenerationError):
    """Raised when two fields of one declaration share a name."""

    def __init__(self, declaration: str, field_name: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"duplicate field '{field_name}' in '{declaration}'",
            location,
            {"declaration": declaration, "field": field_name},
        )
        self.declaration = declaration
        self.field_name = field_name


class InvalidIdentifier(GenerationError):
    """Raised when a declaration, field or companion name is not a usable identifier."""

    def __init__(self, name: str, role: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"'{name}' is not a valid {role} name",
            location,
            {"name": name, "role": role},
        )
        self.name = name
        self.role = role


class DuplicateDeclaration(GenerationError):
    """Raised when a record or companion name is already taken in the generated module."""

    def __init__(self, name: str, owner: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"name '{name}' is already used by '{owner}' in the generated module",
            location,
            {"name": name, "owner": owner},
        )
        self.name = name
        self.owner = owner


class UnderivableDefault(GenerationError):
    """Raised when a defaultable field's type has no default value to fall back to."""

    def __init__(self, type_text: str, reason: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(
            f"type '{type_text}' has no default value: {reason}",
            location,
            {"type": type_text},
        )
        self.type_text = type_text
        self.reason = reason
