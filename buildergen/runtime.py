"""
Runtime support for generated modules.

Generated records and companion builders import from here: the ``ABSENT``
presence marker, the construction errors raised by ``build()``, read-only
sequence views handed out by accessors, and the companion base class.
"""

import copy
from collections.abc import Sequence
from typing import Any, Iterator, Protocol, Tuple, TypeVar, overload, runtime_checkable

T = TypeVar("T")
R = TypeVar("R", covariant=True)


# --- Presence Marker ---
class Absent:
    """Marker type of a presence box holding no value."""

    _instance = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "Absent":
        return self

    def __deepcopy__(self, memo: dict) -> "Absent":
        return self

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = Absent()


# --- Construction Errors ---
class ConstructionError(Exception):
    """Base class for errors raised when a companion builder cannot build its record."""


class MissingField(ConstructionError):
    """A required field was never set on the builder."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name)
        self.field_name = field_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MissingField):
            return NotImplemented
        return self.field_name == other.field_name

    def __hash__(self) -> int:
        return hash((MissingField, self.field_name))

    def __str__(self) -> str:
        return f"MissingField: {self.field_name}"

    def __repr__(self) -> str:
        return f"MissingField({self.field_name!r})"


# --- Read-only Sequence View ---
class SequenceView(Sequence):
    """Read-only view over a list; reflects the backing list without copying it."""

    __slots__ = ("_items",)

    def __init__(self, items: Any) -> None:
        self._items = items

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Any, ...]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceView):
            other = other._items
        if isinstance(other, (list, tuple)):
            return len(self._items) == len(other) and all(
                a == b for a, b in zip(self._items, other)
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SequenceView({list(self._items)!r})"


# --- Companion Builder Base ---
class CompanionBuilder:
    """
    Base class of generated companion builders.

    Subclasses declare ``_fields`` (field names in declared order) and one
    ``_<field>`` slot per field holding either ``ABSENT`` or a value.
    Setters never mutate the receiver; they return a new builder.
    """

    __slots__ = ()
    _fields: Tuple[str, ...] = ()

    def _replace(self: T, name: str, value: Any) -> T:
        builder = copy.copy(self)
        object.__setattr__(builder, f"_{name}", value)
        return builder

    def is_set(self, name: str) -> bool:
        """Return True when the named field's presence box holds a value."""
        if name not in self._fields:
            raise AttributeError(
                f"'{self.__class__.__name__}' has no field '{name}'. "
                f"Valid fields are: {', '.join(self._fields)}."
            )
        return getattr(self, f"_{name}") is not ABSENT

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of fields whose presence box is still empty, in declared order."""
        return tuple(name for name in self._fields if not self.is_set(name))

    def copy(self: T) -> T:
        """Return an independent copy of this builder."""
        return copy.copy(self)

    def __copy__(self):
        cls = self.__class__
        builder = cls.__new__(cls)
        for name in self._fields:
            object.__setattr__(builder, f"_{name}", getattr(self, f"_{name}"))
        return builder

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") and name[1:] in self._fields and not hasattr(self, name):
            # Initial assignment from the generated __init__
            object.__setattr__(self, name, value)
            return
        raise AttributeError(
            f"'{self.__class__.__name__}' fields are set through with_<field>() methods"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return all(
            getattr(self, f"_{name}") == getattr(other, f"_{name}") for name in self._fields
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields_str = ", ".join(f"{name}={getattr(self, f'_{name}')!r}" for name in self._fields)
        return f"{self.__class__.__name__}({fields_str})"


# --- Build Protocol ---
@runtime_checkable
class Build(Protocol[R]):
    """Anything that turns itself into a finished value; generated ``build()`` satisfies it."""

    def build(self) -> R: ...
