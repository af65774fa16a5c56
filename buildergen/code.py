"""Small helpers for assembling generated source text."""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from .schema import SequenceOf, TypeDescriptor
from .shapes import iter_descriptors

INDENT = "    "


@dataclass
class Fragment:
    """Generated lines plus the typing and runtime names they reference."""

    lines: List[str] = field(default_factory=list)
    typing_names: FrozenSet[str] = frozenset()
    runtime_names: FrozenSet[str] = frozenset()

    def extend(self, other: "Fragment") -> "Fragment":
        """Append another fragment's lines and merge the names it needs."""
        self.lines.extend(other.lines)
        self.typing_names = self.typing_names | other.typing_names
        self.runtime_names = self.runtime_names | other.runtime_names
        return self

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def indent_lines(lines: Iterable[str], level: int = 1, indent_str: str = INDENT) -> List[str]:
    """Indent every non-blank line by ``level`` steps."""
    prefix = indent_str * level
    return [f"{prefix}{line}" if line.strip() else "" for line in lines]


def typing_names_for(descriptor: TypeDescriptor) -> FrozenSet[str]:
    """``typing`` names needed to spell a stored value of this type."""
    if any(isinstance(d, SequenceOf) for d in iter_descriptors(descriptor)):
        return frozenset({"List"})
    return frozenset()


def format_tuple(names: Iterable[str]) -> str:
    """Render string literals as a tuple expression, keeping one-element tuples valid."""
    items = [repr(name) for name in names]
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"
