"""Emission of the record type itself: storage, construction, equality and accessors."""

from typing import List

from .accessors import generate_accessors
from .code import Fragment, format_tuple, indent_lines, typing_names_for
from .config import GeneratorConfig
from .directives import ParsedDeclaration
from .shapes import annotation_for


def _init_lines(parsed: ParsedDeclaration) -> List[str]:
    params = ["self"] + [f"{f.name}: {annotation_for(f.type)}" for f in parsed.fields]
    lines = [f"def __init__({', '.join(params)}) -> None:"]
    body = [f"self._{f.name} = {f.name}" for f in parsed.fields] or ["pass"]
    return lines + indent_lines(body)


def _eq_lines(parsed: ParsedDeclaration) -> List[str]:
    mine = ", ".join(f"self._{f.name}" for f in parsed.fields)
    theirs = ", ".join(f"other._{f.name}" for f in parsed.fields)
    if len(parsed.fields) == 1:
        mine, theirs = mine + ",", theirs + ","
    return [
        "def __eq__(self, other: object) -> bool:",
        f"    if not isinstance(other, {parsed.name}):",
        "        return NotImplemented",
        f"    return ({mine}) == ({theirs})",
    ]


def _repr_lines(parsed: ParsedDeclaration) -> List[str]:
    fields_str = ", ".join(f"{f.name}={{self._{f.name}!r}}" for f in parsed.fields)
    return [
        "def __repr__(self) -> str:",
        f'    return f"{parsed.name}({fields_str})"',
    ]


def generate_record(parsed: ParsedDeclaration, config: GeneratorConfig) -> Fragment:
    """
    Emit the record class for a declaration.

    Values live in ``_<field>`` slots in declared order; the constructor takes
    them positionally in the same order.
    """
    typing_names = frozenset()
    for field in parsed.fields:
        typing_names = typing_names | typing_names_for(field.type)

    body: List[str] = []
    if config.emit_docstrings:
        body += [f'"""Record type ``{parsed.name}``; build it with :class:`{parsed.companion_name}`."""', ""]
    body.append(f"__slots__ = {format_tuple('_' + f.name for f in parsed.fields)}")
    for method in (_init_lines(parsed), _eq_lines(parsed), _repr_lines(parsed)):
        body.append("")
        body.extend(method)

    accessors = generate_accessors(parsed, config)
    if accessors.lines:
        body.append("")
        body.extend(accessors.lines)

    lines = [f"class {parsed.name}:"] + indent_lines(body)
    return Fragment(
        lines,
        typing_names | accessors.typing_names,
        accessors.runtime_names,
    )

