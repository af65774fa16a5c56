"""
Companion-type synthesis.

The companion ("builder") type mirrors its record: one presence box per
field, in declared order, each starting out ``ABSENT``. ``with_<field>``
setters return a new builder holding the value, so chains read left to
right and a builder handed to someone else is never changed behind their
back. Setting a field twice keeps the last value.
"""

from typing import Iterable, List, Optional

from .code import Fragment, format_tuple, indent_lines, typing_names_for
from .config import GeneratorConfig
from .directives import ParsedDeclaration
from .schema import Field
from .shapes import annotation_for


def generate_setter(field: Field, builder_name: str, config: GeneratorConfig) -> List[str]:
    lines = [f"def with_{field.name}(self, value: {annotation_for(field.type)}) -> {builder_name}:"]
    body = []
    if config.emit_docstrings:
        body.append(f'"""Return a builder with ``{field.name}`` set to ``value``."""')
    body.append(f'return self._replace("{field.name}", value)')
    return lines + indent_lines(body)


def _init_lines(parsed: ParsedDeclaration) -> List[str]:
    body = [
        f"self._{f.name}: Union[{annotation_for(f.type)}, Absent] = ABSENT" for f in parsed.fields
    ] or ["pass"]
    return ["def __init__(self) -> None:"] + indent_lines(body)


def generate_companion(
    parsed: ParsedDeclaration,
    config: GeneratorConfig,
    methods: Optional[Iterable[Fragment]] = None,
) -> Fragment:
    """
    Emit the companion class for a declaration.

    Args:
        parsed: Declaration with its parsed directives
        config: Generator options
        methods: Extra method fragments appended to the class body
            (the validating ``build()`` when it is requested)

    Returns:
        Fragment holding the class definition
    """
    name = parsed.companion_name
    typing_names = frozenset({"Union"}) if parsed.fields else frozenset()
    runtime_names = frozenset({"CompanionBuilder"})
    if parsed.fields:
        runtime_names = runtime_names | {"ABSENT", "Absent"}
    for field in parsed.fields:
        typing_names = typing_names | typing_names_for(field.type)

    body: List[str] = []
    if config.emit_docstrings:
        if parsed.directives.generate_validator:
            body += [f'"""Companion builder for :class:`{parsed.name}`."""', ""]
        else:
            body += [
                f'"""Companion builder for :class:`{parsed.name}`.',
                "",
                "No ``build()`` is generated; subclasses supply one, satisfying",
                f":class:`{config.runtime_module}.Build`.",
                '"""',
                "",
            ]
    body.append(f"__slots__ = {format_tuple('_' + f.name for f in parsed.fields)}")
    body.append(f"_fields = {format_tuple(f.name for f in parsed.fields)}")
    body.append("")
    body.extend(_init_lines(parsed))

    for field in parsed.fields:
        body.append("")
        body.extend(generate_setter(field, name, config))

    fragment = Fragment([], typing_names, runtime_names)
    for method in methods or ():
        body.append("")
        body.extend(method.lines)
        fragment.typing_names = fragment.typing_names | method.typing_names
        fragment.runtime_names = fragment.runtime_names | method.runtime_names

    fragment.lines = [f"class {name}(CompanionBuilder):"] + indent_lines(body)
    return fragment
