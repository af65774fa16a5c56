"""
Accessor synthesis.

Every field carrying the ``expose`` directive gets a read-only property named
like the field. What the property hands out depends on the field's shape:

    Text        -> the stored ``str`` itself (immutable already)
    SequenceOf  -> a ``SequenceView`` over the stored list, no copy
    Opaque      -> the stored value, in place

Fields without ``expose`` get no accessor.
"""

from typing import List

from .code import Fragment, indent_lines
from .config import GeneratorConfig
from .directives import ParsedDeclaration
from .schema import Field, SequenceOf, Text
from .shapes import view_annotation_for


def generate_accessor(field: Field, config: GeneratorConfig) -> Fragment:
    """Emit the property for one field."""
    annotation = view_annotation_for(field.type)
    lines: List[str] = ["@property", f"def {field.name}(self) -> {annotation}:"]
    body: List[str] = []
    if config.emit_docstrings:
        what = "Read-only view of" if isinstance(field.type, SequenceOf) else "Value of"
        body.append(f'"""{what} the ``{field.name}`` field."""')
    typing_names = frozenset()
    runtime_names = frozenset()

    if isinstance(field.type, Text):
        body.append(f"return self._{field.name}")
    elif isinstance(field.type, SequenceOf):
        body.append(f"return SequenceView(self._{field.name})")
        typing_names = frozenset({"List", "Sequence"})
        runtime_names = frozenset({"SequenceView"})
    else:
        body.append(f"return self._{field.name}")

    lines.extend(indent_lines(body))
    return Fragment(lines, typing_names, runtime_names)


def generate_accessors(parsed: ParsedDeclaration, config: GeneratorConfig) -> Fragment:
    """Emit accessors for the exposed fields of a declaration, in declared order."""
    fragment = Fragment()
    for field, directives in parsed.field_items():
        if not directives.expose:
            continue
        if fragment.lines:
            fragment.lines.append("")
        fragment.extend(generate_accessor(field, config))
    return fragment
