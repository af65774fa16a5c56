"""
Validating-constructor synthesis.

Emitted only for declarations carrying ``generate-validator``. The generated
``build()`` walks the fields once, in declared order:

- a ``defaultable`` field that is absent resolves to its type's default;
- any other absent field raises ``MissingField(<name>)`` immediately, so the
  error always names the first missing field and later ones are not looked at;
- when every field resolved, the record is constructed from the values.
"""

from typing import List, Mapping, Optional

from .code import Fragment, indent_lines
from .config import GeneratorConfig
from .directives import ParsedDeclaration
from .shapes import default_expression_for


def generate_build(
    parsed: ParsedDeclaration,
    config: GeneratorConfig,
    records: Optional[Mapping[str, Optional[str]]] = None,
) -> Fragment:
    """
    Emit the ``build()`` method of a companion builder.

    ``records`` maps the other records of the module to the expression that
    builds one from defaults (None when that is impossible); a defaultable
    field typed as one of them falls back to that expression.

    Raises:
        UnderivableDefault: If a defaultable field's type has no default value
    """
    body: List[str] = []
    if config.emit_docstrings:
        body += [
            f'"""Assemble a :class:`{parsed.name}` from the fields set so far.',
            "",
            "Raises:",
            "    MissingField: For the first required field, in declared order, that was never set",
            '"""',
        ]

    runtime_names = set()
    for field, directives in parsed.field_items():
        local = f"_{field.name}"
        body.append(f"{local} = self._{field.name}")
        body.append(f"if {local} is ABSENT:")
        if directives.defaultable:
            location = field.location or parsed.declaration.location
            default = default_expression_for(field.type, records, location)
            body.append(f"    {local} = {default}")
        else:
            body.append(f'    raise MissingField("{field.name}")')
            runtime_names.add("MissingField")
        runtime_names.add("ABSENT")

    args = ", ".join(f"_{f.name}" for f in parsed.fields)
    body.append(f"return {parsed.name}({args})")

    lines = [f"def build(self) -> {parsed.name}:"] + indent_lines(body)
    return Fragment(lines, frozenset(), frozenset(runtime_names))
