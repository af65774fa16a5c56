"""
Emission driver.

Runs directive parsing and the record, companion and validating-constructor
generators over declarations and stitches their output into a module.
Each declaration is an independent pass: a generation error aborts that
declaration only and is reported as a diagnostic anchored to its source.
"""

import types
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from .code import Fragment
from .companion import generate_companion
from .config import GeneratorConfig
from .construction import generate_build
from .directives import ParsedDeclaration, parse_directives
from .errors import DuplicateDeclaration, GenerationError, UnderivableDefault
from .logging import get_logger
from .record import generate_record
from .schema import Schema, SourceLocation, TypeDeclaration
from .shapes import default_expression_for, resolve_declaration

logger = get_logger(__name__)

HEADER = "# Generated by buildergen from {source}. Do not edit."
# Names generated modules import; declarations cannot reuse them
RUNTIME_NAMES = ("ABSENT", "Absent", "CompanionBuilder", "MissingField", "SequenceView")
TYPING_NAMES = ("List", "Sequence", "Union")


@dataclass(frozen=True)
class GeneratedUnit:
    """Generated source for one declaration."""

    name: str
    companion_name: str
    source: str
    has_validator: bool
    typing_names: FrozenSet[str] = frozenset()
    runtime_names: FrozenSet[str] = frozenset()
    imports: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Diagnostic:
    """A generation error reported against the declaration it aborted."""

    declaration: str
    location: Optional[SourceLocation]
    error: GenerationError

    @property
    def message(self) -> str:
        return self.error.message

    def __str__(self) -> str:
        where = self.location if self.location is not None else f"<{self.declaration}>"
        return f"{where}: error: {self.message}"


@dataclass
class EmissionResult:
    """Output of emitting a whole schema."""

    source: str
    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def emit_declaration(
    declaration: TypeDeclaration,
    config: Optional[GeneratorConfig] = None,
    records: Optional[Mapping[str, Optional[str]]] = None,
) -> GeneratedUnit:
    """
    Generate the record and companion classes for one declaration.

    Args:
        declaration: Declaration to generate code for
        config: Generator options (defaults when omitted)
        records: Default expressions of the other records in the module,
            used by defaultable fields typed as one of them

    Returns:
        The generated unit

    Raises:
        GenerationError: If the declaration or its directives are unusable
    """
    config = config or GeneratorConfig()
    parsed = parse_directives(declaration)
    resolved, imports = resolve_declaration(parsed.declaration)
    parsed = replace(parsed, declaration=resolved)
    logger.debug(
        f"Emitting '{parsed.name}' ({len(parsed.fields)} fields) "
        f"with companion '{parsed.companion_name}'"
    )

    record = generate_record(parsed, config)

    methods = []
    if parsed.directives.generate_validator:
        methods.append(generate_build(parsed, config, records))
    companion = generate_companion(parsed, config, methods)

    unit = Fragment().extend(record)
    unit.lines += ["", ""]
    unit.extend(companion)

    return GeneratedUnit(
        name=parsed.name,
        companion_name=parsed.companion_name,
        source=unit.text,
        has_validator=parsed.directives.generate_validator,
        typing_names=unit.typing_names,
        runtime_names=unit.runtime_names,
        imports=imports,
    )


def render_module(
    units: List[GeneratedUnit],
    imports: Tuple[str, ...] = (),
    config: Optional[GeneratorConfig] = None,
    source_name: str = "a schema",
) -> str:
    """Assemble generated units into the text of one Python module."""
    config = config or GeneratorConfig()
    exported = []
    for unit in units:
        exported += [unit.name, unit.companion_name]
    duplicates = sorted({name for name in exported if exported.count(name) > 1})
    if duplicates:
        raise ValueError(f"Generated names must be unique, got duplicates: {', '.join(duplicates)}")

    typing_names = set()
    runtime_names = set()
    statements = set(imports)
    for unit in units:
        typing_names |= unit.typing_names
        runtime_names |= unit.runtime_names
        statements |= unit.imports
    for statement in list(statements):
        if statement.startswith("from typing import "):
            statements.discard(statement)
            typing_names |= {n.strip() for n in statement[len("from typing import "):].split(",")}
    statements = {s for s in statements if not _imports_generated_name(s, exported)}

    lines: List[str] = []
    if config.emit_header:
        lines += [HEADER.format(source=source_name), ""]
    lines.append("from __future__ import annotations")
    lines.append("")

    if typing_names:
        lines.append(f"from typing import {', '.join(sorted(typing_names))}")
        lines.append("")
    if runtime_names:
        lines.append(f"from {config.runtime_module} import {', '.join(sorted(runtime_names))}")
    lines.extend(sorted(statements))
    if runtime_names or statements:
        lines.append("")
    lines.append(f"__all__ = [{', '.join(repr(name) for name in exported)}]")

    for unit in units:
        lines += ["", "", unit.source]

    text = "\n".join(lines) + "\n"
    if config.indent_size != 4:
        text = _reindent(text, config.indent)
    return text


def _imports_generated_name(statement: str, generated: List[str]) -> bool:
    # Class stubs referring to each other import the stub; the generated class replaces it
    if not statement.startswith("from ") or " import " not in statement:
        return False
    names = statement.split(" import ", 1)[1].split(",")
    return len(names) == 1 and names[0].strip() in generated


def _reindent(text: str, indent: str) -> str:
    out = []
    for line in text.split("\n"):
        stripped = line.lstrip(" ")
        depth, rest = divmod(len(line) - len(stripped), 4)
        out.append(indent * depth + " " * rest + stripped)
    return "\n".join(out)


def _record_defaults(schema: Schema) -> Dict[str, Optional[str]]:
    """
    Map every record of a schema to the expression building it from defaults.

    A record qualifies when it has a generated ``build()`` and every field is
    defaultable with a derivable default; records referring to each other
    qualify only once their dependencies do, so cycles never do.
    """
    candidates: Dict[str, ParsedDeclaration] = {}
    for declaration in schema.declarations:
        try:
            parsed = parse_directives(declaration)
            resolved, _ = resolve_declaration(parsed.declaration)
        except GenerationError:
            # Reported by the emission pass
            continue
        candidates.setdefault(declaration.name, replace(parsed, declaration=resolved))

    defaults: Dict[str, Optional[str]] = dict.fromkeys(candidates)
    changed = True
    while changed:
        changed = False
        for name, parsed in candidates.items():
            if defaults[name] is not None or not parsed.directives.generate_validator:
                continue
            if all(
                directives.defaultable and _has_default(field.type, defaults)
                for field, directives in parsed.field_items()
            ):
                defaults[name] = f"{parsed.companion_name}().build()"
                changed = True
    return defaults


def _has_default(descriptor, records: Dict[str, Optional[str]]) -> bool:
    try:
        default_expression_for(descriptor, records)
    except UnderivableDefault:
        return False
    return True


def emit_schema(schema: Schema, config: Optional[GeneratorConfig] = None) -> EmissionResult:
    """
    Generate a module for every declaration in a schema.

    Declarations that fail to generate, including ones whose record or
    companion name is already taken by an earlier declaration, are left out
    of the module and reported in ``diagnostics``; the remaining declarations
    are still emitted.
    """
    config = config or GeneratorConfig()
    units: List[GeneratedUnit] = []
    diagnostics: List[Diagnostic] = []
    records = _record_defaults(schema)

    owners = dict.fromkeys(RUNTIME_NAMES, config.runtime_module)
    owners.update(dict.fromkeys(TYPING_NAMES, "typing"))

    for declaration in schema.declarations:
        try:
            unit = emit_declaration(declaration, config, records)
            for name in (unit.name, unit.companion_name):
                if name in owners:
                    raise DuplicateDeclaration(name, owners[name], declaration.location)
        except GenerationError as e:
            location = e.location or declaration.location
            diagnostics.append(Diagnostic(declaration.name, location, e))
            logger.warning(f"Skipping '{declaration.name}': {e.message}")
        else:
            owners[unit.name] = owners[unit.companion_name] = unit.name
            units.append(unit)

    source_name = schema.location.path if schema.location and schema.location.path else "a schema"
    source = render_module(units, schema.imports, config, source_name)
    logger.info(
        f"Generated {len(units)} of {len(schema.declarations)} declarations from {source_name}"
    )
    return EmissionResult(source, units, diagnostics)


def load_generated(source: str, module_name: str = "buildergen_generated") -> types.ModuleType:
    """Compile generated source into a fresh module object."""
    module = types.ModuleType(module_name)
    code = compile(source, f"<{module_name}>", "exec")
    exec(code, module.__dict__)
    return module
