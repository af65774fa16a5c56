"""
Type-shape introspection.

Declared field types are reduced to one of three shapes: ``Text``,
``SequenceOf(element)`` or ``Opaque(ref)``. The shape decides which accessor
is generated and what the type's default value is. Types can arrive as
source text (schema documents) or as live ``typing`` hints (class stubs).
"""

import ast
import collections.abc
import types
import typing
from dataclasses import replace
from typing import Any, FrozenSet, List, Mapping, Optional, Set, Tuple, Union, get_args, get_origin

from .errors import UnderivableDefault, UnrecognizedGenericShape
from .schema import Opaque, SequenceOf, SourceLocation, Text, TypeDeclaration, TypeDescriptor

TEXT_NAMES = frozenset({"str", "builtins.str"})
SEQUENCE_NAMES = frozenset({"list", "List", "Sequence", "MutableSequence"})
SEQUENCE_HINTS = (list, typing.List, typing.Sequence, typing.MutableSequence,
                  collections.abc.Sequence, collections.abc.MutableSequence)
NOT_CONCRETE = frozenset({"Any", "typing.Any", "object"})
# Types a defaultable field cannot fall back to by calling them
NO_DEFAULT_NAMES = frozenset({
    "Any", "Literal", "Callable", "Type", "type", "NoReturn", "Never",
    "TypeVar", "ClassVar", "Final", "Protocol", "Generic",
})

BUILTIN_DEFAULTS = {
    "bool": "False",
    "int": "0",
    "float": "0.0",
    "complex": "0j",
    "str": '""',
    "bytes": 'b""',
    "bytearray": "bytearray()",
    "list": "[]",
    "dict": "{}",
    "set": "set()",
    "frozenset": "frozenset()",
    "tuple": "()",
}

GENERIC_DEFAULTS = {
    "list": "[]",
    "List": "[]",
    "Sequence": "[]",
    "dict": "{}",
    "Dict": "{}",
    "Mapping": "{}",
    "set": "set()",
    "Set": "set()",
    "frozenset": "frozenset()",
    "FrozenSet": "frozenset()",
    "tuple": "()",
    "Tuple": "()",
}


# --- Source Text ---
def _dotted(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted(node.value)
        return f"{base}.{node.attr}" if base else None
    return None


def _is_sequence_name(dotted: Optional[str]) -> bool:
    return dotted is not None and dotted.rsplit(".", 1)[-1] in SEQUENCE_NAMES


def _element_node(node: ast.Subscript, text: str, location: Optional[SourceLocation]) -> ast.AST:
    params = node.slice
    if isinstance(params, ast.Tuple):
        if not params.elts:
            raise UnrecognizedGenericShape(text, "no type parameter", location)
        raise UnrecognizedGenericShape(
            text, f"expected one type parameter, got {len(params.elts)}", location
        )
    return params


def _check_concrete(node: ast.AST, text: str, location: Optional[SourceLocation]) -> None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return
    if isinstance(node, ast.Subscript) and _dotted(node.value) is not None:
        return
    dotted = _dotted(node)
    if dotted is None or dotted in NOT_CONCRETE:
        raise UnrecognizedGenericShape(
            text, f"'{ast.unparse(node)}' is not a concrete type reference", location
        )


def _from_node(node: ast.AST, text: str, location: Optional[SourceLocation]) -> TypeDescriptor:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return parse_type_expression(node.value, location)

    dotted = _dotted(node)
    if dotted in TEXT_NAMES:
        return Text()
    if _is_sequence_name(dotted):
        raise UnrecognizedGenericShape(text, "no type parameter", location)

    if isinstance(node, ast.Subscript) and _is_sequence_name(_dotted(node.value)):
        element = _element_node(node, text, location)
        _check_concrete(element, text, location)
        return SequenceOf(_from_node(element, text, location))

    return Opaque(ast.unparse(node))


def parse_type_expression(text: str, location: Optional[SourceLocation] = None) -> TypeDescriptor:
    """
    Parse a Python type expression into a type descriptor.

    Args:
        text: Type expression, e.g. ``"str"``, ``"List[int]"``, ``"Decimal"``
        location: Where the expression was declared, for error reporting

    Returns:
        The descriptor for the expression's shape

    Raises:
        UnrecognizedGenericShape: If a sequence type's element type cannot
            be recovered from its single type parameter
    """
    try:
        node = ast.parse(text.strip(), mode="eval").body
    except SyntaxError as e:
        raise UnrecognizedGenericShape(text, f"not a type expression ({e.msg})", location) from e
    return _from_node(node, text, location)


# --- Live Hints ---
def hint_ref(hint: Any, imports: Optional[Set[str]] = None) -> str:
    """Render a live type hint as source text, collecting the imports it needs."""
    if imports is None:
        imports = set()
    if hint is None or hint is type(None):
        return "None"
    if hint is Ellipsis:
        return "..."
    if isinstance(hint, str):
        return hint
    if isinstance(hint, typing.ForwardRef):
        return hint.__forward_arg__

    origin = get_origin(hint)
    if origin is not None:
        args = get_args(hint)
        if origin is Union or origin is getattr(types, "UnionType", Union):
            if len(args) == 2 and type(None) in args:
                imports.add("from typing import Optional")
                inner = args[0] if args[1] is type(None) else args[1]
                return f"Optional[{hint_ref(inner, imports)}]"
            imports.add("from typing import Union")
            return f"Union[{', '.join(hint_ref(a, imports) for a in args)}]"
        if origin is typing.Literal:
            imports.add("from typing import Literal")
            return f"Literal[{', '.join(repr(a) for a in args)}]"
        base = hint_ref(origin, imports)
        if not args:
            return base
        rendered = []
        for arg in args:
            if isinstance(arg, list):
                rendered.append(f"[{', '.join(hint_ref(a, imports) for a in arg)}]")
            else:
                rendered.append(hint_ref(arg, imports))
        return f"{base}[{', '.join(rendered)}]"

    if isinstance(hint, type):
        module = hint.__module__
        if module == "builtins":
            return hint.__qualname__
        top = hint.__qualname__.split(".", 1)[0]
        imports.add(f"from {module} import {top}")
        return hint.__qualname__

    # typing special forms without an origin (Any, NoReturn, ...)
    name = getattr(hint, "_name", None) or repr(hint).replace("typing.", "")
    imports.add(f"from typing import {name}")
    return name


def _is_concrete_hint(hint: Any) -> bool:
    if hint is Any or hint is object or isinstance(hint, typing.TypeVar):
        return False
    if isinstance(hint, (typing.ForwardRef, str)):
        return True
    return isinstance(hint, type) or get_origin(hint) is not None


def descriptor_from_hint(
    hint: Any,
    location: Optional[SourceLocation] = None,
    imports: Optional[Set[str]] = None,
) -> TypeDescriptor:
    """
    Reduce a live type hint (``str``, ``List[str]``, ``Decimal``, ...) to a descriptor.

    Imports needed to reference opaque types from generated code are added
    to ``imports`` when given.
    """
    if imports is None:
        imports = set()
    if hint is str:
        return Text()
    if isinstance(hint, str):
        return parse_type_expression(hint, location)
    if isinstance(hint, typing.ForwardRef):
        return parse_type_expression(hint.__forward_arg__, location)

    if hint in SEQUENCE_HINTS or get_origin(hint) in SEQUENCE_HINTS:
        text = hint_ref(hint)
        args = get_args(hint)
        if not args:
            raise UnrecognizedGenericShape(text, "no type parameter", location)
        if len(args) > 1:
            raise UnrecognizedGenericShape(
                text, f"expected one type parameter, got {len(args)}", location
            )
        if not _is_concrete_hint(args[0]):
            raise UnrecognizedGenericShape(
                text, f"'{hint_ref(args[0])}' is not a concrete type reference", location
            )
        return SequenceOf(descriptor_from_hint(args[0], location, imports))

    return Opaque(hint_ref(hint, imports))


# --- Rendering ---
def annotation_for(descriptor: TypeDescriptor) -> str:
    """Annotation used for stored values and setter parameters."""
    if isinstance(descriptor, Text):
        return "str"
    if isinstance(descriptor, SequenceOf):
        return f"List[{annotation_for(descriptor.element)}]"
    return descriptor.ref


def view_annotation_for(descriptor: TypeDescriptor) -> str:
    """Annotation of the value an accessor hands out."""
    if isinstance(descriptor, SequenceOf):
        return f"Sequence[{annotation_for(descriptor.element)}]"
    return annotation_for(descriptor)


def _bitor_members(node: ast.AST) -> List[ast.AST]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _bitor_members(node.left) + _bitor_members(node.right)
    return [node]


def _union_members(node: ast.AST) -> Optional[List[ast.AST]]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _bitor_members(node)
    if isinstance(node, ast.Subscript) and (_dotted(node.value) or "").rsplit(".", 1)[-1] == "Union":
        params = node.slice
        return list(params.elts) if isinstance(params, ast.Tuple) else [params]
    return None


def _is_none(node: ast.AST) -> bool:
    return (isinstance(node, ast.Constant) and node.value is None) or _dotted(node) == "None"


def default_expression_for(
    descriptor: TypeDescriptor,
    records: Optional[Mapping[str, Optional[str]]] = None,
    location: Optional[SourceLocation] = None,
) -> str:
    """
    Source expression producing the default value of a declared type.

    Args:
        descriptor: Declared type of a defaultable field
        records: Records generated into the same module, mapped to the
            expression building one from defaults, or None when they cannot be
        location: Where the field was declared, for error reporting

    Raises:
        UnderivableDefault: If the type has no default value
    """
    if isinstance(descriptor, Text):
        return '""'
    if isinstance(descriptor, SequenceOf):
        return "[]"

    ref = descriptor.ref.strip()
    if records is not None and ref in records:
        if records[ref] is None:
            raise UnderivableDefault(ref, f"record '{ref}' cannot be built from defaults alone", location)
        return records[ref]
    if ref in BUILTIN_DEFAULTS:
        return BUILTIN_DEFAULTS[ref]

    try:
        node = ast.parse(ref, mode="eval").body
    except SyntaxError as e:
        raise UnderivableDefault(ref, "not a type expression", location) from e
    if _is_none(node):
        return "None"

    members = _union_members(node)
    if members is not None:
        if any(_is_none(m) for m in members):
            return "None"
        raise UnderivableDefault(ref, "a union without None has no single default", location)

    base = node.value if isinstance(node, ast.Subscript) else node
    dotted = _dotted(base)
    if dotted is None:
        raise UnderivableDefault(ref, "not a type reference", location)
    short = dotted.rsplit(".", 1)[-1]
    if short == "Optional":
        return "None"
    if short in NO_DEFAULT_NAMES:
        raise UnderivableDefault(ref, f"'{short}' cannot be instantiated", location)
    if isinstance(node, ast.Subscript) and short in GENERIC_DEFAULTS:
        return GENERIC_DEFAULTS[short]
    # Other classes, subscripted user generics through their origin
    return f"{dotted}()"


def iter_descriptors(descriptor: TypeDescriptor):
    """Yield a descriptor and every descriptor nested inside it."""
    yield descriptor
    if isinstance(descriptor, SequenceOf):
        yield from iter_descriptors(descriptor.element)


def resolve_type(
    value: Any, location: Optional[SourceLocation] = None, imports: Optional[Set[str]] = None
) -> TypeDescriptor:
    """Turn a field's declared type (descriptor, expression text or live hint) into a descriptor."""
    if isinstance(value, (Text, SequenceOf, Opaque)):
        return value
    if isinstance(value, str):
        return parse_type_expression(value, location)
    return descriptor_from_hint(value, location, imports)


def resolve_declaration(declaration: TypeDeclaration) -> Tuple[TypeDeclaration, FrozenSet[str]]:
    """
    Resolve every field type of a declaration to a shape.

    Returns:
        The declaration with descriptor-typed fields, and the import
        statements generated code needs to reference opaque hint types
    """
    imports: Set[str] = set()
    fields = tuple(
        replace(f, type=resolve_type(f.type, f.location or declaration.location, imports))
        for f in declaration.fields
    )
    return replace(declaration, fields=fields), frozenset(imports)
