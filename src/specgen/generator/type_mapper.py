"""Map IR types to TypeScript type expressions and render them as text.

This module bridges the resolver's :class:`~specgen.models.TypeDef` records
and the declaration tree in :mod:`specgen.generator.nodes`.

**Mapping rules:**

* ``int`` → ``number``, ``str`` → ``string``, ``bool`` → ``boolean``,
  ``empty`` → ``unknown``, ``date`` → ``Date``.
* ``enum`` → a union of string literal types, ``"A" | "B"``.
* ``object`` → an inline object type, ``{ a: string; b?: number }``, with
  required properties listed first.
* ``map`` → an index signature object type, ``{ [key: string]: T }``.
* any other tag → a reference to the model of that name.
* the array flag wraps the result, ``T[]``; union elements are
  parenthesised, ``("A" | "B")[]``.

:func:`render_type` is the single place where a type expression becomes text;
the Jinja2 templates call it through the ``ts_type`` filter.
"""

from __future__ import annotations

import json
from typing import Iterable, Sequence, TypeVar

from specgen.models import (
    BOOL,
    DATE,
    EMPTY,
    ENUM,
    IDENTIFIER_RE,
    INT,
    MAP,
    OBJECT,
    STR,
    PropertyDef,
    TypeDef,
)
from specgen.generator.nodes import (
    ArrayType,
    FunctionType,
    IndexSignature,
    KeywordType,
    LiteralType,
    Parameter,
    PropertySignature,
    TypeLiteral,
    TypeNode,
    TypeReference,
    UnionType,
)


_KEYWORDS: dict[str, str] = {
    INT: "number",
    STR: "string",
    BOOL: "boolean",
    EMPTY: "unknown",
}

DATE_TYPE = "Date"
PROMISE_TYPE = "Promise"
MAP_KEY_NAME = "key"

_T = TypeVar("_T")


# ---------------------------------------------------------------------------
# IR -> nodes
# ---------------------------------------------------------------------------


def stable_partition(items: Iterable[_T]) -> tuple[_T, ...]:
    """Return *items* with required entries first and optional ones after.

    The relative order inside each group is preserved. Items are anything
    with an ``optional`` attribute (properties, arguments, signatures).
    """
    items = tuple(items)
    required = [item for item in items if not getattr(item, "optional", False)]
    optional = [item for item in items if getattr(item, "optional", False)]
    return tuple(required + optional)


def emit_type(type_def: TypeDef) -> TypeNode:
    """Build the type expression for *type_def*.

    Args:
        type_def: A resolved IR type.

    Returns:
        The corresponding node from :mod:`specgen.generator.nodes`.
    """
    node = _emit_element(type_def)
    if type_def.array:
        return ArrayType(node)
    return node


def emit_property(prop: PropertyDef) -> PropertySignature:
    """Build the signature for one model or inline-object property."""
    return PropertySignature(
        name=prop.name, type=emit_type(prop.type_def), optional=prop.optional
    )


def _emit_element(type_def: TypeDef) -> TypeNode:
    tag = type_def.type_name
    value = type_def.value

    if tag in _KEYWORDS:
        return KeywordType(_KEYWORDS[tag])
    if tag == DATE:
        return TypeReference(DATE_TYPE)
    if tag == ENUM:
        literals: Sequence[str] = value if isinstance(value, tuple) else ()
        return UnionType(tuple(LiteralType(str(v)) for v in literals))
    if tag == OBJECT:
        props = value if isinstance(value, tuple) else ()
        return TypeLiteral(tuple(emit_property(p) for p in stable_partition(props)))
    if tag == MAP:
        value_type = value if isinstance(value, TypeDef) else TypeDef(type_name=EMPTY)
        return TypeLiteral(
            (
                IndexSignature(
                    key_name=MAP_KEY_NAME,
                    key_type=KeywordType(_KEYWORDS[STR]),
                    value_type=emit_type(value_type),
                ),
            )
        )
    return TypeReference(tag)


# ---------------------------------------------------------------------------
# nodes -> text
# ---------------------------------------------------------------------------


def render_type(node: TypeNode) -> str:
    """Render a type expression as TypeScript source text.

    Raises:
        TypeError: If *node* is not a type expression node.
    """
    if isinstance(node, KeywordType):
        return node.name
    if isinstance(node, TypeReference):
        if not node.type_args:
            return node.name
        return f"{node.name}<{', '.join(render_type(a) for a in node.type_args)}>"
    if isinstance(node, LiteralType):
        return quote_string(node.value)
    if isinstance(node, UnionType):
        if not node.members:
            return "never"
        return " | ".join(render_type(m) for m in node.members)
    if isinstance(node, ArrayType):
        element = render_type(node.element)
        if _needs_parens(node.element):
            element = f"({element})"
        return f"{element}[]"
    if isinstance(node, TypeLiteral):
        if not node.members:
            return "{}"
        return "{ " + "; ".join(render_member(m) for m in node.members) + " }"
    if isinstance(node, FunctionType):
        params = ", ".join(render_parameter(p) for p in node.parameters)
        return f"({params}) => {render_type(node.return_type)}"
    raise TypeError(f"Not a type node: {node!r}")


def render_member(member: PropertySignature | IndexSignature) -> str:
    """Render a property or index signature without its trailing ``;``."""
    if isinstance(member, IndexSignature):
        return (
            f"[{member.key_name}: {render_type(member.key_type)}]: "
            f"{render_type(member.value_type)}"
        )
    marker = "?" if member.optional else ""
    return f"{format_name(member.name)}{marker}: {render_type(member.type)}"


def render_parameter(param: Parameter) -> str:
    marker = "?" if param.optional else ""
    return f"{param.name}{marker}: {render_type(param.type)}"


def format_name(name: str) -> str:
    """Return *name* as a property key: bare if a valid identifier, quoted otherwise."""
    if IDENTIFIER_RE.match(name):
        return name
    return quote_string(name)


def quote_string(value: str) -> str:
    """Double-quoted string literal with JSON escaping."""
    return json.dumps(value, ensure_ascii=False)


def _needs_parens(node: TypeNode) -> bool:
    if isinstance(node, UnionType):
        return len(node.members) > 1
    return isinstance(node, FunctionType)
