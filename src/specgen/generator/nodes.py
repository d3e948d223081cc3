"""Declaration tree emitted from the IR and consumed by the printer.

The nodes mirror the small subset of TypeScript syntax specgen produces:
type expressions (keywords, references, arrays, unions, literals, inline
object types, function types) and top-level declarations (enums,
interfaces, imports). They are frozen dataclasses holding tuples, so a
built tree is immutable and hashable.

Nothing here knows how to print itself; rendering lives in
:mod:`specgen.generator.type_mapper` and the printer templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeywordType:
    """A built-in keyword type such as ``number`` or ``unknown``."""

    name: str


@dataclass(frozen=True)
class TypeReference:
    """A reference to a named type, with optional type arguments.

    ``TypeReference("Promise", (KeywordType("string"),))`` renders as
    ``Promise<string>``.
    """

    name: str
    type_args: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class ArrayType:
    element: TypeNode


@dataclass(frozen=True)
class LiteralType:
    """A string literal type, e.g. ``"OPEN"``."""

    value: str


@dataclass(frozen=True)
class UnionType:
    members: tuple[TypeNode, ...]


@dataclass(frozen=True)
class PropertySignature:
    name: str
    type: TypeNode
    optional: bool = False


@dataclass(frozen=True)
class IndexSignature:
    """``[key: string]: T`` inside an object type."""

    key_name: str
    key_type: TypeNode
    value_type: TypeNode


@dataclass(frozen=True)
class TypeLiteral:
    """An inline object type: ``{ a: string; b?: number }``."""

    members: tuple[Union[PropertySignature, IndexSignature], ...] = ()


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeNode
    optional: bool = False


@dataclass(frozen=True)
class FunctionType:
    """``(a: string, b?: number) => R``."""

    parameters: tuple[Parameter, ...]
    return_type: TypeNode


TypeNode = Union[
    KeywordType,
    TypeReference,
    ArrayType,
    LiteralType,
    UnionType,
    TypeLiteral,
    FunctionType,
]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: str


@dataclass(frozen=True)
class EnumDeclaration:
    name: str
    members: tuple[EnumMember, ...] = ()
    exported: bool = True


@dataclass(frozen=True)
class InterfaceDeclaration:
    name: str
    members: tuple[PropertySignature, ...] = ()
    exported: bool = True


@dataclass(frozen=True)
class ImportDeclaration:
    """Named imports from a relative module: ``import { A, B } from "./models";``."""

    names: tuple[str, ...]
    module: str


Declaration = Union[EnumDeclaration, InterfaceDeclaration, ImportDeclaration]
