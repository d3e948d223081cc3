"""Canonical Pydantic models shared across all specgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- resolved from CLI flags, environment variables and
the project-local ``specgen.json``:
    :class:`GeneratorConfig`.

**Intermediate representation (IR)** -- produced by the schema resolver and
consumed by the declaration emitter:
    :class:`TypeDef`, :class:`PropertyDef`, :class:`ModelDef`,
    :class:`ArgumentDef`, :class:`FunctionPropertyDef`, :class:`ClientDef`,
    and :class:`ApiDef`.

IR models are frozen and hold tuples rather than lists, so a built
:class:`ApiDef` cannot be altered by later pipeline stages. Named references
between models are kept by name only (``TypeDef(type_name="Pet")``), which
means self-referencing and mutually-referencing schemas never produce cyclic
object graphs.
"""

from __future__ import annotations

import enum
import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Type tags ---

INT = "int"
STR = "str"
BOOL = "bool"
DATE = "date"
EMPTY = "empty"
ENUM = "enum"
OBJECT = "object"
MAP = "map"

PRIMITIVE_TYPES = frozenset({INT, STR, BOOL, DATE, EMPTY})
"""Tags that map onto built-in scalar types and never need an import."""

STRUCTURAL_TYPES = frozenset({ENUM, OBJECT, MAP})
"""Tags describing inline shapes whose details live in :attr:`TypeDef.value`."""

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
"""A bare TypeScript identifier: model names, the client name and unquoted keys."""


class Dialect(str, enum.Enum):
    """Document shapes understood by the parser.

    ``SWAGGER_2`` documents keep schemas in a flat ``definitions`` map and put
    parameter type information directly on the parameter object.
    ``OPENAPI_3`` documents keep schemas under ``components.schemas`` and
    nest them one level down under a ``schema`` key.
    """

    SWAGGER_2 = "2"
    OPENAPI_3 = "3"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations inside a path-item object."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


# --- Generator Config ---


class GeneratorConfig(BaseModel):
    """Effective settings for one generation run.

    Resolved by :func:`~specgen.config.resolve_config` from CLI flags,
    ``SPECGEN_*`` environment variables, the project-local ``specgen.json``
    and these defaults, in that order of precedence.
    """

    client_name: str = Field(
        default="ApiClient", description="Name of the generated client interface"
    )
    models_file: str = Field(
        default="models", description="Base name of the generated models file"
    )
    client_file: str = Field(
        default="client", description="Base name of the generated client file"
    )


# --- Intermediate Representation ---


class TypeDef(BaseModel):
    """Resolved type of a schema node.

    ``type_name`` is a primitive tag (:data:`INT`, :data:`STR`, :data:`BOOL`,
    :data:`DATE`, :data:`EMPTY`), a structural tag (:data:`ENUM`,
    :data:`OBJECT`, :data:`MAP`), or the name of another model.

    ``value`` depends on the tag:

    * enum -- tuple of literal strings, in declared order.
    * object -- tuple of :class:`PropertyDef`, in declared order.
    * map -- the :class:`TypeDef` of the values (keys are always strings).
    * anything else -- ``None``.

    ``array`` marks a sequence whose elements are described by this same
    record with ``array`` cleared.
    """

    model_config = ConfigDict(frozen=True)

    type_name: str
    value: Union[tuple[PropertyDef, ...], tuple[str, ...], TypeDef, None] = None
    array: bool = False

    @property
    def is_reference(self) -> bool:
        """Whether this type points at another model by name."""
        return (
            self.type_name not in PRIMITIVE_TYPES
            and self.type_name not in STRUCTURAL_TYPES
        )

    @property
    def element(self) -> TypeDef:
        """The element type of an array (``self`` with ``array`` cleared)."""
        return self.model_copy(update={"array": False})


class PropertyDef(BaseModel):
    """A named, possibly absent field of an object type or model."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_def: TypeDef
    optional: bool = False


class ArgumentDef(PropertyDef):
    """A parameter of a single operation. Same shape as :class:`PropertyDef`."""


class ModelDef(BaseModel):
    """A reusable schema definition.

    Enum models carry their literals as a tuple of strings in ``properties``;
    object models carry a tuple of :class:`PropertyDef`.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str = Field(description="Either 'object' or 'enum'")
    properties: Union[tuple[PropertyDef, ...], tuple[str, ...]] = ()


class FunctionPropertyDef(BaseModel):
    """One API operation, emitted as a callable member of the client.

    ``name`` is the operation's declared ``operationId``, used verbatim.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    args: tuple[ArgumentDef, ...] = ()
    return_type_def: TypeDef


class ClientDef(BaseModel):
    """The client interface: a name plus one member per operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    members: tuple[FunctionPropertyDef, ...] = ()


class ApiDef(BaseModel):
    """Complete IR for one generation run.

    Produced by :func:`~specgen.parser.extractor.build_api_def` and consumed
    by :func:`~specgen.generator.declarations.build_declarations`.
    """

    model_config = ConfigDict(frozen=True)

    models_def: tuple[ModelDef, ...] = ()
    client_def: ClientDef
    dialect: Optional[Dialect] = None


TypeDef.model_rebuild()
PropertyDef.model_rebuild()
ArgumentDef.model_rebuild()
ModelDef.model_rebuild()
FunctionPropertyDef.model_rebuild()
