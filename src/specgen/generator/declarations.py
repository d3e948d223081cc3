"""Turn the IR into the declaration tree for both output files.

The emitter is the second half of the core pipeline. It takes a complete
:class:`~specgen.models.ApiDef` and produces a :class:`DeclarationSet`:

* one declaration per model -- an exported ``enum`` for enum models, an
  exported ``interface`` for object models;
* the client interface, one callable property per operation returning
  ``Promise<R>``;
* the grouped import of every model the client refers to.

Field and argument lists are stably partitioned so required entries come
first. Everything here is pure: the same IR always yields an equal tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from specgen.generator.nodes import (
    Declaration,
    EnumDeclaration,
    EnumMember,
    FunctionType,
    ImportDeclaration,
    InterfaceDeclaration,
    Parameter,
    PropertySignature,
    TypeReference,
)
from specgen.generator.type_mapper import (
    PROMISE_TYPE,
    emit_property,
    emit_type,
    stable_partition,
)
from specgen.models import (
    ENUM,
    MAP,
    OBJECT,
    ApiDef,
    ArgumentDef,
    ClientDef,
    FunctionPropertyDef,
    ModelDef,
    PropertyDef,
    TypeDef,
)


@dataclass(frozen=True)
class DeclarationSet:
    """Everything the printer needs for one run."""

    models: tuple[Declaration, ...]
    client: InterfaceDeclaration
    client_import: Optional[ImportDeclaration] = None


def build_declarations(api_def: ApiDef, models_module: str = "models") -> DeclarationSet:
    """Build the declaration tree for *api_def*.

    Args:
        api_def: The resolved IR.
        models_module: Base name of the models file, used for the client's
            relative import (``./<models_module>``).

    Returns:
        The model declarations in IR order, the client interface, and the
        client's import of referenced models (``None`` when it references
        none).
    """
    return DeclarationSet(
        models=tuple(make_model_declaration(m) for m in api_def.models_def),
        client=make_client_interface(api_def.client_def),
        client_import=make_model_imports(api_def.client_def, models_module),
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def make_model_declaration(model_def: ModelDef) -> Declaration:
    """Build the exported enum or interface for one model."""
    if model_def.type_name == ENUM:
        return EnumDeclaration(
            name=model_def.name,
            members=tuple(
                EnumMember(name=enum_member_name(str(literal)), value=str(literal))
                for literal in model_def.properties
            ),
        )

    props = [p for p in model_def.properties if isinstance(p, PropertyDef)]
    return InterfaceDeclaration(
        name=model_def.name,
        members=tuple(emit_property(p) for p in stable_partition(props)),
    )


def enum_member_name(literal: str) -> str:
    """Member name for an enum literal.

    Enum members may not have numeric names, so a literal that reads as a
    number gets a ``_`` prefix: ``1`` becomes ``_1``. The value keeps the
    literal unchanged.
    """
    try:
        float(literal)
    except ValueError:
        return literal
    return f"_{literal}"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


def make_argument(argument_def: ArgumentDef) -> Parameter:
    return Parameter(
        name=argument_def.name,
        type=emit_type(argument_def.type_def),
        optional=argument_def.optional,
    )


def make_function_member(function_def: FunctionPropertyDef) -> PropertySignature:
    """``name: (args) => Promise<R>``, with required arguments first."""
    function_type = FunctionType(
        parameters=tuple(make_argument(a) for a in stable_partition(function_def.args)),
        return_type=TypeReference(
            PROMISE_TYPE, (emit_type(function_def.return_type_def),)
        ),
    )
    return PropertySignature(name=function_def.name, type=function_type)


def make_client_interface(client_def: ClientDef) -> InterfaceDeclaration:
    return InterfaceDeclaration(
        name=client_def.name,
        members=tuple(make_function_member(m) for m in client_def.members),
    )


def collect_import_names(client_def: ClientDef) -> tuple[str, ...]:
    """Distinct model names referenced by the client, in first-appearance order.

    Arguments are visited before the return type of each member, in the order
    they are emitted. Names nested inside inline object and map types are
    included.
    """
    names: dict[str, None] = {}
    for member in client_def.members:
        for arg in stable_partition(member.args):
            names.update(dict.fromkeys(_referenced_names(arg.type_def)))
        names.update(dict.fromkeys(_referenced_names(member.return_type_def)))
    return tuple(names)


def make_model_imports(
    client_def: ClientDef, models_module: str = "models"
) -> Optional[ImportDeclaration]:
    """Build ``import { ... } from "./<models_module>";`` or ``None`` if empty."""
    names = collect_import_names(client_def)
    if not names:
        return None
    return ImportDeclaration(names=names, module=f"./{models_module}")


def _referenced_names(type_def: TypeDef) -> Iterator[str]:
    if type_def.is_reference:
        if type_def.type_name != PROMISE_TYPE:
            yield type_def.type_name
        return

    value = type_def.value
    if type_def.type_name == OBJECT and isinstance(value, tuple):
        for prop in stable_partition(value):
            if isinstance(prop, PropertyDef):
                yield from _referenced_names(prop.type_def)
    elif type_def.type_name == MAP and isinstance(value, TypeDef):
        yield from _referenced_names(value)
