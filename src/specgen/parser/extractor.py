"""Assemble the complete intermediate representation of an API document.

This module walks a parsed Swagger 2.0 / OpenAPI 3.x document and builds an
:class:`~specgen.models.ApiDef`: one :class:`~specgen.models.ModelDef` per
schema definition and one client member per path operation.

The single public entry point is :func:`build_api_def`. Internally it
delegates to private helpers that each handle one section of the document:

* ``_definitions`` -- the dialect-appropriate definitions map
  (``definitions`` or ``components.schemas``).
* ``_extract_members`` -- the ``paths`` object, iterating over every path and
  every HTTP-verb key in declaration order.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values. Parameter and response objects given as
internal ``$ref`` pointers are dereferenced; schema ``$ref`` pointers are left
alone and resolved by name.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specgen.exceptions import SpecParseError
from specgen.models import (
    ApiDef,
    ClientDef,
    Dialect,
    FunctionPropertyDef,
    HTTPMethod,
)
from specgen.output import debug, warning
from specgen.parser.loader import detect_dialect
from specgen.parser.resolver import (
    REF,
    canonicalize_name,
    resolve_model,
    resolve_operation,
    resolve_pointer,
)

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def build_api_def(document: dict[str, Any], client_name: str) -> ApiDef:
    """Build the :class:`~specgen.models.ApiDef` for a parsed document.

    Args:
        document: The raw document dictionary as returned by
            :func:`~specgen.parser.loader.load_spec`.
        client_name: Name of the generated client interface.

    Returns:
        The complete, immutable IR for this generation run.

    Raises:
        SpecParseError: If the version marker is missing or unsupported, or
            the dialect's definitions map is absent.

    Example::

        raw = load_spec("petstore.yaml")
        api = build_api_def(raw, "PetClient")
        for member in api.client_def.members:
            print(member.name)
    """
    dialect = detect_dialect(document)
    definitions = _definitions(document, dialect)

    models_def = tuple(
        resolve_model(str(name), definition) for name, definition in definitions.items()
    )
    members = _extract_members(document)

    debug(
        f"Resolved {len(models_def)} model(s) and {len(members)} operation(s) "
        f"(dialect {dialect.value}.x)"
    )
    return ApiDef(
        models_def=models_def,
        client_def=ClientDef(name=client_name, members=members),
        dialect=dialect,
    )


def _definitions(document: dict[str, Any], dialect: Dialect) -> dict[str, Any]:
    """Return the dialect-appropriate definitions map.

    Raises:
        SpecParseError: If the map is absent or not a mapping.
    """
    if dialect is Dialect.OPENAPI_3:
        components = document.get("components")
        definitions = components.get("schemas") if isinstance(components, dict) else None
        location = "components.schemas"
    else:
        definitions = document.get("definitions")
        location = "definitions"

    if definitions is None:
        raise SpecParseError(f"Missing '{location}' map in the document")
    if not isinstance(definitions, dict):
        raise SpecParseError(
            f"'{location}' must be a mapping (got {type(definitions).__name__})"
        )
    return definitions


def _extract_members(document: dict[str, Any]) -> tuple[FunctionPropertyDef, ...]:
    """Resolve every operation under ``paths``, in path and verb declaration order.

    Duplicate ``operationId`` values are not disambiguated: each operation
    produces its own member and a warning is emitted.
    """
    paths = document.get("paths") or {}
    members: list[FunctionPropertyDef] = []
    seen: set[str] = set()

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        if REF in path_item:
            path_item = _deref(path_item, document)

        path_params = path_item.get("parameters") or []

        for method, operation in path_item.items():
            if method not in _HTTP_METHODS or not isinstance(operation, dict):
                continue

            parameters = _merge_parameters(
                [_deref(p, document) for p in path_params],
                [_deref(p, document) for p in operation.get("parameters") or []],
            )
            responses = {
                code: _deref(response, document)
                for code, response in (operation.get("responses") or {}).items()
            }

            fallback_name: Optional[str] = None
            if not operation.get("operationId"):
                fallback_name = _fallback_operation_name(method, str(path))
                warning(
                    f"{method.upper()} {path} has no operationId; "
                    f"generating member '{fallback_name}'."
                )

            member = resolve_operation(
                {**operation, "responses": responses},
                parameters=parameters,
                fallback_name=fallback_name,
            )
            if member.name in seen:
                logger.debug("Duplicate operationId %s at %s %s", member.name, method, path)
                warning(f"Duplicate operationId '{member.name}' ({method.upper()} {path}).")
            seen.add(member.name)
            members.append(member)

    return tuple(members)


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec.

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        Path-level parameters that were not overridden, followed by all
        operation-level parameters.
    """
    op_keys = {(param.get("name", ""), param.get("in", "")) for param in op_params}

    merged = [
        param
        for param in path_params
        if (param.get("name", ""), param.get("in", "")) not in op_keys
    ]
    merged.extend(op_params)
    return merged


def _deref(node: Any, document: dict[str, Any]) -> Any:
    """Follow ``$ref`` pointers on a reusable parameter, response or path item.

    Chains of references are followed until a concrete object is reached.

    Raises:
        SpecParseError: If a pointer cannot be resolved or the chain loops.
    """
    seen: set[str] = set()
    while isinstance(node, dict) and REF in node:
        ref = str(node[REF])
        if ref in seen:
            raise SpecParseError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        node = resolve_pointer(ref, document)
    return node


def _fallback_operation_name(method: str, path: str) -> str:
    """Derive a member name from an operation's verb and path.

    ``GET /tickets/{id}/comments`` becomes ``getTicketsByIdComments``.
    """
    words = [method]
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            words.extend(["by", segment[1:-1]])
        else:
            words.append(segment)
    return canonicalize_name(" ".join(words))

