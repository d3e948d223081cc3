"""Resolve schema objects into the intermediate representation.

Every shape a schema object can take -- primitive, formatted primitive, enum,
array, inline object, map, named reference -- is classified exactly once, by
:func:`resolve_type`, into the closed set of :class:`~specgen.models.TypeDef`
variants. Later pipeline stages never inspect raw document nodes again.

Schema ``$ref`` pointers are **not** inlined: a reference becomes a
``TypeDef`` carrying the referenced model's name, and the emitter prints it as
a type reference. This keeps the IR acyclic for self-referencing and
mutually-referencing schemas and needs no topological ordering of models.

Model names pass through :func:`model_identifier` both where a model is
declared and where it is referenced, so a definition key such as
``io.k8s.api.core.v1.Pod`` yields the same type name everywhere.

The only other kind of pointer handled here is the JSON Pointer lookup used
by the extractor to dereference reusable parameter and response objects
(:func:`resolve_pointer`).
"""

from __future__ import annotations

import json
import re
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from specgen.exceptions import SpecParseError
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
    ArgumentDef,
    FunctionPropertyDef,
    ModelDef,
    PropertyDef,
    TypeDef,
)
from specgen.output import debug, warning

REF = "$ref"
ARRAY = "array"
DEFAULT_TYPE = STR

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")

FORMAT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "int32": INT,
        "int64": INT,
        "number": INT,
        "integer": INT,
        "float": INT,
        "double": INT,
        "string": STR,
        "byte": STR,
        "binary": STR,
        "password": STR,
        "email": STR,
        "boolean": BOOL,
        "date": DATE,
        "date-time": DATE,
    }
)
"""Coarse primitive for every recognised ``format`` and bare ``type`` value."""

_WORD_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9$]+")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_$]+")


# ---------------------------------------------------------------------------
# Schema objects
# ---------------------------------------------------------------------------


def resolve_type(node: Any) -> TypeDef:
    """Resolve a schema node (or an object wrapping one) to a :class:`TypeDef`.

    Evaluated with this precedence, first match wins:

    1. absent/null node -- the empty type.
    2. node wraps a non-empty ``schema`` -- recurse into it.
    3. ``$ref`` -- named reference to the pointer's last path segment.
    4. ``enum`` -- enum type with the declared literals, order and
       duplicates preserved.
    5. ``type: array`` -- array flag set, element resolved from ``items``.
       The element's tag and value are carried onto the array, so an array
       of enums keeps its literal union.
    6. object (``type: object``, or ``properties`` without a ``type``) --
       inline object, map (``additionalProperties``), or empty object.
    7. ``format`` found in :data:`FORMAT_TYPES`.
    8. bare ``type`` through the same table, defaulting to ``str``.

    Args:
        node: A schema object, a parameter/response object wrapping one, or
            ``None``.

    Returns:
        The resolved :class:`~specgen.models.TypeDef`.
    """
    if node is None:
        return TypeDef(type_name=EMPTY)

    if not isinstance(node, dict):
        # additionalProperties: true and similar boolean schemas
        return TypeDef(type_name=EMPTY)

    if node.get("schema"):
        return resolve_type(node["schema"])

    if REF in node:
        return TypeDef(type_name=_ref_name(node[REF]))

    if node.get("enum") is not None:
        return TypeDef(type_name=ENUM, value=_enum_literals(node["enum"]))

    schema_type = _schema_type(node)

    if schema_type == ARRAY:
        return _resolve_array(node)

    if schema_type == OBJECT or (schema_type is None and "properties" in node):
        return _resolve_object(node)

    schema_format = node.get("format")
    if schema_format in FORMAT_TYPES:
        return TypeDef(type_name=FORMAT_TYPES[schema_format])

    return TypeDef(type_name=FORMAT_TYPES.get(schema_type or "", DEFAULT_TYPE))


def _resolve_array(node: dict[str, Any]) -> TypeDef:
    """Resolve an array schema; absent ``items`` means an array of strings."""
    items = node.get("items")
    if items is None:
        return TypeDef(type_name=DEFAULT_TYPE, array=True)

    element = resolve_type(items)
    if element.array:
        warning(
            "Nested arrays are not supported; "
            f"'{element.type_name}[][]' will be generated as '{element.type_name}[]'."
        )
    return TypeDef(type_name=element.type_name, value=element.value, array=True)


def _resolve_object(node: dict[str, Any]) -> TypeDef:
    """Resolve an object schema to an inline object, a map, or an empty object."""
    properties = node.get("properties")
    if properties:
        return TypeDef(
            type_name=OBJECT,
            value=resolve_properties(properties, node.get("required") or ()),
        )

    additional = node.get("additionalProperties")
    if additional is not None and additional is not False:
        return TypeDef(type_name=MAP, value=resolve_type(additional))

    return TypeDef(type_name=OBJECT, value=())


def resolve_properties(
    property_map: Optional[Mapping[str, Any]],
    required_names: Iterable[str] = (),
) -> tuple[PropertyDef, ...]:
    """Build one :class:`PropertyDef` per entry of *property_map*, in declared order.

    Args:
        property_map: The ``properties`` mapping of an object schema.
        required_names: Names listed in the schema's ``required`` array.

    Returns:
        A tuple of property definitions. A property is optional unless its
        name appears in *required_names*.
    """
    if not property_map:
        return ()
    required = set(required_names)
    return tuple(
        PropertyDef(
            name=str(name),
            type_def=resolve_type(schema),
            optional=name not in required,
        )
        for name, schema in property_map.items()
    )


def resolve_model(name: str, definition: Any) -> ModelDef:
    """Resolve one entry of the definitions map to a :class:`ModelDef`.

    Enum definitions become enum models. Composition schemas (``allOf``,
    ``oneOf``, ``anyOf``) are not merged: a warning is emitted and the model
    is generated empty. Everything else becomes an object model.

    Args:
        name: The definition's key in the definitions map. Keys that are not
            identifiers are renamed by :func:`model_identifier`.
        definition: The schema object.

    Returns:
        The resolved :class:`~specgen.models.ModelDef`.
    """
    name = model_identifier(name)
    if not isinstance(definition, dict):
        definition = {}

    if definition.get("enum") is not None:
        return ModelDef(
            name=name, type_name=ENUM, properties=_enum_literals(definition["enum"])
        )

    for keyword in COMPOSITION_KEYWORDS:
        if keyword in definition:
            warning(f"{keyword} not supported, model {name} will be generated empty.")
            return ModelDef(name=name, type_name=OBJECT, properties=())

    return ModelDef(
        name=name,
        type_name=OBJECT,
        properties=resolve_properties(
            definition.get("properties"), definition.get("required") or ()
        ),
    )


def model_identifier(name: str) -> str:
    """Turn a definition key into a TypeScript type name.

    Runs of characters that cannot appear in an identifier become a single
    ``_`` (``pet.Details`` -> ``pet_Details``), and a leading digit gets a
    ``_`` prefix. Keys that already are identifiers are returned unchanged.
    """
    if IDENTIFIER_RE.match(name):
        return name
    identifier = _NON_IDENTIFIER_RE.sub("_", name) or "_"
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def resolve_return_type(responses: Optional[Mapping[Any, Any]]) -> TypeDef:
    """Resolve the type an operation returns on success.

    The lowest numeric status in ``[200, 300)`` is preferred, then the
    ``2XX`` range wildcard, then ``"default"``. The selected response's
    ``schema`` (Swagger 2.0) or its first ``content.<media type>.schema``
    (OpenAPI 3.x) is resolved.

    Args:
        responses: The operation's ``responses`` mapping.

    Returns:
        The resolved type, or the empty type when no success response exists
        or the selected response declares no schema.
    """
    if not responses:
        return TypeDef(type_name=EMPTY)

    ranked = [
        (rank, response)
        for code, response in responses.items()
        if (rank := _success_rank(code)) is not None
    ]
    if ranked:
        _, response = min(ranked, key=lambda item: item[0])
        return resolve_type(_find_schema(response))

    debug("No success response declared; falling back to the empty type")
    return TypeDef(type_name=EMPTY)


def resolve_argument(param: dict[str, Any]) -> ArgumentDef:
    """Resolve a parameter object to an :class:`ArgumentDef`.

    Args:
        param: A (dereferenced) parameter object.

    Returns:
        The argument, named by :func:`canonicalize_name` and optional unless
        the parameter declares ``required: true``.

    Raises:
        SpecParseError: If the parameter has no name.
    """
    name = param.get("name")
    if not name:
        raise SpecParseError(f"Parameter without a name: {param!r}")
    return ArgumentDef(
        name=canonicalize_name(str(name)),
        type_def=resolve_type(param),
        optional=not param.get("required", False),
    )


def resolve_operation(
    operation: dict[str, Any],
    parameters: Optional[list[dict[str, Any]]] = None,
    fallback_name: Optional[str] = None,
) -> FunctionPropertyDef:
    """Resolve an operation object to a :class:`FunctionPropertyDef`.

    Args:
        operation: The operation object under a path item.
        parameters: Parameter objects to use instead of
            ``operation["parameters"]``, e.g. after merging path-level
            parameters and dereferencing ``$ref`` entries.
        fallback_name: Member name used when the operation declares no
            ``operationId``.

    Returns:
        The client member. Its name is the declared ``operationId``, verbatim.

    Raises:
        SpecParseError: If the operation has neither an ``operationId`` nor
            a *fallback_name*.
    """
    name = operation.get("operationId") or fallback_name
    if not name:
        raise SpecParseError(
            f"Operation without an operationId: {operation.get('summary') or operation!r}"
        )
    if parameters is None:
        parameters = operation.get("parameters") or []
    return FunctionPropertyDef(
        name=str(name),
        args=tuple(resolve_argument(param) for param in parameters),
        return_type_def=resolve_return_type(operation.get("responses")),
    )


def canonicalize_name(name: str) -> str:
    """Convert a parameter name into a single lower-camel identifier.

    Whitespace and any other non-identifier characters act as word
    separators: ``"page size"`` and ``"page_size"`` both become
    ``"pageSize"``, ``"X-Request-Id"`` becomes ``"xRequestId"``.

    Reserved words are not escaped.
    """
    words = [word for word in _WORD_SEPARATOR_RE.split(name) if word]
    if not words:
        return "arg"

    head, *tail = words
    head = head.lower() if head.isupper() else head[0].lower() + head[1:]
    identifier = head + "".join(word[0].upper() + word[1:] for word in tail)
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


# ---------------------------------------------------------------------------
# JSON Pointer lookup
# ---------------------------------------------------------------------------


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single internal ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/parameters/limit`` and navigates
    the root dict to locate the referenced value. Handles RFC 6901 escaping
    (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string.
        root: The root document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        SpecParseError: If the reference is external (does not start with
            ``#/``), or if any segment does not exist in the document.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = _unescape_segment(segment)

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )

    return current


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def _ref_name(ref: Any) -> str:
    """Type name for the final path segment of a ``$ref`` pointer."""
    segment = str(ref).rstrip("/").split("/")[-1]
    return model_identifier(_unescape_segment(segment))


def _enum_literals(values: Any) -> tuple[str, ...]:
    """Stringify enum literals; non-strings use their JSON spelling."""
    if not isinstance(values, (list, tuple)):
        values = [values]
    return tuple(v if isinstance(v, str) else json.dumps(v) for v in values)


def _schema_type(node: dict[str, Any]) -> Optional[str]:
    """Extract the ``type`` string from a schema node.

    Handles OpenAPI 3.1 type arrays (e.g., ``["string", "null"]``) by
    returning the first non-null type.
    """
    type_value = node.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    if type_value is None:
        return None
    return str(type_value)


def _success_rank(code: Any) -> Optional[tuple[int, int]]:
    """Sort key of a success response key, or ``None`` for other keys.

    Explicit 2xx codes sort first by value, then ``2XX``, then ``default``.
    """
    key = str(code).strip()
    if key.isdigit() and 200 <= int(key) < 300:
        return (0, int(key))
    if key.upper() == "2XX":
        return (1, 0)
    if key == "default":
        return (2, 0)
    return None


def _find_schema(response: Any) -> Any:
    """Return the schema a response object declares for its body.

    Swagger 2.0 responses carry ``schema`` directly. OpenAPI 3.x nests it
    under ``content.<media type>.schema``, and the first media type that has
    one is used. ``headers`` and ``links`` are never consulted.
    """
    if not isinstance(response, dict):
        return None
    if response.get("schema"):
        return response["schema"]
    content = response.get("content")
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict) and media.get("schema"):
                return media["schema"]
    return None
