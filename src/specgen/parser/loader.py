"""Read Swagger 2.0 and OpenAPI 3.x documents into plain dictionaries.

A document comes either from a local path or, when the source is ``-``,
from stdin. The file extension decides the format when it is ``.json``,
``.yaml`` or ``.yml``; anything else is tried as JSON and then as YAML.
Both parsers return mappings in document order, and the generated
declarations inherit that order.

:func:`detect_dialect` then reads the ``swagger``/``openapi`` marker to pick
the definitions and parameter layout the extractor should expect.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from specgen.exceptions import SpecParseError
from specgen.models import Dialect

STDIN_SOURCE = "-"

_FORMAT_BY_SUFFIX = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def load_spec(source: str) -> dict[str, Any]:
    """Load the document named by *source*.

    Args:
        source: Path to a ``.json``/``.yaml``/``.yml`` file, or ``-`` for stdin.

    Returns:
        The document root.

    Raises:
        SpecParseError: The source is missing, empty, unreadable, or does
            not hold a JSON/YAML object.
    """
    if source == STDIN_SOURCE:
        return _load_from_stdin()
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc
    if content.strip():
        return _parse_content(content)
    raise SpecParseError("No input received from stdin")


def _load_from_file(path: str) -> dict[str, Any]:
    spec_file = Path(path)
    if not spec_file.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = spec_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    return _parse_content(content, _FORMAT_BY_SUFFIX.get(spec_file.suffix.lower(), ""))


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* according to *hint*.

    ``"json"`` means strict JSON, ``"yaml"`` means YAML only, and an empty
    hint tries JSON before YAML. When both attempts fail, the error lists
    what each parser reported.
    """
    failures: list[str] = []

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            failures.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        failures.append(f"YAML error: {exc}")

    details = "".join(f"\n  {line}" for line in failures)
    raise SpecParseError(f"Failed to parse spec as JSON or YAML{details}")


def _require_mapping(document: Any) -> dict[str, Any]:
    if isinstance(document, dict):
        return document
    kind = "empty document" if document is None else type(document).__name__
    raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")


def detect_dialect(spec: dict[str, Any]) -> Dialect:
    """Return the dialect announced by the document's version marker.

    ``swagger`` is consulted before ``openapi``. Unquoted YAML versions such
    as ``swagger: 2.0`` parse as floats and are compared as text.

    Raises:
        SpecParseError: Neither marker is present, or it names a version
            other than 2.x or 3.x.
    """
    for key in ("swagger", "openapi"):
        if spec.get(key) is not None:
            version = str(spec[key]).strip()
            break
    else:
        raise SpecParseError(
            "Missing 'swagger' or 'openapi' version field. "
            "Is this a Swagger 2.0 or OpenAPI 3.x document?"
        )

    for dialect in Dialect:
        if version.startswith(dialect.value):
            return dialect
    raise SpecParseError(
        f"Unsupported spec version: {version}. "
        "Only Swagger 2.0 and OpenAPI 3.x are supported."
    )
