"""API document parser -- load, classify, and resolve into the IR.

This sub-package is responsible for the first half of the specgen pipeline:
turning a raw Swagger 2.0 or OpenAPI 3.x document (JSON or YAML, local file
or stdin) into an :class:`~specgen.models.ApiDef` that the generator can
consume.

Typical usage::

    from specgen.parser import build_api_def, load_spec

    raw = load_spec("tickets.json")
    api = build_api_def(raw, "ApiClient")

Sub-modules:

* :mod:`~specgen.parser.loader` -- I/O layer (file, stdin) plus format
  detection and dialect classification.
* :mod:`~specgen.parser.resolver` -- Schema, parameter and response
  resolution into :class:`~specgen.models.TypeDef` and friends.
* :mod:`~specgen.parser.extractor` -- Walks the definitions and paths of a
  document and produces the :class:`~specgen.models.ApiDef`.
"""

from specgen.parser.extractor import build_api_def
from specgen.parser.loader import detect_dialect, load_spec

__all__ = ["load_spec", "detect_dialect", "build_api_def"]
