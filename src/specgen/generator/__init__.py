"""Declaration generation -- IR to TypeScript source files.

This sub-package is the second half of the specgen pipeline: it turns an
:class:`~specgen.models.ApiDef` into the text of the models and client files
and writes them to disk.

Sub-modules:

* :mod:`~specgen.generator.nodes` -- Frozen declaration tree.
* :mod:`~specgen.generator.type_mapper` -- IR type → type expression, and
  type expression → text.
* :mod:`~specgen.generator.declarations` -- Model, client and import
  declarations for a whole :class:`~specgen.models.ApiDef`.
* :mod:`~specgen.generator.printer` -- Jinja2 rendering of both files.
* :mod:`~specgen.generator.writer` -- All-or-nothing file output.
"""

from specgen.generator.declarations import build_declarations
from specgen.generator.printer import render_files
from specgen.generator.writer import write_outputs

__all__ = ["build_declarations", "render_files", "write_outputs"]
