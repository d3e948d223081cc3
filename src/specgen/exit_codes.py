"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgen.exceptions.SpecgenError` subclass.
External tooling (CI scripts, build steps) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specgen -s broken.yaml -d ./out
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or option values."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description document could not be parsed or validated."""

EXIT_OUTPUT_ERROR = 8
"""The generated files could not be written to the destination directory."""
