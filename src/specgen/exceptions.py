"""Errors raised by specgen, each tied to a process exit code.

:func:`specgen.app.main` and the ``generate`` command turn any
:class:`SpecgenError` into a message on stderr followed by an exit with the
error's ``exit_code``::

    SpecgenError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- SpecParseError      (exit 7)
    +-- OutputWriteError    (exit 8)
    +-- ConfigError         (exit 1)
"""

from specgen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_OUTPUT_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecgenError(Exception):
    """Root of the specgen error tree.

    Args:
        message: Text shown to the user after ``Error:``.
        exit_code: Replaces the subclass default for this one instance.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecgenError):
    """A command-line option is missing or has an unusable value."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpecgenError):
    """The API document cannot be read, decoded, or interpreted."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class OutputWriteError(SpecgenError):
    """The destination directory or one of the output files cannot be written.

    Chained to the :class:`OSError` that caused it.
    """

    exit_code = EXIT_OUTPUT_ERROR


class ConfigError(SpecgenError):
    """``specgen.json`` is unreadable or holds values of the wrong type."""

    exit_code = EXIT_GENERIC_FAILURE
