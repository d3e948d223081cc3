"""Console-script entry point for specgen.

The Typer application has a single command,
:func:`~specgen.commands.generate.generate_command`, so ``specgen -s api.yaml
-d out`` runs it directly without a sub-command name.

See Also:
    :mod:`specgen.config`: Where client and file names come from.
    :mod:`specgen.output`: The stdout/stderr split used for every message.
"""

from __future__ import annotations

import signal
import sys
import traceback
from typing import Any

import typer

from specgen.commands.generate import generate_command
from specgen.exceptions import SpecgenError
from specgen.exit_codes import EXIT_GENERIC_FAILURE
from specgen.output import debug, error

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specgen",
    help="Generate TypeScript declarations from Swagger 2.0 / OpenAPI 3.x specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command()(generate_command)


def _cancel() -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _setup_signal_handlers() -> None:
    """Make Ctrl-C print ``Cancelled.`` and exit with status 130."""

    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        _cancel()

    signal.signal(signal.SIGINT, _on_sigint)


def main() -> None:
    """Run the ``specgen`` command and translate escaped errors to exit codes.

    A :class:`~specgen.exceptions.SpecgenError` exits with its own
    ``exit_code``. Anything else is reported as an unexpected error, with the
    traceback shown under ``--verbose``, and exits with
    :data:`~specgen.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _cancel()
    except SpecgenError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        debug(traceback.format_exc())
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
