"""Console output for specgen, split strictly between stdout and stderr.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** carries generated source only, and only with ``--dry-run``, so
  ``specgen -s api.yaml --dry-run > all.ts`` captures nothing but code.
* **stderr** carries every diagnostic: progress, success, warnings, errors
  and ``--verbose`` traces.
* Syntax highlighting is used only when stdout is an interactive terminal.
* ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` turn off colour and Rich
  markup everywhere.

:class:`OutputManager` holds the resolved preferences for one run. The
command installs it with :func:`set_output`; library code such as the schema
resolver reports through the module-level helpers (:func:`warning`,
:func:`debug`, ...) so the manager never has to be threaded through call
signatures.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """How stdout is rendered.

    ``AUTO`` becomes ``RICH`` on an interactive terminal with colour enabled
    and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    PLAIN = "plain"
    RICH = "rich"


# Rich markup and plain-text prefix per diagnostic level.
_STYLES: dict[str, tuple[str, str]] = {
    "info": ("{}", ""),
    "success": ("[green]{}[/green]", ""),
    "warning": ("[yellow]Warning:[/yellow] {}", "Warning: "),
    "error": ("[bold red]Error:[/bold red] {}", "Error: "),
    "debug": (r"[dim]\[debug] {}[/dim]", "[debug] "),
}


class OutputManager:
    """Route generated source and diagnostics to the right stream.

    Args:
        format: Desired stdout format. ``AUTO`` resolves from TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Hide info and success messages. Warnings and errors still show.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def print_source(self, text: str, lexer: str = "typescript") -> None:
        """Write generated source to stdout.

        In ``RICH`` format the text is highlighted with
        :class:`~rich.syntax.Syntax`; otherwise it is written unchanged, so
        redirected output is byte-identical to the file that would have been
        written.

        Args:
            text: The source text, including its trailing newline.
            lexer: Pygments lexer used for highlighting.
        """
        if self._format != OutputFormat.RICH:
            sys.stdout.write(text)
            sys.stdout.flush()
            return
        self._stdout.print(Syntax(text, lexer, theme="monokai", word_wrap=True))

    # --- stderr ---

    def info(self, message: str) -> None:
        """Progress message. Hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic("info", message)

    def success(self, message: str) -> None:
        """Green completion message. Hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        """Yellow warning. Always shown."""
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        """Bold red error. Always shown."""
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        """Dim ``[debug]`` trace. Shown only with ``--verbose``."""
        if self._verbose:
            self._diagnostic("debug", message)

    def _diagnostic(self, level: str, message: str) -> None:
        markup, prefix = _STYLES[level]
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(escape(message)))


# --- Environment detection ---


def _is_tty() -> bool:
    """Whether stdout is attached to a terminal."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` disables colour."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the process-wide manager."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Used by the test suite between tests."""
    global _output
    _output = None


def print_source(text: str, lexer: str = "typescript") -> None:
    get_output().print_source(text, lexer)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
