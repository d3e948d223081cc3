"""Generate command -- API document to models and client files.

Implements the single ``specgen`` command. It resolves the effective
configuration, loads and classifies the API document, builds the IR, renders
the models and client files, and either writes them into the destination
directory or, with ``--dry-run``, prints them to stdout.
"""

from __future__ import annotations

from typing import Optional

import typer

from specgen import __version__
from specgen.exceptions import InvalidUsageError, SpecgenError
from specgen.output import (
    OutputManager,
    debug,
    error,
    info,
    print_source,
    set_output,
    success,
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specgen {__version__}")
        raise typer.Exit()


def generate_command(
    source: str = typer.Option(
        ...,
        "--source",
        "-s",
        help="Swagger 2.0 / OpenAPI 3.x document (JSON or YAML); '-' for stdin.",
    ),
    destination: Optional[str] = typer.Option(
        None,
        "--destination",
        "-d",
        help="Directory the models and client files are written to.",
    ),
    client_name: Optional[str] = typer.Option(
        None,
        "--clientName",
        "--client-name",
        "-n",
        help="Name of the generated client interface. Defaults to ApiClient.",
    ),
    models_file: Optional[str] = typer.Option(
        None, "--models-file", help="Base name of the models file. Defaults to 'models'."
    ),
    client_file: Optional[str] = typer.Option(
        None, "--client-file", help="Base name of the client file. Defaults to 'client'."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the generated files instead of writing them."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Generate TypeScript models and a client interface from an API document.

    Writes ``<destination>/<models-file>.ts`` with one declaration per schema
    definition and ``<destination>/<client-file>.ts`` with one interface
    whose members mirror the document's operations.

    Args:
        source: Local file path, or ``-`` to read the document from stdin.
        destination: Output directory, created if missing. Required unless
            ``--dry-run`` is given.
        client_name: Client interface name (highest-precedence override).
        models_file: Models file base name, without extension.
        client_file: Client file base name, without extension.
        dry_run: Print both files to stdout and write nothing.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        no_color: Disable all colour and Rich markup.
        version: If ``True``, print the version string and exit.

    Raises:
        typer.Exit: With the error's exit code if the configuration is
            invalid, the document cannot be parsed, or the files cannot be
            written.

    Example::

        specgen --source ./swagger.json --destination ./src/api
        specgen -s ./openapi.yaml -d ./src/api --clientName TicketClient
        cat openapi.yaml | specgen -s - --dry-run
    """
    from specgen.config import resolve_config
    from specgen.generator import render_files, write_outputs
    from specgen.parser import build_api_def, load_spec

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        if destination is None and not dry_run:
            raise InvalidUsageError("Missing option '--destination' / '-d'")

        config = resolve_config(
            cli_client_name=client_name,
            cli_models_file=models_file,
            cli_client_file=client_file,
        )
        debug(
            f"Config: client_name={config.client_name} "
            f"models_file={config.models_file} client_file={config.client_file}"
        )

        info(f"Reading spec from: {source}")
        raw = load_spec(source)
        api_def = build_api_def(raw, config.client_name)
        files = render_files(api_def, config)

        if dry_run:
            for name, text in files.items():
                info(f"--- {name} ---")
                print_source(text)
            return

        written = write_outputs(destination, files)
    except SpecgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for path in written:
        debug(f"Wrote {path}")
    success(
        f"Generated {len(api_def.models_def)} model(s) and "
        f"{len(api_def.client_def.members)} client member(s) in {destination}"
    )
