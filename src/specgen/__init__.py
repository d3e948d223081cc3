"""specgen -- Generate TypeScript declarations from Swagger 2.0 / OpenAPI 3.x specs.

This package converts an API description document into two TypeScript
source files: a *models* file holding one declaration per schema definition,
and a *client* file holding a single interface whose members mirror the
API's operations.

Typical workflow::

    specgen --source petstore.yaml --destination ./src/api --clientName PetClient

The pipeline is strictly linear: the parser turns the raw document into an
immutable intermediate representation (:class:`~specgen.models.ApiDef`), the
generator turns that IR into a declaration tree, and the printer renders the
tree into text that the writer commits to disk.

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Generator configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
