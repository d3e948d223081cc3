"""Print declaration trees as TypeScript source text.

Rendering is done with Jinja2 templates from ``generator/templates/``:

* ``models.ts.j2`` -- one declaration per model, separated by a blank line.
* ``client.ts.j2`` -- the grouped model import (if any), a blank line, then
  the client interface.

Type expressions are rendered by :func:`~specgen.generator.type_mapper.render_type`,
exposed to the templates as filters. Output uses four-space indentation, LF
line endings and ends with a newline, so the same tree always produces
byte-identical text.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from specgen.generator.declarations import DeclarationSet, build_declarations
from specgen.generator.nodes import EnumDeclaration, InterfaceDeclaration
from specgen.generator.type_mapper import (
    format_name,
    quote_string,
    render_member,
    render_type,
)
from specgen.models import ApiDef, GeneratorConfig


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

TS_EXTENSION = ".ts"


def render_files(api_def: ApiDef, config: GeneratorConfig) -> dict[str, str]:
    """Render both output files for *api_def*.

    Args:
        api_def: The resolved IR.
        config: Effective settings; supplies the file base names.

    Returns:
        An ordered mapping of file name to file content: the models file
        first, then the client file.

    Example:
        ::

            files = render_files(api, GeneratorConfig())
            files["client.ts"]  # 'import { TicketDTO } from "./models";\\n...'
    """
    declarations = build_declarations(api_def, models_module=config.models_file)
    env = _create_jinja_env()
    return {
        config.models_file + TS_EXTENSION: render_models(declarations, env),
        config.client_file + TS_EXTENSION: render_client(declarations, env),
    }


def render_models(declarations: DeclarationSet, env: Environment | None = None) -> str:
    """Render the models file."""
    env = env or _create_jinja_env()
    template = env.get_template("models.ts.j2")
    return _normalize(template.render(declarations=declarations.models))


def render_client(declarations: DeclarationSet, env: Environment | None = None) -> str:
    """Render the client file."""
    env = env or _create_jinja_env()
    template = env.get_template("client.ts.j2")
    return _normalize(
        template.render(
            model_import=declarations.client_import, client=declarations.client
        )
    )


def _create_jinja_env() -> Environment:
    """Create and configure the Jinja2 environment for the output templates.

    Autoescape is disabled for ``.ts.j2`` templates, which produce
    TypeScript, not HTML. Block trimming and lstrip are enabled for cleaner
    template authoring.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("ts.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ts_type"] = render_type
    env.filters["ts_member"] = render_member
    env.filters["ts_name"] = format_name
    env.filters["ts_string"] = quote_string
    env.tests["enum_declaration"] = lambda node: isinstance(node, EnumDeclaration)
    env.tests["interface_declaration"] = lambda node: isinstance(
        node, InterfaceDeclaration
    )
    return env


def _normalize(text: str) -> str:
    """LF line endings and exactly one trailing newline (empty stays empty)."""
    text = text.replace("\r\n", "\n")
    if not text.strip():
        return ""
    return text.rstrip("\n") + "\n"
