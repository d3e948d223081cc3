"""Configuration resolution for a generation run.

specgen keeps no persistent state between runs. The only configuration inputs
are:

* **Project config** -- an optional ``./specgen.json`` in the working
  directory, typically committed next to the API document so that every
  developer generates with the same client name and file names.
* **Environment variables** -- ``SPECGEN_CLIENT_NAME``,
  ``SPECGEN_MODELS_FILE`` and ``SPECGEN_CLIENT_FILE``.
* **CLI flags** -- ``--clientName``, ``--models-file`` and ``--client-file``.

:func:`resolve_config` merges them into a single
:class:`~specgen.models.GeneratorConfig`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specgen.exceptions import ConfigError, InvalidUsageError
from specgen.models import IDENTIFIER_RE, GeneratorConfig

_PROJECT_CONFIG_FILENAME = "specgen.json"

_ENV_VARS: dict[str, str] = {
    "client_name": "SPECGEN_CLIENT_NAME",
    "models_file": "SPECGEN_MODELS_FILE",
    "client_file": "SPECGEN_CLIENT_FILE",
}


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``specgen.json``.

    Args:
        directory: Directory to look in. Defaults to the current working
            directory.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid project config at {path}: expected a JSON object, "
            f"got {type(data).__name__}"
        )
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_client_name: Optional[str] = None,
    cli_models_file: Optional[str] = None,
    cli_client_file: Optional[str] = None,
    project_dir: Optional[Path] = None,
) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``SPECGEN_CLIENT_NAME``, ...)
        3. Project config (``./specgen.json``)
        4. Defaults

    Returns:
        The effective :class:`~specgen.models.GeneratorConfig`.

    Raises:
        ConfigError: If the project config is malformed.
        InvalidUsageError: If a resolved file name is empty or contains a
            path separator, or the client name is not an identifier.
    """
    # 4. Defaults come from the model itself
    values: dict[str, Any] = {}

    # 3. Project-local config
    project = load_project_config(project_dir)
    if project is not None:
        for key in GeneratorConfig.model_fields:
            if key in project:
                values[key] = project[key]

    # 2. Environment variables
    for key, env_var in _ENV_VARS.items():
        env_value = os.environ.get(env_var)
        if env_value:
            values[key] = env_value

    # 1. CLI flags (highest precedence)
    cli_values = {
        "client_name": cli_client_name,
        "models_file": cli_models_file,
        "client_file": cli_client_file,
    }
    for key, value in cli_values.items():
        if value is not None:
            values[key] = value

    try:
        config = GeneratorConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    _validate_base_name("models file", config.models_file)
    _validate_base_name("client file", config.client_file)
    if config.models_file == config.client_file:
        raise InvalidUsageError(
            f"Models and client files must differ (both are '{config.models_file}')"
        )
    if not config.client_name.strip():
        raise InvalidUsageError("Client name must not be empty")
    if not IDENTIFIER_RE.match(config.client_name):
        raise InvalidUsageError(
            f"Client name '{config.client_name}' is not a valid TypeScript identifier"
        )
    return config


def _validate_base_name(label: str, name: str) -> None:
    """Reject base names that would escape the destination directory."""
    if not name.strip():
        raise InvalidUsageError(f"The {label} name must not be empty")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise InvalidUsageError(
            f"The {label} name '{name}' must be a plain file name without path separators"
        )
