"""Shared test fixtures for specgen.

Provides reusable fixtures for loading API document fixtures, isolating the
configuration environment, and managing output state. These fixtures are
automatically discovered by pytest and available to all test modules without
explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from specgen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

_EXPECTED_TICKET_MODELS = """\
export interface TicketDTO {
    id: string;
    status?: "OPEN" | "CLOSED";
}
"""

_EXPECTED_TICKET_CLIENT = """\
import { TicketDTO } from "./models";

export interface ApiClient {
    getTicket: (id: string) => Promise<TicketDTO>;
}
"""


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Run every test from an empty working directory with no SPECGEN_* env vars.

    Keeps a developer's own ``specgen.json`` or environment from leaking into
    config resolution. The directory lives outside ``tmp_path``, which tests
    can then list without seeing it.
    """
    for var in ("SPECGEN_CLIENT_NAME", "SPECGEN_MODELS_FILE", "SPECGEN_CLIENT_FILE"):
        monkeypatch.delenv(var, raising=False)
    workdir = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(workdir)
    return workdir


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tickets_path() -> Path:
    """Path to the OpenAPI 3.0 tickets document (JSON)."""
    return FIXTURES_DIR / "tickets_openapi3.json"


@pytest.fixture
def petstore_path() -> Path:
    """Path to the Swagger 2.0 petstore document (YAML)."""
    return FIXTURES_DIR / "petstore_swagger2.yaml"


@pytest.fixture
def tickets_raw(tickets_path: Path) -> dict[str, Any]:
    """Load raw tickets document dict."""
    with open(tickets_path) as f:
        return json.load(f)


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """Load raw petstore document dict."""
    with open(petstore_path) as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a plain, colourless, verbose OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Expected output for the tickets document
# ---------------------------------------------------------------------------


@pytest.fixture
def expected_ticket_models() -> str:
    """models.ts generated from the tickets document."""
    return _EXPECTED_TICKET_MODELS


@pytest.fixture
def expected_ticket_client() -> str:
    """client.ts generated from the tickets document with the default client name."""
    return _EXPECTED_TICKET_CLIENT
