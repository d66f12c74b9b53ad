"""Shared test fixtures for fluent_openapi.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, recording backend calls, and
running CLI commands.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from fluent_openapi.models import ApiRequest
from fluent_openapi.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during a
    test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def kube_spec_path() -> Path:
    return FIXTURES_DIR / "kube_swagger.json"


@pytest.fixture
def kube_spec(kube_spec_path: Path) -> dict[str, Any]:
    """A trimmed Kubernetes-style Swagger 2.0 document."""
    with open(kube_spec_path) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Backend fixtures
# ---------------------------------------------------------------------------


class RecordingBackend:
    """Backend double that records every request and returns a fixed result."""

    def __init__(self, result: Any = None) -> None:
        self.requests: list[ApiRequest] = []
        self.result = result

    def http(self, request: ApiRequest) -> Any:
        self.requests.append(request)
        return self.result

    @property
    def last(self) -> ApiRequest:
        return self.requests[-1]


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend(result="sent")


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears the FLUENT_OPENAPI_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("fluent_openapi.config._is_xdg_platform", lambda: True)

    for var in ["FLUENT_OPENAPI_SPEC", "FLUENT_OPENAPI_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
