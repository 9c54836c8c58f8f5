"""Shared test fixtures for sonarcli.

Provides fixtures for isolated config environments, output state, CLI
runners, and SDK clients backed by :class:`httpx.MockTransport`. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from sonarcli.output import OutputFormat, OutputManager, reset_output, set_output
from sonarcli.sonar import SonarClient

BASE_URL = "http://sonar.test/api/"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    Flags such as quiet, verbose and the output format live on the global
    manager installed by the root callback; resetting keeps one test's
    global options from leaking into the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, and clears all
    SONAR_CLI_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("sonarcli.config._is_xdg_platform", lambda: True)

    for var in [
        "SONAR_CLI_URL",
        "SONAR_CLI_TOKEN",
        "SONAR_CLI_USERNAME",
        "SONAR_CLI_PASSWORD",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


class RecordingHandler:
    """MockTransport handler that records requests and replays canned responses.

    Routes are keyed by URL path (``/api/projects/search``); each value is
    either a single response factory or a list consumed in order.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, list[Handler]] = {}

    def add(self, path: str, *handlers: Handler) -> None:
        self.routes.setdefault(path, []).extend(handlers)

    def add_json(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.add(path, lambda request: httpx.Response(status_code, json=payload))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handlers = self.routes.get(request.url.path)
        if not handlers:
            return httpx.Response(404, json={"errors": [{"msg": f"no route for {request.url.path}"}]})
        handler = handlers.pop(0) if len(handlers) > 1 else handlers[0]
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def handler() -> RecordingHandler:
    """A fresh :class:`RecordingHandler`."""
    return RecordingHandler()


@pytest.fixture
def client(handler: RecordingHandler) -> SonarClient:
    """A :class:`SonarClient` talking to *handler* through a mock transport."""
    with SonarClient(BASE_URL, token="squ_test", transport=httpx.MockTransport(handler)) as sonar:
        yield sonar


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
