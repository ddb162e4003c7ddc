"""Fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from fitclip.config.models import FitclipConfig


@pytest.fixture(autouse=True)
def _skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI invocations from replacing the root logger's handlers."""
    monkeypatch.setattr("fitclip.cli._logging_configured", True)


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_obj() -> dict:
    """Context object with a default configuration."""
    return {"config": FitclipConfig()}
