"""Pytest configuration and shared fixtures."""

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add opencode_synced to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

_ENV_VARS = (
    "OPENCODE_SYNCED_CONFIG_DIR",
    "OPENCODE_SYNCED_SKILLS_HUB",
    "OPENCODE_SYNCED_CONFIG",
    "OPENCODE_SYNCED_LOG_LEVEL",
    "OPENCODE_SYNCED_LOG_FILE",
)


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear package env overrides and logger handlers between tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    yield

    logger = logging.getLogger("opencode_synced")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def tmp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
