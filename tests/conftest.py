"""Shared pytest fixtures for curvedit tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from curvedit.core.config.loader import LOG_LEVEL_ENV

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the log level override from leaking in from the shell."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
