"""Fixtures for CLI tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep user-level config out and drop handlers bound to the runner's streams."""
    monkeypatch.setattr("refdocs.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def root(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path
