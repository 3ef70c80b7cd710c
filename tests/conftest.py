"""Pytest configuration and shared fixtures for the compare backend tests."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from services.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the config manager at a fresh directory for every test."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("JSON_COMPARE_CONFIG_DIR", str(config_dir))
    ConfigManager.reset_instance()
    yield config_dir
    ConfigManager.reset_instance()


@pytest.fixture
def nested_document() -> str:
    """A document mixing objects, arrays of objects and scalar arrays."""
    return (
        '{"users":[{"id":"u1","tags":["a"]},{"id":"u2"}],'
        '"meta":{"count":2}}'
    )
