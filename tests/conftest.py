"""Shared pytest fixtures for tallyscan tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from tallyscan.runtime import load_category_taxonomy, load_parser_config, reset_paths


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point TALLYSCAN_HOME at a temp dir and drop cached paths/config."""
    monkeypatch.setenv("TALLYSCAN_HOME", str(tmp_path))
    reset_paths()
    load_parser_config.cache_clear()
    load_category_taxonomy.cache_clear()
    yield tmp_path
    reset_paths()
    load_parser_config.cache_clear()
    load_category_taxonomy.cache_clear()
