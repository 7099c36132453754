"""Pytest fixtures for the curriculum MCP server."""

from __future__ import annotations

import os
from pathlib import Path
import sys

import pytest

# Ensure repo root is importable when running without an install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from curriculum_mcp.config import McpConfig  # noqa: E402
from curriculum_mcp.dispatch import Dispatcher  # noqa: E402
from curriculum_mcp.store import CollectionStore  # noqa: E402


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with no CURRICULUM_MCP_* overrides.
    """
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("CURRICULUM_MCP_"):
            monkeypatch.delenv(name)
    return tmp_path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.json"


@pytest.fixture
def store(db_path: Path) -> CollectionStore:
    return CollectionStore(db_path)


@pytest.fixture
def dispatcher(store: CollectionStore) -> Dispatcher:
    return Dispatcher(store)


@pytest.fixture
def config(db_path: Path) -> McpConfig:
    cfg = McpConfig()
    cfg.store.path = str(db_path)
    return cfg


