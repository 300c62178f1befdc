"""
Pytest configuration and fixtures
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def write_tree(root: Path, files: Dict[str, Union[str, bytes]]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        target.write_bytes(content)
    return root


@pytest.fixture
def make_tree(tmp_path: Path):
    """Factory fixture building a directory tree under ``tmp_path``."""

    def _make(name: str, files: Dict[str, Union[str, bytes]]) -> Path:
        return write_tree(tmp_path / name, files)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep DUPSCAN_* settings and stray .env files out of every test."""
    for key in (
        "DUPSCAN_ROOTS",
        "DUPSCAN_SEPARATOR",
        "DUPSCAN_CHUNK_SIZE",
        "DUPSCAN_EXCLUDE",
        "DUPSCAN_STRICT",
        "DUPSCAN_CACHE_PATHS",
        "DUPSCAN_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
