from __future__ import annotations

import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI commands reconfigure the package logger; undo that per test."""
    logger = logging.getLogger("content_store")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    yield
    logger.handlers, level, logger.propagate = saved
    logger.setLevel(level)


@pytest.fixture
def write_post(tmp_path: Path):
    """Write a front-matter document under ``tmp_path / "content"``."""
    content_dir = tmp_path / "content"

    def _write(rel_path: str, front_matter: str, body: str = "Body text.\n") -> Path:
        path = content_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"---\n{front_matter.strip()}\n---\n{body}", encoding="utf-8")
        return path

    _write.content_dir = content_dir
    return _write
