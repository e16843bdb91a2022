"""Shared fixtures for the test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from wxr_builders import wxr_document

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_loggers():
    """Undo handlers and levels set by setup_logging."""
    yield
    for name in ("wordpress_to_markdown", "httpx", "httpcore"):
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_export(tmp_path: Path) -> Callable[..., Path]:
    """Write a WXR document built from the given items and return its path."""

    def _write(*items: str) -> Path:
        path = tmp_path / "export.xml"
        path.write_bytes(wxr_document(*items))
        return path

    return _write


@pytest.fixture
def example_export() -> Path:
    """Path to the example WordPress export."""
    return FIXTURES_DIR / "wordpress-export.xml"
