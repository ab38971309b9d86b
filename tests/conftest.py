"""Shared fixtures for the summary pipeline tests.

- Prepend project root to sys.path so 'blog_summary_writer' imports without installation.
- Provide a throwaway site layout with ``src/content/blog`` and ``src/plugins``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def _ensure_project_root_on_syspath() -> None:
    """Prepend repository root to sys.path for package imports."""
    project_root = Path(__file__).resolve().parent.parent
    root_str = str(project_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_syspath()


CONFIG_ENV_KEYS = (
    "AI_SUMMARY_API",
    "AI_SUMMARY_KEY",
    "AISUMMARY_WORD_LIMIT",
    "AISUMMARY_LOG_LEVEL",
    "AISUMMARY_CONCURRENCY",
    "AISUMMARY_OVERWRITE_EXISTING",
    "AISUMMARY_CLEAN_BEFORE_API",
    "AISUMMARY_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clear_summary_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment from leaking into configuration tests."""
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    (tmp_path / "src" / "content" / "blog").mkdir(parents=True)
    (tmp_path / "src" / "plugins").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def blog_dir(site_root: Path) -> Path:
    return site_root / "src" / "content" / "blog"


@pytest.fixture
def write_article(blog_dir: Path) -> Callable[..., Path]:
    """Create ``<blog>/<slug>/<name>`` with the given text and return its path."""

    def _write(slug: str, content: str, name: str = "index.md") -> Path:
        path = blog_dir / slug / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write
