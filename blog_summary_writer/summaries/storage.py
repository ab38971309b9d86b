"""Filesystem helpers for locating and rewriting article files."""
from __future__ import annotations

import contextlib
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import List

_ENTRY_NAME_RE = re.compile(r"index\.mdx?$")


def find_markdown_entries(root: Path) -> List[Path]:
    """Return every ``index.md``/``index.mdx`` file below ``root``."""
    root = Path(root).expanduser()
    if not root.is_dir():
        raise FileNotFoundError(f"Content directory does not exist: {root}")
    return sorted(p for p in root.rglob("*") if p.is_file() and _ENTRY_NAME_RE.search(p.name))


def read_document(path: Path) -> str:
    # newline="" keeps CRLF bodies byte-for-byte intact on rewrite.
    with Path(path).open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_document(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` atomically, keeping its permission bits."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            tmp_path.unlink()
        raise
