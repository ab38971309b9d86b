"""Run configuration resolved from the commented side-file and the environment.

Each setting is looked up in ``src/plugins/aisummary.config.js`` first, using
lines such as ``// AISUMMARY_CONCURRENCY: 2``, then in the environment variable
of the same name, then falls back to its default. Values that fail to parse
count as absent.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence, TypeVar

from .summaries.types import LogLevel, OverwritePolicy, RunConfig

T = TypeVar("T")

CONFIG_RELATIVE_PATH = Path("src") / "plugins" / "aisummary.config.js"
CONTENT_RELATIVE_PATH = Path("src") / "content" / "blog"

KNOWN_KEYS = (
    "AI_SUMMARY_API",
    "AI_SUMMARY_KEY",
    "AISUMMARY_WORD_LIMIT",
    "AISUMMARY_LOG_LEVEL",
    "AISUMMARY_CONCURRENCY",
    "AISUMMARY_OVERWRITE_EXISTING",
    "AISUMMARY_CLEAN_BEFORE_API",
    "AISUMMARY_TIMEOUT",
)

MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 5

_COMMENT_LINE_RE = re.compile(
    r"^[ \t]*//[ \t]*(?P<key>[A-Za-z_]+)[ \t]*[:=](?P<value>[^\r\n]*)", re.MULTILINE
)
_TRUE_WORDS = {"true", "1", "yes", "y"}
_FALSE_WORDS = {"false", "0", "no", "n"}
_LOG_LEVELS: Dict[str, LogLevel] = {"0": "error", "1": "info", "2": "debug"}


def get_config_path(root: Path) -> Path:
    return Path(root) / CONFIG_RELATIVE_PATH


def get_default_content_dir(root: Path) -> Path:
    return Path(root) / CONTENT_RELATIVE_PATH


def read_commented_config(path: Path) -> Dict[str, str]:
    """Collect ``// KEY: value`` pairs for the known keys; the first occurrence wins."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}

    values: Dict[str, str] = {}
    for match in _COMMENT_LINE_RE.finditer(text):
        key = match.group("key").upper()
        if key in KNOWN_KEYS and key not in values:
            values[key] = match.group("value")
    return values


def parse_text(raw: str) -> Optional[str]:
    value = raw.strip()
    value = re.sub(r"\s+//.*$", "", value)
    value = value.rstrip(";").strip()
    value = re.sub(r"^['\"]", "", value)
    value = re.sub(r"['\"]$", "", value).strip()
    return value or None


def parse_positive_int(raw: str) -> Optional[int]:
    value = parse_text(raw)
    if value is None or not value.isdigit():
        return None
    number = int(value)
    return number if number > 0 else None


def parse_positive_float(raw: str) -> Optional[float]:
    value = parse_text(raw)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if 0 < number < float("inf") else None


def parse_bool(raw: str) -> Optional[bool]:
    value = (parse_text(raw) or "").lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    return None


def parse_log_level(raw: str) -> Optional[LogLevel]:
    value = (parse_text(raw) or "").lower()
    if value in _LOG_LEVELS:
        return _LOG_LEVELS[value]
    if value in ("error", "info", "debug"):
        return value  # type: ignore[return-value]
    return None


def parse_overwrite_policy(raw: str) -> Optional[OverwritePolicy]:
    value = (parse_text(raw) or "").lower()
    if value in ("ask", "always", "never"):
        return value  # type: ignore[return-value]
    if value in _TRUE_WORDS:
        return "always"
    if value in _FALSE_WORDS:
        return "never"
    return None


def resolve_setting(
    key: str,
    parse: Callable[[str], Optional[T]],
    sources: Sequence[Mapping[str, str]],
    default: T,
) -> T:
    """Return the first value for ``key`` that parses, searching ``sources`` in order."""
    for source in sources:
        raw = source.get(key)
        if raw is None:
            continue
        value = parse(raw)
        if value is not None:
            return value
    return default


def clamp_concurrency(value: int) -> int:
    return max(MIN_CONCURRENCY, min(MAX_CONCURRENCY, value))


def resolve_run_config(
    root: Path,
    environ: Optional[Mapping[str, str]] = None,
    *,
    interactive: bool = False,
) -> RunConfig:
    """Build the immutable :class:`RunConfig` for a run rooted at ``root``."""
    sources = (
        read_commented_config(get_config_path(root)),
        os.environ if environ is None else environ,
    )
    return RunConfig(
        api_url=resolve_setting("AI_SUMMARY_API", parse_text, sources, ""),
        api_key=resolve_setting("AI_SUMMARY_KEY", parse_text, sources, ""),
        word_limit=resolve_setting("AISUMMARY_WORD_LIMIT", parse_positive_int, sources, 8000),
        concurrency=clamp_concurrency(
            resolve_setting("AISUMMARY_CONCURRENCY", parse_positive_int, sources, 3)
        ),
        log_level=resolve_setting("AISUMMARY_LOG_LEVEL", parse_log_level, sources, "info"),
        overwrite_policy=resolve_setting(
            "AISUMMARY_OVERWRITE_EXISTING",
            parse_overwrite_policy,
            sources,
            "ask" if interactive else "never",
        ),
        clean_before_api=resolve_setting("AISUMMARY_CLEAN_BEFORE_API", parse_bool, sources, False),
        timeout=resolve_setting("AISUMMARY_TIMEOUT", parse_positive_float, sources, 30.0),
    )
