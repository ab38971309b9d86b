"""Dataclasses shared across the summaries feature."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

LogLevel = Literal["error", "info", "debug"]
OverwritePolicy = Literal["ask", "always", "never"]
SummarySource = Literal["api", "local"]


@dataclass(frozen=True)
class RunConfig:
    """Immutable run parameters resolved once per invocation."""

    api_url: str = ""
    api_key: str = ""
    word_limit: int = 8000
    concurrency: int = 3
    log_level: LogLevel = "info"
    overwrite_policy: OverwritePolicy = "never"
    clean_before_api: bool = False
    timeout: float = 30.0

    @property
    def has_api(self) -> bool:
        return bool(self.api_url)


@dataclass(frozen=True)
class SummaryRequest:
    """Per-document input handed to the summary provider."""

    title: str
    body: str
    display_path: str


@dataclass(frozen=True)
class SummaryResult:
    """Normalized summary text and where it came from."""

    text: str
    source: SummarySource
    body_truncated: bool = False


@dataclass(frozen=True)
class OverwriteDecision:
    proceed: bool
    reason: str


@dataclass(frozen=True)
class DocumentOutcome:
    """Result of processing a single article."""

    path: Path
    status: Literal["written", "skipped", "failed"]
    source: Optional[SummarySource] = None
    detail: str = ""
