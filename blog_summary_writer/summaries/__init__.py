"""Shared exports for the article summaries feature."""
from __future__ import annotations

from .client import (
    AuthenticationError,
    ClientConfigurationError,
    SummaryEndpointClient,
    SummaryEndpointError,
    TransientError,
)
from .frontmatter import (
    join_front_matter,
    read_summary,
    read_title,
    split_front_matter,
    upsert_summary,
)
from .normalize import SUMMARY_MAX_LEN, looks_like_code, strip_markup, to_declarative_sentence
from .policy import OVERWRITE_POLICIES, decide_overwrite, serialize_interactive
from .service import SummaryService
from .storage import find_markdown_entries, read_document, write_document
from .types import (
    DocumentOutcome,
    OverwriteDecision,
    RunConfig,
    SummaryRequest,
    SummaryResult,
)


__all__ = [
    "RunConfig",
    "SummaryRequest",
    "SummaryResult",
    "OverwriteDecision",
    "DocumentOutcome",
    "SUMMARY_MAX_LEN",
    "strip_markup",
    "to_declarative_sentence",
    "looks_like_code",
    "split_front_matter",
    "join_front_matter",
    "read_summary",
    "read_title",
    "upsert_summary",
    "find_markdown_entries",
    "read_document",
    "write_document",
    "OVERWRITE_POLICIES",
    "decide_overwrite",
    "serialize_interactive",
    "SummaryEndpointClient",
    "SummaryEndpointError",
    "AuthenticationError",
    "TransientError",
    "ClientConfigurationError",
    "SummaryService",
]
