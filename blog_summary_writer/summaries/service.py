"""Summary provider: endpoint first, deterministic local text otherwise."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from .client import SummaryEndpointClient, SummaryEndpointError
from .normalize import (
    SUMMARY_MAX_LEN,
    limit_body,
    looks_like_code,
    preview_text,
    strip_markup,
    to_declarative_sentence,
)
from .types import RunConfig, SummaryRequest, SummaryResult

PLACEHOLDER_SUMMARY = "本文介绍相关主题与步骤。"


class SummaryService:
    """Produces a normalized one-sentence summary for a single article."""

    def __init__(
        self,
        config: RunConfig,
        *,
        client: Optional[SummaryEndpointClient] = None,
        max_len: int = SUMMARY_MAX_LEN,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.max_len = max_len
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    def summarize(self, request: SummaryRequest) -> SummaryResult:
        limited = limit_body(request.body, self.config.word_limit)
        truncated = len(limited) < len(request.body)
        if truncated:
            self._logger.info(
                "Body exceeds %d characters, truncated: %s",
                self.config.word_limit,
                request.display_path,
            )

        text = self._summarize_via_api(self._client, request, limited) if self._client else None
        source = "api"
        if not text:
            source = "local"
            text = self.local_summary(request.title, limited)
        return SummaryResult(
            text=to_declarative_sentence(text, self.max_len),
            source=source,
            body_truncated=truncated,
        )

    def local_summary(self, title: str, body: str) -> str:
        """Summarize from the body alone; fall back to the title, then a placeholder."""
        for candidate in (strip_markup(body), title):
            sentence = to_declarative_sentence(candidate, self.max_len)
            if sentence:
                return sentence
        return to_declarative_sentence(PLACEHOLDER_SUMMARY, self.max_len)

    def _summarize_via_api(
        self, client: SummaryEndpointClient, request: SummaryRequest, body: str
    ) -> Optional[str]:
        content = strip_markup(body) if self.config.clean_before_api else body
        self._log_debug(
            "api-request",
            request,
            {"cleaned": self.config.clean_before_api, "preview": preview_text(content, 120)},
        )
        try:
            raw = client.request_summary(request.title, content, self.config.word_limit)
        except SummaryEndpointError as exc:
            self._logger.error("Summary API call failed for %s: %s", request.display_path, exc)
            return None

        if looks_like_code(raw):
            self._logger.info(
                "API response looks like code, using local summary: %s", request.display_path
            )
            self._log_debug("api-rejected", request, {"preview": preview_text(raw, 120)})
            return None

        sentence = to_declarative_sentence(strip_markup(raw), self.max_len)
        if not sentence:
            self._logger.info("API returned an empty summary, using local summary: %s", request.display_path)
            return None
        self._logger.info("Summary generated via API: %s", request.display_path)
        return sentence

    def _log_debug(self, event: str, request: SummaryRequest, extra: Mapping[str, object]) -> None:
        payload = {"event": event, "path": request.display_path, "title": request.title}
        payload.update(dict(extra))
        self._logger.debug("summary-service %s", payload, extra={"summary": payload})
