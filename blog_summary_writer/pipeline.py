"""Worker pool that summarizes every article under the content directory."""
from __future__ import annotations

import logging
import os
import queue
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .summaries import (
    DocumentOutcome,
    RunConfig,
    SummaryRequest,
    SummaryService,
    decide_overwrite,
    find_markdown_entries,
    join_front_matter,
    read_document,
    read_summary,
    read_title,
    serialize_interactive,
    split_front_matter,
    upsert_summary,
    write_document,
)
from .summaries.normalize import preview_text

logger = logging.getLogger(__name__)

ConfirmerFactory = Callable[[str], Callable[[str], bool]]


@dataclass
class RunReport:
    outcomes: List[DocumentOutcome] = field(default_factory=list)

    @property
    def counts(self) -> Counter:
        return Counter(outcome.status for outcome in self.outcomes)

    @property
    def sources(self) -> Counter:
        return Counter(outcome.source for outcome in self.outcomes if outcome.source)

    def describe(self) -> str:
        counts = self.counts
        sources = self.sources
        return (
            f"{len(self.outcomes)} articles: {counts['written']} written, "
            f"{counts['skipped']} skipped, {counts['failed']} failed "
            f"(api: {sources['api']}, local: {sources['local']})"
        )


class SummaryPipeline:
    """Locates articles and runs each one through summary generation and rewrite."""

    def __init__(
        self,
        config: RunConfig,
        root: Path,
        content_dir: Path,
        service: SummaryService,
        *,
        confirmer_factory: Optional[ConfirmerFactory] = None,
    ) -> None:
        self.config = config
        self.root = Path(root)
        self.content_dir = Path(content_dir)
        self.service = service
        self._confirmer_factory = confirmer_factory

    def run(self) -> RunReport:
        """Process all articles; only a failure to list them propagates."""
        files = find_markdown_entries(self.content_dir)
        if not files:
            logger.info("No markdown articles found under %s", self.content_dir)
            return RunReport()

        config = serialize_interactive(self.config)
        if config.concurrency != self.config.concurrency:
            logger.info(
                "Overwrite policy 'ask' enabled: concurrency lowered from %d to 1",
                self.config.concurrency,
            )
        logger.info(
            "Articles to process: %d, word limit: %d, concurrency: %d",
            len(files),
            config.word_limit,
            config.concurrency,
        )
        logger.debug("Content directory: %s", self.content_dir)
        logger.debug("Clean body before API: %s", config.clean_before_api)
        logger.debug("Overwrite policy: %s", config.overwrite_policy)

        pending: "queue.Queue[Path]" = queue.Queue()
        for path in files:
            pending.put(path)

        if config.concurrency == 1:
            return RunReport(self._worker(pending))

        report = RunReport()
        with ThreadPoolExecutor(max_workers=config.concurrency, thread_name_prefix="summary") as pool:
            futures = [pool.submit(self._worker, pending) for _ in range(config.concurrency)]
            for future in futures:
                report.outcomes.extend(future.result())
        return report

    def process_document(self, path: Path) -> DocumentOutcome:
        display_path = self.display_path(path)
        content = read_document(path)
        block, body = split_front_matter(content)

        existing = read_summary(block)
        if existing is not None:
            confirm = None
            if self.config.overwrite_policy == "ask" and self._confirmer_factory:
                confirm = self._confirmer_factory(display_path)
            decision = decide_overwrite(self.config.overwrite_policy, existing, confirm)
            if not decision.proceed:
                logger.info(
                    "Skipping existing summary (%s): %s (preview: %s)",
                    decision.reason,
                    display_path,
                    preview_text(existing, 80),
                )
                return DocumentOutcome(path=path, status="skipped", detail=decision.reason)
            logger.info("Overwriting existing summary (%s): %s", decision.reason, display_path)

        result = self.service.summarize(
            SummaryRequest(title=read_title(block), body=body, display_path=display_path)
        )
        if result.source == "local":
            logger.info("Using local summary: %s", display_path)

        updated = join_front_matter(upsert_summary(block, result.text), body)
        write_document(path, updated)
        logger.info("Summary written: %s", display_path)
        return DocumentOutcome(path=path, status="written", source=result.source)

    def display_path(self, path: Path) -> str:
        try:
            return os.path.relpath(path, self.root)
        except ValueError:
            return str(path)

    def _worker(self, pending: "queue.Queue[Path]") -> List[DocumentOutcome]:
        outcomes: List[DocumentOutcome] = []
        while True:
            try:
                path = pending.get_nowait()
            except queue.Empty:
                return outcomes
            outcomes.append(self._process_safely(path))

    def _process_safely(self, path: Path) -> DocumentOutcome:
        try:
            return self.process_document(path)
        except Exception as exc:
            logger.error("Failed to process %s: %s", self.display_path(path), exc)
            logger.debug("Failure details for %s", path, exc_info=True)
            return DocumentOutcome(path=path, status="failed", detail=str(exc))
