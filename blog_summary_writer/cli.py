from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import get_default_content_dir, resolve_run_config
from .pipeline import SummaryPipeline
from .prompting import is_interactive_session, make_overwrite_confirmer
from .summaries import RunConfig, SummaryEndpointClient, SummaryService

logger = logging.getLogger("blog_summary_writer")

_LOG_LEVELS = {"error": logging.ERROR, "info": logging.INFO, "debug": logging.DEBUG}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(levelname)s %(message)s",
        force=True,
    )


def build_summary_client(config: RunConfig) -> Optional[SummaryEndpointClient]:
    if not config.has_api:
        return None
    return SummaryEndpointClient(config.api_url, config.api_key, timeout=config.timeout)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="blog-summary-writer",
        description="Generate one-sentence summaries and write them into article front matter.",
    )
    p.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Site root containing src/plugins/aisummary.config.js (default: current directory)",
    )
    p.add_argument(
        "--content-dir",
        type=Path,
        help="Directory scanned for index.md/index.mdx articles (default: <root>/src/content/blog)",
    )
    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    root: Path = args.root.expanduser()
    content_dir: Path = (args.content_dir or get_default_content_dir(root)).expanduser()

    interactive = is_interactive_session()
    config = resolve_run_config(root, interactive=interactive)
    configure_logging(config.log_level)

    client = build_summary_client(config)
    try:
        service = SummaryService(config, client=client)
        pipeline = SummaryPipeline(
            config,
            root,
            content_dir,
            service,
            confirmer_factory=make_overwrite_confirmer if interactive else None,
        )
        try:
            report = pipeline.run()
        except OSError as exc:
            logger.error("Summary generation failed: %s", exc)
            return 1
    finally:
        if client:
            client.close()

    print(f"Summary run complete: {report.describe()}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
