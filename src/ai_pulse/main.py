"""Main entry point for AI Pulse.

Orchestrates the daily build:
  1. Load config → 2. Collect + translate + brief (batched) → 3. Write pages
"""

import asyncio
import logging
import sys
from datetime import datetime, timezone

import httpx

from .config import AppConfig, Settings, load_config
from .history import daily_filename
from .models import BuildArtifact
from .output import write_site
from .pipeline import build_artifact
from .processor import make_client

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure logging to stdout."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def _collect(
    config: AppConfig, settings: Settings, filename: str, timestamp: datetime
) -> BuildArtifact:
    llm_client = make_client(config.llm, settings)
    try:
        async with httpx.AsyncClient(follow_redirects=True) as http_client:
            return await build_artifact(
                config, http_client, llm_client, filename=filename, timestamp=timestamp
            )
    finally:
        if llm_client is not None:
            await llm_client.close()


def build(config: AppConfig, settings: Settings, now: datetime | None = None) -> None:
    """Run the pipeline and write the site for the UTC day of ``now``."""
    now = now or datetime.now(timezone.utc)
    # page date and "Generated" time come from the same UTC instant
    filename = daily_filename(now.date())

    logger.info("--- Phase 1: Collecting %d categories ---", len(config.categories))
    artifact = asyncio.run(_collect(config, settings, filename, now))

    logger.info("--- Phase 2: Writing pages ---")
    daily_path = write_site(
        artifact,
        config.categories,
        output_dir=config.output.dir,
        max_cards=config.fetch.max_items,
    )
    logger.info("Done! Output: %s", daily_path)


def run(config_path: str = "config.yaml") -> int:
    """Execute the full build; returns the process exit status."""
    _setup_logging()
    logger.info("=" * 60)
    logger.info("AI Pulse - Daily Build")
    logger.info("=" * 60)

    try:
        config, settings = load_config(config_path)
        logger.info(
            "Config loaded: %d categories, %d keywords, batch_size=%d",
            len(config.categories), len(config.keywords), config.pipeline.batch_size,
        )
        build(config, settings)
    except Exception:
        logger.exception("Build failed")
        return 1

    return 0


def cli() -> None:
    """CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    cli()
