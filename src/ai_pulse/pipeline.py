"""Batch pipeline: collect → translate → brief, a few categories at a time.

分批处理：每批最多 batch_size 个分类并发执行，整批结束后才开始下一批，
以免触发 LLM 接口的限流。
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import TypeVar

import httpx
from openai import AsyncOpenAI

from .collectors import REGISTRY, BaseCollector
from .config import AppConfig, CategoryConfig
from .models import BuildArtifact, SourceResult
from .processor import enrich_items, generate_briefing

logger = logging.getLogger(__name__)

K = TypeVar("K")
R = TypeVar("R")


def chunked(keys: Sequence[K], size: int) -> list[list[K]]:
    """Split ``keys`` into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [list(keys[i : i + size]) for i in range(0, len(keys), size)]


async def run_batches(
    keys: Sequence[K],
    worker: Callable[[K], Awaitable[R]],
    batch_size: int = 3,
) -> dict[K, R]:
    """Run ``worker`` for every key, ``batch_size`` keys at a time.

    Each chunk fully settles before the next one starts. A failing key is
    logged and left out of the result; its siblings and later chunks still run.
    """
    results: dict[K, R] = {}
    batches = chunked(keys, batch_size)

    for n, batch in enumerate(batches, 1):
        logger.info("Batch %d/%d: %s", n, len(batches), ", ".join(map(str, batch)))
        outcomes = await asyncio.gather(
            *(worker(key) for key in batch), return_exceptions=True
        )
        for key, outcome in zip(batch, outcomes):
            if isinstance(outcome, Exception):
                logger.error("✗ %s: %s", key, outcome, exc_info=outcome)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            results[key] = outcome

    return results


def build_collector(category: CategoryConfig, config: AppConfig) -> BaseCollector:
    """Instantiate the collector registered for ``category.kind``."""
    cls = REGISTRY.get(category.kind)
    if cls is None:
        raise ValueError(f"Unknown collector kind: {category.kind}")
    return cls(category, config.keywords, config.fetch, config.http)


async def build_artifact(
    config: AppConfig,
    http_client: httpx.AsyncClient,
    llm_client: AsyncOpenAI | None,
    filename: str = "",
    collectors: dict[str, BaseCollector] | None = None,
    timestamp: datetime | None = None,
) -> BuildArtifact:
    """Collect every configured category and request its briefing.

    Args:
        config: Application config; ``config.categories`` defines the keys.
        http_client: Shared client for all sources.
        llm_client: LLM client, or None to skip translation and briefings.
        filename: Daily page filename stored on the artifact.
        collectors: Optional pre-built collectors keyed by category key.
        timestamp: Generation time stored on the artifact; defaults to now (UTC).

    Returns:
        BuildArtifact with one SourceResult per category that did not fail.
    """
    categories = {c.key: c for c in config.categories}
    collectors = collectors or {
        key: build_collector(category, config) for key, category in categories.items()
    }

    async def process(key: str) -> tuple[SourceResult, str | None]:
        category = categories[key]
        items = await collectors[key].collect(http_client)
        items = await enrich_items(llm_client, items, config.llm)
        logger.info("✓ %s: %d items", key, len(items))

        briefing = None
        if items:
            briefing = await generate_briefing(llm_client, category.label, items, config.llm)
        return SourceResult(category=key, items=items), briefing

    outcomes = await run_batches(list(categories), process, config.pipeline.batch_size)

    artifact = BuildArtifact(filename=filename)
    if timestamp is not None:
        artifact.timestamp = timestamp
    for key in categories:
        if key not in outcomes:
            continue
        result, briefing = outcomes[key]
        artifact.results[key] = result
        if briefing:
            artifact.briefings[key] = briefing

    logger.info(
        "Pipeline done: %d/%d categories, %d briefings",
        len(artifact.results), len(categories), len(artifact.briefings),
    )
    return artifact
