"""Hacker News collector.

Fetches top stories from HN and filters for AI/LLM-related titles.
HN Firebase API 免费，无需 API Key。

API docs: https://github.com/HackerNews/API
"""

import asyncio
import logging
from datetime import datetime, timezone

import httpx

from ..http import fetch_with_retry
from ..models import Item
from ..scoring import hn_importance, matches_keywords
from .base import BaseCollector
from .preview import fetch_link_preview

logger = logging.getLogger(__name__)

HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"


class HackerNewsCollector(BaseCollector):
    """Hacker News collector (ranked-story point API).

    importance = points + comments * comment_weight, capped at 100.
    """

    kind = "hackernews"

    async def _get_json(self, client: httpx.AsyncClient, url: str):
        resp = await fetch_with_retry(
            client,
            url,
            max_attempts=self.http.max_attempts,
            base_delay=self.http.backoff,
            timeout=self.http.timeout,
        )
        return resp.json()

    async def _fetch_story(self, client: httpx.AsyncClient, story_id: int) -> dict | None:
        try:
            return await self._get_json(client, f"{HN_API_BASE}/item/{story_id}.json")
        except Exception:
            logger.debug("Failed to fetch HN story %s", story_id)
            return None

    async def _to_item(self, client: httpx.AsyncClient, story: dict) -> Item:
        url = story.get("url") or ""
        snippet = None
        if url:
            snippet = await fetch_link_preview(
                client,
                url,
                timeout=self.http.scrape_timeout,
                limit=self.fetch.snippet_chars,
            )

        published_at = None
        if story.get("time"):
            published_at = datetime.fromtimestamp(story["time"], tz=timezone.utc)

        return Item(
            title=story["title"],
            link=url or HN_ITEM_URL.format(id=story.get("id")),
            source="Hacker News",
            published_at=published_at,
            importance=hn_importance(
                story.get("score") or 0,
                story.get("descendants") or 0,
                self.fetch.comment_weight,
            ),
            snippet=snippet,
        )

    async def collect(self, client: httpx.AsyncClient) -> list[Item]:
        try:
            story_ids: list[int] = (
                await self._get_json(client, f"{HN_API_BASE}/topstories.json")
            )[: self.fetch.hn_top_k]

            logger.info("HN: fetching details for %d top stories", len(story_ids))
            stories = await asyncio.gather(
                *(self._fetch_story(client, sid) for sid in story_ids)
            )

            relevant = [
                story for story in stories
                if story
                and (story.get("title") or "").strip()
                and matches_keywords(story["title"], self.keywords)
            ][: self.fetch.max_items]

            items = list(
                await asyncio.gather(*(self._to_item(client, s) for s in relevant))
            )
        except Exception:
            logger.exception("Failed to fetch Hacker News stories")
            return []

        logger.info("HN: collected %d stories (after keyword filter)", len(items))
        return items
