"""RSS / Atom feed collector.

Fetches every feed configured for a category and filters entries by keywords.
使用 httpx 获取内容 + feedparser 解析，兼容非标准 RSS/Atom。
"""

import asyncio
import logging
from calendar import timegm
from datetime import datetime, timezone

import feedparser
import httpx
from bs4 import BeautifulSoup

from ..config import FeedSource
from ..http import FEED_HEADERS, fetch_with_retry
from ..models import Item
from ..scoring import clean_snippet, feed_importance, matches_keywords
from .base import BaseCollector

logger = logging.getLogger(__name__)


def _parse_published(entry: dict) -> datetime | None:
    """Try to parse the published date from a feed entry."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return datetime.fromtimestamp(timegm(parsed), tz=timezone.utc)
            except (OverflowError, ValueError):
                continue
    return None


def _entry_content(entry: dict) -> str:
    if entry.get("content"):
        return entry["content"][0].get("value", "")
    return ""


class FeedCollector(BaseCollector):
    """Collector for a category made of one or more RSS/Atom feeds.

    Feeds are fetched concurrently and concatenated in configured order;
    importance decays with the entry's position in its own feed.
    """

    kind = "rss"

    async def _fetch_feed(
        self, client: httpx.AsyncClient, feed: FeedSource
    ) -> list[Item]:
        logger.info("Fetching RSS: %s (%s)", feed.name, feed.url)
        try:
            resp = await fetch_with_retry(
                client,
                feed.url,
                max_attempts=self.http.max_attempts,
                base_delay=self.http.backoff,
                timeout=self.http.timeout,
                headers=FEED_HEADERS,
            )
            parsed = feedparser.parse(resp.content)

            if parsed.bozo and not parsed.entries:
                logger.warning(
                    "Failed to parse RSS for %s: %s", feed.name, parsed.bozo_exception
                )
                return []

            relevant = []
            for entry in parsed.entries:
                title = (entry.get("title") or "").strip()
                if not title:
                    continue
                summary_text = BeautifulSoup(
                    entry.get("summary", ""), "html.parser"
                ).get_text(" ", strip=True)
                if matches_keywords(f"{title} {summary_text}", self.keywords):
                    relevant.append(entry)

            items: list[Item] = []
            for index, entry in enumerate(relevant[: self.fetch.max_items]):
                items.append(
                    Item(
                        title=entry.get("title", ""),
                        link=entry.get("link", ""),
                        source=feed.name,
                        published_at=_parse_published(entry),
                        importance=feed_importance(
                            feed.base_score,
                            index,
                            self.fetch.decay_step,
                            self.fetch.score_floor,
                        ),
                        snippet=clean_snippet(
                            _entry_content(entry),
                            entry.get("summary", ""),
                            self.fetch.snippet_chars,
                        ),
                    )
                )
        except Exception:
            logger.exception("Failed to fetch RSS for %s", feed.name)
            return []

        logger.info("RSS %s: %d relevant entries", feed.name, len(items))
        return items

    async def collect(self, client: httpx.AsyncClient) -> list[Item]:
        per_feed = await asyncio.gather(
            *(self._fetch_feed(client, feed) for feed in self.category.feeds)
        )
        items = [item for feed_items in per_feed for item in feed_items]
        logger.info("%s: collected %d items", self.category.label, len(items))
        return items
