"""Best-effort link previews from HTML meta tags."""

import logging

import httpx
from bs4 import BeautifulSoup

from ..http import BROWSER_HEADERS

logger = logging.getLogger(__name__)


async def fetch_link_preview(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = 3.0,
    limit: int = 300,
) -> str | None:
    """Read ``<meta name="description">`` (or og:description) from a page.

    Single attempt with a short timeout. Returns None on any failure or when
    the page has no description.
    """
    try:
        resp = await client.get(url, headers=BROWSER_HEADERS, timeout=timeout)
        resp.raise_for_status()
        soup = BeautifulSoup(resp.text, "html.parser")
    except Exception:
        logger.debug("Link preview failed for %s", url)
        return None

    for attrs in ({"name": "description"}, {"property": "og:description"}):
        meta = soup.find("meta", attrs=attrs)
        if meta and meta.get("content"):
            description = meta["content"].strip()[:limit].strip()
            if description:
                return description
    return None
