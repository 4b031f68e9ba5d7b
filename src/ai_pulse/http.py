"""Outbound HTTP with fixed-count retry and linear backoff.

所有外部请求统一走 fetch_with_retry：失败后等待 attempt * base_delay 秒再重试。
"""

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
}

FEED_HEADERS = {
    **BROWSER_HEADERS,
    "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml; q=0.1",
}


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    timeout: float = 10.0,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """GET ``url``, retrying on any HTTP error.

    Args:
        client: Shared async client.
        url: Target URL.
        max_attempts: Total attempts including the first one.
        base_delay: Backoff unit; waits 1x, 2x, ... between attempts.
        timeout: Per-request timeout in seconds.
        headers: Extra request headers.

    Returns:
        The first successful (2xx) response.

    Raises:
        httpx.HTTPError: The last failure once all attempts are used up.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            resp = await client.get(url, headers=headers, timeout=timeout)
            resp.raise_for_status()
            return resp
        except httpx.HTTPError as exc:
            if attempt >= max_attempts:
                raise
            logger.warning(
                "Retrying %s (%d/%d) after %s", url, attempt, max_attempts, exc.__class__.__name__
            )
            await asyncio.sleep(attempt * base_delay)

    raise ValueError("max_attempts must be >= 1")
