"""Keyword relevance filter, importance heuristics and snippet cleanup."""

import re

from bs4 import BeautifulSoup

# Footer that some aggregator feeds append to every entry
_BOILERPLATE = re.compile(r"Discussion\s*\|\s*Link", re.IGNORECASE)
_MARKDOWN_IMAGE = re.compile(r"!\[.*?\]\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


def matches_keywords(text: str, keywords: list[str]) -> bool:
    """Check if text contains any of the keywords (case-insensitive)."""
    text_lower = text.lower()
    return any(kw.lower() in text_lower for kw in keywords)


def clamp_importance(value: float) -> float:
    return min(max(value, 0.0), 100.0)


def hn_importance(score: float, comments: float, weight: float = 2) -> float:
    """Points plus weighted comment count, capped at 100."""
    return clamp_importance(score + comments * weight)


def feed_importance(
    base_score: float, index: int, decay_step: float = 3, floor: float = 10
) -> float:
    """Earlier entries in a feed rank higher, never below ``floor``."""
    return clamp_importance(max(base_score - index * decay_step, floor))


def _html_to_text(markup: str) -> str:
    return BeautifulSoup(markup, "html.parser").get_text(" ", strip=True)


def clean_snippet(content: str = "", summary: str = "", limit: int = 300) -> str | None:
    """Build a short plain-text snippet from feed content.

    Prefers the first paragraph of rich ``content``; falls back to the full
    content text and then to ``summary``. Boilerplate and markdown images are
    stripped. Returns None when nothing useful is left.
    """
    snippet = ""

    if content:
        soup = BeautifulSoup(content, "html.parser")
        first_p = soup.find("p")
        if first_p is not None:
            snippet = first_p.get_text(" ", strip=True)
        if not snippet:
            snippet = _BOILERPLATE.sub("", soup.get_text(" ", strip=True))

    if not snippet and summary:
        snippet = _BOILERPLATE.sub("", _html_to_text(summary))

    snippet = _MARKDOWN_IMAGE.sub("", snippet)
    snippet = _WHITESPACE.sub(" ", snippet).strip()
    snippet = snippet[:limit].strip()
    return snippet or None
