"""Tests for daily report and shell rendering."""

from datetime import datetime, timezone

from ai_pulse.config import CategoryConfig
from ai_pulse.models import BuildArtifact, Item, SourceResult
from ai_pulse.pages import render_report, render_shell


# ── Helpers ──────────────────────────────────────────────────────────────


def _make_item(
    title: str = "Test Item",
    link: str = "https://example.com/test",
    importance: float = 50,
    **kwargs,
) -> Item:
    return Item(title=title, link=link, source="Test Source", importance=importance, **kwargs)


_CATEGORIES = [
    CategoryConfig(key="hn", label="Hacker News", kind="hackernews", url="https://news.ycombinator.com"),
    CategoryConfig(key="reddit", label="Reddit"),
]


def _artifact(hn_items=None, reddit_items=None, briefings=None) -> BuildArtifact:
    results = {}
    if hn_items is not None:
        results["hn"] = SourceResult(category="hn", items=hn_items)
    if reddit_items is not None:
        results["reddit"] = SourceResult(category="reddit", items=reddit_items)
    return BuildArtifact(
        timestamp=datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc),
        filename="2024-01-02.html",
        results=results,
        briefings=briefings or {},
    )


# ── render_report tests ──────────────────────────────────────────────────


class TestRenderReport:
    """日报页面渲染"""

    def test_empty_category_state(self):
        """空分类显示空状态且无卡片"""
        html = render_report(_artifact(hn_items=[], reddit_items=[]), _CATEGORIES)
        assert 'class="empty-state"' in html
        assert "No stories found for Hacker News today." in html
        assert "No stories found for Reddit today." in html
        assert 'class="card"' not in html

    def test_missing_result_treated_as_empty(self):
        html = render_report(_artifact(hn_items=[_make_item()]), _CATEGORIES)
        assert html.count('class="card"') == 1
        assert "No stories found for Reddit today." in html

    def test_first_tab_active(self):
        html = render_report(_artifact(), _CATEGORIES)
        assert 'class="tab-btn active" data-tab="tab-hn"' in html
        assert 'class="tab-btn" data-tab="tab-reddit"' in html
        assert 'id="tab-hn" class="tab-content active"' in html
        assert 'id="tab-reddit" class="tab-content"' in html

    def test_fields_escaped(self):
        item = _make_item(title="<script>alert(1)</script>", snippet='Tom & "Jerry"')
        html = render_report(_artifact(hn_items=[item]), _CATEGORIES)
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "Tom &amp; &#34;Jerry&#34;" in html

    def test_unsafe_link_neutralized(self):
        item = _make_item(link="javascript:alert(1)")
        html = render_report(_artifact(hn_items=[item]), _CATEGORIES)
        assert "javascript:alert" not in html
        assert 'href="#"' in html

    def test_card_content(self):
        item = _make_item(
            title="GPT news",
            importance=90.4,
            title_translated="GPT 新闻",
            snippet="Short description",
            snippet_translated="简短描述",
            published_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        )
        html = render_report(_artifact(hn_items=[item]), _CATEGORIES)
        assert 'href="https://example.com/test"' in html
        assert "Hot" in html
        assert ">90<" in html
        assert "GPT 新闻" in html
        assert "简短描述" in html
        assert "2024-01-01 12:00 UTC" in html

    def test_not_hot_below_threshold(self):
        html = render_report(_artifact(hn_items=[_make_item(importance=85)]), _CATEGORIES)
        assert 'class="badge fire"' not in html

    def test_same_translation_not_repeated(self):
        item = _make_item(title="Same", title_translated="Same")
        html = render_report(_artifact(hn_items=[item]), _CATEGORIES)
        assert 'class="card-title-translated"' not in html

    def test_briefing_markdown(self):
        html = render_report(
            _artifact(hn_items=[_make_item()], briefings={"hn": "### Summary\n\n**Agents** rise."}),
            _CATEGORIES,
        )
        assert 'class="category-briefing"' in html
        assert "<strong>Agents</strong>" in html
        assert "<h3>Summary</h3>" in html

    def test_section_link(self):
        html = render_report(_artifact(), _CATEGORIES)
        assert 'href="https://news.ycombinator.com"' in html

    def test_max_cards(self):
        items = [_make_item(f"Item {i}") for i in range(30)]
        html = render_report(_artifact(hn_items=items), _CATEGORIES, max_cards=20)
        assert html.count('class="card"') == 20

    def test_embedded_mode_switch(self):
        html = render_report(_artifact(), _CATEGORIES)
        assert "window.self !== window.top" in html
        assert "body.embedded header" in html

    def test_deterministic(self):
        artifact = _artifact(hn_items=[_make_item()])
        assert render_report(artifact, _CATEGORIES) == render_report(artifact, _CATEGORIES)


# ── render_shell tests ───────────────────────────────────────────────────


class TestRenderShell:
    """外壳页面渲染"""

    def test_iframe_and_history(self):
        history = ["2024-01-03.html", "2024-01-02.html", "2024-01-01.html"]
        html = render_shell("2024-01-03.html", history)
        assert 'src="2024-01-03.html"' in html
        assert '<option value="2024-01-03.html" selected>2024-01-03</option>' in html
        assert '<option value="2024-01-01.html">2024-01-01</option>' in html
        assert html.index("2024-01-03</option>") < html.index("2024-01-01</option>")
