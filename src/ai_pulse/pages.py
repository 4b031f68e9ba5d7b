"""Static page rendering.

生成两类页面（纯函数，不做任何 I/O）：
- YYYY-MM-DD.html: 每日报告，按分类分 Tab，含 AI 简报和条目卡片
- index.html: 外壳页面，iframe 加载最新日报 + 历史日报下拉选择

When a daily page is loaded inside the shell's iframe it switches to
"embedded" mode and hides its own header.
"""

from urllib.parse import urlparse

import markdown
from jinja2 import BaseLoader, Environment
from markupsafe import Markup

from .config import CategoryConfig
from .models import BuildArtifact, Item


SITE_TITLE = "AI Pulse"
HOT_THRESHOLD = 85
MAX_CARDS = 20


def _safe_url(url: str | None) -> str:
    """Only http(s) links make it into href attributes."""
    if url and urlparse(url).scheme in ("http", "https"):
        return url
    return "#"


def _render_markdown(text: str | None) -> Markup:
    if not text:
        return Markup("")
    return Markup(markdown.markdown(text, extensions=["extra", "sane_lists"]))


def _format_datetime(value) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M UTC")


_env = Environment(loader=BaseLoader(), autoescape=True, trim_blocks=True, lstrip_blocks=True)
_env.filters["safe_url"] = _safe_url
_env.filters["markdown"] = _render_markdown
_env.filters["datetime"] = _format_datetime


# ---------------------------------------------------------------------------
# Daily report
# ---------------------------------------------------------------------------

REPORT_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ site_title }} | {{ date }}</title>
<style>
  body { font-family: system-ui, -apple-system, sans-serif; margin: 0; background: #0f172a; color: #f8fafc; line-height: 1.6; }
  header { display: flex; justify-content: space-between; align-items: center; padding: 1.25rem 2rem; border-bottom: 1px solid #1e293b; }
  body.embedded header { display: none; }
  .logo { font-weight: 800; font-size: 1.4rem; }
  .timestamp { color: #94a3b8; font-size: 0.875rem; }
  .tab-nav { display: flex; gap: 0.5rem; overflow-x: auto; padding: 1rem 2rem; position: sticky; top: 0; background: #0f172a; }
  .tab-btn { background: transparent; color: #94a3b8; border: 1px solid transparent; border-radius: 2rem; padding: 0.4rem 1rem; cursor: pointer; white-space: nowrap; }
  .tab-btn.active { color: #fff; border-color: #8b5cf6; background: rgba(139, 92, 246, 0.2); }
  main { max-width: 1200px; margin: 1.5rem auto; padding: 0 1rem; }
  .tab-content { display: none; }
  .tab-content.active { display: block; }
  .section-header a { color: inherit; }
  .category-briefing { border: 1px solid rgba(139, 92, 246, 0.3); border-radius: 0.75rem; padding: 1.25rem; margin-bottom: 1.5rem; }
  .grid { display: grid; gap: 1.25rem; grid-template-columns: repeat(auto-fit, minmax(320px, 1fr)); }
  .card { display: flex; flex-direction: column; gap: 0.5rem; background: #1e293b; border-radius: 0.75rem; padding: 1.1rem; color: inherit; text-decoration: none; }
  .card-header { display: flex; justify-content: space-between; font-size: 0.75rem; }
  .card-source { color: #06b6d4; text-transform: uppercase; font-weight: 600; }
  .badge.fire { background: #f59e0b; color: #fff; border-radius: 0.2rem; padding: 0 0.3rem; margin-left: 0.4rem; }
  .card-title { margin: 0; font-size: 1rem; }
  .card-title-translated { margin: 0; font-size: 0.95rem; font-weight: 400; color: #94a3b8; }
  .card-meta { font-size: 0.75rem; color: #64748b; }
  .snippet-block { background: rgba(0, 0, 0, 0.2); border-radius: 0.5rem; padding: 0.6rem; font-size: 0.85rem; color: #94a3b8; }
  .card-snippet-translated { font-style: italic; color: #64748b; }
  .empty-state { text-align: center; padding: 3rem; color: #94a3b8; }
</style>
</head>
<body>
<header>
  <div class="logo">{{ site_title }} <span class="logo-sub">Report</span></div>
  <div class="timestamp">Generated: {{ timestamp }}</div>
</header>

<nav class="tab-nav">
{% for section in sections %}
  <button class="tab-btn{% if loop.first %} active{% endif %}" data-tab="tab-{{ section.key }}">{{ section.label }}</button>
{% endfor %}
</nav>

<main>
{% for section in sections %}
  <div id="tab-{{ section.key }}" class="tab-content{% if loop.first %} active{% endif %}">
    <section>
      <h2 class="section-header">
      {% if section.url %}
        <a href="{{ section.url | safe_url }}" target="_blank" rel="noopener">{{ section.label }}</a>
      {% else %}
        {{ section.label }}
      {% endif %}
      </h2>
    {% if section.briefing %}
      <div class="category-briefing">{{ section.briefing | markdown }}</div>
    {% endif %}
    {% if section.items %}
      <div class="grid">
      {% for item in section.items %}
        <a href="{{ item.link | safe_url }}" target="_blank" rel="noopener" class="card">
          <div class="card-header">
            <div class="card-source">{{ item.source }}{% if item.importance > hot_threshold %}<span class="badge fire">Hot</span>{% endif %}</div>
            <div class="card-score" title="Importance Score">{{ item.importance | round | int }}</div>
          </div>
          <h3 class="card-title">{{ item.title }}</h3>
        {% if item.title_translated and item.title_translated != item.title %}
          <h4 class="card-title-translated">{{ item.title_translated }}</h4>
        {% endif %}
        {% if item.published_at %}
          <div class="card-meta">{{ item.published_at | datetime }}</div>
        {% endif %}
        {% if item.snippet or item.snippet_translated %}
          <div class="snippet-block">
          {% if item.snippet %}
            <div class="card-snippet">{{ item.snippet }}</div>
          {% endif %}
          {% if item.snippet_translated %}
            <div class="card-snippet-translated">{{ item.snippet_translated }}</div>
          {% endif %}
          </div>
        {% endif %}
        </a>
      {% endfor %}
      </div>
    {% else %}
      <div class="empty-state">No stories found for {{ section.label }} today.</div>
    {% endif %}
    </section>
  </div>
{% endfor %}
</main>

<script>
  if (window.self !== window.top) {
    document.body.classList.add('embedded');
  }

  document.querySelectorAll('.tab-btn').forEach(function (btn) {
    btn.addEventListener('click', function () {
      document.querySelectorAll('.tab-content, .tab-btn').forEach(function (el) {
        el.classList.remove('active');
      });
      document.getElementById(btn.dataset.tab).classList.add('active');
      btn.classList.add('active');
      window.scrollTo(0, 0);
    });
  });
</script>
</body>
</html>
"""


def _section(category: CategoryConfig, artifact: BuildArtifact, max_cards: int) -> dict:
    items: list[Item] = artifact.items_for(category.key)[:max_cards]
    return {
        "key": category.key,
        "label": category.label,
        "url": category.url,
        "briefing": artifact.briefings.get(category.key),
        "items": items,
    }


def render_report(
    artifact: BuildArtifact,
    categories: list[CategoryConfig],
    max_cards: int = MAX_CARDS,
) -> str:
    """Render the daily report page.

    Args:
        artifact: Collected results and briefings.
        categories: Tabs in display order; the first one starts active.
        max_cards: Cards shown per category.

    Returns:
        Complete HTML document.
    """
    template = _env.from_string(REPORT_TEMPLATE)
    return template.render(
        site_title=SITE_TITLE,
        date=artifact.filename.removesuffix(".html") or artifact.timestamp.date().isoformat(),
        timestamp=_format_datetime(artifact.timestamp),
        hot_threshold=HOT_THRESHOLD,
        sections=[_section(c, artifact, max_cards) for c in categories],
    )


# ---------------------------------------------------------------------------
# Shell (index.html)
# ---------------------------------------------------------------------------

SHELL_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ site_title }} | Daily Digest</title>
<style>
  body { font-family: system-ui, -apple-system, sans-serif; margin: 0; height: 100vh; display: flex; flex-direction: column; overflow: hidden; background: #0f172a; color: #f8fafc; }
  header { display: flex; justify-content: space-between; align-items: center; padding: 1rem 2rem; border-bottom: 1px solid #1e293b; flex-shrink: 0; }
  .header-left { display: flex; align-items: center; gap: 1rem; }
  .logo { font-weight: 800; font-size: 1.4rem; }
  .history-select { background: #1e293b; color: #f8fafc; border: 1px solid #334155; border-radius: 0.25rem; padding: 0.25rem 0.5rem; }
  .timestamp { color: #94a3b8; font-size: 0.875rem; }
  iframe { flex-grow: 1; border: none; width: 100%; }
</style>
</head>
<body>
<header>
  <div class="header-left">
    <div class="logo">{{ site_title }}</div>
    <select id="history-nav" class="history-select">
    {% for file in history %}
      <option value="{{ file }}"{% if file == latest %} selected{% endif %}>{{ file | replace(".html", "") }}</option>
    {% endfor %}
    </select>
  </div>
  <div class="timestamp">Browsing Archive</div>
</header>

<iframe id="content-frame" src="{{ latest }}" title="Daily Report"></iframe>

<script>
  var select = document.getElementById('history-nav');
  var frame = document.getElementById('content-frame');
  select.addEventListener('change', function (e) {
    frame.src = e.target.value;
  });
</script>
</body>
</html>
"""


def render_shell(latest: str, history: list[str]) -> str:
    """Render index.html framing ``latest`` with a history selector."""
    template = _env.from_string(SHELL_TEMPLATE)
    return template.render(site_title=SITE_TITLE, latest=latest, history=history)
