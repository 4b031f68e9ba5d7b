"""Local output module.

Writes the daily page, the index.html shell and history.json to the output
directory. Errors here are fatal for the build and are not caught.
"""

import logging
from pathlib import Path

from .config import CategoryConfig
from .history import merge_history, save_history_json, scan_history
from .models import BuildArtifact
from .pages import render_report, render_shell

logger = logging.getLogger(__name__)


def write_site(
    artifact: BuildArtifact,
    categories: list[CategoryConfig],
    output_dir: str = "dist",
    max_cards: int = 20,
) -> Path:
    """Write today's report and refresh the archive shell.

    Creates:
        <output_dir>/YYYY-MM-DD.html   - daily report
        <output_dir>/index.html        - shell framing the latest report
        <output_dir>/history.json      - known daily pages, newest first

    Args:
        artifact: Build result; ``artifact.filename`` names the daily page.
        categories: Tabs in display order.
        output_dir: Destination directory, created if missing.
        max_cards: Cards shown per category.

    Returns:
        Path to the daily page.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    history = merge_history(scan_history(out), artifact.filename)
    save_history_json(out, history)

    daily_path = out / artifact.filename
    daily_path.write_text(render_report(artifact, categories, max_cards), encoding="utf-8")
    logger.info("Saved daily report: %s", daily_path)

    index_path = out / "index.html"
    index_path.write_text(render_shell(artifact.filename, history), encoding="utf-8")
    logger.info("Updated shell: %s (%d pages in history)", index_path, len(history))

    return daily_path
