"""Archive history: which daily pages exist in the output directory.

History 由输出目录中的 YYYY-MM-DD.html 文件推导，history.json 仅作镜像备份。
"""

import json
import logging
import re
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

HISTORY_FILE = "history.json"

_DAILY_FILE = re.compile(r"^\d{4}-\d{2}-\d{2}\.html$")


def daily_filename(day: date) -> str:
    return f"{day.isoformat()}.html"


def scan_history(output_dir: str | Path) -> list[str]:
    """List daily page filenames already present in ``output_dir``."""
    path = Path(output_dir)
    if not path.is_dir():
        return []
    return [p.name for p in path.iterdir() if p.is_file() and _DAILY_FILE.match(p.name)]


def merge_history(existing: list[str], today: str) -> list[str]:
    """Add ``today`` if missing and sort newest first.

    Filenames are YYYY-MM-DD.html, so lexicographic order is date order.
    """
    return sorted(set(existing) | {today}, reverse=True)


def save_history_json(output_dir: str | Path, history: list[str]) -> Path | None:
    """Mirror the history list to history.json; failures are only logged."""
    path = Path(output_dir) / HISTORY_FILE
    try:
        path.write_text(json.dumps(history, indent=2), encoding="utf-8")
    except OSError:
        logger.exception("Failed to save %s", path)
        return None
    logger.info("Saved history: %d pages", len(history))
    return path
