"""Source collectors.

Collector registry — maps CategoryConfig.kind to the collector class.
新增来源类型只需：1) 写 collector 文件  2) 在此注册  3) 在 config.yaml 配置分类。
"""

from .base import BaseCollector
from .feed_collector import FeedCollector
from .hackernews_collector import HackerNewsCollector
from .preview import fetch_link_preview

# Collector registry: kind -> class
REGISTRY: dict[str, type[BaseCollector]] = {
    "hackernews": HackerNewsCollector,
    "rss": FeedCollector,
}

__all__ = [
    "BaseCollector",
    "REGISTRY",
    "FeedCollector",
    "HackerNewsCollector",
    "fetch_link_preview",
]
