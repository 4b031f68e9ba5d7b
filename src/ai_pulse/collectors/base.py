"""Base collector abstract class.

所有 collector 的统一基类，配置通过 __init__ 注入。
All collectors inherit from BaseCollector for a unified interface.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from ..config import CategoryConfig, FetchConfig, HttpConfig
from ..models import Item

logger = logging.getLogger(__name__)


class BaseCollector(ABC):
    """Abstract base class for all category collectors.

    统一接口：collect(client) -> list[Item]。
    A collector never raises: failures degrade to an empty list.
    """

    kind: str = ""  # matches CategoryConfig.kind, e.g. "hackernews", "rss"

    def __init__(
        self,
        category: CategoryConfig,
        keywords: list[str],
        fetch: FetchConfig | None = None,
        http: HttpConfig | None = None,
    ) -> None:
        self.category = category
        self.keywords = keywords
        self.fetch = fetch or FetchConfig()
        self.http = http or HttpConfig()

    @abstractmethod
    async def collect(self, client: httpx.AsyncClient) -> list[Item]:
        """Collect relevant items for this category.

        Args:
            client: Shared async HTTP client.

        Returns:
            Ordered list of Item, possibly empty.
        """
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} category={self.category.key!r}>"
