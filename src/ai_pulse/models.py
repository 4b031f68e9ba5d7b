"""Data models for AI Pulse."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """A single piece of content pulled from a source."""

    model_config = ConfigDict(validate_assignment=True)

    title: str
    title_translated: str | None = None
    link: str
    source: str  # e.g. "Hacker News", "r/LocalLLaMA"
    published_at: datetime | None = None
    importance: float = 0.0  # 0-100
    snippet: str | None = None  # None = no snippet at all
    snippet_translated: str | None = None

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("importance")
    @classmethod
    def _clamp_importance(cls, value: float) -> float:
        return min(max(float(value), 0.0), 100.0)


class SourceResult(BaseModel):
    """Ordered items for one category, produced by one fetch cycle."""

    category: str
    items: list[Item] = []


class BuildArtifact(BaseModel):
    """Everything the renderer needs for one daily page."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    filename: str = ""  # YYYY-MM-DD.html
    results: dict[str, SourceResult] = {}
    briefings: dict[str, str] = {}  # category key -> markdown

    def items_for(self, key: str) -> list[Item]:
        result = self.results.get(key)
        return result.items if result else []
