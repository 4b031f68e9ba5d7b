"""Configuration loading from config.yaml + .env."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Config sub-models (loaded from config.yaml)
# ---------------------------------------------------------------------------

DEFAULT_KEYWORDS: list[str] = [
    "AI",
    "LLM",
    "GPT",
    "Deep Learning",
    "Machine Learning",
    "Transformer",
    "Neural Network",
    "OpenAI",
    "Anthropic",
    "Gemini",
    "Llama",
    "Mistral",
]


class FeedSource(BaseModel):
    name: str
    url: str
    base_score: float = 80


class CategoryConfig(BaseModel):
    """One tab on the daily page: a group of sources fetched together."""

    key: str  # unique, used for results / briefings / tab ids
    label: str
    kind: Literal["hackernews", "rss"] = "rss"
    url: str | None = None  # category home page, linked from the section title
    feeds: list[FeedSource] = []


DEFAULT_CATEGORIES: list[CategoryConfig] = [
    CategoryConfig(
        key="hn",
        label="Hacker News",
        kind="hackernews",
        url="https://news.ycombinator.com",
    ),
    CategoryConfig(
        key="hf_papers",
        label="Hugging Face Daily Papers",
        url="https://huggingface.co/papers",
        feeds=[
            FeedSource(
                name="Hugging Face Daily Papers",
                url="https://papers.takara.ai/api/feed",
                base_score=90,
            ),
        ],
    ),
    CategoryConfig(
        key="hf_blog",
        label="Hugging Face Blog",
        url="https://huggingface.co/blog",
        feeds=[
            FeedSource(
                name="Hugging Face Blog",
                url="https://huggingface.co/blog/feed.xml",
                base_score=85,
            ),
        ],
    ),
    CategoryConfig(
        key="product_hunt",
        label="Product Hunt",
        url="https://www.producthunt.com/topics/artificial-intelligence",
        feeds=[
            FeedSource(
                name="Product Hunt AI",
                url="https://www.producthunt.com/feed?category=ai",
                base_score=75,
            ),
        ],
    ),
    CategoryConfig(
        key="research_blogs",
        label="Industry Research Blogs",
        feeds=[
            FeedSource(name="OpenAI Blog", url="https://openai.com/blog/rss.xml", base_score=95),
            FeedSource(
                name="AWS Machine Learning",
                url="https://aws.amazon.com/blogs/machine-learning/feed/",
                base_score=90,
            ),
            FeedSource(
                name="Microsoft Research",
                url="https://www.microsoft.com/en-us/research/feed/",
                base_score=90,
            ),
        ],
    ),
    CategoryConfig(
        key="reddit",
        label="Reddit",
        url="https://www.reddit.com",
        feeds=[
            FeedSource(
                name="r/LocalLLaMA",
                url="https://www.reddit.com/r/LocalLLaMA/top/.rss?t=day",
                base_score=80,
            ),
            FeedSource(
                name="r/ChatGPT",
                url="https://www.reddit.com/r/ChatGPT/top/.rss?t=day",
                base_score=70,
            ),
        ],
    ),
    CategoryConfig(
        key="youtube",
        label="YouTube",
        url="https://www.youtube.com",
        feeds=[
            FeedSource(
                name="Two Minute Papers",
                url="https://www.youtube.com/feeds/videos.xml?channel_id=UCbfYPyITQ-7l4upoX8nvctg",
                base_score=85,
            ),
            FeedSource(
                name="DeepMind",
                url="https://www.youtube.com/feeds/videos.xml?channel_id=UCP7jMXSY2xbc3KCAE0MHQ-A",
                base_score=88,
            ),
            FeedSource(
                name="OpenAI",
                url="https://www.youtube.com/feeds/videos.xml?channel_id=UCvJJ_dzjViJCoLf5uKUTwoA",
                base_score=95,
            ),
        ],
    ),
]


class FetchConfig(BaseModel):
    max_items: int = 20  # per source after keyword filter
    hn_top_k: int = 100
    comment_weight: float = 2  # HN importance = score + comments * weight
    decay_step: float = 3  # feed importance = base - index * step
    score_floor: float = 10
    snippet_chars: int = 300


class HttpConfig(BaseModel):
    timeout: float = 10  # seconds, APIs and feeds
    scrape_timeout: float = 3  # seconds, best-effort link previews
    max_attempts: int = 3
    backoff: float = 1.0  # linear: attempt * backoff


class LlmConfig(BaseModel):
    base_url: str = "https://api.deepseek.com"
    translate_model: str = "deepseek-chat"
    briefing_model: str = "deepseek-reasoner"
    target_language: str = "Simplified Chinese"
    translate: bool = True
    briefing_top_n: int = 5
    timeout: float = 60
    max_retries: int = 2  # OpenAI client retries


class PipelineConfig(BaseModel):
    batch_size: int = 3  # categories processed concurrently


class OutputConfig(BaseModel):
    dir: str = "dist"


class AppConfig(BaseModel):
    """Application config loaded from config.yaml."""

    keywords: list[str] = DEFAULT_KEYWORDS
    categories: list[CategoryConfig] = DEFAULT_CATEGORIES
    fetch: FetchConfig = FetchConfig()
    http: HttpConfig = HttpConfig()
    llm: LlmConfig = LlmConfig()
    pipeline: PipelineConfig = PipelineConfig()
    output: OutputConfig = OutputConfig()

    @model_validator(mode="after")
    def _unique_category_keys(self) -> "AppConfig":
        seen: set[str] = set()
        for category in self.categories:
            if category.key in seen:
                raise ValueError(f"duplicate category key: {category.key!r}")
            seen.add(category.key)
        return self


# ---------------------------------------------------------------------------
# Secrets (loaded from .env / environment variables)
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Secret settings loaded from environment / .env file."""

    deepseek_api_key: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load_config(config_path: str = "config.yaml") -> tuple[AppConfig, Settings]:
    """Load app config from YAML and secrets from .env."""
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        app_config = AppConfig(**data)
    else:
        app_config = AppConfig()

    settings = Settings()
    return app_config, settings
