"""LLM processing: translation and per-category briefings.

通过 OpenAI 兼容接口（默认 DeepSeek）调用模型。
No API key means no client: every function here then degrades to a no-op.
  1. translate / enrich_items: titles + snippets into the target language
  2. generate_briefing: one markdown summary per category
"""

import asyncio
import logging

from openai import AsyncOpenAI

from .config import LlmConfig, Settings
from .models import Item

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# LLM client
# ---------------------------------------------------------------------------

def make_client(llm_config: LlmConfig, settings: Settings) -> AsyncOpenAI | None:
    """Build the async client, or None when no API key is configured."""
    if not settings.deepseek_api_key:
        logger.warning("DEEPSEEK_API_KEY not set, translation and briefings disabled")
        return None

    return AsyncOpenAI(
        api_key=settings.deepseek_api_key,
        base_url=llm_config.base_url,
        timeout=llm_config.timeout,
        max_retries=llm_config.max_retries,
    )


async def _call_llm(
    client: AsyncOpenAI,
    model: str,
    messages: list[dict[str, str]],
) -> str:
    """Run one non-streaming chat completion and return its text."""
    response = await client.chat.completions.create(
        model=model,
        messages=messages,
        stream=False,
    )

    # 部分兼容网关在响应体中返回错误而非 HTTP 状态码
    error = getattr(response, "error", None)
    if error:
        err_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise RuntimeError(f"LLM endpoint returned error: {err_msg}")

    if not response.choices:
        raise ValueError("LLM returned no choices")

    content = response.choices[0].message.content or ""
    if not content:
        raise ValueError("LLM returned empty content")

    return content


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

_TRANSLATE_SYSTEM = (
    "You are a professional technical translator. Translate the following text "
    "to {language}. Keep technical terms accurate (e.g., LLM, Transformer, Agent). "
    "Return ONLY the translated text, no explanations."
)


async def translate(
    client: AsyncOpenAI | None,
    text: str,
    target_language: str = "Simplified Chinese",
    model: str = "deepseek-chat",
) -> str:
    """Translate ``text``; returns it unchanged on failure or without a client."""
    if not text:
        return text
    if client is None:
        return text

    try:
        translated = await _call_llm(
            client,
            model,
            [
                {"role": "system", "content": _TRANSLATE_SYSTEM.format(language=target_language)},
                {"role": "user", "content": text},
            ],
        )
    except Exception as exc:
        logger.debug("Translation failed (%s), keeping original text", exc)
        return text

    return translated.strip() or text


async def _enrich_item(client: AsyncOpenAI, item: Item, llm_config: LlmConfig) -> None:
    title, snippet = await asyncio.gather(
        translate(client, item.title, llm_config.target_language, llm_config.translate_model),
        translate(client, item.snippet or "", llm_config.target_language, llm_config.translate_model),
    )
    item.title_translated = title if title != item.title else None
    item.snippet_translated = snippet if snippet and snippet != item.snippet else None


async def enrich_items(
    client: AsyncOpenAI | None,
    items: list[Item],
    llm_config: LlmConfig,
) -> list[Item]:
    """Fill translated title/snippet fields in place."""
    if client is None or not llm_config.translate or not items:
        return items

    await asyncio.gather(*(_enrich_item(client, item, llm_config) for item in items))
    return items


# ---------------------------------------------------------------------------
# Briefing
# ---------------------------------------------------------------------------

_BRIEFING_PROMPT = """\
You are an expert AI news analyst.
Based on the following news items for **{category}**, generate a concise summary.

Guidelines:
- Provide the summary in **both English and {language}**.
- Structure it as:
  ### English Summary
  (English content)

  ### {language} Summary
  ({language} content)

- Focus on the key trends or most interesting updates in this specific category.
- Use bolding for key terms.
- Keep it under 200 words total.
- Do not include links.
- Start directly with the headers.

News Items:
{items_text}
"""


def _build_items_text(category: str, items: list[Item]) -> str:
    lines = [f"Here are the top stories for {category}:", ""]
    for i, item in enumerate(items, 1):
        lines.append(f"{i}. {item.title}: {item.snippet or 'No details'}")
    return "\n".join(lines)


def build_briefing_prompt(
    category: str, items: list[Item], llm_config: LlmConfig
) -> str:
    top = items[: llm_config.briefing_top_n]
    return _BRIEFING_PROMPT.format(
        category=category,
        language=llm_config.target_language,
        items_text=_build_items_text(category, top),
    )


async def generate_briefing(
    client: AsyncOpenAI | None,
    category: str,
    items: list[Item],
    llm_config: LlmConfig,
) -> str | None:
    """Summarize a category's top items as markdown.

    Args:
        client: LLM client, None when no credential is configured.
        category: Display label used in the prompt.
        items: Category items, best first.
        llm_config: Model and prompt settings.

    Returns:
        The model's markdown verbatim, or None if skipped or failed.
    """
    if not items or client is None:
        return None

    logger.info("Generating briefing for %s...", category)
    try:
        return await _call_llm(
            client,
            llm_config.briefing_model,
            [
                {"role": "system", "content": "You are a helpful AI news assistant."},
                {"role": "user", "content": build_briefing_prompt(category, items, llm_config)},
            ],
        )
    except Exception:
        logger.exception("Briefing generation failed for %s", category)
        return None
