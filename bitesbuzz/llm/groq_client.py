from __future__ import annotations

import json
import logging

from groq import Groq

from ..catalog.models import CatalogItem
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write suggestion messages for BitesBuzz, a university cafeteria app. "
    "Given what a student has in their cart or has ordered before and the items "
    "we are about to suggest, write one short, friendly sentence inviting them "
    "to add the suggestions. Mention at most two of the suggested items by name.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"message": "<one sentence>"}'
)


def _build_user_message(
    mode: str,
    context_names: list[str],
    items: list[CatalogItem],
    fallback: str,
) -> str:
    label = "Cart" if mode == "cart" else "Recent orders"
    lines = [f"## {label}"]
    lines.extend(f"- {name}" for name in context_names)
    lines.append("\n## Suggested items")
    lines.append("| Name | Category | Price | Rating |")
    lines.append("|---|---|---|---|")
    for item in items:
        lines.append(
            f"| {item.name} | {item.category.value} | {item.effective_price:g} | {item.rating} |"
        )
    lines.append(f"\n## Current message\n{fallback}")
    return "\n".join(lines)


def write_suggestion_message(
    mode: str,
    context_names: list[str],
    items: list[CatalogItem],
    fallback: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """
    Ask Groq to reword the suggestion message for the given items.

    Returns ``fallback`` on any failure (timeout, bad JSON, API error) and
    when the LLM is disabled or there is nothing to suggest.
    """
    if not config.enabled or not config.api_key:
        return fallback

    if not items:
        return fallback

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(mode, context_names, items, fallback),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=0.7,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        message = str(json.loads(content).get("message", "")).strip()
        if not message or len(message.split()) > config.max_message_words:
            return fallback
        return message

    except Exception:
        logger.warning("Groq LLM call failed, keeping rule-based message", exc_info=True)
        return fallback
