"""
Response Extractor — normalized LLM response → raw text.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from resumegen.errors import EmptyResponse, ModelRefused
from resumegen.models.llm_models import NormalizedLLMResponse

logger = logging.getLogger(__name__)

REFUSAL_PREFIXES = ("i'm sorry", "i cannot", "i apologize")


def extract(response: NormalizedLLMResponse) -> str:
    """Join the content blocks into one trimmed string; refuse empty or apologetic answers."""
    if not response.content:
        raise EmptyResponse("AI response has no content")

    text = "".join(_block_text(block) for block in response.content).strip()

    if text.lower().startswith(REFUSAL_PREFIXES):
        logger.error(f"AI is apologizing instead of returning JSON: {text[:200]}")
        raise ModelRefused(
            "AI refused to generate resume. The prompt may be too complex. "
            "Please try again with a shorter job description or simpler requirements."
        )
    return text


def _block_text(block: Any) -> str:
    if isinstance(block, str):
        return block
    text = block.get("text") if isinstance(block, dict) else getattr(block, "text", None)
    if text:
        return str(text)
    if block is None:
        return ""
    try:
        return json.dumps(block)
    except TypeError:
        return str(block)
