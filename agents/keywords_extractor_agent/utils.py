"""
Prompt building and response parsing for the keywords extractor.
"""

import json
import logging
import re
from typing import Any, List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError

from agents.keywords_extractor_agent.models import KeywordsResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYWORDS = 25

KEYWORD_VOCABULARY = [
    # paint
    "black-paint", "white-paint", "green-paint", "metallic-paint",
    # seats
    "fabric-seats", "leather-seats", "5-seats", "heated-front-seats",
    "split-folding-rear-seats", "armrest-front",
    # parking
    "park-radar", "park-rear-view-camera", "park-360-camera",
    # wheels
    "rims-alloy", "rims-size-<inches>", "summer-tires", "tire-repair-kit",
    "temporary-replacement-steel-wheel",
    # cockpit and comfort
    "navigation", "head-up-display", "digital-cockpit", "hi-end-audio",
    "wireless-charging", "2-zone-climate", "3-zone-climate", "automatic-climate",
    "keyless-entry", "keyless-start", "sunroof", "heated-windshield",
    "tinted-rear-windows", "automatic-tailgate", "led-lights",
    # driver assistance
    "cruise-control", "adaptive-cruise-control", "blind-spot-assist",
]

SYSTEM_PROMPT = """You extract equipment keywords from car descriptions written in any language.

Rules:
1. Only use keywords from this vocabulary: {vocabulary}
2. "rims-size-<inches>" becomes e.g. "rims-size-17"
3. Options override standard equipment when they conflict
4. Never return more than {max_keywords} keywords, most distinctive first
5. Ignore warranty, services and anything outside the vocabulary

Return ONLY a JSON object: {{"keywords": ["keyword-1", "keyword-2", ...]}}"""

_KEYWORD_PATTERN = re.compile(r"[^a-z0-9]+")


def build_messages(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[BaseMessage]:
    """Build the chat messages for one description."""
    return [
        SystemMessage(content=SYSTEM_PROMPT.format(
            vocabulary=", ".join(KEYWORD_VOCABULARY),
            max_keywords=max_keywords
        )),
        HumanMessage(content=text)
    ]


def message_text(content: Any) -> str:
    """Flatten a chat message content (string or list of content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content or "")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    text = text.strip()
    if text.startswith("```"):
        if text.startswith("```json"):
            text = text[7:]
        else:
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def normalize_keyword(keyword: str) -> str:
    """
    Lower-case a keyword and join its words with single dashes.

    Example:
        >>> normalize_keyword("  Park Radar ")
        'park-radar'
    """
    return _KEYWORD_PATTERN.sub("-", keyword.strip().lower()).strip("-")


def normalize_keywords(keywords: List[str], max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
    """Normalize, drop empties and duplicates, cap at max_keywords, sort."""
    seen = []
    for keyword in keywords:
        if not isinstance(keyword, str):
            logger.warning(f"Skipping non-string keyword: {keyword!r}")
            continue
        normalized = normalize_keyword(keyword)
        if normalized and normalized not in seen:
            seen.append(normalized)
    return sorted(seen[:max_keywords])


def parse_keywords_response(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
    """
    Parse the LLM answer into a keyword list.

    Accepts `{"keywords": [...]}` or a bare JSON array.

    Raises:
        ValueError: If the answer is empty or not one of those shapes
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise ValueError("LLM returned an empty response")

    try:
        result = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse keywords JSON: {e}") from e

    if isinstance(result, list):
        result = {"keywords": result}

    try:
        response = KeywordsResponse.model_validate(result)
    except ValidationError as e:
        raise ValueError(f"Unexpected keywords response format: {e.error_count()} errors") from e

    return normalize_keywords(response.keywords, max_keywords)
