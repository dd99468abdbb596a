"""
Node functions for the keywords extractor LangGraph workflow.
"""

import logging

from langchain_core.runnables import RunnableConfig

from agents.keywords_extractor_agent.models import KeywordsExtractorState
from agents.keywords_extractor_agent.utils import (
    build_messages,
    message_text,
    parse_keywords_response,
)

logger = logging.getLogger(__name__)


def prepare_messages(state: KeywordsExtractorState) -> KeywordsExtractorState:
    """Node: Build one prompt per input text."""
    texts = state.get("texts", [])
    max_keywords = state["max_keywords"]

    state["messages"] = [build_messages(text, max_keywords) for text in texts]
    logger.debug(f"Prepared {len(texts)} prompts")

    return state


async def call_model(state: KeywordsExtractorState, config: RunnableConfig) -> KeywordsExtractorState:
    """
    Node: Send every prompt to the chat model, sequentially.

    Provider errors propagate to the caller; token usage is summed from the
    responses' usage metadata.
    """
    llm = config["configurable"]["llm"]
    raw_outputs = []
    input_tokens = state.get("input_tokens", 0)
    output_tokens = state.get("output_tokens", 0)

    for messages in state["messages"]:
        response = await llm.ainvoke(messages)
        raw_outputs.append(message_text(response.content))

        usage = getattr(response, "usage_metadata", None) or {}
        input_tokens += usage.get("input_tokens", 0)
        output_tokens += usage.get("output_tokens", 0)

    state["raw_outputs"] = raw_outputs
    state["input_tokens"] = input_tokens
    state["output_tokens"] = output_tokens

    return state


def parse_keywords(state: KeywordsExtractorState) -> KeywordsExtractorState:
    """Node: Parse each raw output; unparseable ones yield an empty list and an error."""
    max_keywords = state["max_keywords"]
    errors = state.get("errors", [])
    keywords = []

    for index, raw_output in enumerate(state.get("raw_outputs", [])):
        try:
            keywords.append(parse_keywords_response(raw_output, max_keywords))
        except ValueError as e:
            error_msg = f"Text {index}: {e}"
            errors.append(error_msg)
            logger.warning(f"{error_msg}. Response: {raw_output[:200]}")
            keywords.append([])

    state["keywords"] = keywords
    state["errors"] = errors

    return state


def finalize(state: KeywordsExtractorState) -> KeywordsExtractorState:
    """Node: Finalize and mark as completed."""
    logger.debug("Keywords extraction workflow complete")
    state["completed"] = True
    return state
