"""
LangGraph workflow definition for keywords extraction.
"""

from typing import Any, Dict, List
from langgraph.graph import StateGraph, START, END

from agents.keywords_extractor_agent.models import KeywordsExtractorState
from agents.keywords_extractor_agent.nodes import (
    prepare_messages,
    call_model,
    parse_keywords,
    finalize
)
from agents.keywords_extractor_agent.utils import DEFAULT_MAX_KEYWORDS


# Singleton graph instance
_graph = None


def create_keywords_extractor_graph():
    """Create the LangGraph workflow for keywords extraction."""
    workflow = StateGraph(KeywordsExtractorState)

    # Add nodes
    workflow.add_node("prepare", prepare_messages)
    workflow.add_node("call_model", call_model)
    workflow.add_node("parse", parse_keywords)
    workflow.add_node("finalize", finalize)

    # Define edges (workflow)
    workflow.add_edge(START, "prepare")
    workflow.add_edge("prepare", "call_model")
    workflow.add_edge("call_model", "parse")
    workflow.add_edge("parse", "finalize")
    workflow.add_edge("finalize", END)

    return workflow.compile()


def get_keywords_extractor_graph():
    """Get or create the keywords extractor graph."""
    global _graph
    if _graph is None:
        _graph = create_keywords_extractor_graph()
    return _graph


async def run_keywords_extraction_workflow(
    texts: List[str],
    llm: Any,
    max_keywords: int = DEFAULT_MAX_KEYWORDS
) -> Dict[str, Any]:
    """
    Run the keywords extraction workflow.

    Entry point for the keywords extractor agent.

    Args:
        texts: Descriptions to extract keywords from
        llm: LangChain chat model used for every text
        max_keywords: Upper bound of keywords per text

    Returns:
        Dictionary with keywords, raw_outputs, token counts and errors
    """
    graph = get_keywords_extractor_graph()

    initial_state = {
        "texts": texts,
        "max_keywords": max_keywords,
        "messages": [],
        "raw_outputs": [],
        "keywords": [],
        "input_tokens": 0,
        "output_tokens": 0,
        "errors": [],
        "completed": False
    }

    result = await graph.ainvoke(initial_state, config={"configurable": {"llm": llm}})

    return {
        "keywords": result.get("keywords", []),
        "raw_outputs": result.get("raw_outputs", []),
        "input_tokens": result.get("input_tokens", 0),
        "output_tokens": result.get("output_tokens", 0),
        "errors": result.get("errors", [])
    }
