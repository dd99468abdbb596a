"""
Pydantic models and state for the keywords extractor.
"""

from typing import List, TypedDict
from langchain_core.messages import BaseMessage
from pydantic import BaseModel, Field


class KeywordsResponse(BaseModel):
    """Keywords returned by the LLM for one text."""
    keywords: List[str] = Field(description="Normalized equipment keywords")


class KeywordsExtractorState(TypedDict):
    """State for the keywords extractor graph."""
    # Input
    texts: List[str]
    max_keywords: int

    # Processing
    messages: List[List[BaseMessage]]  # one prompt per text
    raw_outputs: List[str]

    # Output
    keywords: List[List[str]]  # one keyword list per text
    input_tokens: int
    output_tokens: int

    # Metadata
    errors: List[str]
    completed: bool
