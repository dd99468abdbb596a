"""
Keywords Extractor Agent

A modular LangGraph-based agent extracting normalized car equipment keywords
from free-text vehicle descriptions.
"""

from agents.keywords_extractor_agent.graph import run_keywords_extraction_workflow


__all__ = ["run_keywords_extraction_workflow"]
