"""
Keywords Extractor Agent - Entry Point

Thin wrapper that provides the main entry point for keywords extraction.
All logic is in the keywords_extractor_agent/ folder.
"""

import logging
import time
from typing import List, Optional

from langchain_core.caches import BaseCache
from langchain_core.language_models.chat_models import BaseChatModel

from agents.keywords_extractor_agent import run_keywords_extraction_workflow
from agents.keywords_extractor_agent.utils import DEFAULT_MAX_KEYWORDS
from config.settings import Settings
from harness.accuracy import calculate_list_accuracy
from harness.pricing import calculate_token_cost
from models.schemas import (
    KeywordsExtractorResult,
    LLMStatistics,
    ModelConfig,
    TestCase,
    TestResult,
)
from utils.llm_factory import create_chat_model

logger = logging.getLogger(__name__)


class KeywordsExtractor:
    """
    Extracts normalized equipment keywords with the configured chat model.

    Parsing problems are reported through the result (`success=False` and
    `error`); provider and network errors are raised.
    """

    def __init__(
        self,
        model_config: ModelConfig,
        settings: Settings,
        llm: Optional[BaseChatModel] = None,
        cache: Optional[BaseCache] = None,
        max_keywords: int = DEFAULT_MAX_KEYWORDS
    ):
        self.model_config = model_config
        self.max_keywords = max_keywords
        self.llm = llm or create_chat_model(model_config, settings, cache)

    async def extract_keywords(self, texts: List[str]) -> KeywordsExtractorResult:
        """
        Extract one keyword list per text.

        Args:
            texts: Vehicle descriptions

        Returns:
            KeywordsExtractorResult with keywords aligned to `texts`
        """
        logger.info(f"Extracting keywords from {len(texts)} texts with {self.model_config.label}")

        output = await run_keywords_extraction_workflow(texts, self.llm, self.max_keywords)
        errors = output["errors"]

        return KeywordsExtractorResult(
            success=not errors,
            keywords=output["keywords"],
            error="; ".join(errors) if errors else None,
            raw_output="\n".join(output["raw_outputs"]),
            llm_statistics=LLMStatistics(
                input_tokens=output["input_tokens"],
                output_tokens=output["output_tokens"]
            )
        )


def build_keywords_test_action(
    settings: Settings,
    cache: Optional[BaseCache] = None,
    llm: Optional[BaseChatModel] = None
):
    """
    Build the unit of work comparing models on keywords extraction.

    Each call extracts keywords for the test case query with a fresh
    extractor, scores them against the expected list and prices the tokens.
    Provider errors are not caught here; the runner records them.

    Args:
        settings: Harness settings used to create chat models
        cache: Optional LLM cache shared by all extractors
        llm: Chat model to use instead of creating one per model config

    Returns:
        Async callable (TestCase, ModelConfig) -> TestResult
    """

    async def test_action(test_case: TestCase, model_config: ModelConfig) -> TestResult:
        provider_name = model_config.provider.name
        model_name = model_config.model.name
        extractor = KeywordsExtractor(model_config, settings, llm=llm, cache=cache)

        start_time = time.perf_counter()
        result = await extractor.extract_keywords([test_case.query])
        execution_time_ms = (time.perf_counter() - start_time) * 1000

        errors = []
        if not result.success and result.error:
            errors.append(result.error)

        if test_case.expected_output is not None:
            actual = result.keywords[0] if result.keywords else []
            accuracy = calculate_list_accuracy(test_case.expected_output, actual)
        else:
            accuracy = 1.0 if result.success else 0.0

        token_cost = 0.0
        if result.llm_statistics:
            token_cost = calculate_token_cost(
                provider_name,
                model_name,
                result.llm_statistics.input_tokens,
                result.llm_statistics.output_tokens
            )

        return TestResult[KeywordsExtractorResult](
            test_case=test_case,
            provider_name=provider_name,
            model_name=model_name,
            result=result,
            accuracy=accuracy,
            execution_time_ms=execution_time_ms,
            token_cost=token_cost,
            errors=errors
        )

    return test_action


def keywords_output(result: KeywordsExtractorResult) -> List[str]:
    """Comparable output of a keywords result: the first text's keywords."""
    return result.keywords[0] if result.keywords else []
