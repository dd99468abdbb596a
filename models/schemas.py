"""
Data models and schemas for the LLM model comparison harness.

This module defines the Pydantic models shared by the trial runner, the
accuracy scorer, the reporting layer and the units of work under test.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, ClassVar, Generic, List, Optional, TypeVar


# Model configuration

class ProviderConfig(BaseModel):
    """LLM provider identity and connection options."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="Provider name",
        examples=["openai", "anthropic", "groq", "openrouter"]
    )
    api_key: Optional[str] = Field(
        None,
        description="Provider API key (falls back to settings when omitted)"
    )
    base_url: Optional[str] = Field(
        None,
        description="Override for the provider endpoint"
    )
    timeout_ms: Optional[int] = Field(None, ge=0)
    max_retries: Optional[int] = Field(None, ge=0)


class ModelParameters(BaseModel):
    """Model name plus optional sampling and provider-specific tuning."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="Model name as known to the provider",
        examples=["gpt-4o-mini", "gemini-2.5-flash"]
    )
    temperature: Optional[float] = Field(None, ge=0.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0)
    # Gemini specific
    thinking_budget: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None


class ModelConfig(BaseModel):
    """Immutable provider + model configuration under test."""
    model_config = ConfigDict(frozen=True)

    provider: ProviderConfig
    model: ModelParameters

    @property
    def label(self) -> str:
        return f"{self.provider.name}:{self.model.name}"


# Test data

class TestCase(BaseModel):
    """A single query to run against every model."""
    __test__: ClassVar[bool] = False

    id: str = Field(..., min_length=1)
    query: str
    expected_output: Optional[Any] = Field(
        None,
        description="Expected structured output (object or list of strings)"
    )


class UnitOfWorkResult(BaseModel):
    """Base shape for anything a unit of work returns: it must expose `success`."""
    success: bool


class LLMStatistics(BaseModel):
    """Token usage reported by the chat model."""
    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)


class KeywordsExtractorResult(UnitOfWorkResult):
    """Result of a keywords extraction call, one keyword list per input text."""
    keywords: List[List[str]] = Field(default_factory=list)
    error: Optional[str] = None
    raw_output: Optional[str] = None
    llm_statistics: Optional[LLMStatistics] = None


ResultT = TypeVar("ResultT", bound=UnitOfWorkResult)


class TestResult(BaseModel, Generic[ResultT]):
    """
    Outcome of running a unit of work for one (model, test case) pair.

    A trial produces one of these; averaging folds several trials into a
    single result. `failed` marks an entry folded in from a raised exception,
    in which case `result` is None.
    """
    __test__: ClassVar[bool] = False
    model_config = ConfigDict(protected_namespaces=())

    test_case: TestCase
    provider_name: str
    model_name: str
    result: Optional[ResultT] = None
    accuracy: float = Field(0.0, ge=0.0, le=1.0)
    execution_time_ms: float = Field(0.0, ge=0.0)
    token_cost: float = Field(0.0, ge=0.0)
    errors: List[str] = Field(default_factory=list)
    failed: bool = False

    @property
    def success(self) -> bool:
        return self.result is not None and bool(self.result.success)


class ModelTestSummary(BaseModel):
    """Aggregated results for one model."""
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    provider_name: str
    total_tests: int = Field(0, ge=0)
    successful_tests: int = Field(0, ge=0)
    average_accuracy: float = 0.0
    average_execution_time_ms: float = 0.0
    total_token_cost: float = 0.0
    error_rate: float = 0.0
    errors: List[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.provider_name}:{self.model_name}"

    @property
    def success_rate(self) -> float:
        if self.total_tests == 0:
            return 0.0
        return self.successful_tests / self.total_tests


class Recommendations(BaseModel):
    """Best-accuracy, fastest and cheapest picks of an overall comparison."""
    best_accuracy: ModelTestSummary
    fastest: ModelTestSummary
    cheapest: ModelTestSummary


class ComparisonReport(BaseModel):
    """Everything produced by a full comparison run."""
    summaries: List[ModelTestSummary] = Field(default_factory=list)
    results: List[TestResult] = Field(default_factory=list)
    recommendations: Optional[Recommendations] = None
