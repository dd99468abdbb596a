from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Optional

from models.schemas import ModelConfig, ModelParameters, ProviderConfig


class Settings(BaseSettings):
    """Harness settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        frozen=True,
        extra="ignore",
    )

    # API Keys
    OPENAI_API_KEY: Optional[str] = ""
    ANTHROPIC_API_KEY: Optional[str] = ""
    GEMINI_API_KEY: Optional[str] = ""
    GROQ_API_KEY: Optional[str] = ""
    FIREWORKS_API_KEY: Optional[str] = ""
    OPEN_ROUTER_API_KEY: Optional[str] = ""
    INCEPTION_API_KEY: Optional[str] = ""

    # Application Settings
    APP_NAME: str = "LLM Model Comparison Harness"
    APP_VERSION: str = "1.0.0"

    # Benchmark Settings
    TIMES_PER_TEST: int = 3
    TRIAL_DELAY_MS: int = 0
    # Models to compare, as "provider:model" (split on the first colon only)
    BENCHMARK_MODELS: List[str] = [
        "openai:gpt-4o-mini",
        "groq:llama-3.1-8b-instant",
    ]

    # LLM client defaults
    LLM_TIMEOUT_MS: int = 10000
    LLM_MAX_RETRIES: int = 1
    LLM_MAX_TOKENS: int = 512

    # Redis Settings (LLM response cache)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    REDIS_MAX_CONNECTIONS: int = 10
    LLM_CACHE_ENABLED: bool = False
    CACHE_TTL_KEYWORDS_EXTRACTOR: int = 3600 * 24 * 30  # 30 days

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def api_key_for(self, provider_name: str) -> Optional[str]:
        """Return the configured API key for a provider, or None."""
        keys: Dict[str, Optional[str]] = {
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
            "google": self.GEMINI_API_KEY,
            "vertexai": self.GEMINI_API_KEY,
            "groq": self.GROQ_API_KEY,
            "fireworks": self.FIREWORKS_API_KEY,
            "openrouter": self.OPEN_ROUTER_API_KEY,
            "inception": self.INCEPTION_API_KEY,
        }
        return keys.get(provider_name.lower()) or None

    def build_model_configs(self) -> List[ModelConfig]:
        """
        Build the model configurations listed in BENCHMARK_MODELS.

        Entries without a colon are rejected so a typo does not silently
        run against the wrong provider.

        Raises:
            ValueError: If an entry is not in "provider:model" form
        """
        configs = []
        for entry in self.BENCHMARK_MODELS:
            provider_name, sep, model_name = entry.partition(":")
            if not sep or not provider_name or not model_name:
                raise ValueError(
                    f"Invalid BENCHMARK_MODELS entry '{entry}', expected 'provider:model'"
                )
            configs.append(
                ModelConfig(
                    provider=ProviderConfig(
                        name=provider_name,
                        api_key=self.api_key_for(provider_name),
                        timeout_ms=self.LLM_TIMEOUT_MS,
                        max_retries=self.LLM_MAX_RETRIES,
                    ),
                    model=ModelParameters(
                        name=model_name,
                        max_tokens=self.LLM_MAX_TOKENS,
                    ),
                )
            )
        return configs


def load_settings(**overrides) -> Settings:
    """
    Construct the harness settings.

    Settings are built once at the entry point and passed explicitly to
    whatever needs them.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        Settings: Frozen settings instance
    """
    return Settings(**overrides)
