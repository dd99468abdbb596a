"""
Chat model factory.

Builds a LangChain chat model for a ModelConfig. OpenAI-compatible providers
(Groq, Fireworks, OpenRouter, Inception) go through ChatOpenAI with their
own base URL.
"""

import logging
import re
from typing import Any, Dict, Optional

from langchain_core.caches import BaseCache
from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings
from harness.exceptions import ConfigurationError
from models.schemas import ModelConfig

logger = logging.getLogger(__name__)

# Extraction benchmarks want the model as deterministic as possible
LLM_TEMPERATURE = 0.0
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_MAX_RETRIES = 1

OPENAI_COMPATIBLE_BASE_URLS: Dict[str, Optional[str]] = {
    "openai": None,
    "groq": "https://api.groq.com/openai/v1",
    "fireworks": "https://api.fireworks.ai/inference/v1",
    "openrouter": "https://openrouter.ai/api/v1",
    "inception": "https://api.inceptionlabs.ai/v1",
}

GOOGLE_PROVIDERS = ("google", "vertexai")

# gpt-5 and later, and the o-series reasoning models, reject temperature
_NO_TEMPERATURE_PATTERN = re.compile(r"^(gpt-([5-9]|\d{2,})|o\d)")


def supports_temperature(model_name: str) -> bool:
    """
    Whether a model accepts a temperature parameter.

    Example:
        >>> supports_temperature("gpt-4o-mini")
        True
        >>> supports_temperature("o3-mini")
        False
    """
    return not _NO_TEMPERATURE_PATTERN.match(model_name)


def _common_params(model_config: ModelConfig) -> Dict[str, Any]:
    provider = model_config.provider
    model = model_config.model

    params: Dict[str, Any] = {
        "model": model.name,
        "max_retries": provider.max_retries if provider.max_retries is not None else DEFAULT_MAX_RETRIES,
        "timeout": (provider.timeout_ms or DEFAULT_TIMEOUT_MS) / 1000,
    }
    if supports_temperature(model.name):
        params["temperature"] = model.temperature if model.temperature is not None else LLM_TEMPERATURE
    if model.top_p is not None:
        params["top_p"] = model.top_p
    return params


def create_chat_model(
    model_config: ModelConfig,
    settings: Settings,
    cache: Optional[BaseCache] = None
) -> BaseChatModel:
    """
    Create the LangChain chat model described by `model_config`.

    The provider API key comes from the model config, falling back to the
    settings.

    Args:
        model_config: Provider and model to instantiate
        settings: Harness settings (API key fallback)
        cache: Optional LangChain cache shared by the model

    Returns:
        BaseChatModel: Configured chat model

    Raises:
        ConfigurationError: If the provider is unsupported or has no API key
    """
    provider_name = model_config.provider.name.lower()
    api_key = model_config.provider.api_key or settings.api_key_for(provider_name)
    if not api_key:
        raise ConfigurationError(f"No API key configured for provider '{provider_name}'", provider_name)

    params = _common_params(model_config)
    if cache is not None:
        params["cache"] = cache

    max_tokens = model_config.model.max_tokens
    base_url = model_config.provider.base_url

    if provider_name in OPENAI_COMPATIBLE_BASE_URLS:
        from langchain_openai import ChatOpenAI

        base_url = base_url or OPENAI_COMPATIBLE_BASE_URLS[provider_name]
        if base_url:
            params["base_url"] = base_url
        if max_tokens:
            params["max_tokens"] = max_tokens
        logger.debug(f"Creating ChatOpenAI for {model_config.label} (base_url={base_url})")
        return ChatOpenAI(api_key=api_key, **params)

    if provider_name == "anthropic":
        from langchain_anthropic import ChatAnthropic

        if base_url:
            params["base_url"] = base_url
        if max_tokens:
            params["max_tokens"] = max_tokens
        logger.debug(f"Creating ChatAnthropic for {model_config.label}")
        return ChatAnthropic(api_key=api_key, **params)

    if provider_name in GOOGLE_PROVIDERS:
        from langchain_google_genai import ChatGoogleGenerativeAI

        if max_tokens:
            params["max_output_tokens"] = max_tokens
        # Thinking stays off unless a budget is configured
        thinking_budget = model_config.model.thinking_budget or 0
        params["thinking_budget"] = thinking_budget
        params["include_thoughts"] = thinking_budget > 0
        logger.debug(f"Creating ChatGoogleGenerativeAI for {model_config.label}")
        return ChatGoogleGenerativeAI(google_api_key=api_key, **params)

    raise ConfigurationError(f"Unsupported LLM provider: {provider_name}", provider_name)
