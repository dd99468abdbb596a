"""
Static LLM pricing table and token cost calculation.

Rates are USD per 1K tokens and must be kept in sync with the providers'
published pricing by hand.
"""

from typing import Dict

PROVIDERS_MODELS_COSTS: Dict[str, Dict[str, Dict[str, float]]] = {
    "openai": {
        "gpt-4o": {"input": 0.0025, "output": 0.01},
        "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    },
    "groq": {
        "llama-3.3-70b-versatile": {"input": 0.00059, "output": 0.00079},
        "llama-3.1-8b-instant": {"input": 0.00005, "output": 0.00008},
        "llama3-8b-8192": {"input": 0.00005, "output": 0.00008},
        "openai/gpt-oss-120b": {"input": 0.00015, "output": 0.00075},
        "openai/gpt-oss-20b": {"input": 0.0001, "output": 0.0005},
    },
    "fireworks": {
        "accounts/fireworks/models/llama4-scout-instruct-basic": {"input": 0.00015, "output": 0.0006},
        "accounts/fireworks/models/llama-v3p1-8b-instruct": {"input": 0.0002, "output": 0.0002},
        "accounts/fireworks/models/llama4-maverick-instruct-basic": {"input": 0.00022, "output": 0.00088},
        "accounts/fireworks/models/gpt-oss-20b": {"input": 0.00007, "output": 0.0003},
        "accounts/fireworks/models/gpt-oss-120b": {"input": 0.00015, "output": 0.0006},
        "accounts/fireworks/models/kimi-k2-instruct-0905": {"input": 0.0006, "output": 0.0025},
    },
    "anthropic": {
        "claude-3-haiku-20240307": {"input": 0.00025, "output": 0.00125},
        "claude-3-5-haiku-20241022": {"input": 0.0008, "output": 0.004},
    },
    "openrouter": {
        "gpt-4o-2024-08-06": {"input": 0.0025, "output": 0.01},
        "qwen/qwen3-next-80b-a3b-instruct": {"input": 0.0001, "output": 0.0008},
        "google/gemini-2.5-flash-image-preview": {"input": 0.0003, "output": 0.0025},
        "google/gemini-2.5-flash": {"input": 0.0003, "output": 0.0025},
        "google/gemini-flash-1.5-8b": {"input": 0.000038, "output": 0.00015},
        "meta-llama/llama-4-maverick": {"input": 0.00015, "output": 0.0006},
        "anthropic/claude-sonnet-4": {"input": 0.003, "output": 0.015},
        "moonshotai/kimi-k2-0905": {"input": 0.00038, "output": 0.00152},
    },
    "vertexai": {
        "gemini-2.5-flash": {"input": 0.0003, "output": 0.0003},
    },
}

_ZERO_COST = {"input": 0.0, "output": 0.0}


def get_model_pricing(provider_name: str, model_name: str) -> Dict[str, float]:
    """Per-1K-token rates for a provider/model, zero rates when unknown."""
    return PROVIDERS_MODELS_COSTS.get(provider_name, {}).get(model_name, _ZERO_COST)


def calculate_token_cost(
    provider_name: str,
    model_name: str,
    input_tokens: int,
    output_tokens: int
) -> float:
    """
    Approximate cost of a call from its token counts.

    Never raises: a provider or model missing from the pricing table is
    priced at zero.

    Args:
        provider_name: Provider key in PROVIDERS_MODELS_COSTS
        model_name: Model key under that provider
        input_tokens: Prompt tokens
        output_tokens: Completion tokens

    Returns:
        float: Cost in USD
    """
    pricing = get_model_pricing(provider_name, model_name)
    return (
        input_tokens * pricing["input"] / 1000
        + output_tokens * pricing["output"] / 1000
    )
