# Utilities package

from .cache import RedisLLMCache, build_llm_cache, get_cache_key
from .llm_factory import create_chat_model, supports_temperature

__all__ = [
    "RedisLLMCache",
    "build_llm_cache",
    "get_cache_key",
    "create_chat_model",
    "supports_temperature"
]
