"""
Redis-backed LangChain cache for chat model responses.

Keys are sha256 hashes of the prompt and the model's serialized parameters.
"""

import hashlib
import logging
from typing import Any, Optional, Sequence

from langchain_core.caches import RETURN_VAL_TYPE, BaseCache
from langchain_core.load import dumps, loads

logger = logging.getLogger(__name__)

CACHE_PREFIX = "llm"


def get_cache_key(prefix: str, *args) -> str:
    """
    Generate a cache key from prefix and arguments.

    Args:
        prefix: Key prefix (e.g., 'llm', 'keywords_extractor')
        *args: Additional arguments to include in key

    Returns:
        str: Generated cache key
    """
    key_parts = [prefix] + [str(arg) for arg in args]
    return ":".join(key_parts)


def hash_prompt(prompt: str, llm_string: str) -> str:
    """sha256 of a prompt together with the serialized model parameters."""
    return hashlib.sha256(f"{llm_string}\n{prompt}".encode("utf-8")).hexdigest()


class RedisLLMCache(BaseCache):
    """
    LangChain cache storing serialized generations in Redis with a TTL.

    Redis failures are logged and treated as cache misses.
    """

    def __init__(self, redis_client: Any, ttl: Optional[int] = None, namespace: str = CACHE_PREFIX):
        self.redis_client = redis_client
        self.ttl = ttl
        self.namespace = namespace

    def _key(self, prompt: str, llm_string: str) -> str:
        return get_cache_key(self.namespace, hash_prompt(prompt, llm_string))

    def lookup(self, prompt: str, llm_string: str) -> Optional[RETURN_VAL_TYPE]:
        key = self._key(prompt, llm_string)
        try:
            cached = self.redis_client.get(key)
        except Exception as e:
            logger.error(f"Error reading LLM cache: {e}")
            return None

        if not cached:
            logger.debug(f"Cache MISS: {key}")
            return None

        try:
            generations = loads(cached)
        except Exception as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

        logger.debug(f"Cache HIT: {key}")
        return generations

    def update(self, prompt: str, llm_string: str, return_val: RETURN_VAL_TYPE) -> None:
        key = self._key(prompt, llm_string)
        try:
            payload = dumps(list(return_val))
            if self.ttl:
                self.redis_client.setex(key, self.ttl, payload)
            else:
                self.redis_client.set(key, payload)
        except Exception as e:
            logger.error(f"Error writing LLM cache: {e}")

    def clear(self, **kwargs: Any) -> None:
        """Delete every entry of this cache's namespace."""
        try:
            keys: Sequence[str] = list(self.redis_client.scan_iter(match=f"{self.namespace}:*"))
            if keys:
                deleted = self.redis_client.delete(*keys)
                logger.info(f"Cleared {deleted} cache keys matching: {self.namespace}:*")
        except Exception as e:
            logger.error(f"Error clearing LLM cache: {e}")


def build_llm_cache(settings, namespace: str = "keywords_extractor") -> Optional[RedisLLMCache]:
    """
    Build the Redis LLM cache when LLM_CACHE_ENABLED is set.

    Returns None when caching is disabled or Redis is unreachable.
    """
    if not settings.LLM_CACHE_ENABLED:
        return None

    from config.database import get_redis_client

    try:
        redis_client = get_redis_client(settings)
    except ConnectionError as e:
        logger.warning(f"LLM cache disabled: {e}")
        return None

    return RedisLLMCache(
        redis_client,
        ttl=settings.CACHE_TTL_KEYWORDS_EXTRACTOR,
        namespace=get_cache_key(CACHE_PREFIX, namespace)
    )
