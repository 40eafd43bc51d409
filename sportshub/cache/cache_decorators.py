"""
Cache decorators for easy function result caching.
"""
import hashlib
import json
from functools import wraps
from typing import Callable, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sportshub.cache import redis_client
from sportshub.core.config import settings
from sportshub.core.logging import logger


def cached(key_prefix: str, expire: int = settings.CACHE_TTL_SECONDS):
    """
    Decorator to cache JSON-serializable results of async functions.

    Args:
        key_prefix: Prefix for the cache key, e.g. ``events:detail``
        expire: Expiration time in seconds

    Usage:
        @cached('events:detail')
        async def get_event_detail(session, event_id):
            return {...}
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            cache_key = f"{key_prefix}:{_generate_key_from_args(args, kwargs)}"

            cached_value = await redis_client.cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return cached_value

            logger.debug(f"Cache miss for key: {cache_key}")
            result = await func(*args, **kwargs)
            await redis_client.cache.set(cache_key, result, expire)
            return result
        return wrapper
    return decorator


def _generate_key_from_args(args: tuple, kwargs: dict) -> str:
    """MD5 of the call arguments, ignoring sessions and service instances."""
    filtered_args = [
        arg for arg in args
        if not isinstance(arg, AsyncSession) and not hasattr(arg, "session")
    ]
    key_data = {
        'args': [str(arg) for arg in filtered_args],
        'kwargs': {k: str(v) for k, v in kwargs.items() if not isinstance(v, AsyncSession)}
    }
    key_string = json.dumps(key_data, sort_keys=True)
    return hashlib.md5(key_string.encode()).hexdigest()
