"""In-memory TTL cache decorator."""

import time
from functools import wraps

from release_dashboard.config import get_config
from release_dashboard.extensions import cache


def cached(ttl_seconds=None, version=None):
    """Decorator for caching function results with TTL.

    Args:
        ttl_seconds: entry lifetime; defaults to config "cache_ttl_seconds".
        version: optional callable whose return value is part of the key, so
            entries computed from an older source (e.g. a table mtime) are never served.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            ttl = ttl_seconds
            if ttl is None:
                ttl = get_config().get("cache_ttl_seconds", 300)
            tag = version() if version else None
            cache_key = f"{func.__module__}.{func.__name__}:{args}:{sorted(kwargs.items())}:{tag}"
            now = time.time()

            if cache_key in cache:
                result, timestamp = cache[cache_key]
                if now - timestamp < ttl:
                    return result

            result = func(*args, **kwargs)
            cache[cache_key] = (result, now)
            return result

        return wrapper

    return decorator
