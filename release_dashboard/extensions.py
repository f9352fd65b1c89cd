"""Shared singletons: logger and in-memory stats cache.

All global state used across modules lives here to avoid circular imports.
"""

import logging

from cachetools import TTLCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("release_dashboard")

# Bounded in-memory cache with TTL eviction (max 64 entries, 5-minute default TTL)
cache = TTLCache(maxsize=64, ttl=300)
