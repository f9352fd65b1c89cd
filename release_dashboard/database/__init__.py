"""Database package - re-exports the release table and its factory function."""

import threading
from typing import Optional

from release_dashboard.config import get_config, resolve_path
from release_dashboard.database.release_table import (
    ReleaseTable,
    serialize_releases,
    parse_releases,
    serialize_period_stats,
    parse_period_stats,
)

# Thread-safe singleton instance
_db_lock = threading.Lock()

_release_table: Optional[ReleaseTable] = None


def get_release_table() -> ReleaseTable:
    """Release table at the configured raw_table_path / stats_table_path."""
    global _release_table
    if _release_table is None:
        with _db_lock:
            if _release_table is None:
                config = get_config()
                _release_table = ReleaseTable(
                    resolve_path(config["raw_table_path"]),
                    resolve_path(config["stats_table_path"]),
                )
    return _release_table


def reset_release_table():
    """Drop the singleton so the next call re-reads the config."""
    global _release_table
    with _db_lock:
        _release_table = None


__all__ = [
    "ReleaseTable",
    "get_release_table",
    "reset_release_table",
    "serialize_releases",
    "parse_releases",
    "serialize_period_stats",
    "parse_period_stats",
]
