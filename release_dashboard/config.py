"""Application configuration loaded from config.json."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# Project root is one level up from release_dashboard/
PROJECT_ROOT = Path(__file__).parent.parent

TIMESTAMP_FIELDS = ("published_at", "created_at")

DEFAULT_CONFIG: Dict[str, Any] = {
    "repos": ["daangn/stackflow", "daangn/seed-design"],
    "github_token": None,
    "api_base_url": "https://api.github.com",
    "per_page": 100,
    "request_timeout_seconds": 30,
    "ingest_timeout_seconds": 300,
    "fetch_workers": 4,
    "timestamp_field": "published_at",
    "workday_only": True,
    "raw_table_path": "release-raw.csv",
    "stats_table_path": "release-stats.csv",
    "cache_ttl_seconds": 300,
    "host": "127.0.0.1",
    "port": 5050,
    "debug": False,
}


def load_config(config_path: Path = None) -> Dict[str, Any]:
    """Load configuration from config.json.

    Args:
        config_path: Optional path to config file. Defaults to PROJECT_ROOT/config.json.

    Returns:
        Configuration dictionary, with DEFAULT_CONFIG filling any missing key.
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "config.json"
    config = dict(DEFAULT_CONFIG)
    if Path(config_path).exists():
        with open(config_path) as f:
            config.update(json.load(f))
    if not config.get("github_token"):
        config["github_token"] = os.environ.get("GITHUB_TOKEN") or None
    return config


# Singleton config instance
_config: Dict[str, Any] = None


def get_config() -> Dict[str, Any]:
    """Get the singleton config dictionary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Dict[str, Any]]):
    """Replace the singleton config (None resets it to be reloaded on next use)."""
    global _config
    _config = config


def resolve_path(value) -> Path:
    """Resolve a configured table path; relative paths are anchored at PROJECT_ROOT."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


@dataclass(frozen=True)
class IngestSettings:
    """Immutable run configuration for one ingestion batch."""

    repos: Tuple[str, ...]
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    per_page: int = 100
    request_timeout: float = 30
    ingest_timeout: Optional[float] = 300
    fetch_workers: int = 4
    timestamp_field: str = "published_at"
    workday_only: bool = True
    raw_table_path: Path = PROJECT_ROOT / "release-raw.csv"
    stats_table_path: Path = PROJECT_ROOT / "release-stats.csv"

    def __post_init__(self):
        if self.timestamp_field not in TIMESTAMP_FIELDS:
            raise ValueError(
                f"timestamp_field must be one of {TIMESTAMP_FIELDS}, got {self.timestamp_field!r}"
            )
        if self.fetch_workers < 1:
            raise ValueError("fetch_workers must be at least 1")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "IngestSettings":
        return cls(
            repos=tuple(config.get("repos") or ()),
            token=config.get("github_token") or None,
            api_base_url=config.get("api_base_url", DEFAULT_CONFIG["api_base_url"]).rstrip("/"),
            per_page=int(config.get("per_page", 100)),
            request_timeout=float(config.get("request_timeout_seconds", 30)),
            ingest_timeout=config.get("ingest_timeout_seconds"),
            fetch_workers=int(config.get("fetch_workers", 4)),
            timestamp_field=config.get("timestamp_field", "published_at"),
            workday_only=bool(config.get("workday_only", True)),
            raw_table_path=resolve_path(config.get("raw_table_path", DEFAULT_CONFIG["raw_table_path"])),
            stats_table_path=resolve_path(config.get("stats_table_path", DEFAULT_CONFIG["stats_table_path"])),
        )
