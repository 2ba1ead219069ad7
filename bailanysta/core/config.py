"""
Configuration helpers for the Bailanysta backend.

Routers/services read settings through get_settings() instead of touching
os.environ directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path.cwd() / "data" / "bailanysta.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    app_version: str
    data_file: Path
    backup_file: Path
    storage_cache_ttl_seconds: int
    search_cache_ttl_seconds: int
    search_cache_max_entries: int
    hashtag_half_life_days: float
    current_user_id: str
    current_user_name: str
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float) -> float:
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed > 0 else default

    data_file = Path(os.getenv("DATA_FILE") or DEFAULT_DATA_FILE)
    backup_env = os.getenv("BACKUP_FILE")
    backup_file = Path(backup_env) if backup_env else data_file.with_name(f"{data_file.stem}.backup{data_file.suffix}")
    origins = tuple(o.strip().rstrip("/") for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        data_file=data_file,
        backup_file=backup_file,
        storage_cache_ttl_seconds=max(0, _int(os.getenv("STORAGE_CACHE_TTL"), 0)),
        search_cache_ttl_seconds=max(0, _int(os.getenv("SEARCH_CACHE_TTL"), 300)),
        search_cache_max_entries=max(1, _int(os.getenv("SEARCH_CACHE_MAX_ENTRIES"), 100)),
        hashtag_half_life_days=_float(os.getenv("HASHTAG_HALF_LIFE_DAYS"), 7.0),
        current_user_id=os.getenv("CURRENT_USER_ID") or "mock-user-id",
        current_user_name=os.getenv("CURRENT_USER_NAME") or "Test User",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=origins,
    )
