"""
Configuration helpers for the portal backend.

Routers/services read settings through get_settings() so that the storage
backend, feature flags and admin identity are never fetched from os.environ
directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[2] / "data" / "portal.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: Path
    database_url: str
    trusted_redirect_enabled: bool
    strict_persistence: bool
    admin_id: str
    admin_email: str
    admin_password: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=backend,
        data_file=Path(os.getenv("DATA_FILE") or DEFAULT_DATA_FILE),
        database_url=os.getenv("DATABASE_URL", ""),
        trusted_redirect_enabled=_bool(os.getenv("TRUSTED_REDIRECT_ENABLED"), False),
        strict_persistence=_bool(os.getenv("STRICT_PERSISTENCE"), False),
        admin_id=os.getenv("ADMIN_ID", "admin"),
        admin_email=os.getenv("ADMIN_EMAIL", "admin@outcometracker.edu"),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
