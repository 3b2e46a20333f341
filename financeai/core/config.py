"""
Configuration helpers for the FinanceAI backend.

Settings is the only place that reads os.environ; routers, services and
repositories receive what they need from it.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    database_url: str
    enforce_unique: bool
    seed_admin: bool
    gemini_api_key: str
    gemini_model: str
    stock_analysis_dedupe: bool
    log_level: str
    cors_origins: tuple[str, ...]


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(value: str | None) -> tuple[str, ...]:
    return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=(os.getenv("STORAGE_BACKEND") or "memory").strip().lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        enforce_unique=_bool(os.getenv("ENFORCE_UNIQUE"), False),
        seed_admin=_bool(os.getenv("SEED_ADMIN"), True),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_AI_API_KEY") or "",
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-pro"),
        stock_analysis_dedupe=_bool(os.getenv("STOCK_ANALYSIS_DEDUPE"), True),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
    )
