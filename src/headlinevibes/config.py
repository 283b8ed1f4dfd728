"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _optional_int_env(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        return None


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# ── News provider ──────────────────────────────────────────────────────────
NEWS_API_KEY: str = os.getenv("NEWS_API_KEY", "")
NEWS_API_BASE_URL: str = os.getenv("NEWS_API_BASE_URL", "https://eventregistry.org/api/v1/")
NEWS_API_LANGUAGE: str = os.getenv("NEWS_API_LANGUAGE", "eng")
PAGE_CAP_PER_DAY: int = _int_env("BACKFILL_PAGE_CAP_PER_DAY", 2)
SOURCE_RESOLVE_LIMIT: int = _int_env("SOURCE_RESOLVE_LIMIT", 10)

# ── Token budget ───────────────────────────────────────────────────────────
MONTHLY_TOKENS: int = _int_env("TOKEN_MONTHLY_ALLOWANCE", 50_000)
SOFT_CAP_PCT: int = _int_env("TOKEN_SOFT_CAP_PCT", 80)
HARD_CAP_PCT: int = _int_env("TOKEN_HARD_CAP_PCT", 95)
ALLOW_OVERAGE: bool = _bool_env("TOKEN_ALLOW_OVERAGE")
HISTORICAL_MULTIPLIER: int = _int_env("TOKEN_HISTORICAL_MULTIPLIER", 5)
RECENT_WINDOW_DAYS: int = _int_env("TOKEN_RECENT_WINDOW_DAYS", 30)

# ── Rate limits (unset → counted but never throttled) ──────────────────────
DAILY_REQUESTS_CAP: int | None = _optional_int_env("RATE_LIMIT_DAILY_REQUESTS")
PER_SECOND_CAP: int | None = _optional_int_env("RATE_LIMIT_PER_SECOND")

# ── Files ──────────────────────────────────────────────────────────────────
SOURCES_FILE: Path = Path(
    os.getenv("HEADLINEVIBES_SOURCES_FILE", str(PROJECT_ROOT / "config" / "sources.yml"))
)
CACHE_DIR: Path = Path(os.getenv("HEADLINEVIBES_CACHE_DIR", str(PROJECT_ROOT / "var")))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def source_cache_path() -> Path:
    """Return the SQLite file backing the source-URI cache."""
    return CACHE_DIR / "source-cache.sqlite3"
