"""Constants, paths and settings for the letterboxd enricher."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ────────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
RAW_DIR = DATA_DIR / "raw"
PROCESSED_DIR = DATA_DIR / "processed"
EXPORT_DIR = RAW_DIR / "letterboxd"
OUTPUT_PATH = PROCESSED_DIR / "output.json"
MOVIES_CATALOG_PATH = PROCESSED_DIR / "movies.parquet"

for d in [RAW_DIR, PROCESSED_DIR]:
    d.mkdir(parents=True, exist_ok=True)

# ── Letterboxd export ────────────────────────────────────────────────────────
WATCHED_CSV = "watched.csv"
WATCHLIST_CSV = "watchlist.csv"

# ── TMDB ─────────────────────────────────────────────────────────────────────
TMDB_BASE_URL = "https://api.themoviedb.org/3/"
TMDB_LANGUAGE = "en-US"

# ── Fetcher limits ───────────────────────────────────────────────────────────
RATE_LIMIT_PER_SECOND = int(os.getenv("TMDB_RATE_LIMIT", "20"))  # TMDB allows ~50/sec
MAX_CONCURRENT_REQUESTS = int(os.getenv("TMDB_MAX_CONCURRENCY", "5"))
REQUEST_TIMEOUT_SECONDS = 10.0
MAX_RATE_LIMIT_RETRIES = 5


@dataclass(frozen=True)
class EnrichSettings:
    """Everything the TMDB client and the fetcher need for one run."""

    api_key: str
    base_url: str = TMDB_BASE_URL
    language: str = TMDB_LANGUAGE
    rate_limit_per_second: int = RATE_LIMIT_PER_SECOND
    max_concurrent_requests: int = MAX_CONCURRENT_REQUESTS
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    max_rate_limit_retries: int = MAX_RATE_LIMIT_RETRIES


def load_settings(api_key: str | None = None, **overrides) -> EnrichSettings:
    """Build settings from the environment, failing fast without an API key."""
    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    if not resolved:
        raise RuntimeError("TMDB_API_KEY is not set.")
    settings = EnrichSettings(api_key=resolved, **overrides)
    if settings.rate_limit_per_second <= 0:
        raise ValueError("rate_limit_per_second must be positive.")
    if settings.max_concurrent_requests <= 0:
        raise ValueError("max_concurrent_requests must be positive.")
    return settings
