"""Enrich a Letterboxd export with TMDB metadata, skipping movies already fetched."""

from __future__ import annotations

import argparse
from pathlib import Path

from src.config import (
    EXPORT_DIR,
    MAX_CONCURRENT_REQUESTS,
    OUTPUT_PATH,
    RATE_LIMIT_PER_SECOND,
    load_settings,
)
from src.data.cache import ArtifactLoadError
from src.data.merge import build_enriched_catalog


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--export-dir", type=Path, default=EXPORT_DIR, help="Folder with watched.csv and watchlist.csv.")
    p.add_argument("--output", type=Path, default=OUTPUT_PATH, help="Enriched movies JSON (read as cache, then rewritten).")
    p.add_argument("--rate-limit", type=int, default=RATE_LIMIT_PER_SECOND, help="Max TMDB requests per second.")
    p.add_argument("--concurrency", type=int, default=MAX_CONCURRENT_REQUESTS, help="Concurrent movie lookups.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(
            rate_limit_per_second=args.rate_limit,
            max_concurrent_requests=args.concurrency,
        )
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    try:
        build_enriched_catalog(settings, args.export_dir, args.output)
    except ArtifactLoadError as e:
        print(f"Error loading existing movies: {e}")
        return 1
    except FileNotFoundError as e:
        print(f"Error reading export: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
