"""Load output.json into the processed movies catalog and print its statistics."""

from __future__ import annotations

import argparse
from pathlib import Path

from src.config import MOVIES_CATALOG_PATH, OUTPUT_PATH
from src.data.cache import ArtifactLoadError, load_movies
from src.data.catalog import catalog_statistics, upsert_movies


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--input", type=Path, default=OUTPUT_PATH, help="Enriched movies JSON.")
    p.add_argument("--catalog", type=Path, default=MOVIES_CATALOG_PATH, help="Parquet catalog to upsert into.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        movies = load_movies(args.input)
    except ArtifactLoadError as e:
        print(f"Error: {e}")
        return 1

    if not movies:
        print(f"No enriched movies in {args.input}. Run enrich_export.py first.")
        return 1

    df = upsert_movies(movies, args.catalog)
    stats = catalog_statistics(df)

    print(f"\nAverage runtime (watched): {stats['average_runtime']:.1f} min")
    print("Top production countries:")
    for row in stats["top_production_countries"]:
        print(f"  {row['country']}: {row['count']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
