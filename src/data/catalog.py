"""Flatten enriched movies into the processed movies catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from src.data.models import EnrichedRecord

MOVIE_COLUMNS = [
    "letterboxd_uri",
    "title",
    "original_title",
    "overview",
    "release_date",
    "poster_path",
    "popularity",
    "vote_average",
    "vote_count",
    "adult",
    "original_language",
    "runtime",
    "tagline",
    "status",
    "source",
    "year",
    "main_production_country",
    "other_production_countries",
]


def flatten_record(record: EnrichedRecord) -> dict:
    """One catalog row: the first production country is the main one."""
    names = [c.name for c in record.production_countries]
    data = record.to_dict()
    row = {col: data[col] for col in MOVIE_COLUMNS[:-2]}
    row["main_production_country"] = names[0] if names else ""
    row["other_production_countries"] = ", ".join(names[1:])
    return row


def build_movies_frame(records: Iterable[EnrichedRecord]) -> pd.DataFrame:
    """Flatten records, keeping the last row per letterboxd_uri."""
    df = pd.DataFrame([flatten_record(r) for r in records], columns=MOVIE_COLUMNS)
    return df.drop_duplicates(subset="letterboxd_uri", keep="last").reset_index(drop=True)


def upsert_movies(records: Iterable[EnrichedRecord], path: Path) -> pd.DataFrame:
    """Insert or replace rows of the parquet catalog at ``path``."""
    path = Path(path)
    incoming = build_movies_frame(records)

    if path.exists():
        existing = pd.read_parquet(path)
        existing = existing[~existing["letterboxd_uri"].isin(incoming["letterboxd_uri"])]
        combined = pd.concat([existing, incoming], ignore_index=True)
    else:
        combined = incoming

    path.parent.mkdir(parents=True, exist_ok=True)
    combined.to_parquet(path, index=False)
    print(f"Saved {len(incoming)} movies ({len(combined)} total) to {path}")
    return combined


def catalog_statistics(df: pd.DataFrame, top_n: int = 3) -> dict:
    """Average runtime of watched movies and the most common main countries."""
    if df.empty:
        return {"average_runtime": 0.0, "top_production_countries": []}

    watched = df[(df["source"] == "watched") & (df["runtime"] > 0)]
    average_runtime = float(watched["runtime"].mean()) if not watched.empty else 0.0

    countries = df.loc[df["main_production_country"] != "", "main_production_country"]
    counts = countries.value_counts().head(top_n)

    return {
        "average_runtime": round(average_runtime, 2),
        "top_production_countries": [
            {"country": country, "count": int(count)} for country, count in counts.items()
        ],
    }
