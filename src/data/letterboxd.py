"""Read the watched and watchlist CSVs of a Letterboxd export."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from src.config import WATCHED_CSV, WATCHLIST_CSV
from src.data.models import CatalogEntry

# Date,Name,Year,Letterboxd URI
REQUIRED_FIELDS = 4


def read_catalog_csv(csv_path: Path, source: str) -> list[CatalogEntry]:
    """Load one export CSV as catalog entries tagged with ``source``.

    Rows with fewer than four fields are skipped. A year that does not parse
    becomes 0.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"{csv_path} not found. Unzip the Letterboxd export first.")

    try:
        df = pd.read_csv(
            csv_path,
            header=0,
            dtype=str,
            keep_default_na=False,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError:
        return []
    if df.shape[1] < REQUIRED_FIELDS:
        return []

    df = df.iloc[:, :REQUIRED_FIELDS]
    df.columns = ["date", "name", "year", "letterboxd_uri"]
    # short rows come back padded with "" rather than NaN
    df = df[df["letterboxd_uri"].str.strip() != ""]

    years = pd.to_numeric(df["year"], errors="coerce").fillna(0).astype(int)

    return [
        CatalogEntry(
            date=row.date,
            name=row.name,
            year=int(year),
            letterboxd_uri=row.letterboxd_uri,
            source=source,
        )
        for row, year in zip(df.itertuples(index=False), years)
    ]


def load_catalog(export_dir: Path) -> list[CatalogEntry]:
    """Watched entries followed by watchlist entries."""
    export_dir = Path(export_dir)

    watched = read_catalog_csv(export_dir / WATCHED_CSV, "watched")
    print(f"Read {len(watched)} entries from {WATCHED_CSV}")

    watchlist = read_catalog_csv(export_dir / WATCHLIST_CSV, "watchlist")
    print(f"Read {len(watchlist)} entries from {WATCHLIST_CSV}")

    return watched + watchlist
