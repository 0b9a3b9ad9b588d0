"""Combine the Letterboxd catalog with TMDB metadata into output.json."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from src.config import EnrichSettings
from src.data.cache import load_existing_movies, lookup, write_movies
from src.data.letterboxd import load_catalog
from src.data.models import CatalogEntry, EnrichedRecord
from src.data.tmdb import TmdbClient, TmdbError


@dataclass
class RunStats:
    existing: int = 0
    new: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.existing + self.new + self.errors


@dataclass
class EnrichResult:
    records: list[EnrichedRecord]
    stats: RunStats


def resolve_entry(client: TmdbClient, entry: CatalogEntry) -> EnrichedRecord:
    """Search, fetch details and stitch one catalog entry.

    Raises TmdbError (or a subclass) when the entry cannot be resolved.
    """
    tmdb_id = client.search_movie(entry.name, entry.year)
    details = client.get_movie_details(tmdb_id)
    try:
        return EnrichedRecord.from_details(details, entry)
    except (TypeError, ValueError, AttributeError) as exc:
        raise TmdbError(f"malformed details for TMDB id {tmdb_id}: {exc}") from exc


def _run_one(client: TmdbClient, entry: CatalogEntry) -> tuple[EnrichedRecord | None, str | None]:
    try:
        return resolve_entry(client, entry), None
    except TmdbError as exc:
        return None, str(exc)


def enrich_catalog(
    entries: list[CatalogEntry],
    cache: dict[str, EnrichedRecord],
    client: TmdbClient,
    max_workers: int,
) -> EnrichResult:
    """Resolve every entry missing from ``cache`` on a bounded worker pool.

    Cached entries are passed through untouched. Workers report back through
    their futures and only this thread touches the results and counters.
    Records come back in catalog order; failed entries are left out.
    """
    stats = RunStats()
    slots: list[EnrichedRecord | None] = [None] * len(entries)
    pending: list[int] = []

    for i, entry in enumerate(entries):
        cached = lookup(cache, entry)
        if cached is not None:
            slots[i] = cached
            stats.existing += 1
        else:
            pending.append(i)

    if pending:
        print(f"Fetching {len(pending)} movies from TMDB ({max_workers} workers)...")
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {pool.submit(_run_one, client, entries[i]): i for i in pending}
            for fut in as_completed(futures):
                i = futures[fut]
                entry = entries[i]
                record, error = fut.result()
                if record is None:
                    stats.errors += 1
                    print(f"  Error for {entry.name} ({entry.year}): {error}")
                    continue
                slots[i] = record
                stats.new += 1

    records = [r for r in slots if r is not None]
    return EnrichResult(records=records, stats=stats)


def build_enriched_catalog(
    settings: EnrichSettings,
    export_dir: Path,
    output_path: Path,
    client: TmdbClient | None = None,
) -> EnrichResult:
    """Enrich a Letterboxd export and rewrite the artifact at ``output_path``.

    Raises ArtifactLoadError before any request when the existing artifact is
    corrupt.
    """
    existing = load_existing_movies(output_path)
    print(f"Found {len(existing)} existing movies in {Path(output_path).name}")

    entries = load_catalog(export_dir)
    print(f"Processing {len(entries)} total movies")

    client = client or TmdbClient(settings)
    result = enrich_catalog(entries, existing, client, settings.max_concurrent_requests)

    stats = result.stats
    print(f"Processing complete: {stats.existing} existing, {stats.new} new, {stats.errors} errors")

    count = write_movies(result.records, output_path)
    print(f"Saved data for {count} movies to {output_path}")
    return result
