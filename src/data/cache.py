"""Read and write the enriched movies artifact (output.json).

The artifact is both the result of a run and the cache of the next one:
entries whose ``title|year`` key is already present are never fetched again.
"""

from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable

from src.data.models import CatalogEntry, EnrichedRecord


class ArtifactLoadError(RuntimeError):
    """The existing artifact is present but cannot be trusted as a cache."""


def load_movies(path: Path) -> list[EnrichedRecord]:
    """Load every record of the artifact, in file order.

    A missing or empty file (or a bare ``null``) yields no records. A
    non-empty file that is not a JSON array of objects raises
    ArtifactLoadError.
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ArtifactLoadError(f"{path} is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return []

    try:
        movies = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ArtifactLoadError(f"failed to parse existing JSON in {path}: {exc}") from exc

    if movies is None:
        return []
    if not isinstance(movies, list):
        raise ArtifactLoadError(f"{path} does not hold a JSON array")

    records = []
    for item in movies:
        if not isinstance(item, dict):
            raise ArtifactLoadError(f"{path} holds a non-object entry: {item!r}")
        records.append(EnrichedRecord.from_dict(item))
    return records


def load_existing_movies(path: Path) -> dict[str, EnrichedRecord]:
    """Previously enriched movies keyed by ``title|year`` (last one wins)."""
    return {record.key: record for record in load_movies(path)}


def lookup(cache: dict[str, EnrichedRecord], entry: CatalogEntry) -> EnrichedRecord | None:
    return cache.get(entry.key)


def write_movies(records: Iterable[EnrichedRecord], path: Path) -> int:
    """Write records as an indented JSON array, replacing ``path`` atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [r.to_dict() for r in records]

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        # mkstemp creates 0600; keep the mode of the file being replaced
        os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return len(payload)
