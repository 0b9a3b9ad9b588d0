"""Catalog entries and enriched movie records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    """One row of a Letterboxd export (watched or watchlist)."""

    date: str
    name: str
    year: int
    letterboxd_uri: str
    source: str  # 'watched' or 'watchlist'

    @property
    def key(self) -> str:
        return dedup_key(self.name, self.year)


@dataclass(frozen=True)
class Genre:
    id: int
    name: str


@dataclass(frozen=True)
class ProductionCountry:
    iso_3166_1: str
    name: str


def dedup_key(title: str, year: int) -> str:
    """Identity used to skip movies already fetched.

    Two different films sharing a title and a year collide on this key.
    """
    return f"{title}|{year}"


def _int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _float(value) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


def _str(value) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class EnrichedRecord:
    """TMDB movie details stitched with the Letterboxd fields of its entry.

    Field order here is the field order of the output artifact.
    """

    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    release_date: str = ""
    poster_path: str = ""
    popularity: float = 0.0
    vote_average: float = 0.0
    vote_count: int = 0
    adult: bool = False
    genres: tuple[Genre, ...] = ()
    original_language: str = ""
    production_countries: tuple[ProductionCountry, ...] = ()
    runtime: int = 0
    tagline: str = ""
    status: str = ""
    source: str = ""
    year: int = 0
    letterboxd_uri: str = ""

    @property
    def key(self) -> str:
        return dedup_key(self.title, self.year)

    @classmethod
    def from_dict(cls, data: dict) -> EnrichedRecord:
        """Build a record from a TMDB details payload or an artifact entry."""
        genres = tuple(
            Genre(id=_int(g.get("id")), name=_str(g.get("name")))
            for g in data.get("genres") or []
            if isinstance(g, dict)
        )
        countries = tuple(
            ProductionCountry(iso_3166_1=_str(c.get("iso_3166_1")), name=_str(c.get("name")))
            for c in data.get("production_countries") or []
            if isinstance(c, dict)
        )
        return cls(
            id=_int(data.get("id")),
            title=_str(data.get("title")),
            original_title=_str(data.get("original_title")),
            overview=_str(data.get("overview")),
            release_date=_str(data.get("release_date")),
            poster_path=_str(data.get("poster_path")),
            popularity=_float(data.get("popularity")),
            vote_average=_float(data.get("vote_average")),
            vote_count=_int(data.get("vote_count")),
            adult=bool(data.get("adult", False)),
            genres=genres,
            original_language=_str(data.get("original_language")),
            production_countries=countries,
            runtime=_int(data.get("runtime")),
            tagline=_str(data.get("tagline")),
            status=_str(data.get("status")),
            source=_str(data.get("source")),
            year=_int(data.get("year")),
            letterboxd_uri=_str(data.get("letterboxd_uri")),
        )

    @classmethod
    def from_details(cls, details: dict, entry: CatalogEntry) -> EnrichedRecord:
        """Stitch a details payload with the Letterboxd metadata of ``entry``."""
        stitched = dict(details)
        stitched["source"] = entry.source
        stitched["year"] = entry.year
        stitched["letterboxd_uri"] = entry.letterboxd_uri
        return cls.from_dict(stitched)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "original_title": self.original_title,
            "overview": self.overview,
            "release_date": self.release_date,
            "poster_path": self.poster_path,
            "popularity": self.popularity,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
            "adult": self.adult,
            "genres": [{"id": g.id, "name": g.name} for g in self.genres],
            "original_language": self.original_language,
            "production_countries": [
                {"iso_3166_1": c.iso_3166_1, "name": c.name} for c in self.production_countries
            ],
            "runtime": self.runtime,
            "tagline": self.tagline,
            "status": self.status,
            "source": self.source,
            "year": self.year,
            "letterboxd_uri": self.letterboxd_uri,
        }
