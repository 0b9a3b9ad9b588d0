from __future__ import annotations

import json
from pathlib import Path

import pytest

import src.data.merge as merge
import src.scripts.enrich_export as enrich_export
import src.scripts.import_catalog as import_catalog


class FakeTmdbClient:
    instances: list[FakeTmdbClient] = []

    def __init__(self, settings) -> None:
        self.settings = settings
        FakeTmdbClient.instances.append(self)

    def search_movie(self, title: str, year: int) -> int:
        return 949

    def get_movie_details(self, tmdb_id: int) -> dict:
        return {
            "id": tmdb_id,
            "title": "Heat",
            "runtime": 170,
            "production_countries": [
                {"iso_3166_1": "US", "name": "United States of America"},
                {"iso_3166_1": "GB", "name": "United Kingdom"},
            ],
        }


def _export(tmp_path: Path) -> Path:
    export_dir = tmp_path / "export"
    export_dir.mkdir()
    (export_dir / "watched.csv").write_text("Date,Name,Year,Letterboxd URI\n2024-01-05,Heat,1995,https://boxd.it/29Jg\n")
    (export_dir / "watchlist.csv").write_text("Date,Name,Year,Letterboxd URI\n")
    return export_dir


def test_exits_non_zero_without_api_key(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("TMDB_API_KEY", raising=False)

    code = enrich_export.main(["--export-dir", str(_export(tmp_path)), "--output", str(tmp_path / "out.json")])

    assert code == 1
    assert not (tmp_path / "out.json").exists()


def test_exits_non_zero_on_corrupt_artifact(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TMDB_API_KEY", "test-key")
    output = tmp_path / "out.json"
    output.write_text("not json")

    code = enrich_export.main(["--export-dir", str(_export(tmp_path)), "--output", str(output)])

    assert code == 1
    assert output.read_text() == "not json"


def test_enrich_then_import(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setenv("TMDB_API_KEY", "test-key")
    monkeypatch.setattr(merge, "TmdbClient", FakeTmdbClient)
    output = tmp_path / "out.json"

    code = enrich_export.main([
        "--export-dir", str(_export(tmp_path)),
        "--output", str(output),
        "--concurrency", "2",
    ])

    assert code == 0
    assert FakeTmdbClient.instances[-1].settings.max_concurrent_requests == 2
    (movie,) = json.loads(output.read_text())
    assert movie["source"] == "watched"
    assert movie["letterboxd_uri"] == "https://boxd.it/29Jg"
    assert "Processing complete: 0 existing, 1 new, 0 errors" in capsys.readouterr().out

    catalog = tmp_path / "movies.parquet"
    code = import_catalog.main(["--input", str(output), "--catalog", str(catalog)])

    assert code == 0
    out = capsys.readouterr().out
    assert "Average runtime (watched): 170.0 min" in out
    assert "United States of America: 1" in out
    assert catalog.exists()
