from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from cinematch.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyHealthUnitOfWork,
    shutdown,
    startup,
)
from cinematch.domain.model import Film, SourceTier
from cinematch.ui.cli import main
from tests.helpers.catalog import make_screening, seed_catalog

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def file_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    uri = f"sqlite+pysqlite:///{tmp_path / 'cinematch.db'}"
    monkeypatch.setenv("DATABASE_URI", uri)
    monkeypatch.setenv("CINEMATCH_WORKERS", "1")
    monkeypatch.setenv("CINEMATCH_MIN_CALL_DELAY", "0")
    shutdown()
    startup(database_uri=uri)
    yield uri
    shutdown()


@pytest.mark.parametrize(
    "argv",
    [
        ["merge", "--duplicate", "not-a-uuid", "--canonical", "also-not"],
        ["health", "--as-of", "yesterday"],
        ["baselines", "--scrutinized", "rio", "--standard", "rio"],
    ],
)
def test_invalid_arguments_exit_with_usage_code(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == 2


def test_missing_observation_file_exits_with_usage_code(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["resolve", str(tmp_path / "absent.jsonl")])

    assert excinfo.value.code == 2


@pytest.mark.integration
def test_resolve_applies_good_lines_and_reports_bad_ones(
    file_database: str, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _ = file_database
    film = Film(title="The Godfather")
    seed_catalog(SqlAlchemyCatalogUnitOfWork, films=(film,))
    feed = tmp_path / "observations.jsonl"
    good = {
        "filmId": str(film.id),
        "rawTitle": "The Godfather",
        "rawYear": 1972,
        "externalCandidates": [
            {"externalId": "tmdb:238", "candidateTitle": "The Godfather", "candidateYear": 1972}
        ],
        "sourceSignals": {
            "sourceCount": 3,
            "hasPoster": True,
            "hasSynopsis": True,
            "hasLetterboxd": True,
            "hasImdb": True,
        },
    }
    feed.write_text(json.dumps(good) + "\n\n{not json}\n", encoding="utf-8")

    with caplog.at_level(logging.INFO):
        main(["resolve", str(feed)])

    with SqlAlchemyCatalogUnitOfWork() as uow:
        stored = uow.repositories.films.get(film.id)
    assert stored is not None
    assert stored.external_id == "tmdb:238"
    assert "1 succeeded, 1 failed, 0 skipped" in caplog.text
    assert "Observation #2 failed" in caplog.text


@pytest.mark.integration
def test_merge_command_folds_films(file_database: str) -> None:
    _ = file_database
    canonical = Film(title="Stalker", year=1979)
    duplicate = Film(title="Stalker (35mm)")
    seed_catalog(
        SqlAlchemyCatalogUnitOfWork,
        films=(canonical, duplicate),
        screenings=(make_screening(duplicate),),
    )

    main(
        ["merge", "--duplicate", str(duplicate.id), "--canonical", str(canonical.id), "--by", "ops"]
    )

    with SqlAlchemyCatalogUnitOfWork() as uow:
        assert uow.repositories.films.get(duplicate.id) is None
        assert uow.repositories.screenings.count_for_film(canonical.id) == 1
        audit = uow.repositories.merges.for_canonical(canonical.id)
    assert [entry.created_by for entry in audit] == ["ops"]


@pytest.mark.integration
def test_baselines_then_health_flags_silent_source(
    file_database: str, caplog: pytest.LogCaptureFixture
) -> None:
    _ = file_database
    film = Film(title="Daisies")
    as_of = datetime(2026, 10, 10, tzinfo=UTC)
    screenings = tuple(
        make_screening(
            film,
            source_id="castle-cinema",
            offset_hours=day * 24 + slot,
            scraped_at=as_of - timedelta(days=day, hours=-6),
        )
        for day in range(1, 8)
        for slot in range(5)
    )
    seed_catalog(SqlAlchemyCatalogUnitOfWork, films=(film,), screenings=screenings)

    main(["baselines", "--as-of", "2026-10-10", "--scrutinized", "castle-cinema"])

    with SqlAlchemyHealthUnitOfWork() as uow:
        baseline = uow.repositories.baselines.get("castle-cinema")
    assert baseline is not None
    assert baseline.tier is SourceTier.SCRUTINIZED
    assert baseline.average == pytest.approx(5.0)

    with caplog.at_level(logging.INFO):
        main(["health", "--as-of", "2026-10-10"])

    assert "blocked=castle-cinema" in caplog.text


def _observation_json(film: Film, external_id: str, title: str, year: int) -> bytes:
    payload = {
        "filmId": str(film.id),
        "rawTitle": title,
        "rawYear": year,
        "externalCandidates": [
            {"externalId": external_id, "candidateTitle": title, "candidateYear": year}
        ],
        "sourceSignals": {
            "sourceCount": 3,
            "hasPoster": True,
            "hasSynopsis": True,
            "hasLetterboxd": True,
            "hasImdb": True,
        },
    }
    return json.dumps(payload).encode()


@pytest.mark.integration
def test_resolve_survives_undecodable_line(
    file_database: str, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _ = file_database
    first = Film(title="The Godfather")
    second = Film(title="The Godfather Part II")
    seed_catalog(SqlAlchemyCatalogUnitOfWork, films=(first, second))
    feed = tmp_path / "observations.jsonl"
    feed.write_bytes(
        _observation_json(first, "tmdb:238", "The Godfather", 1972)
        + b"\n\xff\xfe bad line\n"
        + _observation_json(second, "tmdb:240", "The Godfather Part II", 1974)
        + b"\n"
    )

    with caplog.at_level(logging.INFO):
        main(["resolve", str(feed)])

    with SqlAlchemyCatalogUnitOfWork() as uow:
        bound = {
            film.id: uow.repositories.films.get(film.id) for film in (first, second)
        }
    assert [film.external_id for film in bound.values() if film] == ["tmdb:238", "tmdb:240"]
    assert "2 succeeded, 1 failed, 0 skipped" in caplog.text
    assert "Observation #2 failed" in caplog.text
