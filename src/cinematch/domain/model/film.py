"""Canonical film records and the listings that reference them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Film:
    """Single authoritative record for a real-world film.

    Films are created by ingestion; this package only enriches, binds and merges
    them. ``external_id`` is unique across all films.
    """

    # metadata copied onto a canonical film when it absorbs a duplicate
    MERGEABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "year",
        "imdb_id",
        "poster_url",
        "synopsis",
        "letterboxd_url",
    )

    title: str
    year: int | None = None
    external_id: str | None = None
    imdb_id: str | None = None
    poster_url: str | None = None
    synopsis: str | None = None
    letterboxd_url: str | None = None
    id: UUID = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or utcnow()

    def bind_external_id(
        self,
        external_id: str,
        *,
        year: int | None = None,
        synopsis: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Attach an external identity and fill in gaps it supplies."""

        self.external_id = external_id
        if self.year is None and year is not None:
            self.year = year
        if not self.synopsis and synopsis:
            self.synopsis = synopsis
        self.touch(now)

    def absorb_metadata(self, duplicate: Film) -> tuple[str, ...]:
        """Copy metadata this film lacks from ``duplicate``; return the names filled."""

        filled: list[str] = []
        for name in self.MERGEABLE_FIELDS:
            if getattr(self, name) in (None, "") and getattr(duplicate, name) not in (None, ""):
                setattr(self, name, getattr(duplicate, name))
                filled.append(name)
        return tuple(filled)


@dataclass(eq=False, kw_only=True)
class Screening:
    """One scraped showing of a film at a listing source."""

    film_id: UUID
    source_id: str
    starts_at: datetime
    booking_url: str | None = None
    scraped_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class SeasonFilm:
    """Membership of a film in a curated season (retrospective, festival strand)."""

    season_slug: str
    film_id: UUID
