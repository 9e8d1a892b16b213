"""Ephemeral inputs to identity resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class ExternalCandidate:
    """A single identity proposal from an external oracle."""

    external_id: str
    candidate_title: str | None
    candidate_year: int | None = None
    overview: str | None = None


@dataclass(frozen=True, slots=True)
class SourceSignals:
    """Corroborating evidence gathered alongside a candidate."""

    source_count: int = 0
    has_poster: bool = False
    has_synopsis: bool = False
    has_letterboxd: bool = False
    has_imdb: bool = False


@dataclass(frozen=True, slots=True)
class CandidateObservation:
    """A scraped title awaiting resolution against oracle-ranked candidates."""

    raw_title: str | None
    raw_year: int | None = None
    external_candidates: tuple[ExternalCandidate, ...] = ()
    source_signals: SourceSignals = field(default_factory=SourceSignals)
    film_id: UUID | None = None
