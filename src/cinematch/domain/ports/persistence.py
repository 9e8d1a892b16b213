"""Ports for persisting films, listings and health metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cinematch.domain.model import (
    BaselineMetric,
    Film,
    FilmMerge,
    ReviewItem,
    Screening,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from uuid import UUID

    from cinematch.domain.model import DailyCount


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@dataclass(frozen=True, slots=True)
class ChildReassignment:
    """What happened to a duplicate film's child rows during a merge."""

    screenings_moved: int = 0
    screenings_dropped: int = 0
    seasons_moved: int = 0
    seasons_dropped: int = 0
    reviews_moved: int = 0

    @property
    def moved(self) -> int:
        return self.screenings_moved + self.seasons_moved + self.reviews_moved


@runtime_checkable
class FilmRepository(Repository[Film], Protocol):
    """Persistence contract for canonical films."""

    def get(self, film_id: UUID, *, lock: bool = False) -> Film | None: ...

    def get_many_for_update(self, film_ids: Sequence[UUID]) -> dict[UUID, Film]: ...

    def get_by_external_id(self, external_id: str) -> Film | None: ...

    def remove(self, film: Film) -> None: ...

    def reassign_children(self, from_id: UUID, to_id: UUID) -> ChildReassignment: ...


@runtime_checkable
class ScreeningRepository(Repository[Screening], Protocol):
    """Persistence contract for screenings and the counts derived from them."""

    def count_for_film(self, film_id: UUID) -> int: ...

    def source_ids(self) -> list[str]: ...

    def count_on(self, source_id: str, day: date) -> int: ...

    def daily_counts(self, source_id: str, *, since: date, until: date) -> list[DailyCount]: ...


@runtime_checkable
class BaselineRepository(Protocol):
    """Persistence contract for per-source baselines, keyed by ``source_id``."""

    def get(self, source_id: str) -> BaselineMetric | None: ...

    def save(self, baseline: BaselineMetric) -> BaselineMetric: ...

    def list_all(self) -> Sequence[BaselineMetric]: ...


@runtime_checkable
class MergeAuditRepository(Repository[FilmMerge], Protocol):
    def for_canonical(self, canonical_id: UUID) -> list[FilmMerge]: ...


@runtime_checkable
class ReviewQueueRepository(Repository[ReviewItem], Protocol):
    def list_open(self) -> list[ReviewItem]: ...
    def find_open(self, film_id: UUID, external_id: str) -> ReviewItem | None: ...
