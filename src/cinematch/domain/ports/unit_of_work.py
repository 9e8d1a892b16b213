"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from cinematch.domain.ports.persistence import (
        BaselineRepository,
        FilmRepository,
        MergeAuditRepository,
        ReviewQueueRepository,
        ScreeningRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Transaction boundary around a repository collection.

    Leaving the block with an exception rolls back; only ``commit`` persists.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories touched by identity resolution and merges."""

    films: FilmRepository
    screenings: ScreeningRepository
    merges: MergeAuditRepository
    reviews: ReviewQueueRepository


@dataclass(slots=True)
class HealthRepositories(RepositoryCollection):
    """Repositories read and written by listing-health checks."""

    screenings: ScreeningRepository
    baselines: BaselineRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
type HealthUnitOfWork = UnitOfWork[HealthRepositories]
type CatalogUnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
type HealthUnitOfWorkFactory = Callable[[], HealthUnitOfWork]
