"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    BaselineRepository,
    ChildReassignment,
    FilmRepository,
    MergeAuditRepository,
    Repository,
    ReviewQueueRepository,
    ScreeningRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    CatalogUnitOfWorkFactory,
    HealthRepositories,
    HealthUnitOfWork,
    HealthUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BaselineRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CatalogUnitOfWorkFactory",
    "ChildReassignment",
    "FilmRepository",
    "HealthRepositories",
    "HealthUnitOfWork",
    "HealthUnitOfWorkFactory",
    "MergeAuditRepository",
    "Repository",
    "RepositoryCollection",
    "ReviewQueueRepository",
    "ScreeningRepository",
    "UnitOfWork",
]
