"""SQLAlchemy adapter package for cinematch."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyBaselineRepository,
    SqlAlchemyFilmRepository,
    SqlAlchemyMergeAuditRepository,
    SqlAlchemyReviewQueueRepository,
    SqlAlchemyScreeningRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyHealthUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyBaselineRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyFilmRepository",
    "SqlAlchemyHealthUnitOfWork",
    "SqlAlchemyMergeAuditRepository",
    "SqlAlchemyReviewQueueRepository",
    "SqlAlchemyScreeningRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
