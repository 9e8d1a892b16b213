"""SQLAlchemy mapping metadata for the cinematch domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from cinematch.domain.model import (
    BaselineMetric,
    Film,
    FilmMerge,
    MergeReason,
    ReviewItem,
    ReviewStatus,
    Screening,
    SeasonFilm,
    SourceTier,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    """Store aware datetimes as UTC and hand them back aware."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog ---------------------------------------------------------------------

film_table = Table(
    "film",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("year", Integer, nullable=True),
    Column("external_id", String, nullable=True, unique=True),
    Column("imdb_id", String, nullable=True),
    Column("poster_url", String, nullable=True),
    Column("synopsis", Text, nullable=True),
    Column("letterboxd_url", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

screening_table = Table(
    "screening",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "film_id",
        UUIDColumnType,
        ForeignKey("film.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("source_id", String, nullable=False, index=True),
    Column("starts_at", UTCDateTime(), nullable=False),
    Column("booking_url", String, nullable=True),
    Column("scraped_at", UTCDateTime(), nullable=False, index=True),
    UniqueConstraint("film_id", "source_id", "starts_at"),
)

season_film_table = Table(
    "season_film",
    mapper_registry.metadata,
    Column("season_slug", String, primary_key=True),
    Column(
        "film_id",
        UUIDColumnType,
        ForeignKey("film.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Audit & review --------------------------------------------------------------

# no foreign keys: audit rows outlive both films
film_merge_table = Table(
    "film_merge",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("duplicate_id", UUIDColumnType, nullable=False),
    Column("canonical_id", UUIDColumnType, nullable=False, index=True),
    Column("merged_count", Integer, nullable=False),
    Column("reason", Enum(MergeReason, native_enum=False), nullable=False),
    Column("duplicate_title", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("created_by", String, nullable=True),
)

review_item_table = Table(
    "review_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "film_id",
        UUIDColumnType,
        ForeignKey("film.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("external_id", String, nullable=False),
    Column("candidate_title", String, nullable=True),
    Column("confidence", Float, nullable=False),
    Column("status", Enum(ReviewStatus, native_enum=False), nullable=False),
    Column("detected_at", UTCDateTime(), nullable=False),
)

# Listing health --------------------------------------------------------------

source_baseline_table = Table(
    "source_baseline",
    mapper_registry.metadata,
    Column("source_id", String, primary_key=True),
    Column("window_days", Integer, nullable=False),
    Column("average", Float, nullable=False),
    Column("minimum_count_guard", Integer, nullable=False),
    Column("tier", Enum(SourceTier, native_enum=False), nullable=False),
    Column("calculated_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Film, film_table)
    mapper_registry.map_imperatively(Screening, screening_table)
    mapper_registry.map_imperatively(SeasonFilm, season_film_table)
    mapper_registry.map_imperatively(FilmMerge, film_merge_table)
    mapper_registry.map_imperatively(ReviewItem, review_item_table)
    mapper_registry.map_imperatively(BaselineMetric, source_baseline_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
