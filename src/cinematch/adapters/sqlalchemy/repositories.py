"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, exists, func, select, update

from cinematch.adapters.sqlalchemy.mappings import (
    film_merge_table,
    film_table,
    review_item_table,
    screening_table,
    season_film_table,
    source_baseline_table,
)
from cinematch.domain.model import (
    BaselineMetric,
    DailyCount,
    Film,
    FilmMerge,
    ReviewItem,
    ReviewStatus,
    Screening,
    SeasonFilm,
)
from cinematch.domain.ports import ChildReassignment

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from uuid import UUID

    from sqlalchemy import CursorResult, Executable
    from sqlalchemy.orm import Session


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)


class SqlAlchemyFilmRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Film) -> None:
        self.session.add(entity)

    def get(self, film_id: UUID, *, lock: bool = False) -> Film | None:
        if lock:
            return self.session.get(Film, film_id, with_for_update=True)
        return self.session.get(Film, film_id)

    def get_many_for_update(self, film_ids: Sequence[UUID]) -> dict[UUID, Film]:
        """Lock the given films in id order so concurrent merges cannot deadlock."""

        stmt = (
            select(Film)
            .where(film_table.c.id.in_(sorted(set(film_ids))))
            .order_by(film_table.c.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {film.id: film for film in self.session.execute(stmt).scalars()}

    def get_by_external_id(self, external_id: str) -> Film | None:
        stmt = select(Film).where(film_table.c.external_id == external_id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def remove(self, film: Film) -> None:
        self.session.delete(film)
        # flushed now so a unique value it held can be reused in this transaction
        self.session.flush()

    def reassign_children(self, from_id: UUID, to_id: UUID) -> ChildReassignment:
        """Point every child row of ``from_id`` at ``to_id``.

        Rows that would duplicate a row the target already has (same source and
        start time, or same season) are deleted instead of moved.
        """

        self.session.flush()

        canonical_screening = screening_table.alias("canonical_screening")
        screening_clash = exists().where(
            canonical_screening.c.film_id == to_id,
            canonical_screening.c.source_id == screening_table.c.source_id,
            canonical_screening.c.starts_at == screening_table.c.starts_at,
        )
        screenings_dropped = self._rowcount(
            delete(screening_table).where(screening_table.c.film_id == from_id, screening_clash)
        )
        screenings_moved = self._rowcount(
            update(screening_table)
            .where(screening_table.c.film_id == from_id)
            .values(film_id=to_id)
        )

        canonical_season = season_film_table.alias("canonical_season")
        season_clash = exists().where(
            canonical_season.c.film_id == to_id,
            canonical_season.c.season_slug == season_film_table.c.season_slug,
        )
        seasons_dropped = self._rowcount(
            delete(season_film_table).where(season_film_table.c.film_id == from_id, season_clash)
        )
        seasons_moved = self._rowcount(
            update(season_film_table)
            .where(season_film_table.c.film_id == from_id)
            .values(film_id=to_id)
        )

        reviews_moved = self._rowcount(
            update(review_item_table)
            .where(review_item_table.c.film_id == from_id)
            .values(film_id=to_id)
        )

        self._expire_children()
        return ChildReassignment(
            screenings_moved=screenings_moved,
            screenings_dropped=screenings_dropped,
            seasons_moved=seasons_moved,
            seasons_dropped=seasons_dropped,
            reviews_moved=reviews_moved,
        )

    def _rowcount(self, statement: Executable) -> int:
        result = cast("CursorResult[tuple[()]]", self.session.execute(statement))
        return max(0, result.rowcount)

    def _expire_children(self) -> None:
        # bulk statements bypass the identity map; reload children on next access
        for instance in list(self.session.identity_map.values()):
            if isinstance(instance, Screening | SeasonFilm | ReviewItem):
                self.session.expire(instance)


class SqlAlchemyScreeningRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Screening) -> None:
        self.session.add(entity)

    def count_for_film(self, film_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(screening_table)
            .where(screening_table.c.film_id == film_id)
        )
        return self.session.execute(stmt).scalar_one()

    def source_ids(self) -> list[str]:
        stmt = select(screening_table.c.source_id).distinct().order_by(screening_table.c.source_id)
        return list(self.session.execute(stmt).scalars())

    def count_on(self, source_id: str, day: date) -> int:
        """Number of screenings ``source_id`` listed in scrapes taken on ``day`` (UTC)."""

        start, end = _day_bounds(day)
        stmt = (
            select(func.count())
            .select_from(screening_table)
            .where(screening_table.c.source_id == source_id)
            .where(screening_table.c.scraped_at >= start)
            .where(screening_table.c.scraped_at < end)
        )
        return self.session.execute(stmt).scalar_one()

    def daily_counts(self, source_id: str, *, since: date, until: date) -> list[DailyCount]:
        """Per-day counts between ``since`` and ``until`` inclusive, omitting empty days."""

        counts: list[DailyCount] = []
        day = since
        while day <= until:
            count = self.count_on(source_id, day)
            if count:
                counts.append(DailyCount(day=day, count=count))
            day += timedelta(days=1)
        return counts


class SqlAlchemyBaselineRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, source_id: str) -> BaselineMetric | None:
        return self.session.get(BaselineMetric, source_id)

    def save(self, baseline: BaselineMetric) -> BaselineMetric:
        return self.session.merge(baseline)

    def list_all(self) -> list[BaselineMetric]:
        stmt = select(BaselineMetric).order_by(source_baseline_table.c.source_id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyMergeAuditRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: FilmMerge) -> None:
        self.session.add(entity)

    def for_canonical(self, canonical_id: UUID) -> list[FilmMerge]:
        stmt = (
            select(FilmMerge)
            .where(film_merge_table.c.canonical_id == canonical_id)
            .order_by(film_merge_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyReviewQueueRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ReviewItem) -> None:
        self.session.add(entity)

    def list_open(self) -> list[ReviewItem]:
        stmt = (
            select(ReviewItem)
            .where(review_item_table.c.status == ReviewStatus.OPEN)
            .order_by(review_item_table.c.detected_at)
        )
        return list(self.session.execute(stmt).scalars())

    def find_open(self, film_id: UUID, external_id: str) -> ReviewItem | None:
        stmt = (
            select(ReviewItem)
            .where(review_item_table.c.film_id == film_id)
            .where(review_item_table.c.external_id == external_id)
            .where(review_item_table.c.status == ReviewStatus.OPEN)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


if TYPE_CHECKING:
    from cinematch.domain.ports import (
        BaselineRepository,
        FilmRepository,
        MergeAuditRepository,
        ReviewQueueRepository,
        ScreeningRepository,
    )

    _session_stub = cast("Session", object())
    _film_repo: FilmRepository = SqlAlchemyFilmRepository(_session_stub)
    _screening_repo: ScreeningRepository = SqlAlchemyScreeningRepository(_session_stub)
    _baseline_repo: BaselineRepository = SqlAlchemyBaselineRepository(_session_stub)
    _merge_repo: MergeAuditRepository = SqlAlchemyMergeAuditRepository(_session_stub)
    _review_repo: ReviewQueueRepository = SqlAlchemyReviewQueueRepository(_session_stub)
