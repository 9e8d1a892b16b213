"""Atomic folding of a duplicate film into its canonical record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinematch.domain.errors import SelfMergeError
from cinematch.domain.model import FilmMerge, MergeReason, MergeStatus, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from cinematch.domain.ports import CatalogRepositories, CatalogUnitOfWorkFactory

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of a merge; counts are zero unless ``status`` is ``merged``."""

    status: MergeStatus
    duplicate_id: UUID
    canonical_id: UUID
    screenings_moved: int = 0
    screenings_dropped: int = 0
    seasons_moved: int = 0
    reviews_moved: int = 0
    fields_copied: tuple[str, ...] = ()

    @property
    def merged(self) -> bool:
        return self.status is MergeStatus.MERGED

    @property
    def merged_count(self) -> int:
        return self.screenings_moved + self.seasons_moved + self.reviews_moved


def merge_films(
    unit_of_work_factory: CatalogUnitOfWorkFactory,
    duplicate_id: UUID,
    canonical_id: UUID,
    *,
    reason: MergeReason = MergeReason.MANUAL,
    created_by: str | None = None,
    now: datetime | None = None,
) -> MergeResult:
    """Merge ``duplicate_id`` into ``canonical_id`` in a single transaction.

    Raises ``SelfMergeError`` when both ids are equal. When either film no
    longer exists the result has status ``not_found`` and nothing changes, so
    repeating a finished merge is harmless. Persistence failures roll back the
    whole merge and surface as ``RetryableError`` from the unit of work.
    """

    if duplicate_id == canonical_id:
        raise SelfMergeError(duplicate_id)

    with unit_of_work_factory() as uow:
        result = merge_within(
            uow.repositories,
            duplicate_id,
            canonical_id,
            reason=reason,
            created_by=created_by,
            now=now,
        )
        if result.merged:
            uow.commit()
    return result


def merge_within(
    repositories: CatalogRepositories,
    duplicate_id: UUID,
    canonical_id: UUID,
    *,
    reason: MergeReason = MergeReason.MANUAL,
    created_by: str | None = None,
    now: datetime | None = None,
) -> MergeResult:
    """Perform a merge inside a caller-owned transaction without committing it."""

    if duplicate_id == canonical_id:
        raise SelfMergeError(duplicate_id)

    films = repositories.films.get_many_for_update((duplicate_id, canonical_id))
    duplicate = films.get(duplicate_id)
    canonical = films.get(canonical_id)
    if duplicate is None or canonical is None:
        missing = duplicate_id if duplicate is None else canonical_id
        log.info("Merge %s -> %s skipped: film %s not found", duplicate_id, canonical_id, missing)
        return MergeResult(
            status=MergeStatus.NOT_FOUND,
            duplicate_id=duplicate_id,
            canonical_id=canonical_id,
        )

    reassignment = repositories.films.reassign_children(duplicate.id, canonical.id)
    copied = list(canonical.absorb_metadata(duplicate))
    duplicate_external_id = duplicate.external_id
    duplicate_title = duplicate.title

    # the duplicate must be gone before its external id may move
    repositories.films.remove(duplicate)
    if canonical.external_id is None and duplicate_external_id is not None:
        canonical.external_id = duplicate_external_id
        copied.append("external_id")

    timestamp = now or utcnow()
    canonical.touch(timestamp)
    repositories.merges.add(
        FilmMerge(
            duplicate_id=duplicate_id,
            canonical_id=canonical_id,
            merged_count=reassignment.moved,
            reason=reason,
            duplicate_title=duplicate_title,
            created_at=timestamp,
            created_by=created_by,
        )
    )
    log.info(
        "Merged film %s (%r) into %s: %d screenings moved, %d dropped, %d seasons moved",
        duplicate_id,
        duplicate_title,
        canonical_id,
        reassignment.screenings_moved,
        reassignment.screenings_dropped,
        reassignment.seasons_moved,
    )
    return MergeResult(
        status=MergeStatus.MERGED,
        duplicate_id=duplicate_id,
        canonical_id=canonical_id,
        screenings_moved=reassignment.screenings_moved,
        screenings_dropped=reassignment.screenings_dropped,
        seasons_moved=reassignment.seasons_moved,
        reviews_moved=reassignment.reviews_moved,
        fields_copied=tuple(copied),
    )
