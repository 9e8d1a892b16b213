"""Audit and review records produced by resolution decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from .enums import MergeReason, ReviewStatus


@dataclass(eq=False, kw_only=True)
class FilmMerge:
    """Audit record for folding a duplicate film into its canonical counterpart."""

    duplicate_id: UUID
    canonical_id: UUID
    merged_count: int
    reason: MergeReason = MergeReason.MANUAL
    duplicate_title: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    created_by: str | None = None
    id: UUID = field(default_factory=uuid4)


@dataclass(eq=False, kw_only=True)
class ReviewItem:
    """A plausible but uncertain match parked for a human decision."""

    film_id: UUID
    external_id: str
    candidate_title: str | None
    confidence: float
    status: ReviewStatus = ReviewStatus.OPEN
    detected_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    id: UUID = field(default_factory=uuid4)
