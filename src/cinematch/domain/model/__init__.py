"""Public domain model surface."""

from __future__ import annotations

from cinematch.domain.model.audit import FilmMerge, ReviewItem
from cinematch.domain.model.enums import (
    AnomalyKind,
    Decision,
    ItemStatus,
    MergeReason,
    MergeStatus,
    ResolutionOutcome,
    ReviewStatus,
    Severity,
    SourceTier,
)
from cinematch.domain.model.film import Film, Screening, SeasonFilm, new_id, utcnow
from cinematch.domain.model.health import (
    AnomalyReason,
    AnomalyReport,
    BaselineMetric,
    DailyCount,
)
from cinematch.domain.model.observation import (
    CandidateObservation,
    ExternalCandidate,
    SourceSignals,
)

__all__ = [  # noqa: RUF022
    # enums
    "AnomalyKind",
    "Decision",
    "ItemStatus",
    "MergeReason",
    "MergeStatus",
    "ResolutionOutcome",
    "ReviewStatus",
    "Severity",
    "SourceTier",
    # catalog
    "Film",
    "Screening",
    "SeasonFilm",
    "new_id",
    "utcnow",
    # audit
    "FilmMerge",
    "ReviewItem",
    # health
    "AnomalyReason",
    "AnomalyReport",
    "BaselineMetric",
    "DailyCount",
    # observations
    "CandidateObservation",
    "ExternalCandidate",
    "SourceSignals",
]
