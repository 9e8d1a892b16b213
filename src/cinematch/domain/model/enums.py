"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Decision(StrEnum):
    AUTO_APPLY = "auto_apply"
    REVIEW = "review"
    REJECT = "reject"


class Severity(StrEnum):
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.HEALTHY: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
}


class SourceTier(StrEnum):
    """Sensitivity class of a listing source.

    Independent venues publish few listings and break quietly, so they are
    watched more closely than chains.
    """

    SCRUTINIZED = "scrutinized"
    STANDARD = "standard"


class AnomalyKind(StrEnum):
    ZERO_RESULTS = "zero_results"
    LOW_COUNT = "low_count"
    HIGH_COUNT = "high_count"


class MergeReason(StrEnum):
    EXTERNAL_ID_COLLISION = "external_id_collision"
    MANUAL = "manual"


class MergeStatus(StrEnum):
    MERGED = "merged"
    NOT_FOUND = "not_found"


class ReviewStatus(StrEnum):
    OPEN = "open"
    APPLIED = "applied"
    DISMISSED = "dismissed"


class ResolutionOutcome(StrEnum):
    BOUND = "bound"
    MERGED = "merged"
    QUEUED = "queued"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"


class ItemStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
