"""Listing-health value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .enums import Severity, SourceTier

if TYPE_CHECKING:
    from datetime import date

    from .enums import AnomalyKind


@dataclass(frozen=True, slots=True)
class DailyCount:
    day: date
    count: int


@dataclass(eq=False, kw_only=True)
class BaselineMetric:
    """Expected daily listing count for a source over a trailing window.

    Recomputed on a schedule; anomaly evaluation only reads it.
    """

    source_id: str
    window_days: int
    average: float
    minimum_count_guard: int = 3
    tier: SourceTier = SourceTier.STANDARD
    calculated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass(frozen=True, slots=True)
class AnomalyReason:
    kind: AnomalyKind
    severity: Severity
    description: str


@dataclass(frozen=True, slots=True)
class AnomalyReport:
    source_id: str
    observed_count: int
    baseline_average: float
    percent_change: float
    severity: Severity
    reasons: tuple[AnomalyReason, ...] = ()
    should_block: bool = False

    @property
    def is_healthy(self) -> bool:
        return self.severity is Severity.HEALTHY

    @property
    def descriptions(self) -> tuple[str, ...]:
        return tuple(reason.description for reason in self.reasons)
