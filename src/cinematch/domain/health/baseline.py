"""Rolling baselines from historical daily counts."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from cinematch.domain.model import BaselineMetric, SourceTier, utcnow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date, datetime

    from cinematch.domain.model import DailyCount

DEFAULT_MINIMUM_COUNT_GUARD = 3


def baseline_window(as_of: date, window_days: int) -> tuple[date, date]:
    """Inclusive ``(since, until)`` days of the window ending the day before ``as_of``."""

    if window_days < 1:
        raise ValueError(f"window_days must be positive, got {window_days}")
    until = as_of - timedelta(days=1)
    return until - timedelta(days=window_days - 1), until


def compute_baseline(
    source_id: str,
    daily_counts: Sequence[DailyCount],
    *,
    window_days: int,
    tier: SourceTier = SourceTier.STANDARD,
    minimum_count_guard: int = DEFAULT_MINIMUM_COUNT_GUARD,
    calculated_at: datetime | None = None,
) -> BaselineMetric:
    """Average the supplied daily counts; a source with no history averages zero.

    Days without any listings are simply absent from ``daily_counts``; they do
    not drag the mean down.
    """

    counts = [max(0, item.count) for item in daily_counts]
    average = sum(counts) / len(counts) if counts else 0.0
    return BaselineMetric(
        source_id=source_id,
        window_days=window_days,
        average=average,
        minimum_count_guard=minimum_count_guard,
        tier=tier,
        calculated_at=calculated_at or utcnow(),
    )
