from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from cinematch.domain.health import baseline_window, compute_baseline
from cinematch.domain.model import DailyCount, SourceTier


def test_baseline_is_mean_of_daily_counts() -> None:
    counts = [
        DailyCount(day=date(2026, 10, 1), count=10),
        DailyCount(day=date(2026, 10, 2), count=20),
        DailyCount(day=date(2026, 10, 3), count=36),
    ]
    calculated_at = datetime(2026, 10, 4, 6, tzinfo=UTC)

    baseline = compute_baseline(
        "bfi-southbank",
        counts,
        window_days=7,
        tier=SourceTier.SCRUTINIZED,
        calculated_at=calculated_at,
    )

    assert baseline.source_id == "bfi-southbank"
    assert baseline.average == pytest.approx(22.0)
    assert baseline.window_days == 7
    assert baseline.tier is SourceTier.SCRUTINIZED
    assert baseline.minimum_count_guard == 3
    assert baseline.calculated_at == calculated_at


def test_baseline_without_history_averages_zero() -> None:
    baseline = compute_baseline("new-venue", [], window_days=7)

    assert baseline.average == 0.0
    assert baseline.tier is SourceTier.STANDARD


def test_negative_counts_do_not_pull_the_mean_below_zero() -> None:
    baseline = compute_baseline(
        "odd-feed",
        [DailyCount(day=date(2026, 10, 1), count=-6), DailyCount(day=date(2026, 10, 2), count=6)],
        window_days=2,
    )

    assert baseline.average == pytest.approx(3.0)


def test_window_ends_the_day_before() -> None:
    assert baseline_window(date(2026, 10, 8), 7) == (date(2026, 10, 1), date(2026, 10, 7))
    assert baseline_window(date(2026, 3, 1), 1) == (date(2026, 2, 28), date(2026, 2, 28))


def test_window_must_be_positive() -> None:
    with pytest.raises(ValueError, match="window_days"):
        baseline_window(date(2026, 10, 8), 0)
