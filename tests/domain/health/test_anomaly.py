from __future__ import annotations

import math

import pytest

from cinematch.domain.health import (
    AnomalyThresholds,
    TierThresholds,
    evaluate,
    percent_change,
)
from cinematch.domain.model import AnomalyKind, BaselineMetric, Severity, SourceTier


def _baseline(
    average: float,
    *,
    tier: SourceTier = SourceTier.STANDARD,
    guard: int = 3,
) -> BaselineMetric:
    return BaselineMetric(
        source_id="curzon-soho",
        window_days=7,
        average=average,
        minimum_count_guard=guard,
        tier=tier,
    )


def test_zero_observed_is_an_error() -> None:
    report = evaluate(0, _baseline(20), SourceTier.STANDARD)

    assert report.severity is Severity.ERROR
    assert AnomalyKind.ZERO_RESULTS in {reason.kind for reason in report.reasons}
    assert any("zero observed" in description for description in report.descriptions)
    assert report.should_block is True


def test_small_drop_on_standard_tier_is_healthy() -> None:
    report = evaluate(45, _baseline(50), SourceTier.STANDARD)

    assert report.severity is Severity.HEALTHY
    assert report.reasons == ()
    assert report.percent_change == pytest.approx(-10.0)
    assert report.is_healthy


def test_scrutinized_drop_is_an_error() -> None:
    report = evaluate(8, _baseline(20), SourceTier.SCRUTINIZED)

    assert report.severity is Severity.ERROR
    assert [reason.kind for reason in report.reasons] == [AnomalyKind.LOW_COUNT]
    assert report.percent_change == pytest.approx(-60.0)
    assert report.should_block is False


def test_same_drop_on_standard_tier_is_a_warning() -> None:
    report = evaluate(8, _baseline(20), SourceTier.STANDARD)

    assert report.severity is Severity.WARNING
    assert [reason.kind for reason in report.reasons] == [AnomalyKind.LOW_COUNT]


def test_tier_defaults_to_baseline_tier() -> None:
    report = evaluate(8, _baseline(20, tier=SourceTier.SCRUTINIZED))

    assert report.severity is Severity.ERROR


def test_drop_below_guard_is_ignored() -> None:
    report = evaluate(1, _baseline(2.5, guard=3), SourceTier.SCRUTINIZED)

    assert report.severity is Severity.HEALTHY


def test_severe_drop_requests_block() -> None:
    report = evaluate(3, _baseline(20), SourceTier.STANDARD)

    assert report.percent_change == pytest.approx(-85.0)
    assert report.severity is Severity.WARNING
    assert report.should_block is True


def test_drop_of_exactly_block_percent_does_not_block() -> None:
    report = evaluate(4, _baseline(20), SourceTier.STANDARD)

    assert report.percent_change == pytest.approx(-80.0)
    assert report.severity is Severity.WARNING
    assert report.should_block is False


def test_spike_warns_about_duplicate_ingestion() -> None:
    report = evaluate(45, _baseline(20), SourceTier.STANDARD)

    assert report.severity is Severity.WARNING
    assert [reason.kind for reason in report.reasons] == [AnomalyKind.HIGH_COUNT]
    assert "possible duplicate ingestion" in report.descriptions[0]


def test_relative_spike_on_tiny_baseline_needs_absolute_margin() -> None:
    # +200 % but only 4 listings above the baseline
    report = evaluate(6, _baseline(2), SourceTier.STANDARD)

    assert report.severity is Severity.HEALTHY


def test_zero_baseline_uses_sentinel_percent_change() -> None:
    empty = evaluate(0, _baseline(0))
    assert empty.percent_change == 0.0
    assert empty.severity is Severity.HEALTHY

    fresh = evaluate(25, _baseline(0))
    assert fresh.percent_change == 100.0
    assert math.isfinite(fresh.percent_change)
    # +100 % is not strictly above the spike threshold
    assert fresh.severity is Severity.HEALTHY


def test_negative_observed_count_is_clamped() -> None:
    report = evaluate(-4, _baseline(20), SourceTier.STANDARD)

    assert report.observed_count == 0
    assert report.severity is Severity.ERROR


def test_zero_observed_fires_drop_as_well() -> None:
    report = evaluate(0, _baseline(20), SourceTier.STANDARD)

    kinds = [reason.kind for reason in report.reasons]
    assert kinds == [AnomalyKind.ZERO_RESULTS, AnomalyKind.LOW_COUNT]
    assert report.severity is Severity.ERROR


def test_custom_thresholds_are_respected() -> None:
    thresholds = AnomalyThresholds(
        tiers={
            SourceTier.STANDARD: TierThresholds(drop_percent=5.0, drop_severity=Severity.ERROR),
            SourceTier.SCRUTINIZED: TierThresholds(
                drop_percent=1.0, drop_severity=Severity.ERROR
            ),
        }
    )

    report = evaluate(45, _baseline(50), SourceTier.STANDARD, thresholds=thresholds)

    assert report.severity is Severity.ERROR


def test_missing_tier_thresholds_raise() -> None:
    thresholds = AnomalyThresholds(tiers={})

    with pytest.raises(ValueError, match="No anomaly thresholds"):
        evaluate(10, _baseline(10), SourceTier.STANDARD, thresholds=thresholds)


@pytest.mark.parametrize(
    ("observed", "average", "expected"),
    [(10, 20, -50.0), (30, 20, 50.0), (0, 0, 0.0), (5, 0, 100.0), (0, 4, -100.0)],
)
def test_percent_change(observed: int, average: float, expected: float) -> None:
    assert percent_change(observed, average) == pytest.approx(expected)
