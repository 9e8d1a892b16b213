"""Classify a source's observed daily count against its baseline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cinematch.domain.model import AnomalyKind, AnomalyReason, AnomalyReport, Severity

from .thresholds import DEFAULT_THRESHOLDS

if TYPE_CHECKING:
    from cinematch.domain.model import BaselineMetric, SourceTier

    from .thresholds import AnomalyThresholds


def percent_change(observed: float, average: float) -> float:
    """Relative change in percent; +100 or 0 when there is no baseline to divide by."""

    if average <= 0:
        return 100.0 if observed > 0 else 0.0
    return (observed - average) / average * 100


def evaluate(
    observed_count: int,
    baseline: BaselineMetric,
    tier: SourceTier | None = None,
    *,
    thresholds: AnomalyThresholds = DEFAULT_THRESHOLDS,
) -> AnomalyReport:
    """Evaluate one source; stateless and never raises for numeric input.

    Every rule is checked independently. The report's severity is the worst
    severity among the rules that fired and its reasons are all of theirs.
    """

    tier_thresholds = thresholds.for_tier(tier if tier is not None else baseline.tier)
    observed = max(0, observed_count)
    average = max(0.0, baseline.average)
    change = percent_change(observed, average)
    guarded = average >= baseline.minimum_count_guard

    reasons: list[AnomalyReason] = []
    should_block = False

    if observed == 0 and average > 0:
        reasons.append(
            AnomalyReason(
                kind=AnomalyKind.ZERO_RESULTS,
                severity=Severity.ERROR,
                description=f"zero observed (expected about {average:.1f})",
            )
        )
        should_block = True

    if change < -tier_thresholds.drop_percent and guarded:
        reasons.append(
            AnomalyReason(
                kind=AnomalyKind.LOW_COUNT,
                severity=tier_thresholds.drop_severity,
                description=(
                    f"{abs(change):.0f}% below baseline "
                    f"(threshold {tier_thresholds.drop_percent:.0f}%)"
                ),
            )
        )
        if change < -tier_thresholds.block_percent:
            should_block = True

    if change > thresholds.spike_percent and observed > average + thresholds.spike_margin:
        reasons.append(
            AnomalyReason(
                kind=AnomalyKind.HIGH_COUNT,
                severity=Severity.WARNING,
                description=f"{change:.0f}% above baseline, possible duplicate ingestion",
            )
        )

    severity = max(
        (reason.severity for reason in reasons),
        key=lambda item: item.rank,
        default=Severity.HEALTHY,
    )
    return AnomalyReport(
        source_id=baseline.source_id,
        observed_count=observed,
        baseline_average=average,
        percent_change=change,
        severity=severity,
        reasons=tuple(reasons),
        should_block=should_block,
    )
