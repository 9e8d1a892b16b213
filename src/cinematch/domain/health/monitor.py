"""Scheduled baseline recomputation and per-source health checks."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinematch.domain.model import Severity, SourceTier

from .anomaly import evaluate
from .baseline import DEFAULT_MINIMUM_COUNT_GUARD, baseline_window, compute_baseline
from .thresholds import DEFAULT_THRESHOLDS

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date, datetime

    from cinematch.domain.model import AnomalyReport, BaselineMetric
    from cinematch.domain.ports import HealthUnitOfWorkFactory

    from .thresholds import AnomalyThresholds

log = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7


@dataclass(frozen=True, slots=True)
class HealthCheckSummary:
    """Reports for every source with a baseline, worst first."""

    as_of: date
    reports: tuple[AnomalyReport, ...]

    @property
    def severity(self) -> Severity:
        return self.reports[0].severity if self.reports else Severity.HEALTHY

    @property
    def blocked_sources(self) -> tuple[str, ...]:
        return tuple(report.source_id for report in self.reports if report.should_block)

    def with_severity(self, severity: Severity) -> tuple[AnomalyReport, ...]:
        return tuple(report for report in self.reports if report.severity is severity)


def recompute_baselines(
    unit_of_work_factory: HealthUnitOfWorkFactory,
    *,
    as_of: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
    tiers: Mapping[str, SourceTier] | None = None,
    minimum_count_guard: int = DEFAULT_MINIMUM_COUNT_GUARD,
    now: datetime | None = None,
) -> list[BaselineMetric]:
    """Recompute the baseline of every source that has ever listed a screening.

    The window covers the ``window_days`` days before ``as_of``. A source keeps
    its stored tier and guard unless ``tiers`` names it explicitly.
    """

    since, until = baseline_window(as_of, window_days)
    overrides = tiers or {}
    saved: list[BaselineMetric] = []
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        for source_id in repositories.screenings.source_ids():
            existing = repositories.baselines.get(source_id)
            tier = overrides.get(source_id) or (existing.tier if existing else SourceTier.STANDARD)
            baseline = compute_baseline(
                source_id,
                repositories.screenings.daily_counts(source_id, since=since, until=until),
                window_days=window_days,
                tier=tier,
                minimum_count_guard=(
                    existing.minimum_count_guard if existing else minimum_count_guard
                ),
                calculated_at=now,
            )
            saved.append(repositories.baselines.save(baseline))
        uow.commit()

    log.info("Recomputed %d baselines for %s..%s", len(saved), since, until)
    return saved


def run_health_check(
    unit_of_work_factory: HealthUnitOfWorkFactory,
    *,
    as_of: date,
    thresholds: AnomalyThresholds = DEFAULT_THRESHOLDS,
    workers: int = 8,
) -> HealthCheckSummary:
    """Evaluate each source's count on ``as_of`` against its stored baseline.

    Counts are read up front; evaluations then run in parallel and are only
    combined once all of them have returned.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        baselines = list(repositories.baselines.list_all())
        observed = {
            baseline.source_id: repositories.screenings.count_on(baseline.source_id, as_of)
            for baseline in baselines
        }

    with ThreadPoolExecutor(
        max_workers=max(1, workers), thread_name_prefix="cinematch-health"
    ) as executor:
        futures = [
            executor.submit(
                evaluate, observed[baseline.source_id], baseline, thresholds=thresholds
            )
            for baseline in baselines
        ]
        reports = [future.result() for future in futures]

    reports.sort(key=lambda report: (-report.severity.rank, report.source_id))
    for report in reports:
        if report.is_healthy:
            continue
        level = logging.ERROR if report.severity is Severity.ERROR else logging.WARNING
        log.log(
            level,
            "Source %s: %d listings vs baseline %.1f (%s)",
            report.source_id,
            report.observed_count,
            report.baseline_average,
            "; ".join(report.descriptions),
        )
    return HealthCheckSummary(as_of=as_of, reports=tuple(reports))
