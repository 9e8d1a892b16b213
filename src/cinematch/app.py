"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from cinematch.adapters.observations import parse_observation_line
from cinematch.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyHealthUnitOfWork,
    is_started,
    startup,
)
from cinematch.config import get_health_config, get_matching_config
from cinematch.domain.batch import BatchRunner
from cinematch.domain.health import recompute_baselines, run_health_check
from cinematch.domain.matching import DecisionPolicy
from cinematch.domain.merge import merge_films
from cinematch.domain.model import utcnow
from cinematch.domain.resolution import FilmResolver

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterable, Mapping
    from datetime import date
    from uuid import UUID

    from cinematch.config import HealthConfig, MatchingConfig
    from cinematch.domain.batch import BatchReport
    from cinematch.domain.health import HealthCheckSummary
    from cinematch.domain.merge import MergeResult
    from cinematch.domain.model import BaselineMetric, SourceTier
    from cinematch.domain.ports import CatalogUnitOfWorkFactory, HealthUnitOfWorkFactory
    from cinematch.domain.resolution import ResolutionResult

log = getLogger(__name__)

RESOLVER_ACTOR = "cinematch-resolve"


def _ensure_started() -> None:
    if not is_started():
        startup()


def resolve_observations(
    lines: Iterable[str | bytes],
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    config: MatchingConfig | None = None,
    stop_event: threading.Event | None = None,
) -> BatchReport[ResolutionResult]:
    """Parse, score and apply each JSONL observation; one bad line fails only itself."""

    effective_config = config or get_matching_config()
    if unit_of_work_factory is None:
        _ensure_started()
    resolver = FilmResolver(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
        policy=DecisionPolicy(
            auto_apply_threshold=effective_config.auto_apply_threshold,
            review_floor=effective_config.review_floor,
        ),
        created_by=RESOLVER_ACTOR,
    )

    def handle(line: str | bytes) -> ResolutionResult:
        return resolver.resolve(parse_observation_line(line))

    log.info(
        "Starting resolution: workers=%s, min_call_delay=%ss, auto_apply>%s, review>%s",
        effective_config.workers,
        effective_config.min_call_delay_seconds,
        effective_config.auto_apply_threshold,
        effective_config.review_floor,
    )
    runner = BatchRunner(
        handle,
        workers=effective_config.workers,
        min_call_delay=effective_config.min_call_delay_seconds,
        stop_event=stop_event,
    )
    return runner.run(lines)


def merge_duplicate_film(
    duplicate_id: UUID,
    canonical_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    created_by: str | None = None,
) -> MergeResult:
    """Manually fold one film into another."""

    if unit_of_work_factory is None:
        _ensure_started()
    return merge_films(
        unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
        duplicate_id,
        canonical_id,
        created_by=created_by,
    )


def recompute_source_baselines(
    *,
    as_of: date | None = None,
    tiers: Mapping[str, SourceTier] | None = None,
    unit_of_work_factory: HealthUnitOfWorkFactory | None = None,
    config: HealthConfig | None = None,
) -> list[BaselineMetric]:
    effective_config = config or get_health_config()
    if unit_of_work_factory is None:
        _ensure_started()
    return recompute_baselines(
        unit_of_work_factory or SqlAlchemyHealthUnitOfWork,
        as_of=as_of or utcnow().date(),
        window_days=effective_config.baseline_window_days,
        tiers=tiers,
    )


def check_listing_health(
    *,
    as_of: date | None = None,
    unit_of_work_factory: HealthUnitOfWorkFactory | None = None,
    config: HealthConfig | None = None,
) -> HealthCheckSummary:
    effective_config = config or get_health_config()
    if unit_of_work_factory is None:
        _ensure_started()
    summary = run_health_check(
        unit_of_work_factory or SqlAlchemyHealthUnitOfWork,
        as_of=as_of or utcnow().date(),
        workers=effective_config.workers,
    )
    log.info(
        "Health check for %s: %d sources, overall %s, blocked=%s",
        summary.as_of,
        len(summary.reports),
        summary.severity,
        ", ".join(summary.blocked_sources) or "none",
    )
    return summary
