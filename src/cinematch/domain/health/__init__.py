"""Listing-health monitoring: baselines, anomaly rules and checks."""

from __future__ import annotations

from .anomaly import evaluate, percent_change
from .baseline import baseline_window, compute_baseline
from .monitor import HealthCheckSummary, recompute_baselines, run_health_check
from .thresholds import DEFAULT_THRESHOLDS, AnomalyThresholds, TierThresholds

__all__ = [
    "DEFAULT_THRESHOLDS",
    "AnomalyThresholds",
    "HealthCheckSummary",
    "TierThresholds",
    "baseline_window",
    "compute_baseline",
    "evaluate",
    "percent_change",
    "recompute_baselines",
    "run_health_check",
]
