"""Listing-health scheduling defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_BASELINE_WINDOW_DAYS = 7
DEFAULT_HEALTH_WORKERS = 8


@dataclass(frozen=True, slots=True)
class HealthConfig:
    baseline_window_days: int = DEFAULT_BASELINE_WINDOW_DAYS
    workers: int = DEFAULT_HEALTH_WORKERS


def get_health_config() -> HealthConfig:
    return HealthConfig(
        baseline_window_days=env_int(
            "CINEMATCH_BASELINE_WINDOW_DAYS", DEFAULT_BASELINE_WINDOW_DAYS, minimum=1
        ),
        workers=env_int("CINEMATCH_HEALTH_WORKERS", DEFAULT_HEALTH_WORKERS, minimum=1),
    )
