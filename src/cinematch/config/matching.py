"""Identity-resolution tuning knobs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int
from .errors import ConfigurationError

DEFAULT_AUTO_APPLY_THRESHOLD = 0.8
DEFAULT_REVIEW_FLOOR = 0.3
DEFAULT_WORKERS = 4
# the search oracle in front of us tolerates about four calls a second
DEFAULT_MIN_CALL_DELAY_SECONDS = 0.25


@dataclass(frozen=True, slots=True)
class MatchingConfig:
    auto_apply_threshold: float = DEFAULT_AUTO_APPLY_THRESHOLD
    review_floor: float = DEFAULT_REVIEW_FLOOR
    workers: int = DEFAULT_WORKERS
    min_call_delay_seconds: float = DEFAULT_MIN_CALL_DELAY_SECONDS

    def __post_init__(self) -> None:
        if not 0.0 <= self.review_floor <= self.auto_apply_threshold <= 1.0:
            raise ConfigurationError(
                "Expected 0 <= review_floor <= auto_apply_threshold <= 1, got "
                f"review_floor={self.review_floor}, "
                f"auto_apply_threshold={self.auto_apply_threshold}"
            )
        if self.workers < 1:
            raise ConfigurationError(f"workers must be positive, got {self.workers}")
        if self.min_call_delay_seconds < 0:
            raise ConfigurationError("min_call_delay_seconds must be non-negative")


def get_matching_config() -> MatchingConfig:
    return MatchingConfig(
        auto_apply_threshold=env_float(
            "CINEMATCH_AUTO_APPLY_THRESHOLD", DEFAULT_AUTO_APPLY_THRESHOLD
        ),
        review_floor=env_float("CINEMATCH_REVIEW_FLOOR", DEFAULT_REVIEW_FLOOR),
        workers=env_int("CINEMATCH_WORKERS", DEFAULT_WORKERS, minimum=1),
        min_call_delay_seconds=env_float(
            "CINEMATCH_MIN_CALL_DELAY", DEFAULT_MIN_CALL_DELAY_SECONDS
        ),
    )
