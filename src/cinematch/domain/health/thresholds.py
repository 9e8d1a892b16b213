"""Per-tier anomaly thresholds, kept apart from the detection rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from cinematch.domain.model import Severity, SourceTier

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class TierThresholds:
    """How far below baseline a source of one tier may fall.

    ``drop_percent`` and ``block_percent`` are positive magnitudes; a drop of
    more than ``drop_percent`` flags the source at ``drop_severity`` and a drop
    of more than ``block_percent`` also asks the caller to block the scrape.
    """

    drop_percent: float
    drop_severity: Severity
    block_percent: float = 80.0


def _default_tiers() -> dict[SourceTier, TierThresholds]:
    return {
        SourceTier.SCRUTINIZED: TierThresholds(drop_percent=30.0, drop_severity=Severity.ERROR),
        SourceTier.STANDARD: TierThresholds(drop_percent=50.0, drop_severity=Severity.WARNING),
    }


@dataclass(frozen=True, slots=True)
class AnomalyThresholds:
    tiers: Mapping[SourceTier, TierThresholds] = field(default_factory=_default_tiers)
    # a spike needs both a relative and an absolute excess over the baseline
    spike_percent: float = 100.0
    spike_margin: float = 10.0

    def for_tier(self, tier: SourceTier) -> TierThresholds:
        try:
            return self.tiers[tier]
        except KeyError as exc:
            raise ValueError(f"No anomaly thresholds configured for tier {tier!r}") from exc


DEFAULT_THRESHOLDS: Final = AnomalyThresholds()
