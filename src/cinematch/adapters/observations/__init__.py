"""JSON Lines adapter for candidate observations."""

from __future__ import annotations

from .reader import iter_observation_lines, parse_observation_line
from .schema import (
    CandidateObservationPayload,
    ExternalCandidatePayload,
    SourceSignalsPayload,
)

__all__ = [
    "CandidateObservationPayload",
    "ExternalCandidatePayload",
    "SourceSignalsPayload",
    "iter_observation_lines",
    "parse_observation_line",
]
