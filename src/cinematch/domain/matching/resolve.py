"""Pick the best external candidate for an observation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinematch.domain.errors import InvalidInputError
from cinematch.domain.model import Decision

from .confidence import DEFAULT_POLICY, ConfidenceInput, ConfidenceResult, score_confidence

if TYPE_CHECKING:
    from cinematch.domain.model import CandidateObservation, ExternalCandidate

    from .confidence import DecisionPolicy

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchDecision:
    """Best-scoring candidate for an observation, or none at all."""

    candidate: ExternalCandidate | None
    confidence: ConfidenceResult | None

    @property
    def decision(self) -> Decision:
        if self.confidence is None:
            return Decision.REJECT
        return self.confidence.decision


def select_match(
    observation: CandidateObservation, policy: DecisionPolicy = DEFAULT_POLICY
) -> MatchDecision:
    """Score every candidate and keep the highest; ties keep oracle order.

    The observation title and every candidate title are validated before
    anything is scored, so a malformed candidate rejects the whole observation.
    """

    if observation.raw_title is None or not observation.raw_title.strip():
        raise InvalidInputError("Observation is missing its raw title")
    for position, candidate in enumerate(observation.external_candidates):
        if not candidate.external_id or not candidate.external_id.strip():
            raise InvalidInputError(f"Candidate #{position} has no external id")
        if candidate.candidate_title is None or not candidate.candidate_title.strip():
            raise InvalidInputError(f"Candidate {candidate.external_id} has no title")

    best: MatchDecision = MatchDecision(candidate=None, confidence=None)
    for candidate in observation.external_candidates:
        result = score_confidence(
            ConfidenceInput(
                original_title=observation.raw_title,
                candidate_title=candidate.candidate_title,
                original_year=observation.raw_year,
                candidate_year=candidate.candidate_year,
                signals=observation.source_signals,
            ),
            policy,
        )
        if best.confidence is None or result.overall > best.confidence.overall:
            best = MatchDecision(candidate=candidate, confidence=result)

    if best.candidate is None:
        log.debug("No candidates for %r", observation.raw_title)
    return best
