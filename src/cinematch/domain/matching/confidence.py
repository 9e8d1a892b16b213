"""Multi-signal confidence scoring for a proposed film match."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Final

from cinematch.domain.errors import InvalidInputError
from cinematch.domain.model import Decision, SourceSignals

from .similarity import title_similarity

TITLE_WEIGHT: Final = 0.40
YEAR_WEIGHT: Final = 0.25
SOURCE_WEIGHT: Final = 0.20
COMPLETENESS_WEIGHT: Final = 0.15

# year difference -> score; larger differences score zero
_YEAR_DIFF_SCORES: Final[dict[int, float]] = {0: 1.0, 1: 0.8, 2: 0.4}
CANDIDATE_YEAR_ONLY_SCORE: Final = 0.6
NEUTRAL_YEAR_SCORE: Final = 0.5

PER_SOURCE_AGREEMENT: Final = 0.33

POSTER_SHARE: Final = 0.3
SYNOPSIS_SHARE: Final = 0.3
LETTERBOXD_SHARE: Final = 0.2
IMDB_SHARE: Final = 0.2


@dataclass(frozen=True, slots=True)
class DecisionPolicy:
    """Thresholds mapping an overall score onto a decision.

    Both comparisons are strict: a score equal to ``auto_apply_threshold`` goes
    to review, a score equal to ``review_floor`` is rejected.
    """

    auto_apply_threshold: float = 0.8
    review_floor: float = 0.3

    def __post_init__(self) -> None:
        if not 0.0 <= self.review_floor <= self.auto_apply_threshold <= 1.0:
            raise ValueError(
                "Expected 0 <= review_floor <= auto_apply_threshold <= 1, got "
                f"{self.review_floor} and {self.auto_apply_threshold}"
            )

    def decide(self, overall: float) -> Decision:
        if overall > self.auto_apply_threshold:
            return Decision.AUTO_APPLY
        if overall > self.review_floor:
            return Decision.REVIEW
        return Decision.REJECT


DEFAULT_POLICY: Final = DecisionPolicy()


@dataclass(frozen=True, slots=True)
class ConfidenceInput:
    original_title: str | None
    candidate_title: str | None
    original_year: int | None = None
    candidate_year: int | None = None
    signals: SourceSignals = field(default_factory=SourceSignals)


@dataclass(frozen=True, slots=True)
class ConfidenceComponents:
    title_match: float
    year_match: float
    source_agreement: float
    completeness: float


@dataclass(frozen=True, slots=True)
class ConfidenceResult:
    overall: float
    components: ConfidenceComponents
    decision: Decision


def score_confidence(
    data: ConfidenceInput, policy: DecisionPolicy = DEFAULT_POLICY
) -> ConfidenceResult:
    """Score how likely ``data.candidate_title`` names the same film as the original.

    Raises ``InvalidInputError`` when either title is missing or blank. All
    other inputs are clamped into range, so any well-formed input yields a
    result with ``0 <= overall <= 1``.
    """

    original_title = _require_title(data.original_title, "original title")
    candidate_title = _require_title(data.candidate_title, "candidate title")

    components = ConfidenceComponents(
        title_match=_clamp01(title_similarity(original_title, candidate_title)),
        year_match=year_match(data.original_year, data.candidate_year),
        source_agreement=source_agreement(data.signals.source_count),
        completeness=completeness(data.signals),
    )
    overall = round_score(
        _clamp01(
            TITLE_WEIGHT * components.title_match
            + YEAR_WEIGHT * components.year_match
            + SOURCE_WEIGHT * components.source_agreement
            + COMPLETENESS_WEIGHT * components.completeness
        )
    )
    return ConfidenceResult(
        overall=overall,
        components=ConfidenceComponents(
            title_match=round_score(components.title_match),
            year_match=round_score(components.year_match),
            source_agreement=round_score(components.source_agreement),
            completeness=round_score(components.completeness),
        ),
        decision=policy.decide(overall),
    )


def year_match(original_year: int | None, candidate_year: int | None) -> float:
    if original_year is not None and candidate_year is not None:
        return _YEAR_DIFF_SCORES.get(abs(original_year - candidate_year), 0.0)
    if candidate_year is not None:
        return CANDIDATE_YEAR_ONLY_SCORE
    return NEUTRAL_YEAR_SCORE


def source_agreement(source_count: int) -> float:
    return min(1.0, max(0, source_count) * PER_SOURCE_AGREEMENT)


def completeness(signals: SourceSignals) -> float:
    score = 0.0
    if signals.has_poster:
        score += POSTER_SHARE
    if signals.has_synopsis:
        score += SYNOPSIS_SHARE
    if signals.has_letterboxd:
        score += LETTERBOXD_SHARE
    if signals.has_imdb:
        score += IMDB_SHARE
    return _clamp01(score)


def round_score(value: float) -> float:
    """Round half-up to two decimals."""

    return math.floor(value * 100 + 0.5) / 100


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _require_title(value: str | None, label: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"Missing {label}")
    return value
