"""Pure scoring core: normalization, similarity and confidence."""

from __future__ import annotations

from .confidence import (
    DEFAULT_POLICY,
    ConfidenceComponents,
    ConfidenceInput,
    ConfidenceResult,
    DecisionPolicy,
    score_confidence,
)
from .normalize import normalize_title
from .resolve import MatchDecision, select_match
from .similarity import levenshtein, title_similarity

__all__ = [
    "DEFAULT_POLICY",
    "ConfidenceComponents",
    "ConfidenceInput",
    "ConfidenceResult",
    "DecisionPolicy",
    "MatchDecision",
    "levenshtein",
    "normalize_title",
    "score_confidence",
    "select_match",
    "title_similarity",
]
