"""Bounded string similarity between film titles."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from .normalize import normalize_title

CONTAINMENT_BASE = 0.8
CONTAINMENT_SPAN = 0.2


def levenshtein(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute edit distance."""

    return Levenshtein.distance(a, b)


def title_similarity(a: str, b: str) -> float:
    """Similarity of two raw titles in ``[0, 1]``; 1.0 only for equal normal forms.

    A title nested inside a longer one (``"Blade Runner"`` in ``"Blade Runner
    2049"``) scores between 0.8 and 1.0 depending on how much of the longer
    title it covers. Otherwise the score is one minus the edit distance
    relative to the longer title.
    """

    left = normalize_title(a)
    right = normalize_title(b)
    if left == right:
        return 1.0

    shorter, longer = sorted((left, right), key=len)
    if shorter in longer:
        return CONTAINMENT_BASE + (len(shorter) / len(longer)) * CONTAINMENT_SPAN

    return max(0.0, 1.0 - levenshtein(left, right) / len(longer))
