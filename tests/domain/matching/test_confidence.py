from __future__ import annotations

import random

import pytest

from cinematch.domain.errors import InvalidInputError
from cinematch.domain.matching import (
    ConfidenceInput,
    DecisionPolicy,
    score_confidence,
)
from cinematch.domain.matching.confidence import (
    completeness,
    round_score,
    source_agreement,
    year_match,
)
from cinematch.domain.model import Decision, SourceSignals

ALL_SIGNALS = SourceSignals(
    source_count=3, has_poster=True, has_synopsis=True, has_letterboxd=True, has_imdb=True
)


def test_perfect_match_auto_applies() -> None:
    result = score_confidence(
        ConfidenceInput(
            original_title="Paris, Texas",
            candidate_title="Paris, Texas",
            original_year=1984,
            candidate_year=1984,
            signals=ALL_SIGNALS,
        )
    )

    assert result.overall > 0.9
    assert result.decision is Decision.AUTO_APPLY
    assert result.components.title_match == 1.0
    assert result.components.year_match == 1.0
    assert result.components.source_agreement == 0.99
    assert result.components.completeness == 1.0


def test_year_off_by_one_scores_point_eight() -> None:
    result = score_confidence(
        ConfidenceInput(
            original_title="Perfect Days",
            candidate_title="Perfect Days",
            original_year=2024,
            candidate_year=2023,
        )
    )
    assert result.components.year_match == 0.8


@pytest.mark.parametrize(
    ("original", "candidate", "expected"),
    [
        (2000, 2000, 1.0),
        (2000, 2001, 0.8),
        (2001, 2000, 0.8),
        (2000, 2002, 0.4),
        (2000, 2003, 0.0),
        (2024, 1972, 0.0),
        (None, 1999, 0.6),
        (1999, None, 0.5),
        (None, None, 0.5),
    ],
)
def test_year_match(original: int | None, candidate: int | None, expected: float) -> None:
    assert year_match(original, candidate) == expected


@pytest.mark.parametrize(
    ("count", "expected"),
    [(-5, 0.0), (0, 0.0), (1, 0.33), (2, 0.66), (3, 0.99), (4, 1.0), (1000, 1.0)],
)
def test_source_agreement_clamps(count: int, expected: float) -> None:
    assert source_agreement(count) == pytest.approx(expected)


def test_completeness_shares() -> None:
    assert completeness(SourceSignals()) == 0.0
    assert completeness(SourceSignals(has_poster=True)) == pytest.approx(0.3)
    assert completeness(SourceSignals(has_synopsis=True, has_imdb=True)) == pytest.approx(0.5)
    assert completeness(ALL_SIGNALS) == pytest.approx(1.0)


def test_event_prefixed_title_with_wrong_year_goes_to_review() -> None:
    result = score_confidence(
        ConfidenceInput(
            original_title="35mm: The Godfather",
            candidate_title="The Godfather",
            original_year=2024,
            candidate_year=1972,
            signals=SourceSignals(source_count=1),
        )
    )

    assert result.components.title_match == 0.9
    assert result.components.year_match == 0.0
    # 0.4 * 0.9 + 0.2 * 0.33 = 0.426
    assert result.overall == 0.43
    assert result.decision is Decision.REVIEW


def test_weak_candidate_is_rejected() -> None:
    result = score_confidence(
        ConfidenceInput(
            original_title="Stalker",
            candidate_title="Mirror",
            original_year=1979,
            candidate_year=1975,
        )
    )
    assert result.overall <= 0.3
    assert result.decision is Decision.REJECT


@pytest.mark.parametrize(
    ("original", "candidate"),
    [(None, "Heat"), ("Heat", None), ("", "Heat"), ("Heat", "   ")],
)
def test_missing_title_raises_before_scoring(original: str | None, candidate: str | None) -> None:
    with pytest.raises(InvalidInputError):
        score_confidence(ConfidenceInput(original_title=original, candidate_title=candidate))


def test_decision_thresholds_are_strict() -> None:
    policy = DecisionPolicy(auto_apply_threshold=0.8, review_floor=0.3)

    assert policy.decide(0.81) is Decision.AUTO_APPLY
    assert policy.decide(0.8) is Decision.REVIEW
    assert policy.decide(0.31) is Decision.REVIEW
    assert policy.decide(0.3) is Decision.REJECT
    assert policy.decide(0.0) is Decision.REJECT


def test_custom_policy_changes_decision() -> None:
    data = ConfidenceInput(
        original_title="35mm: The Godfather",
        candidate_title="The Godfather",
        original_year=2024,
        candidate_year=1972,
        signals=SourceSignals(source_count=1),
    )
    assert score_confidence(data, DecisionPolicy(review_floor=0.5)).decision is Decision.REJECT


def test_policy_rejects_inverted_thresholds() -> None:
    with pytest.raises(ValueError, match="review_floor"):
        DecisionPolicy(auto_apply_threshold=0.2, review_floor=0.5)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.125, 0.13), (0.124, 0.12), (0.675, 0.68), (0.0, 0.0), (0.426, 0.43)],
)
def test_round_score_rounds_half_up(value: float, expected: float) -> None:
    assert round_score(value) == expected


def test_overall_stays_in_unit_interval_for_random_inputs() -> None:
    rng = random.Random(1337)
    titles = ["Heat", "The Thing", "Ran", "", "Alien", "Aliens", "8½", "M"]
    for _ in range(1000):
        original = rng.choice(titles) + rng.choice(["", " 4K", ": Director's Cut"])
        candidate = rng.choice(titles) or "Untitled"
        if not original.strip():
            original = "Untitled"
        signals = SourceSignals(
            source_count=rng.randint(-10, 50),
            has_poster=rng.random() < 0.5,
            has_synopsis=rng.random() < 0.5,
            has_letterboxd=rng.random() < 0.5,
            has_imdb=rng.random() < 0.5,
        )
        result = score_confidence(
            ConfidenceInput(
                original_title=original,
                candidate_title=candidate,
                original_year=rng.choice([None, rng.randint(-5000, 5000)]),
                candidate_year=rng.choice([None, rng.randint(1880, 2030)]),
                signals=signals,
            )
        )
        assert 0.0 <= result.overall <= 1.0
        assert result.overall == round(result.overall, 2)
        for component in (
            result.components.title_match,
            result.components.year_match,
            result.components.source_agreement,
            result.components.completeness,
        ):
            assert 0.0 <= component <= 1.0
