from __future__ import annotations

import pytest

from cinematch.domain.errors import InvalidInputError
from cinematch.domain.matching import select_match
from cinematch.domain.model import Decision, ExternalCandidate
from tests.helpers.catalog import make_observation


def test_best_candidate_wins() -> None:
    observation = make_observation(
        "The Godfather Part II",
        raw_year=1974,
        candidates=(
            ExternalCandidate(
                external_id="tmdb:238", candidate_title="The Godfather", candidate_year=1972
            ),
            ExternalCandidate(
                external_id="tmdb:240",
                candidate_title="The Godfather Part II",
                candidate_year=1974,
            ),
        ),
    )

    match = select_match(observation)

    assert match.candidate is not None
    assert match.candidate.external_id == "tmdb:240"
    assert match.decision is Decision.AUTO_APPLY


def test_ties_keep_oracle_order() -> None:
    observation = make_observation(
        "Solaris",
        raw_year=None,
        candidates=(
            ExternalCandidate(external_id="tmdb:593", candidate_title="Solaris"),
            ExternalCandidate(external_id="tmdb:2103", candidate_title="Solaris"),
        ),
    )

    match = select_match(observation)

    assert match.candidate is not None
    assert match.candidate.external_id == "tmdb:593"


def test_no_candidates_rejects() -> None:
    match = select_match(make_observation("Lost Film", candidates=()))

    assert match.candidate is None
    assert match.confidence is None
    assert match.decision is Decision.REJECT


@pytest.mark.parametrize("raw_title", [None, "", "   "])
def test_missing_observation_title_raises(raw_title: str | None) -> None:
    with pytest.raises(InvalidInputError):
        select_match(make_observation(raw_title))


def test_candidate_without_title_invalidates_observation() -> None:
    observation = make_observation(
        "Heat",
        candidates=(
            ExternalCandidate(external_id="tmdb:949", candidate_title="Heat"),
            ExternalCandidate(external_id="tmdb:1", candidate_title=None),
        ),
    )
    with pytest.raises(InvalidInputError, match="tmdb:1"):
        select_match(observation)
