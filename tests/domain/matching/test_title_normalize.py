from __future__ import annotations

import random
import string

import pytest

from cinematch.domain.matching import normalize_title


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("The Godfather", "godfather"),
        ("  THE   godfather  ", "godfather"),
        ("A Clockwork Orange", "clockwork orange"),
        ("An American Werewolf in London", "american werewolf in london"),
        ("Spider-Man: No Way Home", "spiderman no way home"),
        ("Amélie", "amélie"),
        ("2001: A Space Odyssey", "2001 a space odyssey"),
        ("snake_case_title", "snakecasetitle"),
        ("Theatre of Blood", "theatre of blood"),
        ("Anatomy of a Fall", "anatomy of a fall"),
    ],
)
def test_normalize_title(raw: str, expected: str) -> None:
    assert normalize_title(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "!!!", "--"])
def test_normalize_title_accepts_empty_and_punctuation_only(raw: str) -> None:
    assert normalize_title(raw) == ""


def test_lone_article_is_kept() -> None:
    assert normalize_title("The") == "the"
    assert normalize_title("A") == "a"


def test_article_left_exposed_by_punctuation_is_stripped() -> None:
    # "'The' Thing" only starts with an article once the quotes are gone
    assert normalize_title("'The' Thing") == "thing"


@pytest.mark.parametrize("raw", ["The The", "The A Team", "A An The Film", "the...the end"])
def test_normalize_title_is_idempotent_for_stacked_articles(raw: str) -> None:
    once = normalize_title(raw)
    assert normalize_title(once) == once


def test_normalize_title_is_idempotent_for_random_titles() -> None:
    rng = random.Random(20261018)
    alphabet = string.ascii_letters + string.digits + " \t-:'!.,_éÉ"
    words = ["the", "The", "a", "A", "an", "AN", "film", "night"]
    for _ in range(500):
        parts = [
            rng.choice(words) if rng.random() < 0.4 else "".join(
                rng.choice(alphabet) for _ in range(rng.randint(0, 8))
            )
            for _ in range(rng.randint(0, 5))
        ]
        raw = " ".join(parts)
        once = normalize_title(raw)
        assert normalize_title(once) == once, raw
