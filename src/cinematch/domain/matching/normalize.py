"""Title canonicalization for comparison."""

from __future__ import annotations

from typing import Final

LEADING_ARTICLES: Final[frozenset[str]] = frozenset({"the", "a", "an"})


def normalize_title(title: str) -> str:
    """Return the comparison form of ``title``.

    Lowercases, drops everything that is not a letter, digit or whitespace,
    collapses runs of whitespace and strips a leading article. Punctuation is
    removed without leaving a gap, so ``"Spider-Man"`` becomes ``"spiderman"``.

    Article stripping repeats until no leading article remains so that the
    result is stable under re-normalization (``"The A Team"`` -> ``"team"``).
    A lone article is kept as the whole title.
    """

    text = "".join(ch for ch in title.lower() if ch.isalnum() or ch.isspace())
    text = " ".join(text.split())
    while True:
        head, sep, rest = text.partition(" ")
        if not sep or head not in LEADING_ARTICLES:
            return text
        text = rest
