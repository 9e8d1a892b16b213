"""Domain error hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class CinematchError(Exception):
    """Base class for errors raised by the resolution and health core."""


class InvalidInputError(CinematchError, ValueError):
    """Raised when an observation or candidate is malformed."""


class SelfMergeError(InvalidInputError):
    """Raised when a film would be merged into itself."""

    def __init__(self, film_id: UUID) -> None:
        self.film_id = film_id
        super().__init__(f"Refusing to merge film {film_id} into itself")


class RetryableError(CinematchError):
    """Raised when a persistence step failed and was rolled back entirely.

    Callers may retry the whole operation; nothing from the failed attempt was kept.
    """
