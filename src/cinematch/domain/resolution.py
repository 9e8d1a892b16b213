"""Apply confidence decisions to canonical films."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinematch.domain.errors import InvalidInputError
from cinematch.domain.matching import DEFAULT_POLICY, select_match
from cinematch.domain.merge import merge_within
from cinematch.domain.model import (
    Decision,
    MergeReason,
    ResolutionOutcome,
    ReviewItem,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from cinematch.domain.matching import DecisionPolicy, MatchDecision
    from cinematch.domain.merge import MergeResult
    from cinematch.domain.model import CandidateObservation, ExternalCandidate
    from cinematch.domain.ports import CatalogRepositories, CatalogUnitOfWorkFactory

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    outcome: ResolutionOutcome
    film_id: UUID | None
    match: MatchDecision
    merge: MergeResult | None = None
    review_id: UUID | None = None

    @property
    def decision(self) -> Decision:
        return self.match.decision


@dataclass(slots=True, kw_only=True)
class FilmResolver:
    """Score an observation and act on the decision in one transaction.

    ``auto_apply`` binds the external id to the observed film, or merges the
    observed film into the film already holding that id. ``review`` queues a
    review item unless one is already open for the same film and external id.
    ``reject`` touches nothing.
    """

    unit_of_work_factory: CatalogUnitOfWorkFactory
    policy: DecisionPolicy = DEFAULT_POLICY
    created_by: str | None = None
    now_provider: Callable[[], datetime] = utcnow

    def resolve(self, observation: CandidateObservation) -> ResolutionResult:
        match = select_match(observation, self.policy)
        if match.decision is Decision.REJECT or match.candidate is None:
            return ResolutionResult(
                outcome=ResolutionOutcome.REJECTED,
                film_id=observation.film_id,
                match=match,
            )

        film_id = observation.film_id
        if film_id is None:
            raise InvalidInputError(
                f"Observation {observation.raw_title!r} has no film id to apply a decision to"
            )

        with self.unit_of_work_factory() as uow:
            if match.decision is Decision.REVIEW:
                result = self._queue_review(uow.repositories, film_id, match, match.candidate)
            else:
                result = self._auto_apply(uow.repositories, film_id, match, match.candidate)
            if result.outcome is not ResolutionOutcome.NOT_FOUND:
                uow.commit()
        return result

    def _queue_review(
        self,
        repositories: CatalogRepositories,
        film_id: UUID,
        match: MatchDecision,
        candidate: ExternalCandidate,
    ) -> ResolutionResult:
        if repositories.films.get(film_id) is None:
            return ResolutionResult(
                outcome=ResolutionOutcome.NOT_FOUND, film_id=film_id, match=match
            )
        existing = repositories.reviews.find_open(film_id, candidate.external_id)
        if existing is not None:
            log.debug(
                "Film %s already awaits review against %s", film_id, candidate.external_id
            )
            return ResolutionResult(
                outcome=ResolutionOutcome.QUEUED,
                film_id=film_id,
                match=match,
                review_id=existing.id,
            )
        item = ReviewItem(
            film_id=film_id,
            external_id=candidate.external_id,
            candidate_title=candidate.candidate_title,
            confidence=match.confidence.overall if match.confidence else 0.0,
            detected_at=self.now_provider(),
        )
        repositories.reviews.add(item)
        log.info(
            "Queued film %s for review against %s (confidence %.2f)",
            film_id,
            candidate.external_id,
            item.confidence,
        )
        return ResolutionResult(
            outcome=ResolutionOutcome.QUEUED, film_id=film_id, match=match, review_id=item.id
        )

    def _auto_apply(
        self,
        repositories: CatalogRepositories,
        film_id: UUID,
        match: MatchDecision,
        candidate: ExternalCandidate,
    ) -> ResolutionResult:
        film = repositories.films.get(film_id)
        if film is None:
            return ResolutionResult(
                outcome=ResolutionOutcome.NOT_FOUND, film_id=film_id, match=match
            )

        holder = repositories.films.get_by_external_id(candidate.external_id)
        if holder is None or holder.id == film.id:
            repositories.films.get(film.id, lock=True)
            if film.external_id not in (None, candidate.external_id):
                log.warning(
                    "Rebinding film %s from %s to %s",
                    film.id,
                    film.external_id,
                    candidate.external_id,
                )
            film.bind_external_id(
                candidate.external_id,
                year=candidate.candidate_year,
                synopsis=candidate.overview,
                now=self.now_provider(),
            )
            log.info("Bound film %s to %s", film.id, candidate.external_id)
            return ResolutionResult(outcome=ResolutionOutcome.BOUND, film_id=film.id, match=match)

        merge = merge_within(
            repositories,
            film.id,
            holder.id,
            reason=MergeReason.EXTERNAL_ID_COLLISION,
            created_by=self.created_by,
            now=self.now_provider(),
        )
        outcome = ResolutionOutcome.MERGED if merge.merged else ResolutionOutcome.NOT_FOUND
        return ResolutionResult(outcome=outcome, film_id=holder.id, match=match, merge=merge)
