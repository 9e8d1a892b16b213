"""Pydantic models describing candidate-observation JSON payloads."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cinematch.domain.model import CandidateObservation, ExternalCandidate, SourceSignals


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ObservationBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ExternalCandidatePayload(ObservationBaseModel):
    external_id: str = Field(alias="externalId", min_length=1)
    candidate_title: str | None = Field(default=None, alias="candidateTitle")
    candidate_year: int | None = Field(default=None, alias="candidateYear")
    overview: str | None = None

    @field_validator("candidate_year", "overview", mode="before")
    @classmethod
    def _blank_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    def to_domain(self) -> ExternalCandidate:
        return ExternalCandidate(
            external_id=self.external_id,
            candidate_title=self.candidate_title,
            candidate_year=self.candidate_year,
            overview=self.overview,
        )


class SourceSignalsPayload(ObservationBaseModel):
    source_count: int = Field(default=0, alias="sourceCount")
    has_poster: bool = Field(default=False, alias="hasPoster")
    has_synopsis: bool = Field(default=False, alias="hasSynopsis")
    has_letterboxd: bool = Field(default=False, alias="hasLetterboxd")
    has_imdb: bool = Field(default=False, alias="hasImdb")

    def to_domain(self) -> SourceSignals:
        return SourceSignals(
            source_count=self.source_count,
            has_poster=self.has_poster,
            has_synopsis=self.has_synopsis,
            has_letterboxd=self.has_letterboxd,
            has_imdb=self.has_imdb,
        )


class CandidateObservationPayload(ObservationBaseModel):
    """One line of an observation feed."""

    film_id: UUID | None = Field(default=None, alias="filmId")
    raw_title: str | None = Field(default=None, alias="rawTitle")
    raw_year: int | None = Field(default=None, alias="rawYear")
    external_candidates: list[ExternalCandidatePayload] = Field(
        default_factory=list, alias="externalCandidates"
    )
    source_signals: SourceSignalsPayload = Field(
        default_factory=SourceSignalsPayload, alias="sourceSignals"
    )

    @field_validator("film_id", "raw_year", mode="before")
    @classmethod
    def _blank_optional(cls, value: object) -> object:
        return _blank_to_none(value)

    def to_domain(self) -> CandidateObservation:
        return CandidateObservation(
            raw_title=self.raw_title,
            raw_year=self.raw_year,
            external_candidates=tuple(
                candidate.to_domain() for candidate in self.external_candidates
            ),
            source_signals=self.source_signals.to_domain(),
            film_id=self.film_id,
        )
