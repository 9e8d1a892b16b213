"""Read candidate observations from JSON Lines feeds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from cinematch.domain.errors import InvalidInputError

from .schema import CandidateObservationPayload

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from cinematch.domain.model import CandidateObservation

log = logging.getLogger(__name__)


def parse_observation_line(line: str | bytes) -> CandidateObservation:
    """Validate one JSON object into an observation.

    Raw lines are decoded as UTF-8 here rather than while reading the feed, so
    an undecodable line fails on its own. Bad encoding, malformed JSON and
    schema violations all raise ``InvalidInputError``.
    """

    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputError(
                f"Invalid observation: not UTF-8 at byte {exc.start}"
            ) from exc
    try:
        payload = CandidateObservationPayload.model_validate_json(line)
    except ValidationError as exc:
        raise InvalidInputError(
            f"Invalid observation: {exc.error_count()} validation error(s): "
            + "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
                for error in exc.errors()
            )
        ) from exc
    return payload.to_domain()


def iter_observation_lines(path: Path) -> Iterator[bytes]:
    """Yield the non-blank lines of a JSONL file as stripped, undecoded bytes."""

    with path.open("rb") as handle:
        for line_number, line in enumerate(handle, start=1):
            stripped = line.strip()
            if not stripped:
                log.debug("Skipping blank line %d in %s", line_number, path)
                continue
            yield stripped
