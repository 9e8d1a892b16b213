from __future__ import annotations

import argparse
import logging
import sys
import threading
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from cinematch.adapters.observations import iter_observation_lines
from cinematch.app import (
    check_listing_health,
    merge_duplicate_film,
    recompute_source_baselines,
    resolve_observations,
)
from cinematch.config import configure_logging
from cinematch.domain.model import SourceTier

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_STOP_EVENT = threading.Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve film identities and monitor listing health"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser(
        "resolve", help="Score and apply candidate observations from a JSONL file"
    )
    resolve.add_argument("path", type=Path, help="JSON Lines file of candidate observations")

    merge = subparsers.add_parser("merge", help="Merge a duplicate film into a canonical one")
    merge.add_argument("--duplicate", type=str, required=True, help="Id of the film to remove")
    merge.add_argument("--canonical", type=str, required=True, help="Id of the film to keep")
    merge.add_argument("--by", type=str, help="Operator name recorded on the audit row")

    baselines = subparsers.add_parser(
        "baselines", help="Recompute per-source baselines from recent daily counts"
    )
    baselines.add_argument(
        "--as-of",
        type=str,
        help="ISO date; the window ends the day before (defaults to today, UTC)",
    )
    baselines.add_argument(
        "--scrutinized",
        action="append",
        default=[],
        metavar="SOURCE",
        help="Mark a source as scrutinized (repeatable)",
    )
    baselines.add_argument(
        "--standard",
        action="append",
        default=[],
        metavar="SOURCE",
        help="Mark a source as standard (repeatable)",
    )

    health = subparsers.add_parser("health", help="Check each source's count against baseline")
    health.add_argument("--as-of", type=str, help="ISO date to check (defaults to today, UTC)")

    return parser.parse_args(list(argv))


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _tier_overrides(args: argparse.Namespace) -> dict[str, SourceTier]:
    overrides = dict.fromkeys(args.standard, SourceTier.STANDARD)
    for source_id in args.scrutinized:
        if source_id in overrides:
            raise ValueError(f"Source {source_id} cannot be both scrutinized and standard")
        overrides[source_id] = SourceTier.SCRUTINIZED
    return overrides


def _run_resolve(path: Path) -> None:
    if not path.is_file():
        raise ValueError(f"Observation file not found: {path}")
    report = resolve_observations(iter_observation_lines(path), stop_event=_STOP_EVENT)
    for item in report.failed:
        log.warning("Observation #%d failed: %s", item.index + 1, item.error)
    log.info("Resolution finished: %s", report.summary())


def _run_merge(args: argparse.Namespace) -> None:
    result = merge_duplicate_film(
        _parse_uuid(args.duplicate),
        _parse_uuid(args.canonical),
        created_by=args.by,
    )
    if not result.merged:
        log.warning(
            "Nothing merged: film %s or %s no longer exists",
            result.duplicate_id,
            result.canonical_id,
        )
        return
    log.info(
        "Merged %s into %s: %d references moved",
        result.duplicate_id,
        result.canonical_id,
        result.merged_count,
    )


def _run_health(as_of: date | None) -> None:
    summary = check_listing_health(as_of=as_of)
    for report in summary.reports:
        log.info(
            "%-24s %-8s observed=%d baseline=%.1f change=%+.0f%%%s",
            report.source_id,
            report.severity,
            report.observed_count,
            report.baseline_average,
            report.percent_change,
            " BLOCK" if report.should_block else "",
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        as_of = _parse_date(getattr(parsed_args, "as_of", None))
        tiers = _tier_overrides(parsed_args) if parsed_args.command == "baselines" else {}
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "resolve":
            _run_resolve(parsed_args.path)
        elif parsed_args.command == "merge":
            _run_merge(parsed_args)
        elif parsed_args.command == "baselines":
            saved = recompute_source_baselines(as_of=as_of, tiers=tiers)
            log.info("Stored %d baselines", len(saved))
        elif parsed_args.command == "health":
            _run_health(as_of)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """First Ctrl+C stops submitting work; a second one exits immediately."""
    if _STOP_EVENT.is_set():
        log.info("Closed by user (Ctrl+C)")
        sys.exit(0)
    log.info("Stopping after in-flight items (Ctrl+C again to quit)")
    _STOP_EVENT.set()


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
