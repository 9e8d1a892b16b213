"""Logging setup shared by the CLI and batch entry points."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "CINEMATCH_LOG_LEVEL"


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI-friendly format.

    ``level`` accepts a numeric level or a level name. When omitted the
    ``CINEMATCH_LOG_LEVEL`` environment variable is consulted, falling back to
    INFO. Pass ``force=True`` to reconfigure during tests.
    """

    resolved = level if level is not None else os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(resolved, str):
        resolved = logging.getLevelNamesMapping().get(resolved.strip().upper(), logging.INFO)

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # SQL echo is opt-in through the engine, never through the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
