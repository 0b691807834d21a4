"""CLI logging setup: stderr only, verbosity-driven, restorable."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "netutil"


@dataclass(frozen=True, slots=True)
class PreviousLogging:
    level: int
    handlers: list[logging.Handler]
    propagate: bool


def _level_for(verbosity: int, *, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    # Failed sends are rendered by the command itself.
    return logging.ERROR


def configure_logging(*, verbosity: int, quiet: bool = False) -> PreviousLogging:
    logger = logging.getLogger(_LOGGER_NAME)
    previous = PreviousLogging(
        level=logger.level, handlers=list(logger.handlers), propagate=logger.propagate
    )
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=verbosity >= 2,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.handlers = [handler]
    logger.setLevel(_level_for(verbosity, quiet=quiet))
    logger.propagate = False
    return previous


def restore_logging(previous: PreviousLogging) -> None:
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in logger.handlers:
        if handler not in previous.handlers:
            handler.close()
    logger.handlers = previous.handlers
    logger.setLevel(previous.level)
    logger.propagate = previous.propagate
