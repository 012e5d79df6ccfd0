"""Logging configuration."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def setup_logging(verbose: bool = False, level: str | None = None) -> None:
    """Configure root logging for the server process.

    Args:
        verbose: Log at DEBUG level.
        level: Explicit level name, wins over ``verbose``.
    """
    if level:
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def setup_logging_from_env() -> None:
    """Configure logging from TERMHOLD_LOG_LEVEL / TERMHOLD_VERBOSE."""
    verbose = os.environ.get("TERMHOLD_VERBOSE", "").lower() in ("1", "true", "yes")
    setup_logging(verbose=verbose, level=os.environ.get("TERMHOLD_LOG_LEVEL"))
