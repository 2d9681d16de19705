"""Logging configuration for scaffolder."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from . import __version__

LOGGER_NAMESPACE = "scaffolder"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP libraries log every request and connection at INFO/DEBUG
NOISY_LIBRARIES = ("httpx", "httpcore")

_HANDLER_MARKER = "_scaffolder_handler"


def _level_for(verbose: int) -> int:
    return logging.DEBUG if verbose >= 2 else logging.INFO


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)


def _remove_installed_handlers(logger: logging.Logger) -> None:
    """Drop handlers from an earlier setup_logging call in this process."""
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Configure the ``scaffolder`` logger for a CLI run.

    Nothing is configured unless ``verbose`` or ``log_file`` is given, so
    library users keep full control of logging. Calling this again replaces
    the handlers from the previous call.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG). REST and git
            progress is logged at INFO, request and command details at DEBUG.
        log_file: Optional path to also write logs to
    """
    if verbose == 0 and log_file is None:
        return

    level = _level_for(verbose)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    _remove_installed_handlers(logger)
    logger.setLevel(level)

    if verbose > 0:
        _install(logger, logging.StreamHandler(sys.stderr), level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _install(logger, logging.FileHandler(log_file), level)

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose >= 2 else logging.WARNING)

    logger.info(
        "scaffolder %s starting | %s | level=%s",
        __version__,
        datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC"),
        logging.getLevelName(level),
    )
