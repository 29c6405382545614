"""Logging configuration for mdtasks."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Attach handlers to the "mdtasks" logger.

    Without -v or --log-file nothing is attached, so only warnings reach
    stderr through Python's last-resort handler.

    Args:
        verbose: 1 logs INFO (files written, branches created), 2+ logs DEBUG
        log_file: Also append log records to this file
    """
    if verbose == 0 and log_file is None:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger = logging.getLogger("mdtasks")
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if verbose > 0:
        # stdout carries command output
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging configured (level=%s)", logging.getLevelName(level))
