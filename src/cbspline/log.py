"""Logging helpers for cbspline."""
from __future__ import annotations
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "cbspline"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Parameters
    ----------
    level : int
        Logging level, e.g. ``logging.DEBUG``
    log_file : Optional[str]
        Path of a log file; overwritten on each call

    Returns
    -------
    logging.Logger
        The configured ``cbspline`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Drop handlers from a previous call to avoid duplicate records
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
