"""Logging setup shared by the CLI and library modules.

Usage:
    from quotesync.utils.logger import get_logger
    logger = get_logger(__name__)

Library modules only ask for loggers. The CLI calls setup_logging() once
with the level taken from --log-level, QS_LOG_LEVEL or QS_VERBOSE.
"""
import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Per-request chatter from these drowns out sync reports below WARNING
NOISY_LOGGERS = ("urllib3", "sqlalchemy.engine")


def resolve_level(level: Optional[str] = None, verbose: bool = False) -> int:
    """Map a level name (or the verbose flag) to a logging level, INFO if unknown."""
    if verbose:
        return logging.DEBUG
    name = (level or os.getenv("QS_LOG_LEVEL", "INFO")).strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[str] = None, verbose: bool = False) -> int:
    """Configure the root logger and return the level applied.

    Safe to call after get_logger() already installed the default handler:
    the root level is reset either way.
    """
    resolved = resolve_level(level, verbose)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

    quiet = logging.DEBUG if verbose else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return resolved


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
