"""Logging setup for the kwatta logger hierarchy."""

import logging
import sys
from pathlib import Path
from typing import Literal, Optional, Union

# Levels accepted by KwattaConfig.log_level
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

# Request outcome lines already carry a [SUCCESS]/[FAILURE]/[ABORTED] tag
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Union[str, Path, None] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Route kwatta's request logs to stderr and, optionally, a file.

    Every module logs on a child of the ``kwatta`` logger (the client on
    ``kwatta.client``), so configuring the parent covers them all. The
    arguments mirror ``KwattaConfig.log_level`` and ``KwattaConfig.log_file``
    and can be passed straight through.

    Args:
        level: Logging level name
        log_file: Optional path of a file that also receives the log lines
        format_string: Optional custom format string for log messages
        force: If True, replace handlers installed by an earlier call

    Returns:
        The configured ``kwatta`` logger
    """
    numeric_level = logging.getLevelName(level)
    logger = logging.getLogger("kwatta")
    logger.setLevel(numeric_level)

    # Earlier handlers are kept unless forced, so repeated calls don't duplicate output
    if force or not logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
        _attach(logger, logging.StreamHandler(sys.stderr), numeric_level, formatter)
        if log_file is not None:
            _attach(logger, logging.FileHandler(Path(log_file), encoding="utf-8"), numeric_level, formatter)

    # Records stop at "kwatta" so the application's root handlers don't print them twice
    logger.propagate = False

    return logger
