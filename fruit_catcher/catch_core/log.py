"""
Logging setup.

The terminal belongs to curses while a game runs, so log records go to a
file. Modules log through logging.getLogger(__name__), which puts them
under the "fruit_catcher" logger configured here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "fruit_catcher"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_file: File to append records to. Logging stays silent if None.
        debug: Log DEBUG records too (default is INFO).

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Reconfiguring replaces earlier handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        logger.addHandler(logging.NullHandler())
    else:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(fh)

    logger.propagate = False
    logger.debug("Logging to %s", log_file)
    return logger
