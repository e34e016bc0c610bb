"""Logging for the budget planner.

All loggers hang off the ``budget_planner`` package logger, which gets one
stderr handler the first time :func:`get_logger` is called.  Streamlit
re-executes the page script on every interaction, so the handler check keeps
reruns from stacking duplicate output.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .config import LOG_LEVEL

PACKAGE_LOGGER = "budget_planner"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_package_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """Attach the planner's handler once and apply ``level`` (config default)."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(getattr(h, "_budget_planner", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        handler._budget_planner = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
        package_logger.propagate = False
    package_logger.setLevel(level if level is not None else LOG_LEVEL)
    return package_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``budget_planner`` namespace."""
    package_logger = setup_package_logging()
    if not name or name == PACKAGE_LOGGER:
        return package_logger
    if name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return package_logger.getChild(name)
