"""Logging for the tallyscan namespace.

Every module logs under ``tallyscan.*``. Runtime and application code call
``get_logger(__name__)``; the pure receipt modules use
``logging.getLogger(__name__)`` directly and end up in the same tree, so one
handler installed here covers the whole pipeline.

The level comes from ``TALLYSCAN_LOG_LEVEL`` (DEBUG, INFO, WARNING, ERROR;
default INFO). Receipt text only appears in DEBUG records.
"""

import logging
import os
import sys
from typing import TextIO

LOG_NAMESPACE = "tallyscan"
LEVEL_ENV_VAR = "TALLYSCAN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVELS_BY_NAME = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Handler installed on the namespace logger; None until configured
_handler: logging.Handler | None = None


def level_from_env(value: str | None = None) -> int:
    """Map a TALLYSCAN_LOG_LEVEL value to a logging level.

    Unknown or empty values give DEFAULT_LOG_LEVEL.
    """
    if value is None:
        value = os.environ.get(LEVEL_ENV_VAR, "")
    return _LEVELS_BY_NAME.get(value.strip().upper(), DEFAULT_LOG_LEVEL)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Install the tallyscan handler once and return the namespace logger.

    Args:
        level: Log level; read from TALLYSCAN_LOG_LEVEL when None
        stream: Output stream, stderr by default

    Later calls are no-ops; use set_log_level to change the level.
    """
    global _handler

    namespace_logger = logging.getLogger(LOG_NAMESPACE)
    if _handler is not None:
        return namespace_logger

    if level is None:
        level = level_from_env()

    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(_formatter_for(level))

    namespace_logger.setLevel(level)
    namespace_logger.addHandler(_handler)
    namespace_logger.propagate = False
    return namespace_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, placed under the tallyscan namespace."""
    configure_logging()

    if name != LOG_NAMESPACE and not name.startswith(f"{LOG_NAMESPACE}."):
        name = f"{LOG_NAMESPACE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the namespace level at runtime; DEBUG adds line numbers."""
    logging.getLogger(LOG_NAMESPACE).setLevel(level)
    if _handler is not None:
        _handler.setFormatter(_formatter_for(level))
