from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from checklints.core.utils.io import ensure_directory

LOGGER_NAME = "checklints"
LEVEL_ENV_VAR = "CHECKLINTS_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_STREAM_HANDLER: logging.Handler | None = None
_FILE_HANDLER: logging.Handler | None = None
_CONFIGURED_LOG_PATH: str | None = None


def _level_from_name(name: str, fallback: int) -> int:
    value = getattr(logging, name.strip().upper(), None)
    return value if isinstance(value, int) else fallback


def resolve_level(verbose: bool = False) -> int:
    """Level for the ``checklints`` logger.

    ``-v`` wins, then ``$CHECKLINTS_LOG_LEVEL``, then WARNING.
    """
    if verbose:
        return logging.DEBUG
    env_level = os.environ.get(LEVEL_ENV_VAR)
    if env_level:
        return _level_from_name(env_level, logging.WARNING)
    return logging.WARNING


def configure_logging(*, verbose: bool = False, log_path: Optional[Path] = None) -> None:
    """Configure the ``checklints`` logger with a stderr handler.

    Idempotent per-process: repeated calls only adjust levels, and the file
    handler is replaced only when ``log_path`` changes.
    """
    global _STREAM_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH

    level = resolve_level(verbose)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if _STREAM_HANDLER is None:
        _STREAM_HANDLER = logging.StreamHandler(sys.stderr)
        _STREAM_HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_STREAM_HANDLER)
    _STREAM_HANDLER.setLevel(level)

    if log_path is None:
        return

    resolved = str(Path(log_path).expanduser().resolve())
    if _CONFIGURED_LOG_PATH != resolved:
        if _FILE_HANDLER is not None:
            logger.removeHandler(_FILE_HANDLER)
            _FILE_HANDLER.close()
        ensure_directory(Path(resolved).parent)
        _FILE_HANDLER = logging.FileHandler(resolved, encoding="utf-8")
        _FILE_HANDLER.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(_FILE_HANDLER)
        _CONFIGURED_LOG_PATH = resolved
    _FILE_HANDLER.setLevel(level)


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by :func:`configure_logging`."""
    global _STREAM_HANDLER, _FILE_HANDLER, _CONFIGURED_LOG_PATH
    logger = logging.getLogger(LOGGER_NAME)
    for handler in (_STREAM_HANDLER, _FILE_HANDLER):
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
    _STREAM_HANDLER = None
    _FILE_HANDLER = None
    _CONFIGURED_LOG_PATH = None


__all__ = ["configure_logging", "resolve_level", "reset_logging_for_tests"]
