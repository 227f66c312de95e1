"""Logging for workspacekit.

Every module logs through a child of the "workspacekit" logger obtained
from ``get_logger`` (see ``AREAS``). ``setup_logging`` only touches that
logger, never the root logger, and tags the handlers it adds so it can
find and replace them later; there is no module-level "configured" flag.

Verbosity levels: error(0), warning(1), info(2), verbose(3), trace(4).
A log file comes from the config or the WSK_LOG environment variable;
without one, records go to stderr only when it is a real console.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from workspacekit.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

ROOT_NAME = "workspacekit"
AREAS = ("config", "filetree", "mentions", "session", "workspace")

logger = logging.getLogger(ROOT_NAME)

_HANDLER_PREFIX = f"{ROOT_NAME}."
_FORMAT = "%(asctime)s %(level)s %(area)s: %(message)s"
_DATEFMT = "%H:%M:%S"

_LEVEL_MAP = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_VERBOSITY_MAP = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: VERBOSE,
    4: TRACE,
}


class _AreaFormatter(logging.Formatter):
    """Adds ``area`` (the child logger name) and a lowercase ``level``."""

    def format(self, record: logging.LogRecord) -> str:
        record.area = _area(record.name)
        record.level = record.levelname.lower()
        return super().format(record)


def _area(name: str) -> str:
    if name.startswith(_HANDLER_PREFIX):
        return name[len(_HANDLER_PREFIX) :]
    return "core" if name == ROOT_NAME else name


def resolve_level(config: LoggingConfig | None) -> int:
    """Pick the effective log level; ``verbose`` wins over ``level``."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        return _VERBOSITY_MAP.get(config.verbose, TRACE)
    if config.level:
        return _LEVEL_MAP.get(config.level.upper(), logging.INFO)
    return logging.INFO


def installed_handlers() -> list[logging.Handler]:
    """Handlers that ``setup_logging`` attached to the workspacekit logger."""
    return [h for h in logger.handlers if (h.get_name() or "").startswith(_HANDLER_PREFIX)]


def setup_logging(
    config: LoggingConfig | None = None, *, force: bool = False
) -> list[logging.Handler]:
    """Attach handlers to the workspacekit logger.

    If handlers from an earlier call are still attached they are kept and
    the call does nothing, unless ``force`` is set: then they are closed
    and replaced, so a new level or log file takes effect.

    Args:
        config: Level, verbosity and log file settings; None means info
            level with no file unless WSK_LOG is set.
        force: Replace handlers installed by an earlier call.

    Returns:
        The handlers now installed.
    """
    existing = installed_handlers()
    if existing and not force:
        return existing
    reset_logging()

    level = resolve_level(config)
    logger.setLevel(level)
    formatter = _AreaFormatter(_FORMAT, datefmt=_DATEFMT)

    log_path = config.file if config and config.file else os.environ.get("WSK_LOG")
    if log_path:
        log_path = os.path.expanduser(log_path)
        try:
            handler: logging.Handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        except OSError as e:
            if sys.stderr.isatty():
                _attach(logging.StreamHandler(sys.stderr), "stderr", formatter, level)
            logger.warning("Cannot open log file %s: %s", log_path, e)
        else:
            _attach(handler, "file", formatter, level)
    elif sys.stderr.isatty():
        _attach(logging.StreamHandler(sys.stderr), "stderr", formatter, level)

    return installed_handlers()


def reset_logging() -> None:
    """Close and detach the handlers installed by ``setup_logging``."""
    for handler in installed_handlers():
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def follow_config_reloads() -> Callable[[], None]:
    """Reconfigure logging whenever the config is reloaded.

    Returns:
        A function that stops following reloads.
    """
    from workspacekit.config.loader import on_config_reload

    return on_config_reload(lambda config: setup_logging(config.logging, force=True))


def _attach(
    handler: logging.Handler, kind: str, formatter: logging.Formatter, level: int
) -> None:
    handler.set_name(f"{_HANDLER_PREFIX}{kind}")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the workspacekit logger, or one of its children.

    Args:
        name: Child name, normally one of ``AREAS``. None returns the
            package logger itself.
    """
    if name:
        return logger.getChild(name)
    return logger
