"""Logging setup shared by the testreport modules and CLI.

All module loggers hang off the ``testreport`` logger, which owns the single
handler. The handler writes to stderr; stdout carries the command output.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "testreport"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def _package_logger() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def _coerce_level(level: Union[int, str]) -> int:
    """Accept ``logging.DEBUG`` or a level name such as ``"debug"``."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_root_logger(
    level: Union[int, str] = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the package handler once.

    Later calls do nothing until :func:`reset_logging` runs.

    Args:
        level: Initial level, as a number or a level name.
        format_string: Record format; defaults to :data:`DEFAULT_FORMAT`.
        handler: Handler to install; defaults to a stderr stream handler.
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    package_logger = _package_logger()
    package_logger.setLevel(_coerce_level(level))
    package_logger.handlers.clear()

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)
    # pytest's caplog listens on the global root logger
    package_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, usually called with ``__name__``.

    Names outside the ``testreport`` namespace are nested under it so their
    records reach the package handler.
    """
    setup_root_logger()

    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> int:
    """Set the level of the package logger and its handlers.

    Args:
        level: A number such as ``logging.DEBUG`` or a name such as ``"warning"``.

    Returns:
        The numeric level applied.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    setup_root_logger()

    numeric = _coerce_level(level)
    package_logger = _package_logger()
    package_logger.setLevel(numeric)
    for handler in package_logger.handlers:
        handler.setLevel(numeric)
    return numeric


def level_for_flags(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI ``--verbose``/``--quiet`` flags to a level; verbose wins."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Apply the level selected by the CLI flags and return it."""
    return set_global_log_level(level_for_flags(verbose, quiet))


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler and level; used by tests."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    package_logger = _package_logger()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
