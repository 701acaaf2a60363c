"""
Logging configuration for the ``wxenv`` command.

The CLI calls ``setup_logging`` once.  Handlers hang off the ``wxenv``
package logger rather than the root logger, so a tool that embeds the
resolver keeps its own logging setup.  Console output goes to stderr
so that ``--json`` output on stdout stays machine-readable.

Level precedence:
    --debug / -v / -q  >  WXENV_LOG_LEVEL  >  WARNING

``WXENV_LOG_FILE`` adds a file handler (its directory is created).
``WXENV_LOG_FILE_LEVEL`` sets the file level, which defaults to DEBUG
so a log file always holds every probe and installer step.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ENV_LOG_LEVEL = "WXENV_LOG_LEVEL"
ENV_LOG_FILE = "WXENV_LOG_FILE"
ENV_LOG_FILE_LEVEL = "WXENV_LOG_FILE_LEVEL"

PACKAGE_LOGGER = "wxenv"

# (most verbose level it applies to, format, datefmt), first match wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    # every probe, with its origin
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    # installer progress
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def _level_number(name: str | None, default: int) -> tuple[int, bool]:
    """``(numeric level, recognised)`` for a level name."""
    if not name:
        return default, True
    numeric = logging.getLevelName(name.strip().upper())
    if isinstance(numeric, int):
        return numeric, True
    return default, False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        (f, d) for threshold, f, d in _CONSOLE_FORMATS if level <= threshold
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the ``wxenv`` logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Console level name.  Unknown names fall back to WARNING
            and are reported once the handlers are in place.
        log_file: Log file path (default: ``$WXENV_LOG_FILE``).
        log_file_level: File level name (default: ``$WXENV_LOG_FILE_LEVEL``,
            then DEBUG).

    Returns:
        The configured package logger.
    """
    log_file = log_file or os.environ.get(ENV_LOG_FILE) or None
    log_file_level = log_file_level or os.environ.get(ENV_LOG_FILE_LEVEL) or None

    console_level, console_known = _level_number(level, logging.WARNING)
    handlers = [_console_handler(console_level)]
    file_known = True
    if log_file:
        file_level, file_known = _level_number(log_file_level, logging.DEBUG)
        handlers.append(_file_handler(log_file, file_level))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False

    if not console_known:
        logger.warning("Unknown log level %r, using WARNING", level)
    if not file_known:
        logger.warning("Unknown log file level %r, using DEBUG", log_file_level)
    return logger
