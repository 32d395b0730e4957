"""
Logging configuration — one-time setup for the composemgr CLI.

Library code never configures logging; it only does
``logger = logging.getLogger(__name__)``. The CLI calls
``setup_logging`` once, with a level from ``resolve_level``:

    --debug  >  --verbose  >  --quiet  >  DCM_LOG_LEVEL  >  WARNING

Optional file output via DCM_LOG_FILE / DCM_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys
from typing import Mapping

# ── Format strings ──────────────────────────────────────────────

_FORMATS: dict[int, tuple[str, str | None]] = {
    # WARNING and above: message only
    logging.WARNING: ("%(levelname)s: %(message)s", None),
    # INFO: timestamp + logger
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    # DEBUG: file:line for tracing the match strategies
    logging.DEBUG: (
        "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s",
        "%H:%M:%S",
    ),
}

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Loggers we never want below WARNING unless debugging
_NOISY_LOGGERS = ("urllib3", "asyncio")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console log level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return (env or {}).get("DCM_LOG_LEVEL", "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the log file; defaults to ``level``.
        quiet_third_party: Keep noisy third-party loggers at WARNING.
    """
    console_level = _parse_level(level)

    fmt, datefmt = _FORMATS[_format_bucket(console_level)]
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        effective = min(effective, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _format_bucket(numeric_level: int) -> int:
    if numeric_level <= logging.DEBUG:
        return logging.DEBUG
    if numeric_level <= logging.INFO:
        return logging.INFO
    return logging.WARNING


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
