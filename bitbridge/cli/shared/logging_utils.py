"""Loguru helpers for consistent console and file logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"

_SINK_IDS: dict[str, int] = {}


def log_dir() -> Path:
    return Path.home() / ".bitbridge" / "logs"


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_path = log_dir() / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _SINK_IDS[name] = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    return log_path


def configure_logging(name: str, level: str = "INFO", *, to_file: bool = True) -> Path | None:
    """Replace the default stderr sink; optionally add the rotating file sink."""
    logger.remove()
    _SINK_IDS.clear()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    logger.enable("bitbridge")
    if not to_file:
        return None
    return ensure_rotating_log_file(name, level=level)
