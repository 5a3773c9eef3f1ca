"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from loguru import logger


APP_NAME = "PhotoTagger"


def get_log_directory(platform: str = sys.platform) -> str:
    """Get the main log directory path.

    `%LOCALAPPDATA%` on Windows, `~/Library/Logs` on macOS and the XDG state
    directory elsewhere.
    """
    if platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return os.path.join(base, APP_NAME, "logs")
    if platform == "darwin":
        return str(Path.home() / "Library" / "Logs" / APP_NAME)
    base = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return os.path.join(base, APP_NAME.lower(), "logs")


def init_logging(log_dir: str | None = None, console_level: str | None = None) -> None:
    """Initialize rotating file logging under the given directory.

    Args:
        log_dir: Directory for `app_*.log` files (defaults to `get_log_directory()`).
        console_level: When set, also log to stderr at this level.
    """
    if log_dir is None:
        log_dir = get_log_directory()
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level="INFO",
    )
    if console_level:
        logger.add(sys.stderr, level=console_level, format="{level: <8} | {message}")


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Find the latest log file in the specified directory."""
    if log_dir is None:
        log_dir = get_log_directory()

    try:
        log_path = Path(log_dir)
        if not log_path.exists():
            return None

        log_files = list(log_path.glob("app_*.log"))
        if not log_files:
            return None

        # Return the most recently modified file
        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None
