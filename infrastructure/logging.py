"""Logging initialization utilities using loguru."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

from infrastructure.settings import JsonSettings


def get_log_directory() -> str:
    """Get the default log directory path."""
    return str(Path.home() / ".photometa" / "logs")


def init_logging(
    log_dir: str | None = None, level: str = "INFO", console: bool = False
) -> Path:
    """Initialize rotating file logging under the given directory.

    Returns the directory the sink writes to.
    """
    log_path = Path(log_dir or get_log_directory())
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "photometa_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    if console:
        logger.add(sys.stderr, level=level)
    return log_path


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Find the latest log file in the specified directory."""
    log_path = Path(log_dir or get_log_directory())
    try:
        if not log_path.exists():
            return None
        log_files = list(log_path.glob("photometa_*.log"))
        if not log_files:
            return None
        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None


def init_logging_from_settings(settings: JsonSettings, console: bool = False) -> Path:
    """Initialize logging from the `logging.level` and `logging.dir` settings."""
    level = str(settings.get("logging.level", "INFO") or "INFO").upper()
    return init_logging(settings.get("logging.dir"), level=level, console=console)
