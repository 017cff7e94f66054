"""
Logging configuration for the application.

This module sets up centralized logging for the CLI, the editor session and
background import workers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .paths import get_log_file_path


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def rotate_log_file(log_file: Path) -> None:
    """
    Keep the previous session's log next to the new one.

    ``log.txt`` is renamed to ``log.old.txt`` (replacing an older one), so
    only the last two sessions are kept.

    Args:
        log_file: Path of the log file about to be opened.
    """
    if not log_file.exists():
        return

    old_log_file = log_file.with_name(f"{log_file.stem}.old{log_file.suffix}")
    try:
        log_file.replace(old_log_file)
    except OSError as e:
        # Rotation is best effort; the new session still logs
        print(f"Warning: Could not rotate log file {log_file}: {e}", file=sys.stderr)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    log_to_file: bool = True
) -> None:
    """
    Configure application-wide logging.

    Logs always go to stdout; with ``log_to_file`` they are also written to
    the persistent data directory, rotating the previous session's file.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
        log_file: Optional path to a log file. If None and log_to_file=True, uses default location.
        format_string: Optional custom format string for log messages.
        log_to_file: Whether to log to a file. Default is True.
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    formatter = logging.Formatter(format_string)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if log_to_file:
        if log_file is None:
            log_file = get_log_file_path()

        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotate_log_file(log_file)

        file_handler = logging.FileHandler(log_file, encoding='utf-8', mode='w')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format=format_string,
        force=True  # Override any existing configuration
    )

    # Capture warnings.warn() output (duplicate ids, empty imports) in the log
    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logging.getLogger(name)
