"""Logging utilities with type hints."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from kcluster.logging.json_formatter import JSONFormatter


def setup_logger(
    name: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Set up a logger with consistent formatting.

    Args:
        name: Logger name (defaults to root logger)
        level: Logging level (e.g., logging.INFO or "INFO")
        log_file: Optional file to write logs to
        format_string: Custom format string (ignored for JSON output)
        json_format: Emit one JSON object per record

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        if format_string is None:
            format_string = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
        formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
