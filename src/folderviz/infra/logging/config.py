from __future__ import annotations

"""
Logging Configuration Models.

Defines the settings consumed by `configure_logging` and the mapping from
level names to the numeric constants of the standard logging module.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem.

    Attributes:
        level: Minimum severity captured by the root logger.
        console: Emit records to stderr.
        log_file: Optional path of the rotating diagnostic log.
        max_bytes: Size at which the log file rolls over.
        backup_count: Number of rolled-over files kept.
        console_fmt: Record layout on the terminal.
        file_fmt: Record layout in the log file.
        datefmt: Timestamp layout in the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
