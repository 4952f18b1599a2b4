from __future__ import annotations

"""
Logging Handlers.

Handler factories plus the tag that marks handlers installed by this
package, so re-configuration only detaches what it created itself.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

HANDLER_TAG_ATTR: str = "_folderviz_handler"


def tag_handler(handler: logging.Handler) -> logging.Handler:
    """Mark a handler as owned by FolderViz and return it."""
    setattr(handler, HANDLER_TAG_ATTR, True)
    return handler


def is_our_handler(handler: logging.Handler) -> bool:
    """True if the handler carries the FolderViz tag."""
    return bool(getattr(handler, HANDLER_TAG_ATTR, False))


def create_console_handler(level: int, formatter: logging.Formatter) -> logging.StreamHandler:
    """Tagged stderr handler."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    tag_handler(handler)
    return handler


def create_rotating_file_handler(
        log_file: str,
        level: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Build a tagged RotatingFileHandler.

    Args:
        log_file: Target path; parent directories are created.
        level: Numeric logging level.
        formatter: Record formatter.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.

    Returns:
        Optional[RotatingFileHandler]: The handler, or None if the file
        cannot be opened (a warning goes to stderr).
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    handler.setLevel(level)
    handler.setFormatter(formatter)
    tag_handler(handler)
    return handler
