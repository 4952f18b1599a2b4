from __future__ import annotations

"""
Logging Bootstrap.

Idempotent configuration of the root logger. Records are pushed through a
QueueHandler to a QueueListener thread that owns the real console and file
handlers, so writing the diagnostic file never blocks an edit.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from folderviz.infra.fs import get_user_data_dir
from folderviz.infra.logging.config import LEVEL_MAP, LoggingConfig
from folderviz.infra.logging.handlers import (
    create_console_handler,
    create_rotating_file_handler,
    is_our_handler,
    tag_handler,
)

CONFIGURED_FLAG_ATTR: str = "_folderviz_configured"
QUEUE_LISTENER_ATTR: str = "_folderviz_queue_listener"

DEFAULT_LOG_FILENAME = "folderviz.log"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILENAME) -> str:
    """Path of the persistent log inside the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once per process.

    Repeated calls are no-ops unless force is set, in which case the
    handlers and listener installed earlier are torn down and rebuilt.

    Args:
        cfg: Logging settings.
        force: Rebuild even if logging is already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level = parse_level(cfg.level)
    root.setLevel(level)
    reset_logging(root)

    targets: List[logging.Handler] = []
    if cfg.console:
        targets.append(create_console_handler(level, logging.Formatter(cfg.console_fmt)))
    if cfg.log_file:
        fh = create_rotating_file_handler(
            cfg.log_file,
            level,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh is not None:
            targets.append(fh)

    if not targets:
        return root

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
    listener = QueueListener(log_queue, *targets, respect_handler_level=True)
    listener.start()

    root.addHandler(tag_handler(QueueHandler(log_queue)))
    setattr(root, QUEUE_LISTENER_ATTR, listener)
    setattr(root, CONFIGURED_FLAG_ATTR, True)
    atexit.register(_stop_listener, listener)
    return root


def reset_logging(root: Optional[logging.Logger] = None) -> None:
    """Detach FolderViz handlers and stop the queue listener, if any."""
    root = root or logging.getLogger()
    for handler in list(root.handlers):
        if is_our_handler(handler):
            root.removeHandler(handler)
            handler.close()

    listener = getattr(root, QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _stop_listener(listener)
        setattr(root, QUEUE_LISTENER_ATTR, None)
    setattr(root, CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    """Named logger (usually __name__)."""
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Tail of the persistent log file, for diagnostics.

    Args:
        n_lines: Maximum number of trailing lines.
        log_path: Log file to read; defaults to the standard location.

    Returns:
        str: The trailing lines, or a short notice if the file is absent.
    """
    path = log_path or get_default_log_path()
    if not os.path.exists(path):
        return "Log file not found."
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.readlines()
    return "".join(lines[-n_lines:])


def parse_level(level: str) -> int:
    """Convert a level name to its numeric constant (INFO when unknown)."""
    if not level:
        return logging.INFO
    return LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stop_listener(listener: QueueListener) -> None:
    # QueueListener.stop() fails on a listener that was already stopped.
    if getattr(listener, "_thread", None) is not None:
        try:
            listener.stop()
        except RuntimeError as e:
            sys.stderr.write(f"WARNING: Log listener shutdown failed: {e}\n")
