from __future__ import annotations

from .config import LoggingConfig
from .core import (
    CONFIGURED_FLAG_ATTR,
    QUEUE_LISTENER_ATTR,
    configure_logging,
    get_default_log_path,
    get_logger,
    get_recent_logs,
    reset_logging,
)
from .handlers import HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "reset_logging",
    "get_logger",
    "get_recent_logs",
    "get_default_log_path",
    "HANDLER_TAG_ATTR",
    "CONFIGURED_FLAG_ATTR",
    "QUEUE_LISTENER_ATTR",
]
