from __future__ import annotations

"""
Configuration Domain Management.

Persists application settings and the last CLI session as JSON in the
user data directory. A missing or corrupted file silently yields defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from folderviz.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_ID_LENGTH,
    DEFAULT_ROOT_NAME,
)
from folderviz.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_config_path() -> str:
    """Location of config.json."""
    return os.path.join(get_user_data_dir(), CONFIG_FILENAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default session configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Tree
        "root_name": DEFAULT_ROOT_NAME,
        "template": "",
        "id_length": DEFAULT_ID_LENGTH,

        # Export
        "output_format": "tree",
        "export_dir": os.getcwd(),

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": False,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the full structure stored in config.json.

    Returns:
        Dict[str, Any]: Version stamp, global settings and last session.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": {
            "locale": "en",
        },
        "last_session": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load application state from disk, merged over the defaults.

    Args:
        path: Alternative config file location.

    Returns:
        Dict[str, Any]: The loaded state or the default structure on failure.
    """
    config_file = path or get_config_path()
    state = get_default_app_state()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    if isinstance(data.get("app_settings"), dict):
        state["app_settings"].update(data["app_settings"])
    if isinstance(data.get("last_session"), dict):
        state["last_session"].update(data["last_session"])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
        path: Alternative config file location.
    """
    config_file = path or get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_file)), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Retrieve the last session configuration, completed with defaults."""
    state = load_app_state(path)
    config = get_default_config()
    config.update(state.get("last_session", {}))
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """Store config as the last session."""
    state = load_app_state(path)
    state["last_session"] = dict(config)
    save_app_state(state, path)
