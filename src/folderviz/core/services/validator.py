from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration (persisted file, CLI overrides) into
strictly typed values, filling gaps with defaults. Problems are collected
as warnings, or raised in strict mode.
"""

import logging
from typing import Any, Dict, List, Tuple

from folderviz.domain.config import get_default_config
from folderviz.domain.constants import MAX_ID_LENGTH, MIN_ID_LENGTH, OUTPUT_FORMATS
from folderviz.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data.
        strict: Raise TypeError/ValueError instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for field in ("root_name", "template", "output_format", "export_dir", "log_level"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["log_to_file"] = _as_bool(
        merged.get("log_to_file"), defaults["log_to_file"], "log_to_file", warnings, strict
    )
    merged["id_length"] = _as_int_in_range(
        merged.get("id_length"), defaults["id_length"], MIN_ID_LENGTH, MAX_ID_LENGTH,
        "id_length", warnings, strict,
    )

    if merged["output_format"] not in OUTPUT_FORMATS:
        msg = f"Unknown output_format '{merged['output_format']}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{defaults['output_format']}'.")
        merged["output_format"] = defaults["output_format"]

    merged["export_dir"] = normalize_path(merged["export_dir"], defaults["export_dir"])
    merged["log_level"] = merged["log_level"].upper()

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Strings are stripped; blanks fall back to the default."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Accept real booleans and the usual textual spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int_in_range(
        value: Any,
        fallback: int,
        low: int,
        high: int,
        field: str,
        warnings: List[str],
        strict: bool,
) -> int:
    """Integers (or numeric strings) clamped into [low, high]."""
    if isinstance(value, bool) or value is None:
        number = None
    else:
        try:
            number = int(value)
        except (TypeError, ValueError):
            number = None

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    clamped = max(low, min(high, number))
    if clamped != number:
        warnings.append(f"Field '{field}' clamped from {number} to {clamped}.")
    return clamped
