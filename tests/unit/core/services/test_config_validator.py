from __future__ import annotations

"""
Unit tests for configuration validation.

Verifies:
1. Defaults fill every gap and unknown keys are dropped.
2. Type coercion and clamping produce warnings instead of crashes.
3. Strict mode raises on the same problems.
"""

import os

import pytest

from folderviz.core.services.validator import validate_config
from folderviz.domain.config import get_default_config


def test_valid_config_passes_through(mock_config_dict) -> None:
    clean, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert clean["root_name"] == "PROJECT"
    assert clean["id_length"] == 8
    assert clean["output_format"] == "tree"
    assert os.path.isabs(clean["export_dir"])


def test_non_dict_falls_back_to_defaults() -> None:
    clean, warnings = validate_config(["not", "a", "dict"])

    assert clean == get_default_config()
    assert len(warnings) == 1


def test_unknown_keys_are_dropped(mock_config_dict) -> None:
    mock_config_dict["legacy_option"] = True
    clean, _ = validate_config(mock_config_dict)
    assert "legacy_option" not in clean


def test_id_length_is_clamped(mock_config_dict) -> None:
    mock_config_dict["id_length"] = 2
    clean, warnings = validate_config(mock_config_dict)
    assert clean["id_length"] == 4
    assert any("clamped" in w for w in warnings)

    mock_config_dict["id_length"] = "64"
    clean, _ = validate_config(mock_config_dict)
    assert clean["id_length"] == 32


def test_bad_types_fall_back(mock_config_dict) -> None:
    mock_config_dict.update({"root_name": 42, "id_length": "many", "log_to_file": "maybe"})
    clean, warnings = validate_config(mock_config_dict)

    assert clean["root_name"] == "PROJECT"
    assert clean["id_length"] == 8
    assert clean["log_to_file"] is False
    assert len(warnings) == 3


def test_blank_strings_use_defaults(mock_config_dict) -> None:
    mock_config_dict["root_name"] = "   "
    clean, warnings = validate_config(mock_config_dict)
    assert clean["root_name"] == "PROJECT"
    assert warnings == []


def test_textual_booleans_and_level_case(mock_config_dict) -> None:
    mock_config_dict.update({"log_to_file": "yes", "log_level": "debug"})
    clean, _ = validate_config(mock_config_dict)
    assert clean["log_to_file"] is True
    assert clean["log_level"] == "DEBUG"


def test_unknown_output_format(mock_config_dict) -> None:
    mock_config_dict["output_format"] = "yaml"
    clean, warnings = validate_config(mock_config_dict)
    assert clean["output_format"] == "tree"
    assert warnings

    with pytest.raises(ValueError):
        validate_config(mock_config_dict, strict=True)


def test_strict_mode_raises_on_type_errors(mock_config_dict) -> None:
    with pytest.raises(TypeError):
        validate_config("config", strict=True)

    mock_config_dict["id_length"] = "many"
    with pytest.raises(TypeError):
        validate_config(mock_config_dict, strict=True)
