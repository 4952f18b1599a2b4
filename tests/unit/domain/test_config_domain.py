from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Resilience against corrupted config files.
3. Persistence (Save/Load) without touching real user data.
"""

import json
from unittest.mock import patch

import pytest

from folderviz.domain.config import (
    get_config_path,
    get_default_app_state,
    get_default_config,
    load_app_state,
    load_config,
    save_config,
)
from folderviz.domain.constants import CURRENT_CONFIG_VERSION


@pytest.fixture
def mock_user_data_dir(tmp_path):
    """Redirect the user data directory so the real one is never touched."""
    config_dir = tmp_path / "FolderViz"
    config_dir.mkdir()
    with patch("folderviz.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir


def test_default_config_keys() -> None:
    config = get_default_config()
    assert set(config) == {
        "root_name", "template", "id_length", "output_format",
        "export_dir", "log_level", "log_to_file",
    }
    assert config["root_name"] == "PROJECT"
    assert config["id_length"] == 8


def test_config_path_lives_in_user_dir(mock_user_data_dir) -> None:
    assert get_config_path() == str(mock_user_data_dir / "config.json")


def test_load_fresh_state_returns_defaults(mock_user_data_dir) -> None:
    state = load_app_state()
    assert state == get_default_app_state()
    assert state["version"] == CURRENT_CONFIG_VERSION


def test_load_corrupted_file_returns_defaults(mock_user_data_dir) -> None:
    (mock_user_data_dir / "config.json").write_text("{ this is not json", encoding="utf-8")
    assert load_app_state() == get_default_app_state()

    (mock_user_data_dir / "config.json").write_text("[1, 2, 3]", encoding="utf-8")
    assert load_app_state() == get_default_app_state()


def test_partial_file_is_merged_over_defaults(mock_user_data_dir) -> None:
    payload = {"version": "0.1", "last_session": {"root_name": "acme"}}
    (mock_user_data_dir / "config.json").write_text(json.dumps(payload), encoding="utf-8")

    config = load_config()

    assert config["root_name"] == "acme"
    assert config["output_format"] == "tree"
    assert load_app_state()["version"] == CURRENT_CONFIG_VERSION


def test_save_then_load_round_trip(mock_user_data_dir) -> None:
    config = get_default_config()
    config["root_name"] = "saved"
    config["id_length"] = 12

    save_config(config)
    stored = json.loads((mock_user_data_dir / "config.json").read_text(encoding="utf-8"))

    assert stored["version"] == CURRENT_CONFIG_VERSION
    assert stored["last_session"]["root_name"] == "saved"
    assert load_config()["id_length"] == 12


def test_explicit_path_overrides_user_dir(tmp_path) -> None:
    target = tmp_path / "custom" / "settings.json"
    save_config({"root_name": "elsewhere"}, path=str(target))

    assert target.exists()
    assert load_config(path=str(target))["root_name"] == "elsewhere"
