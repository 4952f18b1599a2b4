from __future__ import annotations

"""
Unit tests for identifier generation.
"""

from unittest.mock import patch

import pytest

from folderviz.core.engine import ids
from folderviz.core.engine.mutator import remove_subtree


def test_generate_id_is_lowercase_hex_of_requested_length() -> None:
    for length in (4, 7, 8, 16):
        value = ids.generate_id(lambda _: False, length)
        assert len(value) == length
        assert value == value.lower()
        int(value, 16)


def test_generate_id_clamps_length() -> None:
    assert len(ids.generate_id(lambda _: False, 1)) == 4
    assert len(ids.generate_id(lambda _: False, 500)) == 32


def test_generate_id_rerolls_on_collision() -> None:
    draws = iter(["aaaaaaaa", "aaaaaaaa", "bbbbbbbb"])
    with patch("folderviz.core.engine.ids.secrets.token_hex", side_effect=lambda n: next(draws)):
        assert ids.generate_id(lambda v: v == "aaaaaaaa", 8) == "bbbbbbbb"


def test_generate_id_gives_up_after_max_attempts() -> None:
    with pytest.raises(RuntimeError):
        ids.generate_id(lambda _: True, 8)


def test_new_id_avoids_retired_ids(sample_store) -> None:
    store = remove_subtree(sample_store, "readme")
    draws = iter(["readme", "src", "cafebabe"])

    with patch("folderviz.core.engine.ids.secrets.token_hex", side_effect=lambda n: next(draws)):
        assert ids.new_id(store, 8) == "cafebabe"
