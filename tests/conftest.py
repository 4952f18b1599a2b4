from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a deterministic sample tree and a configuration dict.
"""

import os
import sys
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from folderviz.core.engine.mutator import add_node  # noqa: E402
from folderviz.domain.tree_models import NodeStore, default_state  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_store() -> NodeStore:
    """
    Return a small tree with predictable identifiers.

    Structure:
    PROJECT (root)
      src/            id=src
        lib/          id=lib
          util.py     id=util
        index.js      id=index
      docs/           id=docs
        guide.md      id=guide
      README.md       id=readme
    """
    store = default_state()
    store = add_node(store, "folder", "src", "root", node_id="src")
    store = add_node(store, "folder", "lib", "src", node_id="lib")
    store = add_node(store, "file", "util.py", "lib", node_id="util")
    store = add_node(store, "file", "index.js", "src", node_id="index")
    store = add_node(store, "folder", "docs", "root", node_id="docs")
    store = add_node(store, "file", "guide.md", "docs", node_id="guide")
    store = add_node(store, "file", "README.md", "root", node_id="readme")
    return store


@pytest.fixture
def mock_config_dict(tmp_path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Mirrors the keys of 'folderviz.domain.config.get_default_config'.
    """
    return {
        "root_name": "PROJECT",
        "template": "",
        "id_length": 8,
        "output_format": "tree",
        "export_dir": str(tmp_path / "exports"),
        "log_level": "INFO",
        "log_to_file": False,
    }
