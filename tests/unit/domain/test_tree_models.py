from __future__ import annotations

"""
Unit tests for the Folder Tree Data Models.

Verifies:
1. The default snapshot (lone open root).
2. Snapshot immutability and record sharing in `evolve`.
3. Flat record shapes of both node variants.
"""

import dataclasses

import pytest

from folderviz.domain.constants import ROOT_ID
from folderviz.domain.tree_models import (
    FileNode,
    FolderNode,
    NodeKind,
    NodeStore,
    default_state,
)


def test_default_state_has_single_open_root() -> None:
    """The initial snapshot holds only the root folder named PROJECT."""
    store = default_state()

    assert list(store) == [ROOT_ID]
    assert store.root_id == ROOT_ID
    assert store.root.name == "PROJECT"
    assert store.root.parent is None
    assert store.root.is_open is True
    assert store.root.kind is NodeKind.FOLDER


def test_node_records_are_frozen() -> None:
    """Node records cannot be edited in place."""
    node = FileNode(id="a", name="a.txt", parent=ROOT_ID)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "b.txt"  # type: ignore[misc]


def test_evolve_leaves_previous_snapshot_untouched(sample_store: NodeStore) -> None:
    """evolve returns a new snapshot; the old one still sees the old records."""
    renamed = dataclasses.replace(sample_store["util"], name="helpers.py")
    successor = sample_store.evolve({"util": renamed})

    assert sample_store["util"].name == "util.py"
    assert successor["util"].name == "helpers.py"
    # Untouched records are shared, not copied.
    assert successor["docs"] is sample_store["docs"]


def test_evolve_removal_retires_ids(sample_store: NodeStore) -> None:
    """Removed ids disappear from the mapping but stay known to the session."""
    successor = sample_store.evolve(removed=["guide"])

    assert "guide" not in successor
    assert "guide" in successor.retired
    assert successor.is_known_id("guide")
    assert not sample_store.retired


def test_equality_ignores_retired_ids(sample_store: NodeStore) -> None:
    """Two snapshots with the same nodes and root compare equal."""
    a = NodeStore(dict(sample_store.items()), ROOT_ID, retired=["x"])
    b = NodeStore(dict(sample_store.items()), ROOT_ID)
    assert a == b
    assert a != NodeStore(dict(sample_store.items()), "src")


def test_folder_lookup_rejects_files(sample_store: NodeStore) -> None:
    assert isinstance(sample_store.folder("src"), FolderNode)
    assert sample_store.folder("util") is None
    assert sample_store.folder("missing") is None
    assert sample_store.folder(None) is None


def test_to_record_shapes() -> None:
    """Folders carry children and isOpen; files carry neither."""
    folder = FolderNode(id="f", name="src", parent=ROOT_ID, children=("x",), is_open=False)
    file_ = FileNode(id="x", name="main.py", parent="f")

    assert folder.to_record() == {
        "id": "f", "kind": "folder", "name": "src", "parent": ROOT_ID,
        "children": ["x"], "isOpen": False,
    }
    assert file_.to_record() == {"id": "x", "kind": "file", "name": "main.py", "parent": "f"}
