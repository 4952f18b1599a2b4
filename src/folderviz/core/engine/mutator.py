from __future__ import annotations

"""
Structural Mutator.

Total functions from (snapshot, operation) to snapshot. An illegal request
never raises: it is logged at DEBUG and the very same input snapshot object
is returned, so callers can detect a rejection with `new is old`.
Accepted requests produce a fresh snapshot that shares every untouched node
record with its predecessor.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from folderviz.core.engine.ids import new_id
from folderviz.core.engine.queries import ancestors, collect_subtree_ids, is_descendant
from folderviz.domain.constants import (
    DEFAULT_ID_LENGTH,
    DEFAULT_NEW_FILE_NAME,
    DEFAULT_NEW_FOLDER_NAME,
)
from folderviz.domain.tree_models import (
    DropMode,
    FileNode,
    FolderNode,
    Node,
    NodeKind,
    NodeStore,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CREATION
# -----------------------------------------------------------------------------

def add_node(
        store: NodeStore,
        kind: NodeKind | str,
        name: str,
        parent_id: Optional[str],
        *,
        node_id: Optional[str] = None,
        id_length: int = DEFAULT_ID_LENGTH,
) -> NodeStore:
    """
    Append a new node to a folder's children and open that folder.

    Args:
        store: Current snapshot.
        kind: Folder or file.
        name: Display name; surrounding whitespace is stripped.
        parent_id: Destination folder. None means the root.
        node_id: Explicit identifier; rejected if live or retired.
        id_length: Length of generated identifiers.

    Returns:
        NodeStore: Successor snapshot, or `store` if the request is invalid.
    """
    clean_name = (name or "").strip()
    if not clean_name:
        return _reject(store, "add", "empty name")

    pid = parent_id if parent_id is not None else store.root_id
    parent = store.folder(pid)
    if parent is None:
        return _reject(store, "add", f"parent '{pid}' is not an existing folder")

    try:
        node_kind = NodeKind(kind)
    except ValueError:
        return _reject(store, "add", f"unknown kind '{kind}'")

    if node_id is not None and store.is_known_id(node_id):
        return _reject(store, "add", f"identifier '{node_id}' already used")
    nid = node_id or new_id(store, id_length)

    node: Node
    if node_kind is NodeKind.FOLDER:
        node = FolderNode(id=nid, name=clean_name, parent=pid, children=(), is_open=True)
    else:
        node = FileNode(id=nid, name=clean_name, parent=pid)

    new_parent = replace(parent, children=parent.children + (nid,), is_open=True)
    logger.debug(f"Added {node_kind.value} '{clean_name}' ({nid}) under '{pid}'.")
    return store.evolve({nid: node, pid: new_parent})


def add_relative(
        store: NodeStore,
        kind: NodeKind | str,
        target_id: str,
        name: Optional[str] = None,
        *,
        id_length: int = DEFAULT_ID_LENGTH,
) -> NodeStore:
    """
    Context-menu add: create a node inside target if it is a folder,
    otherwise next to it in the target's parent.

    The name defaults to "New Folder" or "new-file.txt".
    """
    target = store.get(target_id)
    if target is None:
        return _reject(store, "add", f"target '{target_id}' not found")

    parent_id = target.id if isinstance(target, FolderNode) else (target.parent or store.root_id)
    if name is None:
        name = DEFAULT_NEW_FOLDER_NAME if kind == NodeKind.FOLDER else DEFAULT_NEW_FILE_NAME
    return add_node(store, kind, name, parent_id, id_length=id_length)

# -----------------------------------------------------------------------------
# REMOVAL AND IN-PLACE EDITS
# -----------------------------------------------------------------------------

def remove_subtree(store: NodeStore, node_id: str) -> NodeStore:
    """
    Delete node_id and everything below it, and unlink it from its parent.

    The root can never be removed. Removed ids are retired and will not be
    handed out again in this session.
    """
    if node_id == store.root_id:
        return _reject(store, "remove", "the root cannot be deleted")
    node = store.get(node_id)
    if node is None:
        return _reject(store, "remove", f"node '{node_id}' not found")

    doomed = collect_subtree_ids(store, node_id)
    updates: Dict[str, Node] = {}
    parent = store.folder(node.parent)
    if parent is not None:
        updates[parent.id] = replace(
            parent, children=tuple(cid for cid in parent.children if cid != node_id)
        )

    logger.debug(f"Removed subtree '{node_id}' ({len(doomed)} node(s)).")
    return store.evolve(updates, removed=doomed)


def rename(store: NodeStore, node_id: str, new_name: str) -> NodeStore:
    """Replace a node's name with the stripped new_name; blank names are rejected."""
    clean_name = (new_name or "").strip()
    if not clean_name:
        return _reject(store, "rename", "empty name")
    node = store.get(node_id)
    if node is None:
        return _reject(store, "rename", f"node '{node_id}' not found")
    if node.name == clean_name:
        return store
    return store.evolve({node_id: replace(node, name=clean_name)})


def toggle_open(store: NodeStore, node_id: str) -> NodeStore:
    """Flip the expanded state of a folder. Files and unknown ids are ignored."""
    folder = store.folder(node_id)
    if folder is None:
        return _reject(store, "toggle", f"'{node_id}' is not a folder")
    return store.evolve({node_id: replace(folder, is_open=not folder.is_open)})


def set_open(store: NodeStore, node_id: str, is_open: bool) -> NodeStore:
    """Force the expanded state of a folder."""
    folder = store.folder(node_id)
    if folder is None or folder.is_open == is_open:
        return store
    return store.evolve({node_id: replace(folder, is_open=is_open)})


def reveal(store: NodeStore, node_id: str) -> NodeStore:
    """Open every ancestor folder of node_id so that it becomes visible."""
    updates: Dict[str, Node] = {}
    for ancestor_id in ancestors(store, node_id):
        folder = store.folder(ancestor_id)
        if folder is not None and not folder.is_open:
            updates[ancestor_id] = replace(folder, is_open=True)
    return store.evolve(updates) if updates else store

# -----------------------------------------------------------------------------
# REPARENTING
# -----------------------------------------------------------------------------

def move(store: NodeStore, active_id: str, target_id: str, mode: DropMode | str) -> NodeStore:
    """
    Reparent active_id relative to target_id.

    INTO appends active_id to the target folder and opens it. BEFORE and
    AFTER insert active_id into the target's parent right next to the target;
    the insertion index is computed once active_id has been unlinked, so a
    move within the same parent behaves like a stable array move.

    Rejected when active_id is the root, equals target_id, either id is
    unknown, the destination folder lies inside active_id's subtree, an INTO
    target is not a folder, or a sibling target has no parent.

    Returns:
        NodeStore: Successor snapshot, or `store` on rejection.
    """
    try:
        drop_mode = DropMode(mode)
    except ValueError:
        return _reject(store, "move", f"unknown mode '{mode}'")

    if active_id == store.root_id:
        return _reject(store, "move", "the root cannot be moved")
    if active_id == target_id:
        return _reject(store, "move", "source and target are the same node")

    active = store.get(active_id)
    target = store.get(target_id)
    if active is None or target is None:
        return _reject(store, "move", f"unknown node ('{active_id}' -> '{target_id}')")

    if drop_mode is DropMode.INTO:
        if not isinstance(target, FolderNode):
            return _reject(store, "move", f"INTO target '{target_id}' is not a folder")
        dest_id = target_id
    else:
        if target.parent is None:
            return _reject(store, "move", f"sibling target '{target_id}' has no parent")
        dest_id = target.parent

    if _lands_inside(store, active_id, dest_id):
        return _reject(store, "move", f"'{dest_id}' lies inside the subtree of '{active_id}'")

    dest = store.folder(dest_id)
    if dest is None:
        return _reject(store, "move", f"destination '{dest_id}' is not a folder")

    updates: Dict[str, Node] = {}
    old_parent = store.folder(active.parent)
    if old_parent is not None and old_parent.id != dest_id:
        updates[old_parent.id] = replace(
            old_parent, children=tuple(cid for cid in old_parent.children if cid != active_id)
        )

    siblings: List[str] = [cid for cid in dest.children if cid != active_id]
    if drop_mode is DropMode.INTO:
        siblings.append(active_id)
        updates[dest_id] = replace(dest, children=tuple(siblings), is_open=True)
    else:
        idx = siblings.index(target_id)
        insert_at = idx if drop_mode is DropMode.BEFORE else idx + 1
        siblings.insert(insert_at, active_id)
        updates[dest_id] = replace(dest, children=tuple(siblings))

    updates[active_id] = replace(active, parent=dest_id)
    logger.debug(f"Moved '{active_id}' {drop_mode.value} '{target_id}'.")
    return store.evolve(updates)


def move_to_folder(store: NodeStore, node_id: str, folder_id: str) -> NodeStore:
    """Builder-panel move: append node_id to folder_id (same rules as INTO)."""
    return move(store, node_id, folder_id, DropMode.INTO)


def reorder_children(store: NodeStore, parent_id: str, new_order: Sequence[str]) -> NodeStore:
    """
    Replace a folder's children list wholesale.

    new_order must be a permutation of the current children. Anything else
    (dropped, duplicated or foreign ids) is rejected rather than applied.
    """
    parent = store.folder(parent_id)
    if parent is None:
        return _reject(store, "reorder", f"'{parent_id}' is not a folder")

    order = tuple(new_order)
    if len(order) != len(parent.children) or set(order) != set(parent.children):
        return _reject(store, "reorder", f"new order for '{parent_id}' is not a permutation of its children")
    if order == parent.children:
        return store
    return store.evolve({parent_id: replace(parent, children=order)})


def array_move(items: Sequence[str], from_index: int, to_index: int) -> List[str]:
    """Return a copy of items with the element at from_index moved to to_index."""
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _lands_inside(store: NodeStore, active_id: str, dest_id: str) -> bool:
    """True if placing active_id under dest_id would make it its own ancestor."""
    return dest_id == active_id or is_descendant(store, dest_id, active_id)


def _reject(store: NodeStore, operation: str, reason: str) -> NodeStore:
    logger.debug(f"Rejected {operation}: {reason}.")
    return store
