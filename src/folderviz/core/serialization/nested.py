from __future__ import annotations

"""
Nested Tree Serialization.

Converts between the flat NodeStore and the plain nested description
`{name, kind, children}` used by templates and hand-written imports.
Malformed input degrades to documented defaults instead of failing.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from folderviz.core.engine.ids import generate_id
from folderviz.domain.constants import DEFAULT_ID_LENGTH, DEFAULT_ROOT_NAME, PLACEHOLDER_NAME
from folderviz.domain.tree_models import FileNode, FolderNode, Node, NodeKind, NodeStore, default_state

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def from_nested(
        nested: Any,
        id_length: int = DEFAULT_ID_LENGTH,
        is_taken: Optional[Callable[[str], bool]] = None,
) -> NodeStore:
    """
    Build a fresh snapshot from a nested description.

    Defaults:
    - root name: the nested root's name, else "PROJECT".
    - missing kind: folder. Any kind other than "folder" is a file.
    - missing or blank name: "untitled".
    - folders start open; `children` that is not a list counts as empty;
      children entries that are not objects are skipped.

    Args:
        nested: Parsed nested description (usually a dict).
        id_length: Length of generated identifiers.
        is_taken: Extra predicate for identifiers that must not be handed
            out, e.g. ids live or retired in the session being replaced.

    Returns:
        NodeStore: Snapshot with freshly assigned identifiers.
    """
    if not isinstance(nested, dict):
        logger.debug(f"Nested import received {type(nested).__name__}; using an empty tree.")
        nested = {}

    store = default_state(_clean_name(nested.get("name"), DEFAULT_ROOT_NAME))
    records: Dict[str, Node] = dict(store.items())

    def _taken(candidate: str) -> bool:
        return candidate in records or (is_taken is not None and is_taken(candidate))

    def _add_children(parent_id: str, children: Any) -> None:
        child_ids: List[str] = []
        for entry in _as_list(children):
            if not isinstance(entry, dict):
                logger.debug(f"Skipping non-object child entry under '{parent_id}'.")
                continue
            nid = generate_id(_taken, id_length)
            name = _clean_name(entry.get("name"), PLACEHOLDER_NAME)
            kind = entry.get("kind") or NodeKind.FOLDER.value
            if kind == NodeKind.FOLDER.value:
                records[nid] = FolderNode(id=nid, name=name, parent=parent_id, children=(), is_open=True)
                child_ids.append(nid)
                _add_children(nid, entry.get("children"))
            else:
                records[nid] = FileNode(id=nid, name=name, parent=parent_id)
                child_ids.append(nid)
        parent = records[parent_id]
        assert isinstance(parent, FolderNode)
        records[parent_id] = FolderNode(
            id=parent.id, name=parent.name, parent=parent.parent,
            children=tuple(child_ids), is_open=parent.is_open,
        )

    _add_children(store.root_id, nested.get("children"))
    return NodeStore(records, store.root_id)


def to_nested(store: NodeStore, root_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Export the subtree at root_id as a nested description.

    Identifiers and open states are dropped; folders carry a `children`
    list, files do not.
    """
    start = root_id if root_id is not None else store.root_id

    def _build(node_id: str) -> Dict[str, Any]:
        node = store[node_id]
        obj: Dict[str, Any] = {"name": node.name, "kind": node.kind.value}
        if isinstance(node, FolderNode):
            obj["children"] = [_build(cid) for cid in node.children if cid in store]
        return obj

    return _build(start)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _clean_name(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = str(value).strip()
    return text if text else fallback


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []

