from __future__ import annotations

"""
Flat JSON Serialization and Import Detection.

The flat form `{"root_id": ..., "nodes": {id: record}}` mirrors the NodeStore
exactly and round-trips without loss. Import of this form is strict: any
record or structural defect is a FormatError and nothing is applied.
`load_payload` auto-detects flat versus nested payloads.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from folderviz.core.engine.queries import find_violations
from folderviz.core.serialization.nested import from_nested
from folderviz.domain.constants import DEFAULT_ID_LENGTH
from folderviz.domain.errors import FormatError
from folderviz.domain.tree_models import FileNode, FolderNode, Node, NodeKind, NodeStore

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# EXPORT
# -----------------------------------------------------------------------------

def to_flat(store: NodeStore) -> Dict[str, Any]:
    """Export the snapshot as the flat exchange form."""
    return {
        "root_id": store.root_id,
        "nodes": {node_id: node.to_record() for node_id, node in store.items()},
    }


def dumps_flat(store: NodeStore) -> str:
    """Pretty-printed flat JSON, as written to structure.json."""
    return json.dumps(to_flat(store), ensure_ascii=False, indent=2)

# -----------------------------------------------------------------------------
# IMPORT
# -----------------------------------------------------------------------------

def from_flat(data: Any) -> NodeStore:
    """
    Rebuild a snapshot from the flat exchange form.

    Args:
        data: Parsed JSON object with `root_id` and `nodes`.

    Returns:
        NodeStore: The imported snapshot.

    Raises:
        FormatError: If root_id is absent from nodes, a record is malformed,
            or the records violate the tree invariants.
    """
    if not isinstance(data, dict):
        raise FormatError(f"Flat import expects an object, received {type(data).__name__}.")

    root_id = data.get("root_id")
    raw_nodes = data.get("nodes")
    if not isinstance(root_id, str) or not root_id:
        raise FormatError("Flat import requires a non-empty string 'root_id'.")
    if not isinstance(raw_nodes, dict):
        raise FormatError("Flat import requires a 'nodes' object.")
    if root_id not in raw_nodes:
        raise FormatError(f"Declared root_id '{root_id}' is missing from nodes.")

    records: Dict[str, Node] = {}
    for node_id, raw in raw_nodes.items():
        records[node_id] = _parse_record(node_id, raw)

    store = NodeStore(records, root_id)
    problems = find_violations(store)
    if problems:
        logger.warning(f"Flat import rejected with {len(problems)} structural problem(s).")
        raise FormatError("Invalid tree structure: " + "; ".join(problems[:5]))
    return store


def parse_payload(text: str) -> Any:
    """Decode JSON text, mapping decoder errors to FormatError."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Import failed: {e}") from e


def load_payload(
        data: Any,
        id_length: int = DEFAULT_ID_LENGTH,
        is_taken: Optional[Callable[[str], bool]] = None,
) -> NodeStore:
    """
    Import either exchange form.

    Flat when both `root_id` and `nodes` are present; nested when the object
    has no `kind` or kind is "folder". is_taken is forwarded to the nested
    importer so generated ids avoid ids already used by the caller.

    Raises:
        FormatError: For anything else, or for an invalid flat payload.
    """
    if isinstance(data, dict) and "root_id" in data and "nodes" in data:
        logger.debug("Import detected as flat form.")
        return from_flat(data)
    if isinstance(data, dict) and data.get("kind", NodeKind.FOLDER.value) in (None, "", NodeKind.FOLDER.value):
        logger.debug("Import detected as nested form.")
        return from_nested(data, id_length=id_length, is_taken=is_taken)
    raise FormatError("Unrecognized JSON format.")

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _parse_record(node_id: str, raw: Any) -> Node:
    if not isinstance(raw, dict):
        raise FormatError(f"Node '{node_id}' must be an object.")

    declared_id = raw.get("id", node_id)
    if declared_id != node_id:
        raise FormatError(f"Node keyed '{node_id}' declares id '{declared_id}'.")

    name = raw.get("name")
    if not isinstance(name, str):
        raise FormatError(f"Node '{node_id}' requires a string 'name'.")

    parent = raw.get("parent")
    if parent is not None and not isinstance(parent, str):
        raise FormatError(f"Node '{node_id}' has a non-string 'parent'.")

    # Records written without a kind tag are folders iff they carry children.
    kind = raw.get("kind") or (NodeKind.FOLDER.value if "children" in raw else NodeKind.FILE.value)
    if kind == NodeKind.FOLDER.value:
        children = raw.get("children", [])
        if not isinstance(children, list) or not all(isinstance(c, str) for c in children):
            raise FormatError(f"Folder '{node_id}' requires 'children' to be a list of ids.")
        is_open = raw.get("isOpen", True)
        if not isinstance(is_open, bool):
            raise FormatError(f"Folder '{node_id}' requires 'isOpen' to be a boolean.")
        return FolderNode(
            id=node_id, name=name, parent=parent,
            children=tuple(children), is_open=is_open,
        )
    if kind == NodeKind.FILE.value:
        return FileNode(id=node_id, name=name, parent=parent)

    raise FormatError(f"Node '{node_id}' has unknown kind {kind!r}.")
