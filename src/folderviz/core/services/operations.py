from __future__ import annotations

"""
Operation Scripts.

Applies a JSON list of structural operations to a snapshot, for headless
use from the CLI. Nodes are referenced either by id (`id`, `parent_id`,
`target_id`) or by slash-separated name path below the root (`path`,
`parent_path`, `target_path`).

A reference that cannot be resolved, or a malformed entry, is a
FormatError. An operation the mutator rejects is logged and skipped, like
any other validation rejection.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from folderviz.core.engine import mutator, placement
from folderviz.core.engine.queries import children_of, find_by_path
from folderviz.domain.constants import DEFAULT_ID_LENGTH
from folderviz.domain.errors import FormatError
from folderviz.domain.tree_models import DropGesture, DropMode, NodeStore

logger = logging.getLogger(__name__)

SUPPORTED_OPS = ("add", "remove", "rename", "toggle", "move", "reorder", "drop")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def apply_operations(
        store: NodeStore,
        operations: Any,
        id_length: int = DEFAULT_ID_LENGTH,
) -> NodeStore:
    """
    Apply every operation in order.

    Args:
        store: Starting snapshot.
        operations: Parsed JSON list of operation objects.
        id_length: Length of generated identifiers.

    Returns:
        NodeStore: Snapshot after the last operation.

    Raises:
        FormatError: If the script is not a list, or an entry is malformed.
    """
    if not isinstance(operations, list):
        raise FormatError("Operation script must be a JSON list.")

    current = store
    for index, op in enumerate(operations, start=1):
        updated = apply_operation(current, op, id_length=id_length)
        if updated is current:
            logger.info(f"Operation #{index} ({_op_name(op)}) had no effect.")
        current = updated
    return current


def apply_operation(store: NodeStore, op: Any, id_length: int = DEFAULT_ID_LENGTH) -> NodeStore:
    """Apply a single operation object; see the module docstring for the format."""
    if not isinstance(op, dict):
        raise FormatError(f"Operation must be an object, received {type(op).__name__}.")

    name = _op_name(op)
    if name == "add":
        parent_id = _resolve(store, op, "parent", required=False) or store.root_id
        return mutator.add_node(
            store, _require_str(op, "kind", default="folder"), _require_str(op, "name"),
            parent_id, id_length=id_length,
        )
    if name == "remove":
        return mutator.remove_subtree(store, _resolve(store, op, ""))
    if name == "rename":
        return mutator.rename(store, _resolve(store, op, ""), _require_str(op, "name"))
    if name == "toggle":
        return mutator.toggle_open(store, _resolve(store, op, ""))
    if name == "move":
        mode = _require_str(op, "mode", default=DropMode.INTO.value).lower()
        if mode not in [m.value for m in DropMode]:
            raise FormatError(f"Unknown move mode '{mode}'.")
        return mutator.move(store, _resolve(store, op, ""), _resolve(store, op, "target"), mode)
    if name == "reorder":
        parent_id = _resolve(store, op, "")
        return mutator.reorder_children(store, parent_id, _resolve_order(store, parent_id, op.get("order")))
    if name == "drop":
        gesture = DropGesture(
            active_id=_resolve(store, op, ""),
            over_id=_resolve(store, op, "target"),
            modifier_active=bool(op.get("modifier", False)),
        )
        return placement.drop(store, gesture)

    raise FormatError(f"Unknown operation '{name}'. Supported: {', '.join(SUPPORTED_OPS)}.")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _op_name(op: Any) -> str:
    if isinstance(op, dict):
        return str(op.get("op", "")).strip().lower()
    return "?"


def _require_str(op: Dict[str, Any], key: str, default: Optional[str] = None) -> str:
    value = op.get(key, default)
    if not isinstance(value, str):
        raise FormatError(f"Operation '{_op_name(op)}' requires a string '{key}'.")
    return value


def _resolve(store: NodeStore, op: Dict[str, Any], prefix: str, required: bool = True) -> Optional[str]:
    """Resolve `<prefix>_id` / `<prefix>_path` (or `id` / `path` when prefix is empty)."""
    id_key = f"{prefix}_id" if prefix else "id"
    path_key = f"{prefix}_path" if prefix else "path"

    if op.get(id_key) is not None:
        node_id = str(op[id_key])
        if node_id not in store:
            raise FormatError(f"Operation '{_op_name(op)}': unknown node id '{node_id}'.")
        return node_id

    if op.get(path_key) is not None:
        node_id = find_by_path(store, str(op[path_key]))
        if node_id is None:
            raise FormatError(f"Operation '{_op_name(op)}': no node at path '{op[path_key]}'.")
        return node_id

    if required:
        raise FormatError(f"Operation '{_op_name(op)}' requires '{id_key}' or '{path_key}'.")
    return None


def _resolve_order(store: NodeStore, parent_id: str, order: Any) -> List[str]:
    """Map each entry to a child of parent_id, by id first and then by name."""
    if not isinstance(order, list):
        raise FormatError("Operation 'reorder' requires an 'order' list.")

    children: Sequence[str] = children_of(store, parent_id)
    resolved: List[str] = []
    for entry in order:
        key = str(entry)
        if key in children:
            resolved.append(key)
            continue
        by_name = next(
            (cid for cid in children if store[cid].name == key and cid not in resolved),
            None,
        )
        if by_name is None:
            raise FormatError(f"Operation 'reorder': '{key}' is not a child of '{parent_id}'.")
        resolved.append(by_name)
    return resolved
