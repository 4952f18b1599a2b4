from __future__ import annotations

"""
Drag/Drop Placement Resolver.

Turns a drop gesture reported by the view into one structural operation.
The sibling-placement modifier travels inside the gesture itself; nothing
here reads keyboard state.
"""

import logging
from typing import Optional

from folderviz.core.engine import mutator
from folderviz.domain.tree_models import (
    DropGesture,
    DropMode,
    FolderNode,
    NodeStore,
    Placement,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def resolve_drop(store: NodeStore, gesture: DropGesture) -> Optional[Placement]:
    """
    Decide what a drop means.

    - Folder target without modifier: move INTO the folder.
    - File target, or modifier held: sibling placement in the target's
      parent. When both nodes share that parent the placement is flagged as
      a stable reorder; otherwise the source lands right BEFORE the target.

    Args:
        store: Snapshot current at drop time.
        gesture: Drop data from the view.

    Returns:
        Optional[Placement]: The operation to apply, or None for a no-op drop.
    """
    active_id, over_id = gesture.active_id, gesture.over_id
    if not active_id or not over_id or active_id == over_id:
        return None

    active = store.get(active_id)
    over = store.get(over_id)
    if active is None or over is None:
        logger.debug(f"Drop ignored: '{active_id}' or '{over_id}' no longer exists.")
        return None

    if isinstance(over, FolderNode) and not gesture.modifier_active:
        return Placement(active_id, over_id, DropMode.INTO)

    same_parent = active.parent is not None and active.parent == over.parent
    return Placement(active_id, over_id, DropMode.BEFORE, stable_reorder=same_parent)


def apply_placement(store: NodeStore, placement: Placement) -> NodeStore:
    """
    Execute a resolved placement through the Structural Mutator.

    A stable reorder moves the source to the target's index within their
    shared parent (array-move semantics: dragging downwards lands after the
    target, dragging upwards lands before it).
    """
    if not placement.stable_reorder:
        return mutator.move(store, placement.active_id, placement.target_id, placement.mode)

    active = store.get(placement.active_id)
    parent = store.folder(active.parent) if active is not None else None
    if parent is None or placement.target_id not in parent.children:
        return store

    order = parent.children
    reordered = mutator.array_move(
        order, order.index(placement.active_id), order.index(placement.target_id)
    )
    logger.debug(f"Reordered '{placement.active_id}' onto '{placement.target_id}' in '{parent.id}'.")
    return mutator.reorder_children(store, parent.id, reordered)


def drop(store: NodeStore, gesture: DropGesture) -> NodeStore:
    """Resolve and apply a drop gesture in one step."""
    placement = resolve_drop(store, gesture)
    if placement is None:
        return store
    return apply_placement(store, placement)
