from __future__ import annotations

"""
Tree Query Engine.

Read-only traversals over a NodeStore snapshot: ancestry checks used for
cycle prevention, subtree collection, ordered walks, search matching and
the folder listings that feed the builder's pickers.
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from folderviz.domain.tree_models import FolderNode, Node, NodeStore

# -----------------------------------------------------------------------------
# ANCESTRY
# -----------------------------------------------------------------------------

def is_descendant(store: NodeStore, node_id: Optional[str], maybe_ancestor_id: str) -> bool:
    """
    Check whether node_id lies strictly inside maybe_ancestor_id's subtree.

    Walks the parent chain of node_id. A node is never its own descendant.
    The walk stops after len(store) steps so a corrupted parent chain cannot
    loop forever.

    Args:
        store: Snapshot to inspect.
        node_id: Node whose ancestry is walked.
        maybe_ancestor_id: Candidate ancestor.

    Returns:
        bool: True if maybe_ancestor_id is found on node_id's parent chain.
    """
    node = store.get(node_id) if node_id is not None else None
    steps = 0
    while node is not None and node.parent is not None and steps <= len(store):
        if node.parent == maybe_ancestor_id:
            return True
        node = store.get(node.parent)
        steps += 1
    return False


def ancestors(store: NodeStore, node_id: str) -> List[str]:
    """Return the parent chain of node_id, nearest first, root last."""
    chain: List[str] = []
    node = store.get(node_id)
    while node is not None and node.parent is not None and len(chain) <= len(store):
        chain.append(node.parent)
        node = store.get(node.parent)
    return chain

# -----------------------------------------------------------------------------
# SUBTREES AND WALKS
# -----------------------------------------------------------------------------

def children_of(store: NodeStore, node_id: str) -> Tuple[str, ...]:
    """Ordered children of a folder; empty for files and unknown ids."""
    folder = store.folder(node_id)
    return folder.children if folder else ()


def collect_subtree_ids(store: NodeStore, node_id: str) -> List[str]:
    """
    Collect node_id and every node transitively reachable through children.

    Args:
        store: Snapshot to inspect.
        node_id: Subtree root.

    Returns:
        List[str]: Breadth-first list starting with node_id; empty if unknown.
    """
    if node_id not in store:
        return []

    collected = [node_id]
    seen: Set[str] = {node_id}
    i = 0
    while i < len(collected):
        for child_id in children_of(store, collected[i]):
            if child_id not in seen and child_id in store:
                seen.add(child_id)
                collected.append(child_id)
        i += 1
    return collected


def walk(store: NodeStore, root_id: Optional[str] = None) -> Iterator[Tuple[Node, int]]:
    """
    Pre-order traversal in children order.

    Yields:
        Tuple[Node, int]: Each reachable node with its depth (root is 0).
    """
    start = root_id if root_id is not None else store.root_id
    if start not in store:
        return

    stack: List[Tuple[str, int]] = [(start, 0)]
    seen: Set[str] = set()
    while stack:
        current_id, depth = stack.pop()
        if current_id in seen or current_id not in store:
            continue
        seen.add(current_id)
        node = store[current_id]
        yield node, depth
        for child_id in reversed(children_of(store, current_id)):
            stack.append((child_id, depth + 1))


def visible_rows(store: NodeStore, root_id: Optional[str] = None) -> List[Tuple[str, int]]:
    """
    Rows shown by the tree view.

    The root itself is not listed; its children sit at depth 0. Only open
    folders are descended into.

    Returns:
        List[Tuple[str, int]]: (node id, indentation depth) in display order.
    """
    start = root_id if root_id is not None else store.root_id
    rows: List[Tuple[str, int]] = []

    def _descend(parent_id: str, depth: int) -> None:
        for child_id in children_of(store, parent_id):
            child = store.get(child_id)
            if child is None:
                continue
            rows.append((child_id, depth))
            if isinstance(child, FolderNode) and child.is_open:
                _descend(child_id, depth + 1)

    _descend(start, 0)
    return rows

# -----------------------------------------------------------------------------
# PATHS
# -----------------------------------------------------------------------------

def path_of(store: NodeStore, node_id: str) -> str:
    """Slash-separated name path from (but excluding) the root down to node_id."""
    if node_id == store.root_id or node_id not in store:
        return ""
    chain = [node_id] + ancestors(store, node_id)
    names = [store[i].name for i in reversed(chain) if i != store.root_id]
    return "/".join(names)


def find_by_path(store: NodeStore, path: str) -> Optional[str]:
    """
    Resolve a slash-separated name path starting below the root.

    The first child with a matching name wins at each level. An empty path
    resolves to the root.

    Returns:
        Optional[str]: The resolved id, or None if any segment is missing.
    """
    current = store.root_id
    for segment in [s.strip() for s in path.strip().strip("/").split("/") if s.strip()]:
        match = next(
            (cid for cid in children_of(store, current) if cid in store and store[cid].name == segment),
            None,
        )
        if match is None:
            return None
        current = match
    return current

# -----------------------------------------------------------------------------
# SEARCH
# -----------------------------------------------------------------------------

def name_matches(name: str, query: str) -> bool:
    """Case-insensitive containment match; an empty query never matches."""
    q = (query or "").strip().lower()
    return bool(q) and q in name.lower()


def highlight_flags(store: NodeStore, query: str) -> Dict[str, bool]:
    """Per-node highlight flag for the current search substring."""
    return {node_id: name_matches(node.name, query) for node_id, node in store.items()}


def matches(store: NodeStore, query: str, include_root: bool = False) -> List[str]:
    """Identifiers whose names match query, in tree display order."""
    return [
        node.id for node, _ in walk(store)
        if (include_root or node.id != store.root_id) and name_matches(node.name, query)
    ]


def first_match(store: NodeStore, query: str) -> Optional[str]:
    """First non-root node matching query, or None."""
    found = matches(store, query)
    return found[0] if found else None

# -----------------------------------------------------------------------------
# FOLDER PICKERS
# -----------------------------------------------------------------------------

def folder_options(store: NodeStore) -> List[FolderNode]:
    """All folders, root first, the rest ordered by case-folded name."""
    folders = [n for n in store.values() if isinstance(n, FolderNode)]
    folders.sort(key=lambda f: (f.id != store.root_id, f.name.casefold(), f.id))
    return folders


def move_targets(store: NodeStore, selected_id: Optional[str]) -> List[FolderNode]:
    """
    Folders the selected node may be moved into.

    A folder can never be moved into itself or one of its descendants;
    files may go anywhere.
    """
    options = folder_options(store)
    selected = store.get(selected_id) if selected_id else None
    if not isinstance(selected, FolderNode):
        return options
    return [
        f for f in options
        if f.id != selected.id and not is_descendant(store, f.id, selected.id)
    ]

# -----------------------------------------------------------------------------
# INVARIANT AUDIT
# -----------------------------------------------------------------------------

def find_violations(store: NodeStore) -> List[str]:
    """
    Audit the structural invariants of a snapshot.

    Used to vet imported data before it becomes the active snapshot.

    Returns:
        List[str]: Human-readable violations; empty when the snapshot is sound.
    """
    problems: List[str] = []
    root = store.get(store.root_id)
    if not isinstance(root, FolderNode):
        return [f"Root '{store.root_id}' is missing or is not a folder."]
    if root.parent is not None:
        problems.append(f"Root '{store.root_id}' must not have a parent.")

    for node_id, node in store.items():
        if node.id != node_id:
            problems.append(f"Node keyed '{node_id}' declares id '{node.id}'.")
        if node_id == store.root_id:
            continue
        parent = store.folder(node.parent)
        if parent is None:
            problems.append(f"Node '{node_id}' references missing parent folder '{node.parent}'.")
        elif parent.children.count(node_id) != 1:
            problems.append(f"Node '{node_id}' is not listed exactly once by parent '{node.parent}'.")

    for node_id, node in store.items():
        if not isinstance(node, FolderNode):
            continue
        for child_id in node.children:
            child = store.get(child_id)
            if child is None:
                problems.append(f"Folder '{node_id}' lists missing child '{child_id}'.")
            elif child.parent != node_id:
                problems.append(f"Folder '{node_id}' lists '{child_id}' whose parent is '{child.parent}'.")

    reachable = set(collect_subtree_ids(store, store.root_id))
    for node_id in store:
        if node_id not in reachable:
            problems.append(f"Node '{node_id}' is not reachable from the root.")
    return problems
