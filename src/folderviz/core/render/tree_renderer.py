from __future__ import annotations

"""
Connector Tree Renderer.

Converts a NodeStore into the plain-text layout produced by directory
listing tools, using the box-drawing connectors (├──, └──, │). Children keep
their stored order.
"""

from typing import List, Optional

from folderviz.domain.tree_models import FolderNode, NodeStore

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_connector_tree(store: NodeStore, root_id: Optional[str] = None) -> str:
    """
    Render the subtree at root_id, one line per node.

    The root is printed as a bare name without a connector.

    Args:
        store: Snapshot to render.
        root_id: Subtree root; defaults to the store root.

    Returns:
        str: Newline-joined lines, without a trailing newline.
    """
    start = root_id if root_id is not None else store.root_id
    lines: List[str] = [store[start].name]
    render_tree_structure(store, start, lines, prefix="")
    return "\n".join(lines)


def render_tree_structure(
        store: NodeStore,
        parent_id: str,
        lines: List[str],
        prefix: str = "",
) -> None:
    """
    Recursively append the children of parent_id to lines.

    The last child of each level takes the terminal connector and passes a
    blank continuation prefix to its descendants; earlier children take the
    branch connector and a vertical-bar continuation prefix.

    Args:
        store: Snapshot to render.
        parent_id: Folder whose children are emitted.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
    """
    parent = store.folder(parent_id)
    if parent is None:
        return

    entries = [cid for cid in parent.children if cid in store]
    total = len(entries)

    for i, child_id in enumerate(entries):
        is_last = (i == total - 1)
        connector = LAST_BRANCH if is_last else BRANCH
        child = store[child_id]

        lines.append(f"{prefix}{connector}{child.name}")

        if isinstance(child, FolderNode):
            new_prefix = prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX)
            render_tree_structure(store, child_id, lines, prefix=new_prefix)
