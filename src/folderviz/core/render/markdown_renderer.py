from __future__ import annotations

"""
Markdown Outline Renderer.

One bullet per node, indented two spaces per level. Folders are bold and
marked with the folder glyph, files with the file glyph; the root is a bold
bullet at the top.
"""

from typing import List, Optional

from folderviz.core.engine.queries import walk
from folderviz.domain.constants import FILE_GLYPH, FOLDER_GLYPH
from folderviz.domain.tree_models import FolderNode, NodeStore


def render_markdown_outline(store: NodeStore, root_id: Optional[str] = None) -> str:
    """Render the subtree at root_id as a nested Markdown bullet list."""
    lines: List[str] = []
    for node, depth in walk(store, root_id):
        pad = "  " * depth
        if depth == 0:
            lines.append(f"- **{node.name}**")
        elif isinstance(node, FolderNode):
            lines.append(f"{pad}- {FOLDER_GLYPH} **{node.name}**")
        else:
            lines.append(f"{pad}- {FILE_GLYPH} {node.name}")
    return "\n".join(lines)
