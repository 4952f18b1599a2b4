from __future__ import annotations

"""
Diagram Description Renderer.

Emits a top-down Mermaid flowchart: one labelled declaration per node and
one edge per parent -> child link, both in tree order.
"""

import re
from typing import List, Optional

from folderviz.core.engine.queries import walk
from folderviz.domain.constants import FILE_GLYPH, FOLDER_GLYPH
from folderviz.domain.tree_models import FolderNode, NodeStore

_ESCAPED_ID_CHARS = re.compile(r"[^A-Za-z0-9]")


def diagram_node_id(node_id: str) -> str:
    """
    Map a store id onto a diagram-safe identifier.

    The mapping is one-to-one: `_` is doubled and any other character outside
    [A-Za-z0-9] becomes `_x<HEX>_` (its code point), so distinct store ids never
    share a diagram id.
    """
    return "n_" + _ESCAPED_ID_CHARS.sub(_escape_id_char, node_id)


def _escape_id_char(match: "re.Match[str]") -> str:
    char = match.group(0)
    return "__" if char == "_" else f"_x{ord(char):X}_"


def escape_label(text: str) -> str:
    """Labels are double-quoted; embedded double quotes become single quotes."""
    return str(text).replace('"', "'")


def render_diagram(store: NodeStore, root_id: Optional[str] = None) -> str:
    """
    Render the subtree at root_id as a Mermaid `flowchart TD` description.

    Args:
        store: Snapshot to render.
        root_id: Subtree root; defaults to the store root.

    Returns:
        str: Newline-joined diagram source.
    """
    nodes = [node for node, _ in walk(store, root_id)]
    lines: List[str] = ["flowchart TD"]

    for node in nodes:
        glyph = FOLDER_GLYPH if isinstance(node, FolderNode) else FILE_GLYPH
        lines.append(f'  {diagram_node_id(node.id)}["{glyph} {escape_label(node.name)}"]')

    included = {node.id for node in nodes}
    for node in nodes:
        if node.parent is not None and node.parent in included:
            lines.append(f"  {diagram_node_id(node.parent)} --> {diagram_node_id(node.id)}")

    return "\n".join(lines)
