from __future__ import annotations

"""
Markdown Export Bundle.

Assembles the connector tree, the Markdown outline and the diagram source
into the single document written as structure.md.
"""

from typing import Optional

from folderviz.core.render.diagram_renderer import render_diagram
from folderviz.core.render.markdown_renderer import render_markdown_outline
from folderviz.core.render.tree_renderer import render_connector_tree
from folderviz.domain.tree_models import NodeStore


def render_markdown_bundle(store: NodeStore, root_id: Optional[str] = None) -> str:
    """Build the Markdown bundle document (ends with a newline)."""
    tree_text = render_connector_tree(store, root_id)
    outline = render_markdown_outline(store, root_id)
    diagram = render_diagram(store, root_id)
    return (
        "# Folder Structure\n\n"
        "## Tree (text)\n\n"
        f"```text\n{tree_text}\n```\n\n"
        "## Tree (Markdown)\n\n"
        f"{outline}\n\n"
        "## Mermaid\n\n"
        f"```mermaid\n{diagram}\n```\n"
    )
