from __future__ import annotations

from .bundle import render_markdown_bundle
from .diagram_renderer import render_diagram
from .markdown_renderer import render_markdown_outline
from .tree_renderer import render_connector_tree

__all__ = [
    "render_connector_tree",
    "render_markdown_outline",
    "render_diagram",
    "render_markdown_bundle",
]
