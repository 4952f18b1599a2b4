from __future__ import annotations

"""
Text Export Service.

Renders a snapshot into each textual format and writes the standard export
artifacts (tree.txt, structure.md, structure.json, structure.mmd).
"""

import json
import logging
import os
from typing import Callable, Dict

from folderviz.core.render import (
    render_connector_tree,
    render_diagram,
    render_markdown_bundle,
    render_markdown_outline,
)
from folderviz.core.serialization.flat import dumps_flat
from folderviz.core.serialization.nested import to_nested
from folderviz.domain.constants import (
    DIAGRAM_FILENAME,
    JSON_FILENAME,
    MARKDOWN_FILENAME,
    TREE_TXT_FILENAME,
)
from folderviz.domain.tree_models import NodeStore
from folderviz.infra.fs import write_bytes, write_text

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FORMAT REGISTRY
# -----------------------------------------------------------------------------

def _render_nested(store: NodeStore) -> str:
    return json.dumps(to_nested(store), ensure_ascii=False, indent=2)


RENDERERS: Dict[str, Callable[[NodeStore], str]] = {
    "tree": render_connector_tree,
    "markdown": render_markdown_outline,
    "mermaid": render_diagram,
    "bundle": render_markdown_bundle,
    "json": dumps_flat,
    "nested": _render_nested,
}

ARTIFACTS: Dict[str, str] = {
    TREE_TXT_FILENAME: "tree",
    MARKDOWN_FILENAME: "bundle",
    JSON_FILENAME: "json",
    DIAGRAM_FILENAME: "mermaid",
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render(store: NodeStore, fmt: str) -> str:
    """
    Render the snapshot in one of the supported formats.

    Raises:
        ValueError: If fmt is not a known format name.
    """
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        raise ValueError(f"Unknown export format '{fmt}'. Choose from: {', '.join(RENDERERS)}.")
    return renderer(store)


def write_export(store: NodeStore, fmt: str, path: str) -> str:
    """Render and write one format to path; returns the absolute path."""
    text = render(store, fmt)
    if not text.endswith("\n"):
        text += "\n"
    try:
        target = write_text(path, text)
    except OSError as e:
        logger.error(f"Failed to write {fmt} export to '{path}': {e}")
        raise
    logger.info(f"Exported {fmt} to {target}")
    return target


def export_all(store: NodeStore, export_dir: str) -> Dict[str, str]:
    """
    Write every standard text artifact into export_dir.

    Returns:
        Dict[str, str]: Format name -> absolute path written.
    """
    written: Dict[str, str] = {}
    for filename, fmt in ARTIFACTS.items():
        written[fmt] = write_export(store, fmt, os.path.join(export_dir, filename))
    return written


def write_image(payload: bytes, path: str) -> str:
    """Persist an encoded image produced by the capture collaborator."""
    try:
        target = write_bytes(path, payload)
    except OSError as e:
        logger.error(f"Failed to write image to '{path}': {e}")
        raise
    logger.info(f"Image exported to {target}")
    return target
