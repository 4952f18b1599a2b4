from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants: the well-known
root identifier, default names, kind glyphs, export file names and the
starter templates offered by the builder.
"""

from typing import Any, Dict

CURRENT_CONFIG_VERSION = "1.0.0"

ROOT_ID = "root"
DEFAULT_ROOT_NAME = "PROJECT"
PLACEHOLDER_NAME = "untitled"

DEFAULT_NEW_FOLDER_NAME = "New Folder"
DEFAULT_NEW_FILE_NAME = "new-file.txt"

DEFAULT_ID_LENGTH = 8
MIN_ID_LENGTH = 4
MAX_ID_LENGTH = 32

FOLDER_GLYPH = "📁"
FILE_GLYPH = "📄"

# -----------------------------------------------------------------------------
# EXPORT ARTIFACTS
# -----------------------------------------------------------------------------
TREE_TXT_FILENAME = "tree.txt"
MARKDOWN_FILENAME = "structure.md"
JSON_FILENAME = "structure.json"
DIAGRAM_FILENAME = "structure.mmd"

IMAGE_PIXEL_RATIO = 2
IMAGE_BACKGROUND = "#ffffff"

OUTPUT_FORMATS = ("tree", "markdown", "mermaid", "bundle", "json", "nested")

# -----------------------------------------------------------------------------
# STARTER TEMPLATES (nested form)
# -----------------------------------------------------------------------------
TEMPLATES: Dict[str, Dict[str, Any]] = {
    "React app": {
        "name": "my-react-app",
        "kind": "folder",
        "children": [
            {
                "name": "src",
                "kind": "folder",
                "children": [
                    {"name": "App.jsx", "kind": "file"},
                    {"name": "main.jsx", "kind": "file"},
                ],
            },
            {"name": "public", "kind": "folder", "children": []},
            {"name": "package.json", "kind": "file"},
            {"name": "vite.config.js", "kind": "file"},
            {"name": "README.md", "kind": "file"},
            {"name": ".gitignore", "kind": "file"},
        ],
    },
    "Python package": {
        "name": "my-python-project",
        "kind": "folder",
        "children": [
            {
                "name": "src",
                "kind": "folder",
                "children": [
                    {
                        "name": "my_package",
                        "kind": "folder",
                        "children": [{"name": "__init__.py", "kind": "file"}],
                    },
                ],
            },
            {
                "name": "tests",
                "kind": "folder",
                "children": [{"name": "test_smoke.py", "kind": "file"}],
            },
            {"name": "pyproject.toml", "kind": "file"},
            {"name": "README.md", "kind": "file"},
            {"name": "requirements.txt", "kind": "file"},
            {"name": ".gitignore", "kind": "file"},
        ],
    },
    "Writing project": {
        "name": "my-book",
        "kind": "folder",
        "children": [
            {
                "name": "chapters",
                "kind": "folder",
                "children": [
                    {"name": "01-opening.md", "kind": "file"},
                    {"name": "02-middle.md", "kind": "file"},
                ],
            },
            {
                "name": "notes",
                "kind": "folder",
                "children": [
                    {"name": "research.md", "kind": "file"},
                    {"name": "ideas.md", "kind": "file"},
                ],
            },
            {
                "name": "assets",
                "kind": "folder",
                "children": [{"name": "cover.png", "kind": "file"}],
            },
            {"name": "README.md", "kind": "file"},
        ],
    },
}

DEFAULT_TEMPLATE_KEY = "React app"
