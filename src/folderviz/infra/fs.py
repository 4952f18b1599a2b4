from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform resolution of the per-user data directory, path
normalization and the text/binary writers used by the exporters.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "FolderViz"
UNIX_APP_DIR_NAME = ".folderviz"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/FolderViz
    - Linux/Mac: ~/.folderviz

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Expands environment variables and `~`. Reverts to fallback if the
    input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use when path is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# FILE I/O API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> None:
    """Create a directory tree if it does not exist yet."""
    os.makedirs(path, exist_ok=True)


def read_text(path: str) -> str:
    """Read a UTF-8 text file (BOM tolerated)."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def write_text(path: str, text: str) -> str:
    """
    Write text as UTF-8, creating parent directories.

    Returns:
        str: Absolute path of the written file.
    """
    target = os.path.abspath(path)
    safe_mkdir(os.path.dirname(target))
    with open(target, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    return target


def write_bytes(path: str, payload: bytes) -> str:
    """Binary counterpart of write_text."""
    target = os.path.abspath(path)
    safe_mkdir(os.path.dirname(target))
    with open(target, "wb") as f:
        f.write(payload)
    return target
