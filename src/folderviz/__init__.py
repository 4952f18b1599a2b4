from __future__ import annotations

"""
FolderViz.

Interactive folder/file structure builder: an immutable node store, the
structural operations that reshape it, and text exporters for the result.
"""

__version__ = "1.0.0"
