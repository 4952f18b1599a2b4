from __future__ import annotations

"""
Domain Error Types.

Format errors are the only failures the tree subsystem reports upward;
validation rejections are absorbed by the structural operations.
"""


class FormatError(ValueError):
    """
    Raised when an imported payload or operation script cannot be understood.

    The active snapshot is never touched when this is raised.
    """
