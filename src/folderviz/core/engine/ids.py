from __future__ import annotations

"""
Node Identifier Generation.

Identifiers are short random lowercase-hex strings. With the default length
of 8 there are 16**8 (about 4.3e9) values, so for a tree of n nodes the
chance that a single draw collides is n / 4.3e9. Draws are still checked
against every live and retired id and re-rolled on a hit.
"""

import logging
import secrets
from typing import Callable

from folderviz.domain.constants import DEFAULT_ID_LENGTH, MAX_ID_LENGTH, MIN_ID_LENGTH
from folderviz.domain.tree_models import NodeStore

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 64


def generate_id(is_taken: Callable[[str], bool], length: int = DEFAULT_ID_LENGTH) -> str:
    """
    Draw a random identifier rejected by is_taken.

    Args:
        is_taken: Predicate reporting identifiers already in use.
        length: Number of hex characters, clamped to the supported range.

    Returns:
        str: A fresh identifier.

    Raises:
        RuntimeError: If no free identifier was found after MAX_ATTEMPTS draws.
    """
    length = max(MIN_ID_LENGTH, min(MAX_ID_LENGTH, int(length)))
    for attempt in range(MAX_ATTEMPTS):
        candidate = secrets.token_hex((length + 1) // 2)[:length]
        if not is_taken(candidate):
            return candidate
        logger.debug(f"Identifier collision on '{candidate}' (attempt {attempt + 1}). Re-rolling.")
    raise RuntimeError(f"Unable to allocate a unique identifier of length {length}.")


def new_id(store: NodeStore, length: int = DEFAULT_ID_LENGTH) -> str:
    """Draw an identifier that is neither live nor retired in the snapshot."""
    return generate_id(store.is_known_id, length)
