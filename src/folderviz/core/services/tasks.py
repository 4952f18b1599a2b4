from __future__ import annotations

"""
Single-Shot Background Tasks.

Reading an import file and capturing the rendered view are the only
operations that wait on I/O. Each runs once on a daemon thread and hands
its outcome (a value or the exception raised) to an `on_complete`
callback; the caller marshals that outcome back onto the thread that owns
the session. Tasks cannot be cancelled.
"""

import logging
import threading
from typing import Any, Callable, Optional, Protocol, Union

from folderviz.core.serialization.flat import load_payload, parse_payload
from folderviz.domain.constants import DEFAULT_ID_LENGTH, IMAGE_BACKGROUND, IMAGE_PIXEL_RATIO
from folderviz.domain.tree_models import NodeStore
from folderviz.infra.fs import read_text

logger = logging.getLogger(__name__)

ImportOutcome = Union[NodeStore, Exception]
CaptureOutcome = Union[bytes, Exception]


class ViewCapture(Protocol):
    """
    Image capture provided by the rendering collaborator.

    Implementations snapshot the fully rendered tree view.
    """

    def to_png(self, pixel_ratio: int, background: str) -> bytes:
        ...

    def to_svg(self, background: str) -> bytes:
        ...

# -----------------------------------------------------------------------------
# IMPORT WORKERS
# -----------------------------------------------------------------------------

def run_import_task(
        path: str,
        on_complete: Callable[[ImportOutcome], None],
        id_length: int = DEFAULT_ID_LENGTH,
        is_taken: Optional[Callable[[str], bool]] = None,
) -> None:
    """
    Read, decode and convert an import file.

    Args:
        path: JSON file in flat or nested form.
        on_complete: Receives the imported snapshot, or the OSError /
            FormatError that prevented it.
        id_length: Length of identifiers generated for nested payloads.
        is_taken: Identifiers that generated ids must avoid.
    """
    try:
        store = load_payload(parse_payload(read_text(path)), id_length=id_length, is_taken=is_taken)
    except Exception as e:
        logger.warning(f"Import Thread: '{path}' could not be imported: {e}")
        on_complete(e)
        return

    logger.info(f"Import Thread: '{path}' parsed ({len(store)} node(s)).")
    on_complete(store)


def start_import_task(
        path: str,
        on_complete: Callable[[ImportOutcome], None],
        id_length: int = DEFAULT_ID_LENGTH,
        is_taken: Optional[Callable[[str], bool]] = None,
) -> threading.Thread:
    """Launch run_import_task on a daemon thread and return the thread."""
    worker = threading.Thread(
        target=run_import_task,
        args=(path, on_complete, id_length, is_taken),
        name="folderviz-import",
        daemon=True,
    )
    worker.start()
    return worker

# -----------------------------------------------------------------------------
# IMAGE CAPTURE WORKERS
# -----------------------------------------------------------------------------

def run_capture_task(
        capture: ViewCapture,
        fmt: str,
        on_complete: Callable[[CaptureOutcome], None],
) -> None:
    """
    Capture the rendered view as PNG (2x density) or SVG, white background.

    Args:
        capture: Rendering collaborator.
        fmt: "png" or "svg".
        on_complete: Receives the encoded image, or the raised exception.
    """
    try:
        kind = fmt.strip().lower()
        if kind == "png":
            payload = capture.to_png(pixel_ratio=IMAGE_PIXEL_RATIO, background=IMAGE_BACKGROUND)
        elif kind == "svg":
            payload = capture.to_svg(background=IMAGE_BACKGROUND)
        else:
            raise ValueError(f"Unsupported image format '{fmt}'.")
    except Exception as e:
        logger.error(f"Capture Thread: {fmt} export failed: {e}")
        on_complete(e)
        return

    on_complete(payload)


def start_capture_task(
        capture: ViewCapture,
        fmt: str,
        on_complete: Callable[[CaptureOutcome], None],
) -> threading.Thread:
    """Launch run_capture_task on a daemon thread and return the thread."""
    worker = threading.Thread(
        target=run_capture_task,
        args=(capture, fmt, on_complete),
        name="folderviz-capture",
        daemon=True,
    )
    worker.start()
    return worker


def is_failure(outcome: Any) -> bool:
    """True if a task outcome is an exception rather than a value."""
    return isinstance(outcome, Exception)
