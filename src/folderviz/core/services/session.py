from __future__ import annotations

"""
Editing Session.

Holds the active snapshot plus the view-side state a UI layer drives it
with: selection, rename buffer, search substring and the default parent
for new items. Every edit goes through the Structural Mutator, so each
action replaces the snapshot wholesale; earlier snapshots stay valid for
anyone still holding them.

All methods are meant to be called from the single thread that owns the
session. Background tasks deliver their outcome through `deliver`, which a
UI toolkit replaces with its own "run on the UI thread" hook.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from folderviz.core.engine import mutator, placement, queries
from folderviz.core.serialization.flat import load_payload, parse_payload
from folderviz.core.serialization.nested import from_nested
from folderviz.core.services import exporter, tasks
from folderviz.domain.constants import DEFAULT_ID_LENGTH, DEFAULT_ROOT_NAME, TEMPLATES
from folderviz.domain.tree_models import (
    DropGesture,
    DropMode,
    FolderNode,
    NodeKind,
    NodeStore,
    default_state,
)

logger = logging.getLogger(__name__)

Deliver = Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class RowView:
    """One visible row of the tree view, fully resolved for rendering."""
    id: str
    name: str
    kind: NodeKind
    depth: int
    is_open: bool
    selected: bool
    highlight: bool


def _run_inline(callback: Callable[[], None]) -> None:
    callback()


class TreeSession:
    """
    In-memory editing session over a NodeStore.

    Attributes:
        selected_id: Currently selected node, if any.
        rename_value: Text of the rename field, seeded on selection.
        search: Current search substring.
    """

    def __init__(
            self,
            store: Optional[NodeStore] = None,
            *,
            root_name: str = DEFAULT_ROOT_NAME,
            id_length: int = DEFAULT_ID_LENGTH,
            deliver: Optional[Deliver] = None,
    ):
        self._store: NodeStore = store if store is not None else default_state(root_name)
        self._id_length = id_length
        self._deliver: Deliver = deliver or _run_inline
        self._pending: int = 0
        self._add_parent_id: str = self._store.root_id

        self.selected_id: Optional[str] = None
        self.rename_value: str = ""
        self.search: str = ""

    # -------------------------------------------------------------------------
    # STATE ACCESS
    # -------------------------------------------------------------------------

    @property
    def store(self) -> NodeStore:
        """Active snapshot."""
        return self._store

    @property
    def busy(self) -> bool:
        """True while a background import or capture is in flight."""
        return self._pending > 0

    @property
    def add_parent_id(self) -> str:
        """Default destination folder for `add`; falls back to the root."""
        if self._store.folder(self._add_parent_id) is None:
            self._add_parent_id = self._store.root_id
        return self._add_parent_id

    @add_parent_id.setter
    def add_parent_id(self, folder_id: str) -> None:
        self._add_parent_id = folder_id

    def rows(self) -> List[RowView]:
        """Visible rows with their selection and search highlight flags."""
        flags = queries.highlight_flags(self._store, self.search)
        rows: List[RowView] = []
        for node_id, depth in queries.visible_rows(self._store):
            node = self._store[node_id]
            rows.append(RowView(
                id=node_id,
                name=node.name,
                kind=node.kind,
                depth=depth,
                is_open=isinstance(node, FolderNode) and node.is_open,
                selected=node_id == self.selected_id,
                highlight=flags.get(node_id, False),
            ))
        return rows

    def folder_options(self) -> List[FolderNode]:
        return queries.folder_options(self._store)

    def move_targets(self) -> List[FolderNode]:
        return queries.move_targets(self._store, self.selected_id)

    # -------------------------------------------------------------------------
    # SELECTION AND SEARCH
    # -------------------------------------------------------------------------

    def select(self, node_id: Optional[str]) -> None:
        """Select a node and seed the rename buffer with its name."""
        node = self._store.get(node_id) if node_id else None
        self.selected_id = node.id if node is not None else None
        self.rename_value = node.name if node is not None else ""

    def set_search(self, query: str) -> None:
        self.search = query or ""

    def highlight_flags(self) -> Dict[str, bool]:
        return queries.highlight_flags(self._store, self.search)

    def jump_to_first_match(self) -> Optional[str]:
        """
        Reveal and select the first non-root node matching the search.

        Returns:
            Optional[str]: The selected id, or None when nothing matches.
        """
        match = queries.first_match(self._store, self.search)
        if match is None:
            return None
        self._commit(mutator.reveal(self._store, match))
        self.select(match)
        return match

    # -------------------------------------------------------------------------
    # EDITS
    # -------------------------------------------------------------------------

    def add(self, kind: NodeKind | str, name: str, parent_id: Optional[str] = None) -> Optional[str]:
        """
        Add a node under parent_id (default: `add_parent_id`).

        Returns:
            Optional[str]: Identifier of the new node, None if rejected.
        """
        pid = parent_id if parent_id is not None else self.add_parent_id
        updated = mutator.add_node(self._store, kind, name, pid, id_length=self._id_length)
        return self._new_child_id(updated, pid)

    def add_relative(self, kind: NodeKind | str, target_id: str) -> Optional[str]:
        """Context-menu add next to or inside target_id."""
        target = self._store.get(target_id)
        if target is None:
            return None
        pid = target.id if isinstance(target, FolderNode) else (target.parent or self._store.root_id)
        updated = mutator.add_relative(self._store, kind, target_id, id_length=self._id_length)
        return self._new_child_id(updated, pid)

    def rename(self, node_id: str, new_name: str) -> bool:
        return self._commit(mutator.rename(self._store, node_id, new_name))

    def rename_selected(self, new_name: Optional[str] = None) -> bool:
        """Apply the rename buffer (or new_name) to the selected node."""
        if not self.selected_id:
            return False
        if new_name is not None:
            self.rename_value = new_name
        return self.rename(self.selected_id, self.rename_value)

    def rename_root(self, new_name: str) -> bool:
        return self.rename(self._store.root_id, new_name)

    def delete(self, node_id: Optional[str] = None) -> bool:
        """Remove a subtree (default: the selection). Clears a selection inside it."""
        target = node_id or self.selected_id
        if not target:
            return False
        doomed = set(queries.collect_subtree_ids(self._store, target))
        changed = self._commit(mutator.remove_subtree(self._store, target))
        if changed and self.selected_id in doomed:
            self.select(None)
        return changed

    def toggle(self, node_id: str) -> bool:
        return self._commit(mutator.toggle_open(self._store, node_id))

    def move(self, active_id: str, target_id: str, mode: DropMode | str = DropMode.INTO) -> bool:
        return self._commit(mutator.move(self._store, active_id, target_id, mode))

    def move_selected_to(self, folder_id: str) -> bool:
        if not self.selected_id:
            return False
        return self._commit(mutator.move_to_folder(self._store, self.selected_id, folder_id))

    def drop(self, gesture: DropGesture) -> bool:
        """Apply a drag-and-drop gesture reported by the view."""
        return self._commit(placement.drop(self._store, gesture))

    def reorder(self, parent_id: str, new_order: Sequence[str]) -> bool:
        return self._commit(mutator.reorder_children(self._store, parent_id, new_order))

    # -------------------------------------------------------------------------
    # WHOLE-TREE REPLACEMENT
    # -------------------------------------------------------------------------

    def apply_template(self, key: str) -> None:
        """
        Replace the tree with a starter template.

        Raises:
            KeyError: If the template name is unknown.
        """
        template = TEMPLATES[key]
        self._replace(from_nested(template, id_length=self._id_length, is_taken=self._is_known_id))
        logger.info(f"Applied template '{key}'.")

    def reset(self, root_name: str = DEFAULT_ROOT_NAME) -> None:
        self._replace(default_state(root_name))
        logger.info("Session reset to an empty tree.")

    def import_payload(self, data: Any) -> None:
        """
        Replace the tree with an imported flat or nested payload.

        Raises:
            FormatError: The payload is not usable; the current tree is kept.
        """
        self._replace(load_payload(data, id_length=self._id_length, is_taken=self._is_known_id))
        logger.info(f"Imported tree with {len(self._store)} node(s).")

    def import_text(self, text: str) -> None:
        """import_payload for raw JSON text."""
        self.import_payload(parse_payload(text))

    def import_file_async(
            self,
            path: str,
            on_done: Optional[Callable[[Optional[Exception]], None]] = None,
    ) -> threading.Thread:
        """
        Read and parse path in the background, then swap the tree in.

        The swap itself runs through `deliver`. on_done receives None on
        success or the exception that kept the current tree in place.
        """
        self._pending += 1

        def _complete(outcome: tasks.ImportOutcome) -> None:
            self._deliver(lambda: self._finish_import(outcome, on_done))

        return tasks.start_import_task(
            path, _complete, id_length=self._id_length, is_taken=self._is_known_id,
        )

    # -------------------------------------------------------------------------
    # EXPORTS
    # -------------------------------------------------------------------------

    def export_text(self, fmt: str) -> str:
        return exporter.render(self._store, fmt)

    def export_all(self, export_dir: str) -> Dict[str, str]:
        return exporter.export_all(self._store, export_dir)

    def export_image(
            self,
            capture: tasks.ViewCapture,
            fmt: str,
            on_done: Callable[[tasks.CaptureOutcome], None],
            path: Optional[str] = None,
    ) -> threading.Thread:
        """
        Capture the rendered view in the background (png or svg).

        When path is given the image is written there before on_done runs.
        """
        self._pending += 1

        def _complete(outcome: tasks.CaptureOutcome) -> None:
            if path and not tasks.is_failure(outcome):
                try:
                    exporter.write_image(outcome, path)
                except OSError as e:
                    outcome = e
            self._deliver(lambda: self._finish_capture(outcome, on_done))

        return tasks.start_capture_task(capture, fmt, _complete)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _is_known_id(self, node_id: str) -> bool:
        # Reads the snapshot current at call time; import workers call this too.
        return self._store.is_known_id(node_id)

    def _commit(self, updated: NodeStore) -> bool:
        if updated is self._store:
            return False
        self._store = updated
        if self.selected_id is not None and self.selected_id not in updated:
            self.select(None)
        return True

    def _new_child_id(self, updated: NodeStore, parent_id: str) -> Optional[str]:
        if not self._commit(updated):
            return None
        new_id = updated[parent_id].children[-1]  # type: ignore[union-attr]
        logger.info(f"Added '{updated[new_id].name}' ({new_id}).")
        return new_id

    def _replace(self, imported: NodeStore) -> None:
        # Identifiers used earlier in the session stay retired.
        previous = set(self._store) | set(self._store.retired)
        retired = (previous | set(imported.retired)) - set(imported)
        self._store = NodeStore(dict(imported.items()), imported.root_id, retired)
        self.select(None)
        self.search = ""
        self._add_parent_id = self._store.root_id

    def _finish_import(
            self,
            outcome: tasks.ImportOutcome,
            on_done: Optional[Callable[[Optional[Exception]], None]],
    ) -> None:
        self._pending = max(0, self._pending - 1)
        error: Optional[Exception] = None
        if isinstance(outcome, NodeStore):
            self._replace(outcome)
            logger.info(f"Imported tree with {len(self._store)} node(s).")
        else:
            error = outcome
        if on_done is not None:
            on_done(error)

    def _finish_capture(
            self,
            outcome: tasks.CaptureOutcome,
            on_done: Callable[[tasks.CaptureOutcome], None],
    ) -> None:
        self._pending = max(0, self._pending - 1)
        on_done(outcome)
