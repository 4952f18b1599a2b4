from __future__ import annotations

"""
Folder Tree Data Models.

Provides the node records (folder/file variants), the placement enums and
the immutable NodeStore snapshot that every structural operation consumes
and produces.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple, Union

from folderviz.domain.constants import DEFAULT_ROOT_NAME, ROOT_ID

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    """Variant tag of a node record."""
    FOLDER = "folder"
    FILE = "file"


class DropMode(str, Enum):
    """
    Destination of a reparenting operation relative to a target node.

    INTO appends to the target folder; BEFORE/AFTER are sibling placements
    inside the target's parent.
    """
    INTO = "into"
    BEFORE = "before"
    AFTER = "after"

# -----------------------------------------------------------------------------
# NODE RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FolderNode:
    """
    Container node with an ordered list of children.

    Attributes:
        id: Immutable unique identifier.
        name: Display name.
        parent: Identifier of the containing folder, None for the root.
        children: Ordered child identifiers (display and export order).
        is_open: Expanded state in the rendered view.
    """
    id: str
    name: str
    parent: Optional[str] = None
    children: Tuple[str, ...] = ()
    is_open: bool = True

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FOLDER

    @property
    def is_folder(self) -> bool:
        return True

    def to_record(self) -> Dict[str, Any]:
        """Serialize into the flat JSON node record."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "parent": self.parent,
            "children": list(self.children),
            "isOpen": self.is_open,
        }


@dataclass(frozen=True)
class FileNode:
    """
    Leaf node. Files carry neither children nor an open state.

    Attributes:
        id: Immutable unique identifier.
        name: Display name.
        parent: Identifier of the containing folder.
    """
    id: str
    name: str
    parent: Optional[str] = None

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE

    @property
    def is_folder(self) -> bool:
        return False

    def to_record(self) -> Dict[str, Any]:
        """Serialize into the flat JSON node record."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "parent": self.parent,
        }


Node = Union[FolderNode, FileNode]

# -----------------------------------------------------------------------------
# GESTURES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DropGesture:
    """
    Pointer drop reported by the rendering collaborator.

    Attributes:
        active_id: Node being dragged.
        over_id: Node under the pointer at release, None when dropped on nothing.
        modifier_active: True while the sibling-placement modifier (Shift) is held.
    """
    active_id: str
    over_id: Optional[str]
    modifier_active: bool = False


@dataclass(frozen=True)
class Placement:
    """
    Concrete structural operation resolved from a DropGesture.

    Attributes:
        active_id: Node to relocate.
        target_id: Node the destination is expressed against.
        mode: Destination relative to target_id.
        stable_reorder: Source and target share a parent; apply as an
            in-place array move instead of unlink and reinsert.
    """
    active_id: str
    target_id: str
    mode: DropMode
    stable_reorder: bool = False

# -----------------------------------------------------------------------------
# NODE STORE SNAPSHOT
# -----------------------------------------------------------------------------

class NodeStore(Mapping[str, Node]):
    """
    Immutable keyed collection of every node in the tree.

    Snapshots never change after construction. `evolve` builds the successor
    snapshot by copying the id mapping and replacing only the touched
    records; untouched records are shared between snapshots.
    """

    __slots__ = ("_nodes", "_root_id", "_retired")

    def __init__(
            self,
            nodes: Mapping[str, Node],
            root_id: str = ROOT_ID,
            retired: Iterable[str] = (),
    ):
        self._nodes: Dict[str, Node] = dict(nodes)
        self._root_id = root_id
        self._retired: FrozenSet[str] = frozenset(retired)

    def __getitem__(self, node_id: str) -> Node:
        return self._nodes[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeStore):
            return NotImplemented
        return self._root_id == other._root_id and self._nodes == other._nodes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"NodeStore(root_id={self._root_id!r}, nodes={len(self._nodes)})"

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def root(self) -> FolderNode:
        node = self._nodes[self._root_id]
        assert isinstance(node, FolderNode)
        return node

    @property
    def retired(self) -> FrozenSet[str]:
        """Identifiers deleted earlier in this session; never handed out again."""
        return self._retired

    def folder(self, node_id: Optional[str]) -> Optional[FolderNode]:
        """Return the folder stored under node_id, or None for files and unknown ids."""
        if node_id is None:
            return None
        node = self._nodes.get(node_id)
        return node if isinstance(node, FolderNode) else None

    def is_known_id(self, node_id: str) -> bool:
        """True if node_id is live or was retired in this session."""
        return node_id in self._nodes or node_id in self._retired

    def evolve(
            self,
            updates: Optional[Mapping[str, Node]] = None,
            removed: Iterable[str] = (),
    ) -> "NodeStore":
        """
        Build the successor snapshot.

        Args:
            updates: Records to insert or replace, keyed by id.
            removed: Identifiers to drop; they join the retired set.

        Returns:
            NodeStore: A new snapshot. `self` is left untouched.
        """
        nodes = dict(self._nodes)
        if updates:
            nodes.update(updates)
        removed = [node_id for node_id in removed if node_id in nodes]
        for node_id in removed:
            del nodes[node_id]
        return NodeStore(nodes, self._root_id, self._retired.union(removed))


def default_state(root_name: str = DEFAULT_ROOT_NAME) -> NodeStore:
    """
    Build the initial snapshot: a lone, open root folder.

    Args:
        root_name: Display name of the root.

    Returns:
        NodeStore: Snapshot containing only the root.
    """
    root = FolderNode(id=ROOT_ID, name=root_name, parent=None, children=(), is_open=True)
    return NodeStore({ROOT_ID: root}, ROOT_ID)
