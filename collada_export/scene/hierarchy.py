"""Flattened view of the scene node tree, keyed by integer handles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set

from ..data.scene import Mesh, Node

IMPLICIT_ROOT_NAME = "Root"


@dataclass
class NodeEntry:
    """A node plus its position in the tree."""
    handle: int
    node: Node
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)


class NodeArena:
    """
    Assigns every node a stable handle in depth-first pre-order.

    A scene with exactly one top-level node is rooted at it; any other
    count gets an implicit root node holding the top-level nodes.
    """

    def __init__(self, top_level: Sequence[Node]):
        if len(top_level) == 1:
            root = top_level[0]
            self.implicit_root = False
        else:
            root = Node(name=IMPLICIT_ROOT_NAME, children=list(top_level))
            self.implicit_root = True

        self._entries: List[NodeEntry] = []
        self._by_name: Dict[str, int] = {}
        self._add(root, None)

    def _add(self, node: Node, parent: Optional[int]) -> int:
        handle = len(self._entries)
        entry = NodeEntry(handle=handle, node=node, parent=parent)
        self._entries.append(entry)
        if node.name and node.name not in self._by_name:
            self._by_name[node.name] = handle
        for child in node.children:
            entry.children.append(self._add(child, handle))
        return handle

    @property
    def root(self) -> int:
        return 0

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, handle: int) -> NodeEntry:
        return self._entries[handle]

    def walk(self) -> Iterator[int]:
        """Handles in depth-first pre-order (the order they were assigned)."""
        return iter(range(len(self._entries)))

    def find_by_name(self, name: str) -> Optional[int]:
        """First node with this name in depth-first order."""
        return self._by_name.get(name)


def collect_joint_handles(arena: NodeArena, meshes: Sequence[Mesh]) -> Set[int]:
    """Handles of all nodes that some mesh bone refers to by name."""
    joints: Set[int] = set()
    for mesh in meshes:
        for bone in mesh.bones:
            handle = arena.find_by_name(bone.name)
            if handle is not None:
                joints.add(handle)
    return joints


def find_skeleton_root(
    arena: NodeArena,
    mesh: Mesh,
    joints: Set[int],
) -> Optional[int]:
    """
    Topmost joint above the mesh's first resolvable bone.

    Walks up the parent chain while the parent is itself a joint.
    """
    for bone in mesh.bones:
        handle = arena.find_by_name(bone.name)
        if handle is None:
            continue
        parent = arena[handle].parent
        while parent is not None and parent in joints:
            handle = parent
            parent = arena[handle].parent
        return handle
    return None
