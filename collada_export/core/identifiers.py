"""Globally unique, stable ids and display names for every exported entity.

Ids must be valid ``xs:ID`` values: a letter or underscore followed by
letters, digits, ``_``, ``-`` or ``.``. Every id handed out, whatever its
category, is drawn from one shared set so that no two entities in a
document collide.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Set, Tuple

from .errors import InternalExportError
from .types import ObjectCategory

if TYPE_CHECKING:
    from ..data.scene import Scene
    from ..scene.hierarchy import NodeArena

_ID_START_CHARS = frozenset(string.ascii_letters + "_")
_ID_CHARS = frozenset(string.ascii_letters + string.digits + "_-.")

# Upper bound on numeric suffixes tried before giving up on a candidate
_MAX_SUFFIX = 1_000_000


def encode_xml_id(name: str) -> str:
    """Sanitize a name into the xs:ID character set.

    Invalid characters become '_'; a name that does not start with a
    letter or underscore gets a '_' prefix. Empty names stay empty.
    """
    if not name:
        return ""
    encoded = "".join(c if c in _ID_CHARS else "_" for c in name)
    if encoded[0] not in _ID_START_CHARS:
        encoded = "_" + encoded
    return encoded


@dataclass(frozen=True)
class ObjectIds:
    """Id and display name of a non-node scene object."""
    id: str
    name: str


class IdentifierRegistry:
    """Caches ids for nodes (by arena handle), objects and bones."""

    def __init__(self, scene: Scene, arena: NodeArena):
        self.scene = scene
        self.arena = arena
        self._used: Set[str] = set()
        self._node_ids: Dict[int, str] = {}
        self._objects: Dict[Tuple[ObjectCategory, int], ObjectIds] = {}
        self._bone_ids: Dict[Tuple[int, int], str] = {}
        self._derived: Dict[Tuple[str, str], str] = {}

    def make_unique(self, candidate: str) -> str:
        """Register ``candidate``, appending ``_<n>`` until it is unused."""
        if candidate not in self._used:
            self._used.add(candidate)
            return candidate
        for n in range(1, _MAX_SUFFIX):
            result = f"{candidate}_{n}"
            if result not in self._used:
                self._used.add(result)
                return result
        raise InternalExportError(f"Cannot find a unique id for '{candidate}'")

    def reserve(self, candidate: str) -> str:
        """Register an id outside the node/object categories."""
        return self.make_unique(encode_xml_id(candidate))

    def derived_id(self, owner: str, suffix: str) -> str:
        """Id of a sub-element built from its owner's id, e.g. ``geometry_0-positions``.

        Registered in the shared set like any other id and cached per
        (owner, suffix), so the element and every reference to it agree.
        """
        key = (owner, suffix)
        cached = self._derived.get(key)
        if cached is None:
            cached = self.make_unique(f"{owner}{suffix}")
            self._derived[key] = cached
        return cached

    # --- Nodes ---

    def assign_node_ids(self) -> None:
        """Give every node an id before anything is written.

        Skin joint lists reference node ids long before the scene graph
        that declares those nodes is written.
        """
        for handle in self.arena.walk():
            self.node_id(handle)

    def node_id(self, handle: int) -> str:
        cached = self._node_ids.get(handle)
        if cached is not None:
            return cached
        name = self.arena[handle].node.name
        candidate = encode_xml_id(name) or f"node_{handle}"
        node_id = self.make_unique(candidate)
        self._node_ids[handle] = node_id
        return node_id

    def node_name(self, handle: int) -> str:
        return self.arena[handle].node.name or self.node_id(handle)

    # --- Objects ---

    def object_ids(self, category: ObjectCategory, index: int) -> ObjectIds:
        key = (category, index)
        cached = self._objects.get(key)
        if cached is not None:
            return cached
        object_id = self.make_unique(f"{category.value}_{index}")
        name = self._object_source_name(category, index) or object_id
        ids = ObjectIds(id=object_id, name=name)
        self._objects[key] = ids
        return ids

    def object_id(self, category: ObjectCategory, index: int) -> str:
        return self.object_ids(category, index).id

    def object_name(self, category: ObjectCategory, index: int) -> str:
        return self.object_ids(category, index).name

    def _object_source_name(self, category: ObjectCategory, index: int) -> str:
        collections = {
            ObjectCategory.MESH: self.scene.meshes,
            ObjectCategory.MATERIAL: self.scene.materials,
            ObjectCategory.ANIMATION: self.scene.animations,
            ObjectCategory.LIGHT: self.scene.lights,
            ObjectCategory.CAMERA: self.scene.cameras,
        }
        return collections[category][index].name

    # --- Bones ---

    def bone_id(self, mesh_index: int, bone_index: int) -> str:
        """Id of the joint node a bone controls.

        A bone naming no node gets an id of its own so the joint list
        stays well formed.
        """
        bone = self.scene.meshes[mesh_index].bones[bone_index]
        handle = self.arena.find_by_name(bone.name)
        if handle is not None:
            return self.node_id(handle)
        key = (mesh_index, bone_index)
        cached = self._bone_ids.get(key)
        if cached is None:
            candidate = encode_xml_id(bone.name) or f"bone_{mesh_index}_{bone_index}"
            cached = self.make_unique(candidate)
            self._bone_ids[key] = cached
        return cached
