"""Skin binding data: joints, bind poses and per-vertex influences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from ..data.scene import Mesh
from ..formats.xml_utils import matrix_to_values


@dataclass
class SkinData:
    """
    Flattened skin of one mesh.

    joint_ids and bind_poses run parallel (one entry per bone);
    weights holds every raw weight in bone order; vcount has one
    entry per vertex; influences holds (joint index, weight index)
    pairs for each vertex in turn.
    """
    joint_ids: List[str] = field(default_factory=list)
    bind_poses: List[float] = field(default_factory=list)
    weights: List[float] = field(default_factory=list)
    vcount: List[int] = field(default_factory=list)
    influences: List[Tuple[int, int]] = field(default_factory=list)

    def flat_influences(self) -> List[int]:
        return [value for pair in self.influences for value in pair]


def build_skin(mesh: Mesh, joint_ids: List[str]) -> SkinData:
    """
    Collect the skin of ``mesh``; ``joint_ids`` holds one id per bone.

    Weights are passed through unchanged: no deduplication and no
    normalization.
    """
    skin = SkinData(joint_ids=list(joint_ids))

    per_vertex: List[List[Tuple[int, int]]] = [[] for _ in mesh.positions]
    for joint_index, bone in enumerate(mesh.bones):
        skin.bind_poses.extend(matrix_to_values(bone.offset_matrix))
        for vw in bone.weights:
            weight_index = len(skin.weights)
            skin.weights.append(float(vw.weight))
            per_vertex[vw.vertex_id].append((joint_index, weight_index))

    for pairs in per_vertex:
        skin.vcount.append(len(pairs))
        skin.influences.extend(pairs)
    return skin
