"""Write library_controllers: one skin controller per boned mesh."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.logging import ExportLogger
from ..core.types import ObjectCategory
from ..data.collada import FloatKind, IDENTITY_MATRIX
from ..skeleton.skin import build_skin
from .geometry_writer import emit_float_array, emit_name_array
from .xml_utils import DocumentBuilder, floats_to_str, ints_to_str

if TYPE_CHECKING:
    from ..core.identifiers import IdentifierRegistry
    from ..data.scene import Scene


def controller_id(registry: IdentifierRegistry, mesh_index: int) -> str:
    """Id of the skin controller of mesh ``mesh_index``."""
    geometry_id = registry.object_id(ObjectCategory.MESH, mesh_index)
    return registry.derived_id(geometry_id, "-skin")


def emit_controller(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    mesh_index: int,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    """
    Write the skin controller of a mesh with bones.

    <controller id="geom-skin" name="skinCluster0">
        <skin source="#geom">
            <bind_shape_matrix>
            <source> joints (Name_array), bind poses, weights
            <joints> JOINT + INV_BIND_MATRIX
            <vertex_weights count="V"> JOINT/WEIGHT inputs, <vcount>, <v>
    """
    mesh = scene.meshes[mesh_index]
    if not mesh.has_bones:
        return

    geometry_id = registry.object_id(ObjectCategory.MESH, mesh_index)
    skin_id = controller_id(registry, mesh_index)
    joint_ids = [registry.bone_id(mesh_index, i) for i in range(len(mesh.bones))]
    skin = build_skin(mesh, joint_ids)

    joints_source = registry.derived_id(skin_id, "-joints")
    poses_source = registry.derived_id(skin_id, "-bind_poses")
    weights_source = registry.derived_id(skin_id, "-weights")

    with builder.element("controller", id=skin_id, name=f"skinCluster{mesh_index}"):
        with builder.element("skin", source=f"#{geometry_id}"):
            builder.leaf("bind_shape_matrix", floats_to_str(IDENTITY_MATRIX, precision))

            emit_name_array(builder, registry, joints_source, skin.joint_ids, "JOINT")
            emit_float_array(builder, registry, poses_source, FloatKind.MATRIX4X4,
                             skin.bind_poses, precision)
            emit_float_array(builder, registry, weights_source, FloatKind.WEIGHT,
                             skin.weights, precision)

            with builder.element("joints"):
                builder.leaf("input", semantic="JOINT", source=f"#{joints_source}")
                builder.leaf("input", semantic="INV_BIND_MATRIX",
                             source=f"#{poses_source}")

            with builder.element("vertex_weights", count=str(len(skin.vcount))):
                builder.leaf("input", semantic="JOINT",
                             source=f"#{joints_source}", offset="0")
                builder.leaf("input", semantic="WEIGHT",
                             source=f"#{weights_source}", offset="1")
                builder.leaf("vcount", ints_to_str(skin.vcount))
                builder.leaf("v", ints_to_str(skin.flat_influences()))

    log.info(f"Written controller: {skin_id} ({len(skin.joint_ids)} joints)")


def write_controller_library(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    if not any(mesh.has_bones for mesh in scene.meshes):
        return
    with builder.element("library_controllers"):
        for index in range(len(scene.meshes)):
            emit_controller(builder, scene, registry, index, log, precision)
