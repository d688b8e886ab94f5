"""Write library_cameras, library_lights and the visual scene node tree."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Set

from ..core.logging import ExportLogger
from ..core.types import ObjectCategory
from ..data.collada import DEFAULT_MATERIAL_SYMBOL
from ..data.scene import Camera, Light
from ..scene.hierarchy import collect_joint_handles, find_skeleton_root
from .controller_writer import controller_id
from .xml_utils import DocumentBuilder, float_to_str, floats_to_str, matrix_to_values

if TYPE_CHECKING:
    from ..core.identifiers import IdentifierRegistry
    from ..data.scene import Scene


# --- Cameras ---

def _write_camera(builder: DocumentBuilder, camera: Camera, precision: int) -> None:
    def fmt(value: float) -> str:
        return float_to_str(value, precision)

    with builder.element("optics"):
        with builder.element("technique_common"):
            if camera.kind == "orthographic":
                with builder.element("orthographic"):
                    builder.leaf("xmag", fmt(camera.ortho_width), sid="xmag")
                    if camera.aspect > 0:
                        builder.leaf("aspect_ratio", fmt(camera.aspect))
                    builder.leaf("znear", fmt(camera.clip_near), sid="znear")
                    builder.leaf("zfar", fmt(camera.clip_far), sid="zfar")
            else:
                with builder.element("perspective"):
                    builder.leaf("xfov", fmt(math.degrees(camera.horizontal_fov)), sid="xfov")
                    if camera.aspect > 0:
                        builder.leaf("aspect_ratio", fmt(camera.aspect))
                    builder.leaf("znear", fmt(camera.clip_near), sid="znear")
                    builder.leaf("zfar", fmt(camera.clip_far), sid="zfar")


def write_cameras_library(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    if not scene.cameras:
        return
    with builder.element("library_cameras"):
        for index, camera in enumerate(scene.cameras):
            ids = registry.object_ids(ObjectCategory.CAMERA, index)
            with builder.element("camera", id=ids.id, name=ids.name):
                _write_camera(builder, camera, precision)
            log.info(f"Written camera: {ids.id}")


# --- Lights ---

def spot_falloff_exponent(light: Light) -> float:
    """Exponent reaching 10% intensity across the penumbra."""
    cos_penumbra = math.cos(light.angle_outer_cone - light.angle_inner_cone)
    if cos_penumbra <= 0.0 or cos_penumbra >= 1.0:
        return 0.0
    return 1.0 / (math.log(cos_penumbra) / math.log(0.1))


def _write_attenuation(builder: DocumentBuilder, light: Light, precision: int) -> None:
    builder.leaf("constant_attenuation", float_to_str(light.attenuation_constant, precision))
    builder.leaf("linear_attenuation", float_to_str(light.attenuation_linear, precision))
    builder.leaf("quadratic_attenuation", float_to_str(light.attenuation_quadratic, precision))


def _write_light(
    builder: DocumentBuilder,
    light: Light,
    name: str,
    log: ExportLogger,
    precision: int,
) -> None:
    color = floats_to_str(light.color[:3], precision)
    with builder.element("technique_common"):
        if light.kind == "point":
            with builder.element("point"):
                builder.leaf("color", color, sid="color")
                _write_attenuation(builder, light, precision)
        elif light.kind == "directional":
            with builder.element("directional"):
                builder.leaf("color", color, sid="color")
        elif light.kind == "spot":
            with builder.element("spot"):
                builder.leaf("color", color, sid="color")
                _write_attenuation(builder, light, precision)
                builder.leaf("falloff_angle",
                             float_to_str(math.degrees(light.angle_inner_cone), precision),
                             sid="fall_off_angle")
                builder.leaf("falloff_exponent",
                             float_to_str(spot_falloff_exponent(light), precision),
                             sid="fall_off_exponent")
        elif light.kind == "ambient":
            with builder.element("ambient"):
                builder.leaf("color", color, sid="color")
        else:
            log.warning(f"Light '{name}' has unsupported kind '{light.kind}'")


def write_lights_library(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    if not scene.lights:
        return
    with builder.element("library_lights"):
        for index, light in enumerate(scene.lights):
            ids = registry.object_ids(ObjectCategory.LIGHT, index)
            with builder.element("light", id=ids.id, name=ids.name):
                _write_light(builder, light, ids.name, log, precision)
            log.info(f"Written light: {ids.id}")


# --- Node tree ---

class SceneGraphWriter:
    """Writes the node hierarchy below a <visual_scene>."""

    def __init__(
        self,
        builder: DocumentBuilder,
        scene: Scene,
        registry: IdentifierRegistry,
        log: ExportLogger,
        precision: int = 7,
        write_cameras: bool = True,
        write_lights: bool = True,
    ):
        self.builder = builder
        self.scene = scene
        self.registry = registry
        self.arena = registry.arena
        self.log = log
        self.precision = precision
        self.write_cameras = write_cameras
        self.write_lights = write_lights
        self.joints: Set[int] = collect_joint_handles(self.arena, scene.meshes)

    def write_node(self, handle: int) -> None:
        """Write a node and, depth first, its children in input order."""
        entry = self.arena[handle]
        node = entry.node
        node_id = self.registry.node_id(handle)
        node_type = "JOINT" if handle in self.joints else "NODE"

        with self.builder.element("node", id=node_id, name=self.registry.node_name(handle),
                                  sid=node_id, type=node_type):
            self.builder.leaf("matrix",
                              floats_to_str(matrix_to_values(node.transform), self.precision),
                              sid="matrix")

            if node.camera is not None and self.write_cameras:
                camera_id = self.registry.object_id(ObjectCategory.CAMERA, node.camera)
                self.builder.leaf("instance_camera", url=f"#{camera_id}")

            # Schema order: controllers, geometries, then lights
            skinned = [i for i in node.meshes if self.scene.meshes[i].has_bones]
            static = [i for i in node.meshes if not self.scene.meshes[i].has_bones]
            for mesh_index in skinned + static:
                self._write_mesh_instance(mesh_index)

            if node.light is not None and self.write_lights:
                light_id = self.registry.object_id(ObjectCategory.LIGHT, node.light)
                self.builder.leaf("instance_light", url=f"#{light_id}")

            for child in entry.children:
                self.write_node(child)

    def _write_mesh_instance(self, mesh_index: int) -> None:
        mesh = self.scene.meshes[mesh_index]
        ids = self.registry.object_ids(ObjectCategory.MESH, mesh_index)

        if mesh.has_bones:
            with self.builder.element("instance_controller",
                                      url=f"#{controller_id(self.registry, mesh_index)}"):
                root = find_skeleton_root(self.arena, mesh, self.joints)
                if root is not None:
                    self.builder.leaf("skeleton", f"#{self.registry.node_id(root)}")
                self._write_bind_material(mesh_index)
        else:
            with self.builder.element("instance_geometry", url=f"#{ids.id}", name=ids.name):
                self._write_bind_material(mesh_index)

    def _write_bind_material(self, mesh_index: int) -> None:
        mesh = self.scene.meshes[mesh_index]
        if not 0 <= mesh.material_index < len(self.scene.materials):
            return
        material_id = self.registry.object_id(ObjectCategory.MATERIAL, mesh.material_index)
        with self.builder.element("bind_material"):
            with self.builder.element("technique_common"):
                with self.builder.element("instance_material",
                                          symbol=DEFAULT_MATERIAL_SYMBOL,
                                          target=f"#{material_id}"):
                    for channel, uvs in enumerate(mesh.uv_channels):
                        if not uvs:
                            continue
                        self.builder.leaf("bind_vertex_input",
                                          semantic=f"CHANNEL{channel}",
                                          input_semantic="TEXCOORD",
                                          input_set=str(channel))


def write_visual_scene(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    scene_id: str,
    log: ExportLogger,
    precision: int = 7,
    write_cameras: bool = True,
    write_lights: bool = True,
) -> None:
    """library_visual_scenes with the node tree, then <scene>."""
    writer = SceneGraphWriter(builder, scene, registry, log, precision,
                              write_cameras, write_lights)
    arena = registry.arena
    with builder.element("library_visual_scenes"):
        with builder.element("visual_scene", id=scene_id,
                             name=registry.node_name(arena.root)):
            writer.write_node(arena.root)
    with builder.element("scene"):
        builder.leaf("instance_visual_scene", url=f"#{scene_id}")
    log.info(f"Written visual scene: {scene_id} ({len(arena)} nodes)")
