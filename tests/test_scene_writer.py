import math

import pytest

from collada_export import Camera, Light, Material, Mesh, Node, Scene
from collada_export.formats.scene_writer import (
    SceneGraphWriter,
    spot_falloff_exponent,
    write_cameras_library,
    write_lights_library,
    write_visual_scene,
)

from conftest import make_registry


def _writer(scene, builder, log):
    return SceneGraphWriter(builder, scene, make_registry(scene), log)


def test_write_node_restores_depth(skinned_scene, builder, log):
    writer = _writer(skinned_scene, builder, log)
    assert builder.depth == 0
    writer.write_node(writer.arena.root)
    assert builder.depth == 0

    leaf = writer.arena.find_by_name("Spine")
    writer.write_node(leaf)
    assert builder.depth == 0


def test_node_tree_mirrors_hierarchy(skinned_scene, builder, log):
    writer = _writer(skinned_scene, builder, log)
    writer.write_node(writer.arena.root)

    armature = builder.root.find("node")
    assert armature.get("id") == "Armature"
    assert armature.get("type") == "NODE"
    assert [n.get("name") for n in armature.findall("node")] == ["Hips", "Body"]

    hips = armature.find("node[@name='Hips']")
    assert hips.get("type") == "JOINT"
    assert hips.get("sid") == "Hips"
    assert hips.find("node").get("type") == "JOINT"


def test_node_matrix_is_row_major(skinned_scene, builder, log):
    writer = _writer(skinned_scene, builder, log)
    writer.write_node(writer.arena.find_by_name("Hips"))
    matrix = builder.root.find("node/matrix")
    assert matrix.get("sid") == "matrix"
    assert matrix.text.split()[:8] == ["1", "0", "0", "0", "0", "1", "0", "1"]


def test_skinned_mesh_uses_controller(skinned_scene, builder, log):
    writer = _writer(skinned_scene, builder, log)
    writer.write_node(writer.arena.root)

    body = builder.root.find("node/node[@name='Body']")
    assert body.find("instance_geometry") is None
    controller = body.find("instance_controller")
    assert controller.get("url") == "#geometry_0-skin"
    assert controller.find("skeleton").text == "#Hips"

    instance = controller.find("bind_material/technique_common/instance_material")
    assert instance.get("symbol") == "defaultMaterial"
    assert instance.get("target") == "#material_0"


def test_static_mesh_uses_geometry(quad_scene, builder, log):
    quad_scene.materials.append(Material(name="Red"))
    quad_scene.meshes[0].uv_channels = [[(0, 0)] * 4, [], [(1, 1)] * 4]
    writer = _writer(quad_scene, builder, log)
    writer.write_node(writer.arena.root)

    instance = builder.root.find("node/instance_geometry")
    assert instance.get("url") == "#geometry_0"
    inputs = instance.findall(
        "bind_material/technique_common/instance_material/bind_vertex_input")
    assert [i.get("semantic") for i in inputs] == ["CHANNEL0", "CHANNEL2"]
    assert [i.get("input_set") for i in inputs] == ["0", "2"]


def test_no_bind_material_without_valid_material(quad_scene, builder, log):
    writer = _writer(quad_scene, builder, log)
    writer.write_node(writer.arena.root)
    instance = builder.root.find("node/instance_geometry")
    assert instance.find("bind_material") is None


def test_camera_and_light_instances(builder, log):
    scene = Scene(
        nodes=[Node(name="Rig", light=0, camera=0)],
        lights=[Light(name="Sun", kind="directional")],
        cameras=[Camera(name="Eye")],
    )
    writer = _writer(scene, builder, log)
    writer.write_node(writer.arena.root)
    node = builder.root.find("node")
    assert node.find("instance_camera").get("url") == "#camera_0"
    assert node.find("instance_light").get("url") == "#light_0"


def test_instances_suppressed_by_flags(builder, log):
    scene = Scene(nodes=[Node(name="Rig", light=0, camera=0)],
                  lights=[Light()], cameras=[Camera()])
    writer = SceneGraphWriter(builder, scene, make_registry(scene), log,
                              write_cameras=False, write_lights=False)
    writer.write_node(writer.arena.root)
    node = builder.root.find("node")
    assert node.find("instance_camera") is None
    assert node.find("instance_light") is None


def test_visual_scene_and_scene_instance(quad_scene, builder, log):
    registry = make_registry(quad_scene)
    scene_id = registry.reserve("Scene")
    write_visual_scene(builder, quad_scene, registry, scene_id, log)

    visual = builder.root.find("library_visual_scenes/visual_scene")
    assert visual.get("id") == "Scene"
    assert visual.get("name") == "Root"
    assert builder.root.find("scene/instance_visual_scene").get("url") == "#Scene"
    assert builder.depth == 0


def test_implicit_root_wraps_multiple_top_level_nodes(builder, log):
    scene = Scene(nodes=[Node(name="A"), Node(name="B")])
    registry = make_registry(scene)
    write_visual_scene(builder, scene, registry, registry.reserve("Scene"), log)
    root = builder.root.find("library_visual_scenes/visual_scene/node")
    assert root.get("name") == "Root"
    assert [n.get("id") for n in root.findall("node")] == ["A", "B"]


def test_perspective_camera(builder, log):
    scene = Scene(cameras=[Camera(name="Eye", horizontal_fov=math.pi / 2, aspect=1.5)])
    write_cameras_library(builder, scene, make_registry(scene), log)
    camera = builder.root.find("library_cameras/camera")
    assert camera.get("id") == "camera_0"
    assert camera.get("name") == "Eye"
    persp = camera.find("optics/technique_common/perspective")
    assert persp.find("xfov").text == "90"
    assert persp.find("aspect_ratio").text == "1.5"
    assert persp.find("znear").text == "0.1"
    assert persp.find("zfar").text == "1000"


def test_orthographic_camera_without_aspect(builder, log):
    scene = Scene(cameras=[Camera(kind="orthographic", ortho_width=4.0)])
    write_cameras_library(builder, scene, make_registry(scene), log)
    ortho = builder.root.find("library_cameras/camera/optics/technique_common/orthographic")
    assert ortho.find("xmag").text == "4"
    assert ortho.find("aspect_ratio") is None


def test_light_kinds(builder, log):
    scene = Scene(lights=[
        Light(kind="point", color=(1.0, 0.5, 0.0), attenuation_linear=0.25),
        Light(kind="directional"),
        Light(kind="spot", angle_inner_cone=0.0, angle_outer_cone=math.acos(0.1)),
        Light(kind="ambient"),
    ])
    write_lights_library(builder, scene, make_registry(scene), log)
    lights = builder.root.findall("library_lights/light")
    assert [l.get("id") for l in lights] == ["light_0", "light_1", "light_2", "light_3"]

    point = lights[0].find("technique_common/point")
    assert point.find("color").text == "1 0.5 0"
    assert point.find("linear_attenuation").text == "0.25"
    assert lights[1].find("technique_common/directional") is not None
    spot = lights[2].find("technique_common/spot")
    assert float(spot.find("falloff_exponent").text) == pytest.approx(1.0)
    assert spot.find("falloff_angle").text == "0"
    assert lights[3].find("technique_common/ambient") is not None
    assert log.warning_count == 0


def test_unsupported_light_kind_warns(builder, log):
    scene = Scene(lights=[Light(name="Odd", kind="area")])
    write_lights_library(builder, scene, make_registry(scene), log)
    assert builder.root.find("library_lights/light/technique_common") is not None
    assert any("unsupported kind" in msg for msg in log.warnings())


def test_spot_falloff_without_penumbra():
    assert spot_falloff_exponent(Light(kind="spot")) == 0.0


def test_empty_libraries_are_omitted(builder, log):
    scene = Scene(nodes=[Node(name="Only")], meshes=[Mesh()])
    registry = make_registry(scene)
    write_cameras_library(builder, scene, registry, log)
    write_lights_library(builder, scene, registry, log)
    assert len(builder.root) == 0


def test_node_instances_follow_schema_order(skinned_scene, builder, log):
    skinned_scene.meshes.append(Mesh(positions=[(0, 0, 0)]))
    skinned_scene.lights.append(Light())
    skinned_scene.cameras.append(Camera())
    body = skinned_scene.nodes[0].children[1]
    body.meshes = [1, 0]
    body.light = 0
    body.camera = 0

    writer = _writer(skinned_scene, builder, log)
    writer.write_node(writer.arena.find_by_name("Body"))
    node = builder.root.find("node")
    assert [child.tag for child in node] == [
        "matrix",
        "instance_camera",
        "instance_controller",
        "instance_geometry",
        "instance_light",
    ]
