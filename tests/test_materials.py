import pytest

from collada_export import ExportLogger, Material, Scene, TextureSlot
from collada_export.formats.material_writer import (
    emit_color_or_texture,
    emit_scalar,
    write_effects,
    write_images,
    write_materials,
)
from collada_export.materials.resolver import (
    Property,
    Surface,
    collada_shading_model,
    resolve_property,
    resolve_surface,
    summarize_material,
)

from conftest import make_registry


RED = (1.0, 0.0, 0.0, 1.0)


def test_texture_takes_precedence_over_color():
    material = Material(
        colors={"diffuse": RED},
        textures={"diffuse": [TextureSlot("wood.png", uv_channel=1)]},
    )
    surface = resolve_surface(material, "diffuse", "diffuse")
    assert surface.exists
    assert surface.texture == "wood.png"
    assert surface.channel == 1
    assert surface.color is None


def test_color_used_without_texture():
    surface = resolve_surface(Material(colors={"diffuse": RED}), "diffuse", "diffuse")
    assert surface.exists and not surface.is_texture
    assert surface.color == RED


def test_rgb_color_gets_opaque_alpha():
    surface = resolve_surface(Material(colors={"ambient": (0.1, 0.2, 0.3)}),
                              "ambient", "ambient")
    assert surface.color == (0.1, 0.2, 0.3, 1.0)


def test_absent_surface():
    assert not resolve_surface(Material(), "diffuse", "diffuse").exists
    # normal maps have no color fallback
    assert not resolve_surface(Material(colors={"normal": RED}), "normals", None).exists


def test_texture_index_selects_slot():
    material = Material(textures={"diffuse": [TextureSlot("a.png"), TextureSlot("b.png")]})
    assert resolve_surface(material, "diffuse", "diffuse", index=1).texture == "b.png"
    assert not resolve_surface(material, "diffuse", None, index=2).exists


def test_embedded_texture_path_is_mapped():
    material = Material(textures={"diffuse": [TextureSlot("*0")]})
    surface = resolve_surface(material, "diffuse", "diffuse",
                              textures={0: "scene_texture_0.png"})
    assert surface.texture == "scene_texture_0.png"


def test_unexported_embedded_texture_falls_back_to_color():
    log = ExportLogger()
    material = Material(name="Painted", colors={"diffuse": RED},
                        textures={"diffuse": [TextureSlot("*0")]})
    surface = resolve_surface(material, "diffuse", "diffuse", textures={}, log=log)
    assert not surface.is_texture
    assert surface.color == RED
    assert any("*0" in msg for msg in log.warnings())


def test_unexported_embedded_texture_without_color_is_absent():
    material = Material(textures={"diffuse": [TextureSlot("*1")]})
    surface = resolve_surface(material, "diffuse", "diffuse", textures={0: "a.png"})
    assert not surface.exists


def test_resolve_property():
    material = Material(properties={"shininess": 32})
    assert resolve_property(material, "shininess") == Property(True, 32.0)
    assert not resolve_property(material, "refracti").exists


@pytest.mark.parametrize("tag, expected", [
    ("phong", "phong"),
    ("Blinn", "blinn"),
    ("gouraud", "lambert"),
    ("flat", "lambert"),
    ("unlit", "constant"),
    ("toon", "phong"),
    ("", "phong"),
])
def test_collada_shading_model(tag, expected):
    assert collada_shading_model(tag) == expected


def test_emitters_are_noops_when_absent(builder):
    emit_color_or_texture(builder, Surface(), "diffuse", "material_0")
    emit_scalar(builder, Property(), "shininess")
    assert len(builder.root) == 0


def _effect(builder, material, log):
    registry = make_registry(Scene(materials=[material]))
    summary = summarize_material(material, "material_0", "mat", textures={})
    write_images(builder, registry, [summary], log)
    write_effects(builder, registry, [summary], log)
    write_materials(builder, registry, [summary], log)
    return builder.root.find("library_effects/effect/profile_COMMON")


def test_diffuse_entry_absent_without_texture_or_color(builder, log):
    material = Material(colors={"specular": RED})
    profile = _effect(builder, material, log)
    phong = profile.find("technique/phong")
    assert phong.find("diffuse") is None
    assert phong.find("specular/color").text == "1 0 0 1"
    assert builder.root.find("library_images") is None


def test_effect_references_only_texture_when_both_set(builder, log):
    material = Material(
        colors={"diffuse": RED},
        textures={"diffuse": [TextureSlot("textures/wood grain.png")]},
    )
    profile = _effect(builder, material, log)
    diffuse = profile.find("technique/phong/diffuse")
    assert [child.tag for child in diffuse] == ["texture"]
    assert diffuse[0].get("texture") == "material_0-diffuse-sampler"
    assert diffuse[0].get("texcoord") == "CHANNEL0"

    sids = [p.get("sid") for p in profile.findall("newparam")]
    assert sids == ["material_0-diffuse-surface", "material_0-diffuse-sampler"]

    image = builder.root.find("library_images/image")
    assert image.get("id") == "material_0-diffuse-image"
    assert image.find("init_from").text == "textures/wood%20grain.png"


def test_effect_slot_order_and_scalars(builder, log):
    material = Material(
        shading_model="blinn",
        colors={"diffuse": RED, "emissive": RED, "ambient": RED},
        properties={"shininess": 10.0, "opacity": 0.5, "refracti": 1.45},
    )
    profile = _effect(builder, material, log)
    blinn = profile.find("technique/blinn")
    assert [child.tag for child in blinn] == [
        "emission", "ambient", "diffuse", "shininess",
        "transparency", "index_of_refraction",
    ]
    assert blinn.find("transparency/float").text == "0.5"


def test_normal_map_goes_to_bump_extra(builder, log):
    material = Material(textures={"normals": [TextureSlot("n.png", uv_channel=2)]})
    profile = _effect(builder, material, log)
    bump = profile.find("technique/extra/technique/bump")
    assert bump.get("bumptype") == "NORMALMAP"
    assert bump.find("texture").get("texcoord") == "CHANNEL2"


def test_material_instances_effect(builder, log):
    _effect(builder, Material(name="Paint"), log)
    material = builder.root.find("library_materials/material")
    assert material.get("id") == "material_0"
    assert material.get("name") == "mat"
    assert material.find("instance_effect").get("url") == "#material_0-fx"
