"""Write library_images, library_effects and library_materials."""

from __future__ import annotations

from typing import TYPE_CHECKING, List
from urllib.parse import quote

from ..core.logging import ExportLogger
from ..data.collada import SURFACE_SLOTS, NORMAL_SLOT
from ..materials.resolver import MaterialSummary, Property, Surface
from .xml_utils import DocumentBuilder, float_to_str, floats_to_str

if TYPE_CHECKING:
    from ..core.identifiers import IdentifierRegistry

# Order of entries inside a <phong>/<blinn>/<lambert>/<constant> technique
_EFFECT_ORDER = (
    ("emission", False),
    ("ambient", False),
    ("diffuse", False),
    ("specular", False),
    ("shininess", True),
    ("reflective", False),
    ("transparent", False),
    ("transparency", True),
    ("index_of_refraction", True),
)


def image_id(registry: IdentifierRegistry, material_id: str, slot: str) -> str:
    return registry.derived_id(material_id, f"-{slot}-image")


def effect_id(registry: IdentifierRegistry, material_id: str) -> str:
    return registry.derived_id(material_id, "-fx")


def _texture_url(path: str) -> str:
    return quote(path.replace("\\", "/"), safe="/:.-_~")


def emit_image(builder: DocumentBuilder, surface: Surface, img_id: str) -> None:
    """<image> for a texture surface; no-op otherwise."""
    if not surface.is_texture:
        return
    with builder.element("image", id=img_id):
        builder.leaf("init_from", _texture_url(surface.texture))


def emit_texture_reference(
    builder: DocumentBuilder,
    surface: Surface,
    slot: str,
    material_id: str,
    img_id: str,
) -> None:
    """The surface + sampler newparams an effect needs to sample a texture."""
    if not surface.is_texture:
        return
    prefix = f"{material_id}-{slot}"
    with builder.element("newparam", sid=f"{prefix}-surface"):
        with builder.element("surface", type="2D"):
            builder.leaf("init_from", img_id)
    with builder.element("newparam", sid=f"{prefix}-sampler"):
        with builder.element("sampler2D"):
            builder.leaf("source", f"{prefix}-surface")


def emit_color_or_texture(
    builder: DocumentBuilder,
    surface: Surface,
    slot: str,
    material_id: str,
    precision: int = 7,
) -> None:
    """A <color> or <texture> entry for one effect slot; no-op when absent."""
    if not surface.exists:
        return
    with builder.element(slot):
        if surface.is_texture:
            builder.leaf("texture",
                         texture=f"{material_id}-{slot}-sampler",
                         texcoord=f"CHANNEL{surface.channel}")
        else:
            builder.leaf("color", floats_to_str(surface.color, precision), sid=slot)


def emit_scalar(
    builder: DocumentBuilder,
    prop: Property,
    slot: str,
    precision: int = 7,
) -> None:
    if not prop.exists:
        return
    with builder.element(slot):
        builder.leaf("float", float_to_str(prop.value, precision), sid=slot)


def _emit_normal_map(builder: DocumentBuilder, summary: MaterialSummary) -> None:
    """Normal maps have no common-profile slot; use the FCOLLADA bump extra."""
    surface = summary.surface("normal")
    if not surface.is_texture:
        return
    with builder.element("extra"):
        with builder.element("technique", profile="FCOLLADA"):
            with builder.element("bump", bumptype="NORMALMAP"):
                builder.leaf("texture",
                             texture=f"{summary.id}-normal-sampler",
                             texcoord=f"CHANNEL{surface.channel}")


def _all_slots() -> List[str]:
    return [slot for slot, _, _ in SURFACE_SLOTS + (NORMAL_SLOT,)]


def write_images(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    summaries: List[MaterialSummary],
    log: ExportLogger,
) -> None:
    """library_images, omitted when no material binds a texture."""
    if not any(s.surface(slot).is_texture for s in summaries for slot in _all_slots()):
        return
    with builder.element("library_images"):
        for summary in summaries:
            for slot in _all_slots():
                surface = summary.surface(slot)
                if surface.is_texture:
                    emit_image(builder, surface, image_id(registry, summary.id, slot))
    log.debug("Written image library")


def write_effects(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    summaries: List[MaterialSummary],
    log: ExportLogger,
    precision: int = 7,
) -> None:
    if not summaries:
        return
    with builder.element("library_effects"):
        for summary in summaries:
            with builder.element("effect", id=effect_id(registry, summary.id),
                                 name=summary.name):
                with builder.element("profile_COMMON"):
                    for slot in _all_slots():
                        surface = summary.surface(slot)
                        if surface.is_texture:
                            emit_texture_reference(builder, surface, slot, summary.id,
                                                   image_id(registry, summary.id, slot))

                    with builder.element("technique", sid="standard"):
                        with builder.element(summary.shading_model):
                            for slot, is_scalar in _EFFECT_ORDER:
                                if is_scalar:
                                    emit_scalar(builder, summary.scalar(slot), slot, precision)
                                else:
                                    emit_color_or_texture(
                                        builder, summary.surface(slot), slot,
                                        summary.id, precision)
                        _emit_normal_map(builder, summary)
            log.info(f"Written effect: {effect_id(registry, summary.id)}")


def write_materials(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    summaries: List[MaterialSummary],
    log: ExportLogger,
) -> None:
    if not summaries:
        return
    with builder.element("library_materials"):
        for summary in summaries:
            with builder.element("material", id=summary.id, name=summary.name):
                builder.leaf("instance_effect", url=f"#{effect_id(registry, summary.id)}")
            log.info(f"Written material: {summary.id}")
