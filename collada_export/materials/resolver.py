"""Resolve material keys into per-slot surface descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..core.logging import ExportLogger
from ..data.collada import (
    DEFAULT_SHADING_MODEL,
    NORMAL_SLOT,
    SCALAR_SLOTS,
    SHADING_MODELS,
    SURFACE_SLOTS,
)
from ..data.scene import Material


@dataclass
class Surface:
    """One material input: absent, a solid color, or a texture.

    When both are bound, the texture wins and ``color`` stays None.
    """
    exists: bool = False
    color: Optional[Tuple[float, float, float, float]] = None
    texture: str = ""
    channel: int = 0

    @property
    def is_texture(self) -> bool:
        return self.exists and bool(self.texture)


@dataclass
class Property:
    exists: bool = False
    value: float = 0.0


@dataclass
class MaterialSummary:
    """Everything the effect writer needs to know about one material."""
    id: str = ""
    name: str = ""
    shading_model: str = DEFAULT_SHADING_MODEL
    surfaces: Dict[str, Surface] = field(default_factory=dict)    # effect slot -> surface
    scalars: Dict[str, Property] = field(default_factory=dict)    # effect slot -> property

    def surface(self, slot: str) -> Surface:
        return self.surfaces.get(slot, Surface())

    def scalar(self, slot: str) -> Property:
        return self.scalars.get(slot, Property())


def embedded_texture_index(path: str) -> Optional[int]:
    """Index of an embedded texture reference like ``*3``, else None."""
    if len(path) > 1 and path[0] == "*" and path[1:].isdigit():
        return int(path[1:])
    return None


def resolve_surface(
    material: Material,
    texture_kind: str,
    color_key: Optional[str],
    index: int = 0,
    textures: Optional[Dict[int, str]] = None,
    log: Optional[ExportLogger] = None,
) -> Surface:
    """
    Resolve one slot: bound texture first, then solid color, else absent.

    ``index`` selects among several textures of the same kind.
    ``textures`` maps embedded texture indices to their exported file names;
    an embedded reference missing from it is ignored so the color applies.
    """
    slots = material.textures.get(texture_kind, [])
    if index < len(slots) and slots[index].path:
        slot = slots[index]
        path = slot.path
        embedded = embedded_texture_index(path)
        if embedded is None:
            return Surface(exists=True, texture=path, channel=slot.uv_channel)
        if textures and embedded in textures:
            return Surface(exists=True, texture=textures[embedded], channel=slot.uv_channel)
        if log is not None:
            log.warning(f"Material '{material.name}': embedded texture {path} "
                        f"is not exported, ignoring {texture_kind} texture")

    if color_key is not None and color_key in material.colors:
        color = tuple(material.colors[color_key])
        if len(color) == 3:
            color = color + (1.0,)
        return Surface(exists=True, color=color)

    return Surface()


def resolve_property(material: Material, key: str) -> Property:
    if key in material.properties:
        return Property(exists=True, value=float(material.properties[key]))
    return Property()


def collada_shading_model(tag: str) -> str:
    return SHADING_MODELS.get(tag.lower(), DEFAULT_SHADING_MODEL) if tag else DEFAULT_SHADING_MODEL


def summarize_material(
    material: Material,
    material_id: str,
    name: str,
    textures: Optional[Dict[int, str]] = None,
    log: Optional[ExportLogger] = None,
) -> MaterialSummary:
    summary = MaterialSummary(
        id=material_id,
        name=name,
        shading_model=collada_shading_model(material.shading_model),
    )
    for slot, texture_kind, color_key in SURFACE_SLOTS + (NORMAL_SLOT,):
        summary.surfaces[slot] = resolve_surface(
            material, texture_kind, color_key, textures=textures, log=log)
    for slot, key in SCALAR_SLOTS:
        summary.scalars[slot] = resolve_property(material, key)
    return summary
