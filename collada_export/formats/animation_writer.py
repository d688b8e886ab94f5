"""Write library_animations: one clip per scene animation, one unit per channel."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from ..core.logging import ExportLogger
from ..core.types import ObjectCategory
from ..data.collada import FloatKind
from ..skeleton.animation import BakedChannel, bake_channel
from .geometry_writer import emit_float_array, emit_name_array
from .xml_utils import DocumentBuilder

if TYPE_CHECKING:
    from ..core.identifiers import IdentifierRegistry
    from ..data.scene import Scene


def collect_channels(
    scene: Scene,
    registry: IdentifierRegistry,
    anim_index: int,
    log: ExportLogger,
    default_interpolation: str = "LINEAR",
) -> List[Tuple[BakedChannel, str]]:
    """
    Baked channels of one animation with their target node ids.

    Channels without samples or without a target node are skipped with
    a warning.
    """
    animation = scene.animations[anim_index]
    result: List[Tuple[BakedChannel, str]] = []
    for channel in animation.channels:
        if not channel.keyframes:
            log.warning(f"Animation '{animation.name}': channel for "
                        f"'{channel.node_name}' has no samples, skipping")
            continue
        handle = registry.arena.find_by_name(channel.node_name)
        if handle is None:
            log.warning(f"Animation '{animation.name}': no node named "
                        f"'{channel.node_name}', skipping channel")
            continue
        baked = bake_channel(animation, channel, default_interpolation)
        result.append((baked, registry.node_id(handle)))
    return result


def emit_animation(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    clip_id: str,
    baked: BakedChannel,
    target_id: str,
    precision: int = 7,
) -> None:
    """
    Write one animation unit driving ``<target>/matrix``.

    <animation id="clip_target">
        <source> input (TIME), output (TRANSFORM), interpolation (Name_array)
        <sampler> INPUT / OUTPUT / INTERPOLATION
        <channel source="#..-sampler" target="node/matrix" />
    """
    unit_id = registry.make_unique(f"{clip_id}_{target_id}")
    input_id = registry.derived_id(unit_id, "_matrix-input")
    output_id = registry.derived_id(unit_id, "_matrix-output")
    interpolation_id = registry.derived_id(unit_id, "_matrix-interpolation")
    sampler_id = registry.derived_id(unit_id, "_matrix-sampler")

    with builder.element("animation", id=unit_id, name=baked.node_name):
        emit_float_array(builder, registry, input_id, FloatKind.TIME,
                         baked.times, precision)
        emit_float_array(builder, registry, output_id, FloatKind.MATRIX4X4,
                         baked.matrices, precision)
        emit_name_array(builder, registry, interpolation_id,
                        baked.interpolations, "INTERPOLATION")

        with builder.element("sampler", id=sampler_id):
            builder.leaf("input", semantic="INPUT", source=f"#{input_id}")
            builder.leaf("input", semantic="OUTPUT", source=f"#{output_id}")
            builder.leaf("input", semantic="INTERPOLATION", source=f"#{interpolation_id}")

        builder.leaf("channel", source=f"#{sampler_id}", target=f"{target_id}/matrix")


def write_animation_library(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    log: ExportLogger,
    default_interpolation: str = "LINEAR",
    precision: int = 7,
) -> None:
    clips = []
    for index, animation in enumerate(scene.animations):
        channels = collect_channels(scene, registry, index, log, default_interpolation)
        if not channels:
            log.warning(f"Animation '{animation.name}' has no exportable channels")
            continue
        clips.append((index, channels))

    if not clips:
        return

    with builder.element("library_animations"):
        for index, channels in clips:
            ids = registry.object_ids(ObjectCategory.ANIMATION, index)
            with builder.element("animation", id=ids.id, name=ids.name):
                for baked, target_id in channels:
                    emit_animation(builder, registry, ids.id, baked, target_id, precision)
            log.info(f"Written animation: {ids.id} ({len(channels)} channels)")
