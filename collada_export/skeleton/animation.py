"""Bake animation channels into time / matrix sample lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from mathutils import Matrix, Quaternion, Vector

from ..data.scene import Animation, AnimationChannel, Keyframe
from ..formats.xml_utils import matrix_to_values


@dataclass
class BakedChannel:
    """One channel as parallel input/output/interpolation arrays."""
    node_name: str = ""
    times: List[float] = field(default_factory=list)
    matrices: List[float] = field(default_factory=list)   # 16 per sample
    interpolations: List[str] = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return len(self.times)


def keyframe_matrix(kf: Keyframe) -> Matrix:
    """Local transform of one keyframe; missing parts are identity."""
    loc = Vector(kf.position) if kf.position is not None else None
    rot = Quaternion(kf.rotation) if kf.rotation is not None else None
    scl = Vector(kf.scale) if kf.scale is not None else None
    return Matrix.LocRotScale(loc, rot, scl)


def bake_channel(
    animation: Animation,
    channel: AnimationChannel,
    default_interpolation: str = "LINEAR",
) -> BakedChannel:
    """
    Convert keyframes to seconds and full transform matrices.

    Times are divided by ``ticks_per_second`` when it is positive.
    Every sample gets the channel's interpolation tag.
    """
    tps = animation.ticks_per_second
    interpolation = channel.interpolation or default_interpolation
    baked = BakedChannel(node_name=channel.node_name)
    for kf in channel.keyframes:
        baked.times.append(kf.time / tps if tps > 0 else kf.time)
        baked.matrices.extend(matrix_to_values(keyframe_matrix(kf)))
        baked.interpolations.append(interpolation)
    return baked
