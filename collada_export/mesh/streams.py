"""Split a mesh into typed float streams and a primitive layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..data.collada import FloatKind
from ..data.scene import Mesh

TRIANGLES = "triangles"
POLYLIST = "polylist"


@dataclass
class MeshStream:
    """One per-vertex attribute stream ready for a float array."""
    semantic: str           # POSITION, NORMAL, TEXCOORD, COLOR
    suffix: str             # id suffix, e.g. "positions" or "tex0"
    kind: FloatKind
    values: List[float] = field(default_factory=list)
    set_index: Optional[int] = None


@dataclass
class PrimitiveLayout:
    """Faces of a mesh as one <triangles> or <polylist> block."""
    tag: str
    count: int = 0
    vcount: List[int] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)


def flatten(vectors: Sequence[Sequence[float]], width: int) -> List[float]:
    """Flatten tuples to a float list, padding or truncating to ``width``."""
    values: List[float] = []
    for vec in vectors:
        row = [float(v) for v in vec[:width]]
        if len(row) < width:
            row.extend([0.0] * (width - len(row)))
        values.extend(row)
    return values


def mesh_streams(mesh: Mesh) -> List[MeshStream]:
    """Streams present on the mesh; absent streams produce nothing."""
    streams = [MeshStream("POSITION", "positions", FloatKind.VECTOR,
                          flatten(mesh.positions, 3))]

    if mesh.normals:
        streams.append(MeshStream("NORMAL", "normals", FloatKind.VECTOR,
                                  flatten(mesh.normals, 3)))

    for channel, uvs in enumerate(mesh.uv_channels):
        if not uvs:
            continue
        if mesh.uv_components(channel) == 3:
            kind, width = FloatKind.TEXCOORD3, 3
        else:
            kind, width = FloatKind.TEXCOORD2, 2
        streams.append(MeshStream("TEXCOORD", f"tex{channel}", kind,
                                  flatten(uvs, width), channel))

    for channel, colors in enumerate(mesh.colors):
        if not colors:
            continue
        streams.append(MeshStream("COLOR", f"color{channel}", FloatKind.COLOR,
                                  flatten(colors, 4), channel))

    return streams


def primitive_layout(faces: Sequence[Sequence[int]]) -> PrimitiveLayout:
    """Triangle list when every face has 3 corners, polygon list otherwise."""
    if all(len(face) == 3 for face in faces):
        layout = PrimitiveLayout(tag=TRIANGLES)
    else:
        layout = PrimitiveLayout(tag=POLYLIST)

    for face in faces:
        layout.vcount.append(len(face))
        layout.indices.extend(face)
    layout.count = len(faces)
    return layout
