"""In-memory scene consumed by the exporter.

These structures are read-only views for the duration of one export.
Loading a source format and building them is the caller's job.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from mathutils import Matrix


def _identity() -> Matrix:
    return Matrix.Identity(4)


@dataclass
class VertexWeight:
    """Influence of one bone on one vertex."""
    vertex_id: int = 0
    weight: float = 0.0


@dataclass
class Bone:
    """A skin influence; ``name`` names the joint node it controls."""
    name: str = ""
    offset_matrix: Matrix = field(default_factory=_identity)  # inverse bind
    weights: List[VertexWeight] = field(default_factory=list)


@dataclass
class Mesh:
    """Per-vertex attribute streams plus face topology.

    Every stream except ``positions`` is optional; an empty list means
    the stream is absent. UV channels hold 2- or 3-tuples, color channels
    hold RGBA 4-tuples.
    """
    name: str = ""
    positions: List[Tuple[float, float, float]] = field(default_factory=list)
    normals: List[Tuple[float, float, float]] = field(default_factory=list)
    uv_channels: List[List[Tuple[float, ...]]] = field(default_factory=list)
    colors: List[List[Tuple[float, float, float, float]]] = field(default_factory=list)
    faces: List[List[int]] = field(default_factory=list)
    bones: List[Bone] = field(default_factory=list)
    material_index: int = 0

    @property
    def has_bones(self) -> bool:
        return bool(self.bones)

    def uv_components(self, channel: int) -> int:
        """Number of components of a UV channel (2 or 3)."""
        uvs = self.uv_channels[channel]
        if uvs and len(uvs[0]) >= 3:
            return 3
        return 2


@dataclass
class TextureSlot:
    """A texture bound to a material. ``*N`` paths name embedded textures."""
    path: str = ""
    uv_channel: int = 0


@dataclass
class Material:
    """Material keys as produced by the scene loader.

    colors:     color key ("diffuse", "ambient", ...) -> RGBA
    textures:   texture kind ("diffuse", "normals", ...) -> bound slots
    properties: scalar key ("shininess", "opacity", "refracti") -> value
    """
    name: str = ""
    shading_model: str = "phong"
    colors: Dict[str, Tuple[float, float, float, float]] = field(default_factory=dict)
    textures: Dict[str, List[TextureSlot]] = field(default_factory=dict)
    properties: Dict[str, float] = field(default_factory=dict)


@dataclass
class Light:
    name: str = ""
    kind: str = "point"  # point, directional, spot, ambient
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    attenuation_constant: float = 1.0
    attenuation_linear: float = 0.0
    attenuation_quadratic: float = 0.0
    angle_inner_cone: float = 0.0  # radians
    angle_outer_cone: float = 0.0  # radians


@dataclass
class Camera:
    name: str = ""
    kind: str = "perspective"  # perspective, orthographic
    horizontal_fov: float = 0.7853982  # radians
    aspect: float = 0.0  # 0 = unspecified
    clip_near: float = 0.1
    clip_far: float = 1000.0
    ortho_width: float = 1.0  # half width


@dataclass
class Keyframe:
    """One sample of a node's local transform."""
    time: float = 0.0
    position: Optional[Tuple[float, float, float]] = None
    rotation: Optional[Tuple[float, float, float, float]] = None  # wxyz
    scale: Optional[Tuple[float, float, float]] = None


@dataclass
class AnimationChannel:
    """Sampled transform curve for the node named ``node_name``."""
    node_name: str = ""
    keyframes: List[Keyframe] = field(default_factory=list)
    interpolation: Optional[str] = None  # None = ExportSettings default


@dataclass
class Animation:
    name: str = ""
    ticks_per_second: float = 0.0  # 0 = keyframe times are in seconds
    channels: List[AnimationChannel] = field(default_factory=list)


@dataclass
class EmbeddedTexture:
    """Compressed image data stored inside the scene."""
    data: bytes = b""
    format_hint: str = "png"


@dataclass
class Node:
    """A scene hierarchy entry; identity is its position in the tree."""
    name: str = ""
    transform: Matrix = field(default_factory=_identity)
    children: List["Node"] = field(default_factory=list)
    meshes: List[int] = field(default_factory=list)
    light: Optional[int] = None
    camera: Optional[int] = None


@dataclass
class Scene:
    """Root container handed to the exporter."""
    nodes: List[Node] = field(default_factory=list)
    meshes: List[Mesh] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    lights: List[Light] = field(default_factory=list)
    cameras: List[Camera] = field(default_factory=list)
    animations: List[Animation] = field(default_factory=list)
    textures: List[EmbeddedTexture] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
