"""Export in-memory 3D scenes to COLLADA 1.4.1 documents."""

__version__ = "1.0.0"

from .core.errors import ExportError, InternalExportError
from .core.logging import ExportLogger
from .core.types import ExportSettings, ObjectCategory
from .data.scene import (
    Animation,
    AnimationChannel,
    Bone,
    Camera,
    EmbeddedTexture,
    Keyframe,
    Light,
    Material,
    Mesh,
    Node,
    Scene,
    TextureSlot,
    VertexWeight,
)
from .exporter import ColladaExporter, export_scene
from .formats.sink import FileOutputSink, MemoryOutputSink, OutputSink

__all__ = [
    "Animation",
    "AnimationChannel",
    "Bone",
    "Camera",
    "ColladaExporter",
    "EmbeddedTexture",
    "ExportError",
    "ExportLogger",
    "ExportSettings",
    "FileOutputSink",
    "InternalExportError",
    "Keyframe",
    "Light",
    "Material",
    "MemoryOutputSink",
    "Mesh",
    "Node",
    "ObjectCategory",
    "OutputSink",
    "Scene",
    "TextureSlot",
    "VertexWeight",
    "export_scene",
]
