from dataclasses import dataclass
from enum import Enum


class ObjectCategory(Enum):
    """Scene object categories that receive registry ids.

    The value is the prefix used for fallback ids (``geometry_0``).
    """
    MESH = "geometry"
    MATERIAL = "material"
    ANIMATION = "animation"
    LIGHT = "light"
    CAMERA = "camera"


@dataclass
class ExportSettings:
    """All export settings for one COLLADA export."""

    # Asset header
    author: str = "collada_export"
    authoring_tool: str = "collada_export"
    # Fixed so that exporting the same scene twice is byte-identical
    timestamp: str = "1970-01-01T00:00:00"
    unit_name: str = "meter"
    unit_meter: float = 1.0
    up_axis: str = "Y_UP"

    # Output
    file_extension: str = "dae"
    indent: str = "  "
    float_precision: int = 7

    # Libraries
    export_cameras: bool = True
    export_lights: bool = True
    export_animations: bool = True
    export_embedded_textures: bool = True

    # Animation
    default_interpolation: str = "LINEAR"
