"""COLLADA 1.4.1 constants shared by the writers."""

from enum import Enum
from typing import Tuple

COLLADA_NAMESPACE = "http://www.collada.org/2005/11/COLLADASchema"
COLLADA_VERSION = "1.4.1"

IDENTITY_MATRIX = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)

# Symbol used by <instance_material> to bind a geometry's primitives
DEFAULT_MATERIAL_SYMBOL = "defaultMaterial"


class FloatKind(Enum):
    """Semantic kind of a float array; decides stride and accessor params."""
    VECTOR = "vector"
    TEXCOORD2 = "texcoord2"
    TEXCOORD3 = "texcoord3"
    COLOR = "color"
    MATRIX4X4 = "matrix4x4"
    WEIGHT = "weight"
    TIME = "time"

    @property
    def stride(self) -> int:
        return _STRIDES[self]

    @property
    def params(self) -> Tuple[Tuple[str, str], ...]:
        """(name, type) of each accessor <param>."""
        return _PARAMS[self]


_STRIDES = {
    FloatKind.VECTOR: 3,
    FloatKind.TEXCOORD2: 2,
    FloatKind.TEXCOORD3: 3,
    FloatKind.COLOR: 4,
    FloatKind.MATRIX4X4: 16,
    FloatKind.WEIGHT: 1,
    FloatKind.TIME: 1,
}

_PARAMS = {
    FloatKind.VECTOR: (("X", "float"), ("Y", "float"), ("Z", "float")),
    FloatKind.TEXCOORD2: (("S", "float"), ("T", "float")),
    FloatKind.TEXCOORD3: (("S", "float"), ("T", "float"), ("P", "float")),
    FloatKind.COLOR: (("R", "float"), ("G", "float"), ("B", "float"), ("A", "float")),
    FloatKind.MATRIX4X4: (("TRANSFORM", "float4x4"),),
    FloatKind.WEIGHT: (("WEIGHT", "float"),),
    FloatKind.TIME: (("TIME", "float"),),
}


# Material surface slots: (effect element name, texture kind, color key).
# Effect order inside <phong>/<blinn>/... follows the schema sequence.
SURFACE_SLOTS = (
    ("emission", "emissive", "emissive"),
    ("ambient", "ambient", "ambient"),
    ("diffuse", "diffuse", "diffuse"),
    ("specular", "specular", "specular"),
    ("reflective", "reflection", "reflective"),
    ("transparent", "opacity", "transparent"),
)
NORMAL_SLOT = ("normal", "normals", None)

# Scalar slots: (effect element name, material property key)
SCALAR_SLOTS = (
    ("shininess", "shininess"),
    ("transparency", "opacity"),
    ("index_of_refraction", "refracti"),
)

SHADING_MODELS = {
    "phong": "phong",
    "blinn": "blinn",
    "gouraud": "lambert",
    "flat": "lambert",
    "lambert": "lambert",
    "no_shading": "constant",
    "unlit": "constant",
    "constant": "constant",
}
DEFAULT_SHADING_MODEL = "phong"
