"""Write float sources and library_geometries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..core.errors import InternalExportError
from ..core.logging import ExportLogger
from ..core.types import ObjectCategory
from ..data.collada import FloatKind, DEFAULT_MATERIAL_SYMBOL
from ..mesh.streams import POLYLIST, mesh_streams, primitive_layout
from .xml_utils import DocumentBuilder, floats_to_str, ints_to_str

if TYPE_CHECKING:
    from ..core.identifiers import IdentifierRegistry
    from ..data.scene import Scene


def emit_float_array(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    source_id: str,
    kind: FloatKind,
    values: Sequence[float],
    precision: int = 7,
) -> None:
    """
    Write a <source> holding a float array and its accessor.

    <source id="..." name="...">
        <float_array id="...-array" count="N">...</float_array>
        <technique_common>
            <accessor count="N/stride" offset="0" source="#...-array" stride="S">
                <param name="X" type="float" /> ...
    """
    stride = kind.stride
    if len(values) % stride:
        raise InternalExportError(
            f"Float array '{source_id}' has {len(values)} values, "
            f"not a multiple of stride {stride}")

    array_id = registry.derived_id(source_id, "-array")
    with builder.element("source", id=source_id, name=source_id):
        builder.leaf("float_array", floats_to_str(values, precision),
                     id=array_id, count=str(len(values)))
        with builder.element("technique_common"):
            with builder.element("accessor", count=str(len(values) // stride),
                                 offset="0", source=f"#{array_id}",
                                 stride=str(stride)):
                for name, param_type in kind.params:
                    builder.leaf("param", name=name, type=param_type)


def emit_name_array(
    builder: DocumentBuilder,
    registry: IdentifierRegistry,
    source_id: str,
    names: Sequence[str],
    param_name: str,
) -> None:
    """A <source> holding a Name_array, one name per element."""
    array_id = registry.derived_id(source_id, "-array")
    with builder.element("source", id=source_id, name=source_id):
        builder.leaf("Name_array", " ".join(names),
                     id=array_id, count=str(len(names)))
        with builder.element("technique_common"):
            with builder.element("accessor", count=str(len(names)),
                                 offset="0", source=f"#{array_id}", stride="1"):
                builder.leaf("param", name=param_name, type="name")


def emit_mesh(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    index: int,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    """Write one <geometry>: present streams, <vertices>, one primitive block."""
    mesh = scene.meshes[index]
    ids = registry.object_ids(ObjectCategory.MESH, index)
    streams = mesh_streams(mesh)

    source_ids = [registry.derived_id(ids.id, f"-{stream.suffix}") for stream in streams]

    with builder.element("geometry", id=ids.id, name=ids.name):
        with builder.element("mesh"):
            for stream, source_id in zip(streams, source_ids):
                emit_float_array(builder, registry, source_id,
                                 stream.kind, stream.values, precision)

            vertices_id = registry.derived_id(ids.id, "-vertices")
            with builder.element("vertices", id=vertices_id):
                builder.leaf("input", semantic="POSITION",
                             source=f"#{source_ids[0]}")

            if not mesh.faces:
                log.warning(f"Mesh '{ids.name}' has no faces, writing streams only")
                return

            layout = primitive_layout(mesh.faces)
            with builder.element(layout.tag, count=str(layout.count),
                                 material=DEFAULT_MATERIAL_SYMBOL):
                builder.leaf("input", semantic="VERTEX",
                             source=f"#{vertices_id}", offset="0")
                for stream, source_id in zip(streams[1:], source_ids[1:]):
                    attrib = {"semantic": stream.semantic,
                              "source": f"#{source_id}",
                              "offset": "0"}
                    if stream.set_index is not None:
                        attrib["set"] = str(stream.set_index)
                    builder.leaf("input", **attrib)
                if layout.tag == POLYLIST:
                    builder.leaf("vcount", ints_to_str(layout.vcount))
                builder.leaf("p", ints_to_str(layout.indices))

    log.info(f"Written geometry: {ids.id} ({len(mesh.positions)} vertices, "
             f"{len(mesh.faces)} faces)")


def write_geometry_library(
    builder: DocumentBuilder,
    scene: Scene,
    registry: IdentifierRegistry,
    log: ExportLogger,
    precision: int = 7,
) -> None:
    if not scene.meshes:
        return
    with builder.element("library_geometries"):
        for index in range(len(scene.meshes)):
            emit_mesh(builder, scene, registry, index, log, precision)
