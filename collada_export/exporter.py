"""Assemble a full COLLADA document from a scene and hand it to a sink."""

from __future__ import annotations

import os
from typing import Dict, List, Optional
from xml.etree.ElementTree import Element

from .core.identifiers import IdentifierRegistry
from .core.errors import ExportError, InternalExportError
from .core.logging import ExportLogger
from .core.types import ExportSettings, ObjectCategory
from .data.collada import COLLADA_NAMESPACE, COLLADA_VERSION
from .data.scene import Scene
from .formats.animation_writer import write_animation_library
from .formats.controller_writer import write_controller_library
from .formats.geometry_writer import write_geometry_library
from .formats.material_writer import write_effects, write_images, write_materials
from .formats.scene_writer import (
    write_cameras_library,
    write_lights_library,
    write_visual_scene,
)
from .formats.sink import FileOutputSink, OutputSink
from .formats.xml_utils import DocumentBuilder, float_to_str, xml_to_bytes
from .materials.resolver import MaterialSummary, summarize_material
from .materials.texture_resolver import embedded_texture_names, write_embedded_textures
from .scene.hierarchy import NodeArena

# Contributor children in schema order
_CONTRIBUTOR_KEYS = ("author", "authoring_tool", "comments", "copyright", "source_data")


class ColladaExporter:
    """
    Exports one scene to ``<path>/<file_name>.dae``.

    The registry and document are rebuilt on every ``build_document()``
    call, so one instance can export repeatedly with identical results.
    """

    def __init__(
        self,
        scene: Scene,
        path: str,
        file_name: str,
        settings: Optional[ExportSettings] = None,
        sink: Optional[OutputSink] = None,
        log: Optional[ExportLogger] = None,
    ):
        self.scene = scene
        self.path = path
        self.file_name = file_name
        self.settings = settings or ExportSettings()
        self.sink = sink or FileOutputSink()
        self.log = log or ExportLogger()
        self.registry: Optional[IdentifierRegistry] = None
        self.textures: Dict[int, str] = {}

    @property
    def output_path(self) -> str:
        return os.path.join(self.path, f"{self.file_name}.{self.settings.file_extension}")

    def build_document(self) -> Element:
        """Run the id pre-pass, then write every section into a fresh tree."""
        settings = self.settings
        precision = settings.float_precision
        scene = self.scene
        log = self.log

        arena = NodeArena(scene.nodes)
        registry = IdentifierRegistry(scene, arena)
        registry.assign_node_ids()
        scene_id = registry.reserve("Scene")
        self.registry = registry

        if settings.export_embedded_textures:
            self.textures = embedded_texture_names(scene, self.file_name)
        else:
            self.textures = {}

        builder = DocumentBuilder("COLLADA", xmlns=COLLADA_NAMESPACE,
                                  version=COLLADA_VERSION)

        self.write_header(builder)

        summaries = self._material_summaries()
        write_images(builder, registry, summaries, log)
        write_effects(builder, registry, summaries, log, precision)
        write_materials(builder, registry, summaries, log)

        if settings.export_cameras:
            write_cameras_library(builder, scene, registry, log, precision)
        if settings.export_lights:
            write_lights_library(builder, scene, registry, log, precision)

        write_controller_library(builder, scene, registry, log, precision)
        write_geometry_library(builder, scene, registry, log, precision)

        if settings.export_animations:
            write_animation_library(builder, scene, registry, log,
                                    settings.default_interpolation, precision)

        write_visual_scene(builder, scene, registry, scene_id, log, precision,
                           settings.export_cameras, settings.export_lights)

        if builder.depth != 0:
            raise InternalExportError("Document builder left elements open")
        return builder.root

    def write_header(self, builder: DocumentBuilder) -> None:
        settings = self.settings
        meta = self.scene.metadata
        defaults = {"author": settings.author, "authoring_tool": settings.authoring_tool}

        with builder.element("asset"):
            with builder.element("contributor"):
                for key in _CONTRIBUTOR_KEYS:
                    value = meta.get(key) or defaults.get(key)
                    if value:
                        builder.leaf(key, value)
            builder.leaf("created", meta.get("created") or settings.timestamp)
            if meta.get("keywords"):
                builder.leaf("keywords", meta["keywords"])
            builder.leaf("modified", meta.get("modified") or settings.timestamp)
            for key in ("revision", "subject", "title"):
                if meta.get(key):
                    builder.leaf(key, meta[key])
            builder.leaf("unit", name=settings.unit_name,
                         meter=float_to_str(settings.unit_meter, settings.float_precision))
            builder.leaf("up_axis", settings.up_axis)

    def _material_summaries(self) -> List[MaterialSummary]:
        summaries = []
        for index, material in enumerate(self.scene.materials):
            ids = self.registry.object_ids(ObjectCategory.MATERIAL, index)
            summaries.append(summarize_material(material, ids.id, ids.name,
                                                self.textures, self.log))
        return summaries

    def export(self) -> bool:
        """
        Build the whole document in memory, then write it in one piece.

        Sink failures are logged and reported as False; internal errors
        propagate.
        """
        with self.log.scope(self.file_name):
            document = xml_to_bytes(self.build_document(), self.settings.indent)
            try:
                if self.textures:
                    write_embedded_textures(self.scene, self.textures, self.path,
                                            self.sink, self.log)
                self.sink.write_file(self.output_path, document)
            except InternalExportError:
                raise
            except (OSError, ExportError) as e:
                self.log.error(f"Failed to write '{self.output_path}': {e}")
                return False

            self.log.info(f"Written COLLADA document: {self.output_path}")
        return True


def export_scene(
    scene: Scene,
    path: str,
    file_name: str,
    settings: Optional[ExportSettings] = None,
    sink: Optional[OutputSink] = None,
    log: Optional[ExportLogger] = None,
) -> bool:
    """Export ``scene`` to ``<path>/<file_name>.dae``; True on success."""
    exporter = ColladaExporter(scene, path, file_name, settings, sink, log)
    return exporter.export()
