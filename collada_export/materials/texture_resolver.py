"""Embedded texture naming and writing."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Dict

from ..core.logging import ExportLogger

if TYPE_CHECKING:
    from ..data.scene import Scene
    from ..formats.sink import OutputSink


def embedded_texture_name(file_name: str, index: int, format_hint: str) -> str:
    """File name for embedded texture ``index``, e.g. ``scene_texture_0.png``."""
    ext = (format_hint or "bin").lstrip(".").lower()
    return f"{file_name}_texture_{index}.{ext}"


def embedded_texture_names(scene: Scene, file_name: str) -> Dict[int, str]:
    """Map embedded texture indices (``*N`` paths) to exported file names."""
    return {
        index: embedded_texture_name(file_name, index, texture.format_hint)
        for index, texture in enumerate(scene.textures)
    }


def write_embedded_textures(
    scene: Scene,
    names: Dict[int, str],
    directory: str,
    sink: OutputSink,
    log: ExportLogger,
) -> None:
    """Write each embedded texture next to the document."""
    for index, texture in enumerate(scene.textures):
        if not texture.data:
            log.warning(f"Embedded texture {index} has no data, skipping")
            continue
        path = os.path.join(directory, names[index])
        sink.write_file(path, texture.data)
        log.info(f"Written embedded texture: {path}")
