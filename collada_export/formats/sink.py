"""Output sinks receiving finished files as single byte buffers."""

import os
from typing import BinaryIO, Dict, List, Optional

from ..core.errors import ExportError


class OutputSink:
    """create(path) / write(data) / close() for one file at a time."""

    def create(self, path: str) -> None:
        raise NotImplementedError

    def write(self, data: bytes) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def write_file(self, path: str, data: bytes) -> None:
        self.create(path)
        try:
            self.write(data)
        finally:
            self.close()


class FileOutputSink(OutputSink):
    """Writes to the local file system, creating parent directories."""

    def __init__(self):
        self._file: Optional[BinaryIO] = None

    def create(self, path: str) -> None:
        if self._file is not None:
            raise ExportError(f"Cannot create '{path}': another file is still open")
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._file = open(path, 'wb', buffering=1024 * 1024)

    def write(self, data: bytes) -> None:
        if self._file is None:
            raise ExportError("No file open for writing")
        self._file.write(data)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class MemoryOutputSink(OutputSink):
    """Keeps written files in memory, keyed by path."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self._path: Optional[str] = None
        self._chunks: List[bytes] = []

    def create(self, path: str) -> None:
        if self._path is not None:
            raise ExportError(f"Cannot create '{path}': another file is still open")
        self._path = path
        self._chunks = []

    def write(self, data: bytes) -> None:
        if self._path is None:
            raise ExportError("No file open for writing")
        self._chunks.append(data)

    def close(self) -> None:
        if self._path is not None:
            self.files[self._path] = b"".join(self._chunks)
            self._path = None
            self._chunks = []
