"""
Lock-guarded byte source shared by a reader and every subfile/field it creates.
"""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass
from typing import BinaryIO

from loguru import logger

from lazy_tiff.formats.tiff.tiff import TruncatedReadError


@dataclass
class LocalFileSource:
    """Local file source opened as a buffered binary stream.

    Attributes:
        path: Path to the local file.
    """

    path: str

    def open(self) -> "SharedByteSource":
        """Open the file read-only and wrap it for shared access."""
        return SharedByteSource(open(self.path, "rb"))


class SharedByteSource:
    """Seekable binary stream behind a single mutex.

    Seek and read happen as one unit under the lock, so handles sharing the
    source never interleave a seek from one caller with a read from another.
    """

    __slots__ = ("_stream", "_lock", "name")

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._lock = threading.Lock()
        self.name: str = getattr(stream, "name", "<stream>")

    @classmethod
    def from_bytes(cls, data: bytes) -> "SharedByteSource":
        """Wrap an in-memory buffer."""
        return cls(io.BytesIO(data))

    def seek_and_read(self, offset: int, length: int) -> bytes:
        """Read exactly ``length`` bytes starting at absolute ``offset``."""
        if offset < 0 or length < 0:
            raise ValueError(f"Invalid read request: offset={offset} length={length}")
        with self._lock:
            self._stream.seek(offset)
            data = self._stream.read(length)
        if len(data) != length:
            raise TruncatedReadError(offset, expected=length, actual=len(data))
        return data

    def close(self) -> None:
        with self._lock:
            self._stream.close()
        logger.debug("Closed byte source {name}", name=self.name)

    def __enter__(self) -> "SharedByteSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
