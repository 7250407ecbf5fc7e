# lazy_tiff/__init__.py
"""
lazy_tiff
=========

Pure-Python TIFF 6.0 directory reader: walks the IFD chain, decodes inline
field values immediately and defers out-of-line values until they are
requested, reading them through one lock-guarded byte source.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

from lazy_tiff.formats.tiff.field import Field, Loaded, Local, NotLoaded, Unknown
from lazy_tiff.formats.tiff.reader import TiffReader
from lazy_tiff.formats.tiff.subfile import Subfile
from lazy_tiff.formats.tiff.tiff import (
    BufferSizeOverflowError,
    Endianness,
    TiffDecodeError,
    TiffError,
    TiffParseError,
    TruncatedReadError,
)
from lazy_tiff.formats.tiff.tiff_types import FieldType, FieldValue, Rational, SRational
from lazy_tiff.io.byte_source import LocalFileSource, SharedByteSource

__all__ = [
    "__version__",
    "BufferSizeOverflowError",
    "Endianness",
    "Field",
    "FieldType",
    "FieldValue",
    "Loaded",
    "Local",
    "LocalFileSource",
    "NotLoaded",
    "Rational",
    "SRational",
    "SharedByteSource",
    "Subfile",
    "TiffDecodeError",
    "TiffError",
    "TiffParseError",
    "TiffReader",
    "TruncatedReadError",
    "Unknown",
]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("lazytiff")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
