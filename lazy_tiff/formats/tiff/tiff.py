# lazy_tiff/formats/tiff/tiff.py
"""
TIFF shared structures and exceptions.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum

HEADER_SIZE = 8

MAGIC_LITTLE = b"II*\x00"
MAGIC_BIG = b"MM\x00*"


class Endianness(str, Enum):
    """Byte order of every multi-byte number in a file."""

    LITTLE = "LE"
    BIG = "BE"

    @property
    def struct_prefix(self) -> str:
        return "<" if self is Endianness.LITTLE else ">"


@dataclass(frozen=True)
class Header:
    endianness: Endianness
    offset_to_first_ifd: int


class TiffError(Exception):
    """Base class for every error raised while reading a TIFF file."""


class TiffParseError(TiffError):
    """Raised when the file structure (header, IFD chain) is malformed."""


class TruncatedReadError(TiffParseError):
    """Raised when the byte source ends before a requested read completes."""

    def __init__(self, offset: int, *, expected: int, actual: int):
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(offset, expected, actual)

    def __str__(self) -> str:
        return "Unexpected EOF: wanted {} bytes, got {} (0x{:08x})".format(
            self.expected, self.actual, self.offset
        )


class BufferSizeOverflowError(TiffError):
    """Raised when ``count * element_size`` is not a representable size."""

    def __init__(self, field_type, count: int):
        self.field_type = field_type
        self.count = count
        super().__init__(f"Required buffer size too big: {count} x {field_type.name}")


class TiffDecodeError(TiffError):
    """Raised when a value buffer does not match its declared type and count."""


def parse_header(data: bytes) -> Header:
    """Parse the 8-byte file header.

    The first four bytes select the byte order; the next four are the offset
    of the first IFD, which has to point past the header itself.
    """
    if len(data) != HEADER_SIZE:
        raise TiffParseError(f"Header must be {HEADER_SIZE} bytes, got {len(data)}")
    magic = bytes(data[:4])
    if magic == MAGIC_LITTLE:
        endianness = Endianness.LITTLE
    elif magic == MAGIC_BIG:
        endianness = Endianness.BIG
    else:
        raise TiffParseError(f"Invalid magic {magic!r}; not TIFF")

    (offset,) = struct.unpack_from(endianness.struct_prefix + "I", data, 4)
    if offset < HEADER_SIZE:
        raise TiffParseError(f"First IFD offset {offset} points into the header")
    return Header(endianness=endianness, offset_to_first_ifd=offset)
