# lazy_tiff/formats/tiff/decoder.py
"""
Type-directed decoding of raw field buffers into FieldValue objects.
"""

from __future__ import annotations

import struct

from .tiff import Endianness, TiffDecodeError
from .tiff_types import FieldType, FieldValue, Rational, SRational, buffer_size

# struct format character per element; rationals are two 32-bit integers.
STRUCT_CODES = {
    FieldType.SHORT: "H",
    FieldType.LONG: "I",
    FieldType.RATIONAL: "I",
    FieldType.SSHORT: "h",
    FieldType.SLONG: "i",
    FieldType.SRATIONAL: "i",
    FieldType.FLOAT: "f",
    FieldType.DOUBLE: "d",
}


def _pairs(flat: tuple[int, ...], cls: type) -> tuple:
    return tuple(cls(flat[i], flat[i + 1]) for i in range(0, len(flat), 2))


def decode(
    field_type: FieldType, count: int, buffer: bytes, endianness: Endianness
) -> FieldValue:
    """Decode ``count`` values of ``field_type`` from ``buffer``.

    The buffer length must match ``buffer_size(field_type, count)`` exactly.
    """
    expected = buffer_size(field_type, count)
    if expected is None:
        raise TiffDecodeError(f"Buffer size for {count} x {field_type.name} is not representable")
    if len(buffer) != expected:
        raise TiffDecodeError(
            f"Buffer length {len(buffer)} does not match {count} x {field_type.name} "
            f"({expected} bytes)"
        )

    if field_type in (FieldType.ASCII, FieldType.UNDEFINED):
        return FieldValue(field_type, bytes(buffer))
    if field_type is FieldType.BYTE:
        return FieldValue(field_type, tuple(buffer))
    if field_type is FieldType.SBYTE:
        return FieldValue(field_type, struct.unpack(f"{count}b", buffer))

    code = STRUCT_CODES[field_type]
    n = count * 2 if field_type in (FieldType.RATIONAL, FieldType.SRATIONAL) else count
    flat = struct.unpack(f"{endianness.struct_prefix}{n}{code}", buffer)
    if field_type is FieldType.RATIONAL:
        return FieldValue(field_type, _pairs(flat, Rational))
    if field_type is FieldType.SRATIONAL:
        return FieldValue(field_type, _pairs(flat, SRational))
    return FieldValue(field_type, flat)
