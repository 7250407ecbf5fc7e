# lazy_tiff/formats/tiff/tiff_types.py
"""
TIFF 6.0 field types, their element widths and decoded value containers.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence, Union


class FieldType(IntEnum):
    """Field types by TIFF type code."""

    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12


ELEMENT_SIZES = {
    FieldType.BYTE: 1,
    FieldType.ASCII: 1,
    FieldType.SHORT: 2,
    FieldType.LONG: 4,
    FieldType.RATIONAL: 8,
    FieldType.SBYTE: 1,
    FieldType.UNDEFINED: 1,
    FieldType.SSHORT: 2,
    FieldType.SLONG: 4,
    FieldType.SRATIONAL: 8,
    FieldType.FLOAT: 4,
    FieldType.DOUBLE: 8,
}

# Types whose values are kept as raw bytes rather than a tuple of numbers.
RAW_BYTE_TYPES = (FieldType.ASCII, FieldType.UNDEFINED)


def type_from_code(code: int) -> Optional[FieldType]:
    """Resolve a raw type code; ``None`` for codes outside TIFF 6.0."""
    try:
        return FieldType(code)
    except ValueError:
        return None


def element_size(field_type: FieldType) -> int:
    return ELEMENT_SIZES[field_type]


def buffer_size(field_type: FieldType, count: int) -> Optional[int]:
    """Bytes needed to hold ``count`` values, or ``None`` if not addressable."""
    if count < 0 or count > sys.maxsize:
        return None
    size = ELEMENT_SIZES[field_type] * count
    if size > sys.maxsize:
        return None
    return size


@dataclass(frozen=True)
class Rational:
    numerator: int
    denominator: int


@dataclass(frozen=True)
class SRational:
    numerator: int
    denominator: int


Element = Union[int, float, Rational, SRational]


@dataclass(frozen=True)
class FieldValue:
    """Decoded values of one field, in file order.

    ``values`` is ``bytes`` for ASCII and UNDEFINED fields and a tuple for
    every other type.
    """

    field_type: FieldType
    values: Union[bytes, Sequence[Element]]

    @property
    def count(self) -> int:
        return len(self.values)

    def as_text(self) -> list[str]:
        """Split an ASCII value into its NUL-terminated strings."""
        if self.field_type is not FieldType.ASCII:
            raise TypeError(f"{self.field_type.name} value is not text")
        raw = bytes(self.values)
        if raw.endswith(b"\x00"):
            raw = raw[:-1]
        return [part.decode("latin-1") for part in raw.split(b"\x00")] if raw else []
