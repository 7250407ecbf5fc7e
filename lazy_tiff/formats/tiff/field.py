# lazy_tiff/formats/tiff/field.py
"""
Per-field value states and the on-demand load/unload transitions.

A directory entry becomes one of four states:

- ``Local``: the value fit in the entry's 4 inline bytes and was decoded.
- ``NotLoaded``: the value lives at ``offset``; nothing has been read yet.
- ``Loaded``: an out-of-line value that has been read and cached.
- ``Unknown``: the type code is outside TIFF 6.0; the bytes are kept verbatim.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger

from lazy_tiff.io.byte_source import SharedByteSource

from .decoder import decode
from .tiff import BufferSizeOverflowError, Endianness
from .tiff_types import FieldType, FieldValue, buffer_size, type_from_code

INLINE_SIZE = 4


@dataclass(frozen=True)
class Local:
    value: FieldValue


@dataclass(frozen=True)
class NotLoaded:
    field_type: FieldType
    count: int
    offset: int


@dataclass(frozen=True)
class Loaded:
    value: FieldValue
    offset: int


@dataclass(frozen=True)
class Unknown:
    raw_type_code: int
    count: int
    raw_bytes: bytes


FieldState = Union[Local, NotLoaded, Loaded, Unknown]


def state_from_entry(
    raw_type_code: int, count: int, value_offset_bytes: bytes, endianness: Endianness
) -> FieldState:
    """Build the initial state for one directory entry."""
    field_type = type_from_code(raw_type_code)
    if field_type is None:
        logger.debug("Unknown field type {code}; keeping raw bytes", code=raw_type_code)
        return Unknown(raw_type_code=raw_type_code, count=count, raw_bytes=bytes(value_offset_bytes))

    size = buffer_size(field_type, count)
    if size is None:
        raise BufferSizeOverflowError(field_type, count)

    if size <= INLINE_SIZE:
        # Inline values are left-justified in the 4-byte slot.
        return Local(decode(field_type, count, bytes(value_offset_bytes[:size]), endianness))

    (offset,) = struct.unpack(endianness.struct_prefix + "I", value_offset_bytes)
    return NotLoaded(field_type=field_type, count=count, offset=offset)


class Field:
    """One tag's value within a subfile, loaded lazily from a shared source."""

    __slots__ = ("_source", "endianness", "state")

    def __init__(self, source: SharedByteSource, endianness: Endianness, state: FieldState):
        self._source = source
        self.endianness = endianness
        self.state = state

    def __repr__(self) -> str:
        return f"Field({self.state!r})"

    def field_type(self) -> Optional[FieldType]:
        state = self.state
        if isinstance(state, (Local, Loaded)):
            return state.value.field_type
        if isinstance(state, NotLoaded):
            return state.field_type
        return None

    def count(self) -> int:
        state = self.state
        if isinstance(state, (Local, Loaded)):
            return state.value.count
        return state.count

    def value_if_local(self) -> Optional[FieldValue]:
        """Return the value only when it was decoded inline. Never does I/O."""
        if isinstance(self.state, Local):
            return self.state.value
        return None

    def raw_bytes(self) -> Optional[bytes]:
        """Inline bytes of a field with an unrecognised type code."""
        if isinstance(self.state, Unknown):
            return self.state.raw_bytes
        return None

    def is_loaded(self) -> bool:
        return isinstance(self.state, (Local, Loaded))

    def load(self) -> Optional[FieldValue]:
        """Read and decode an out-of-line value; no-op for every other state."""
        state = self.state
        if isinstance(state, NotLoaded):
            size = buffer_size(state.field_type, state.count)
            if size is None:
                raise BufferSizeOverflowError(state.field_type, state.count)
            logger.debug(
                "Loading {n} x {t} ({size} bytes) at offset {off}",
                n=state.count,
                t=state.field_type.name,
                size=size,
                off=state.offset,
            )
            data = self._source.seek_and_read(state.offset, size)
            value = decode(state.field_type, state.count, data, self.endianness)
            self.state = Loaded(value=value, offset=state.offset)
        return self.current_value()

    def unload(self) -> None:
        """Drop a cached out-of-line value so it is re-read on the next load."""
        state = self.state
        if isinstance(state, Loaded):
            logger.debug(
                "Unloading {n} x {t} at offset {off}",
                n=state.value.count,
                t=state.value.field_type.name,
                off=state.offset,
            )
            self.state = NotLoaded(
                field_type=state.value.field_type, count=state.value.count, offset=state.offset
            )

    def current_value(self) -> Optional[FieldValue]:
        state = self.state
        if isinstance(state, (Local, Loaded)):
            return state.value
        return None

    def value(self) -> Optional[FieldValue]:
        """Load if needed, then return the value (``None`` for unknown types)."""
        return self.load()
