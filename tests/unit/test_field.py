"""
Unit tests for the per-field state machine.

States are constructed directly where possible so each transition can be
checked in isolation.
"""

import io
import struct
import sys

import pytest

from lazy_tiff.formats.tiff.field import (
    Field,
    Loaded,
    Local,
    NotLoaded,
    Unknown,
    state_from_entry,
)
from lazy_tiff.formats.tiff.tiff import (
    BufferSizeOverflowError,
    Endianness,
    TruncatedReadError,
)
from lazy_tiff.formats.tiff.tiff_types import FieldType, FieldValue, Rational
from tests.conftest import CountingSource

LE = Endianness.LITTLE
BE = Endianness.BIG


def _source_with(payload: bytes, at: int) -> CountingSource:
    return CountingSource(io.BytesIO(bytes(at) + payload))


@pytest.mark.unit
class TestStateFromEntry:
    """Initial state chosen for a directory entry."""

    def test_inline_bytes_are_local(self):
        state = state_from_entry(1, 3, b"\xca\xfe\xbe\x00", LE)
        assert state == Local(FieldValue(FieldType.BYTE, (202, 254, 190)))

    def test_inline_short_is_left_justified(self):
        assert state_from_entry(3, 1, b"\x00\x01\xff\xff", BE) == Local(
            FieldValue(FieldType.SHORT, (1,))
        )
        assert state_from_entry(3, 1, b"\x01\x00\xff\xff", LE) == Local(
            FieldValue(FieldType.SHORT, (1,))
        )

    def test_exactly_four_bytes_is_local(self):
        state = state_from_entry(4, 1, struct.pack(">I", 70000), BE)
        assert state == Local(FieldValue(FieldType.LONG, (70000,)))

    @pytest.mark.parametrize(
        "type_code,count",
        [(1, 5), (2, 20), (3, 3), (4, 2), (5, 1), (10, 1), (11, 2), (12, 1)],
    )
    def test_larger_values_are_not_loaded(self, type_code, count):
        state = state_from_entry(type_code, count, struct.pack("<I", 1234), LE)
        assert state == NotLoaded(field_type=FieldType(type_code), count=count, offset=1234)

    def test_offset_uses_file_byte_order(self):
        state = state_from_entry(5, 1, b"\x00\x00\x01\x00", BE)
        assert state.offset == 256

    def test_unknown_type_keeps_raw_bytes(self):
        state = state_from_entry(9999, 7, b"\x01\x02\x03\x04", LE)
        assert state == Unknown(raw_type_code=9999, count=7, raw_bytes=b"\x01\x02\x03\x04")

    def test_unrepresentable_size_raises(self):
        with pytest.raises(BufferSizeOverflowError):
            state_from_entry(12, sys.maxsize, b"\x00" * 4, LE)


@pytest.mark.unit
class TestFieldAccessors:
    """Inspection without I/O."""

    def test_local_field(self, counting_source):
        source = counting_source(b"")
        field = Field(source, LE, Local(FieldValue(FieldType.SHORT, (7, 8))))
        assert field.field_type() is FieldType.SHORT
        assert field.count() == 2
        assert field.value_if_local() == FieldValue(FieldType.SHORT, (7, 8))
        assert field.value() == FieldValue(FieldType.SHORT, (7, 8))
        assert source.reads == []

    def test_not_loaded_field(self, counting_source):
        source = counting_source(b"")
        field = Field(source, LE, NotLoaded(FieldType.LONG, 10, 100))
        assert field.field_type() is FieldType.LONG
        assert field.count() == 10
        assert field.value_if_local() is None
        assert field.current_value() is None
        assert source.reads == []

    def test_unknown_field(self, counting_source):
        source = counting_source(b"")
        field = Field(source, BE, Unknown(9999, 3, b"\x01\x02\x03\x04"))
        assert field.field_type() is None
        assert field.count() == 3
        assert field.value_if_local() is None
        assert field.raw_bytes() == b"\x01\x02\x03\x04"
        assert field.load() is None
        assert field.value() is None
        assert isinstance(field.state, Unknown)
        assert source.reads == []


@pytest.mark.unit
class TestLoadUnload:
    """Out-of-line values are read on demand and can be evicted."""

    def test_load_reads_exact_range(self):
        source = _source_with(struct.pack("<3I", 1, 2, 3), at=40)
        field = Field(source, LE, NotLoaded(FieldType.LONG, 3, 40))
        value = field.load()
        assert value == FieldValue(FieldType.LONG, (1, 2, 3))
        assert field.state == Loaded(value=value, offset=40)
        assert source.reads == [(40, 12)]

    def test_second_load_is_cached(self):
        source = _source_with(struct.pack(">2I", 3, 4), at=16)
        field = Field(source, BE, NotLoaded(FieldType.RATIONAL, 1, 16))
        field.load()
        field.load()
        assert field.value() == FieldValue(FieldType.RATIONAL, (Rational(3, 4),))
        assert len(source.reads) == 1

    def test_reload_after_unload_is_identical(self):
        source = _source_with(struct.pack("<4d", 1.0, 2.5, -3.0, 1e300), at=8)
        field = Field(source, LE, NotLoaded(FieldType.DOUBLE, 4, 8))
        first = field.load()
        field.unload()
        assert field.state == NotLoaded(FieldType.DOUBLE, 4, 8)
        assert field.value_if_local() is None
        second = field.load()
        assert first == second
        assert len(source.reads) == 2

    def test_unload_is_noop_for_local_and_unknown(self, counting_source):
        source = counting_source(b"")
        local = Field(source, LE, Local(FieldValue(FieldType.BYTE, (1,))))
        unknown = Field(source, LE, Unknown(77, 1, b"\x00" * 4))
        local.unload()
        unknown.unload()
        assert isinstance(local.state, Local)
        assert isinstance(unknown.state, Unknown)

    def test_unload_not_loaded_is_noop(self, counting_source):
        field = Field(counting_source(b""), LE, NotLoaded(FieldType.SHORT, 4, 8))
        field.unload()
        assert field.state == NotLoaded(FieldType.SHORT, 4, 8)

    def test_short_read_fails_and_state_is_kept(self):
        source = _source_with(b"\x00\x01", at=8)
        field = Field(source, LE, NotLoaded(FieldType.SHORT, 4, 8))
        with pytest.raises(TruncatedReadError) as excinfo:
            field.load()
        assert excinfo.value.offset == 8
        assert excinfo.value.expected == 8
        assert excinfo.value.actual == 2
        assert isinstance(field.state, NotLoaded)
