"""
Pytest configuration and shared fixtures for the lazytiff test suite.

Fixtures:
- ``sample_entries``: a realistic IFD mixing inline, out-of-line and unknown fields
- ``sample_tiff``: parametrized over both byte orders, two IFDs built from it
- ``counting_source``: wraps a SharedByteSource and records every read
"""

import io

import pytest
from loguru import logger

from lazy_tiff.io.byte_source import SharedByteSource
from tests.fixtures.tiff_factory import Entry, build_tiff


class CountingSource(SharedByteSource):
    """SharedByteSource that records each (offset, length) request."""

    __slots__ = ("reads",)

    def __init__(self, stream):
        super().__init__(stream)
        self.reads = []

    def seek_and_read(self, offset, length):
        self.reads.append((offset, length))
        return super().seek_and_read(offset, length)


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks a test added so they never outlive its captured streams."""
    yield
    logger.remove()


@pytest.fixture
def sample_entries():
    return [
        Entry(256, 3, [640]),  # ImageWidth, SHORT inline
        Entry(257, 4, [480]),  # ImageLength, LONG inline
        Entry(258, 3, [8, 8, 8]),  # BitsPerSample, out of line
        Entry(270, 2, b"A test image\x00"),  # ImageDescription
        Entry(273, 4, [1000, 2000, 3000]),  # StripOffsets
        Entry(282, 5, [(72, 1)]),  # XResolution
        Entry(40000, 9999, count=2, raw=b"\xde\xad\xbe\xef"),
    ]


@pytest.fixture(params=["<", ">"], ids=["little", "big"])
def sample_tiff(request, sample_entries):
    second = [Entry(256, 3, [32]), Entry(257, 3, [24])]
    return build_tiff([sample_entries, second], byteorder=request.param)


@pytest.fixture
def counting_source():
    def make(data: bytes) -> CountingSource:
        return CountingSource(io.BytesIO(data))

    return make
