# lazy_tiff/formats/tiff/reader.py
"""
TIFF reader: header detection and IFD chain traversal.
"""

from __future__ import annotations

from typing import BinaryIO, List, Optional, Set, Union

from loguru import logger

from lazy_tiff.io.byte_source import LocalFileSource, SharedByteSource

from .subfile import Subfile
from .tiff import HEADER_SIZE, Endianness, Header, TiffParseError, parse_header

DEFAULT_MAX_SUBFILES = 65536


class TiffReader:
    """Reads the header of a TIFF stream and discovers its subfiles.

    Every subfile and field created by the reader shares its byte source.
    """

    def __init__(
        self,
        source: Union[SharedByteSource, BinaryIO],
        *,
        max_subfiles: int = DEFAULT_MAX_SUBFILES,
    ):
        if not isinstance(source, SharedByteSource):
            source = SharedByteSource(source)
        if max_subfiles < 1:
            raise ValueError("max_subfiles must be at least 1")
        self.source = source
        self.max_subfiles = max_subfiles
        self.header: Header = parse_header(source.seek_and_read(0, HEADER_SIZE))
        self.subfiles: List[Subfile] = []
        logger.debug(
            "TIFF header: {endian}, first IFD at {off}",
            endian=self.header.endianness.value,
            off=self.header.offset_to_first_ifd,
        )

    @classmethod
    def open(cls, path: str, **kwargs) -> "TiffReader":
        """Open a local file; close it with ``close()`` or a ``with`` block."""
        source = LocalFileSource(path).open()
        try:
            return cls(source, **kwargs)
        except Exception:
            source.close()
            raise

    @property
    def endianness(self) -> Endianness:
        return self.header.endianness

    @property
    def offset_to_first_ifd(self) -> int:
        return self.header.offset_to_first_ifd

    def read_all_subfiles(self) -> List[Subfile]:
        """Follow the next-IFD chain from the first IFD until it ends.

        Raises ``TiffParseError`` when the chain revisits an offset, points into
        the header, or grows past ``max_subfiles``.
        """
        subfiles: List[Subfile] = []
        visited: Set[int] = set()
        offset: Optional[int] = self.header.offset_to_first_ifd
        while offset is not None:
            if offset < HEADER_SIZE:
                raise TiffParseError(f"IFD offset {offset} points into the header")
            if offset in visited:
                raise TiffParseError(f"IFD chain loops back to offset {offset}")
            if len(subfiles) >= self.max_subfiles:
                raise TiffParseError(f"IFD chain exceeds {self.max_subfiles} subfiles")
            visited.add(offset)
            subfile = Subfile.parse(self.source, offset, self.header.endianness)
            subfiles.append(subfile)
            offset = subfile.offset_to_next_ifd

        self.subfiles = subfiles
        logger.debug("Read {n} subfile(s)", n=len(subfiles))
        return subfiles

    def close(self) -> None:
        self.source.close()

    def __enter__(self) -> "TiffReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
