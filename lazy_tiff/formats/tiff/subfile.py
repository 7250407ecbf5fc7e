# lazy_tiff/formats/tiff/subfile.py
"""
One Image File Directory (IFD) parsed into a tag → Field table.
"""

from __future__ import annotations

import struct
from typing import Dict, Iterator, List, Optional

from loguru import logger

from lazy_tiff.io.byte_source import SharedByteSource

from .field import Field, state_from_entry
from .tiff import Endianness
from .tiff_types import FieldValue

ENTRY_SIZE = 12


class Subfile:
    """Fields of one IFD, keyed by tag in ascending order."""

    def __init__(
        self,
        source: SharedByteSource,
        endianness: Endianness,
        fields: Dict[int, Field],
        offset_to_next_ifd: Optional[int],
        *,
        offset: int = 0,
    ):
        self._source = source
        self.endianness = endianness
        self.offset = offset
        self.fields: Dict[int, Field] = dict(sorted(fields.items()))
        self.offset_to_next_ifd = offset_to_next_ifd

    @classmethod
    def parse(cls, source: SharedByteSource, offset: int, endianness: Endianness) -> "Subfile":
        """Read the IFD at ``offset``: entry count, entries, next-IFD offset."""
        prefix = endianness.struct_prefix
        (entry_count,) = struct.unpack(prefix + "H", source.seek_and_read(offset, 2))
        body = source.seek_and_read(offset + 2, ENTRY_SIZE * entry_count + 4)

        fields: Dict[int, Field] = {}
        for i in range(entry_count):
            start = i * ENTRY_SIZE
            tag, type_code, count = struct.unpack_from(prefix + "HHI", body, start)
            state = state_from_entry(type_code, count, body[start + 8 : start + 12], endianness)
            if tag in fields:
                logger.warning(
                    "Duplicate tag {tag} in IFD at {off}; keeping the later entry",
                    tag=tag,
                    off=offset,
                )
            fields[tag] = Field(source, endianness, state)

        (next_raw,) = struct.unpack_from(prefix + "I", body, ENTRY_SIZE * entry_count)
        next_offset = next_raw if next_raw != 0 else None
        logger.debug(
            "Parsed IFD at {off}: {n} entries, next={nxt}",
            off=offset,
            n=entry_count,
            nxt=next_offset,
        )
        return cls(source, endianness, fields, next_offset, offset=offset)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, tag: object) -> bool:
        return tag in self.fields

    def __iter__(self) -> Iterator[int]:
        return iter(self.fields)

    def __repr__(self) -> str:
        return f"Subfile(offset={self.offset}, tags={self.tags()}, next={self.offset_to_next_ifd})"

    def tags(self) -> List[int]:
        return list(self.fields)

    def get_field(self, tag: int) -> Optional[Field]:
        return self.fields.get(tag)

    def get_field_value_if_local(self, tag: int) -> Optional[FieldValue]:
        field = self.fields.get(tag)
        return field.value_if_local() if field is not None else None

    def load_field_value(self, tag: int) -> Optional[FieldValue]:
        field = self.fields.get(tag)
        return field.load() if field is not None else None

    def unload_field_value(self, tag: int) -> None:
        field = self.fields.get(tag)
        if field is not None:
            field.unload()

    def load_all(self) -> None:
        for field in self.fields.values():
            field.load()

    def unload_all(self) -> None:
        for field in self.fields.values():
            field.unload()
