# lazy_tiff/reporting/json_reporter.py
"""
JSON reporting utilities (optional).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lazy_tiff.formats.tiff.field import Field, Loaded, NotLoaded
from lazy_tiff.formats.tiff.reader import TiffReader
from lazy_tiff.formats.tiff.tiff import TiffError
from lazy_tiff.formats.tiff.tiff_tags import tag_name
from lazy_tiff.formats.tiff.tiff_types import FieldType
from lazy_tiff.observability import to_dict


@dataclass
class FieldReport:
    tag: int
    name: str
    type: str
    count: int
    state: str
    offset: Optional[int] = None
    value: Any = None
    error: Optional[str] = None


@dataclass
class SubfileReport:
    index: int
    offset: int
    next_offset: Optional[int]
    fields: List[FieldReport] = field(default_factory=list)


@dataclass
class InspectionReport:
    file_path: str
    endianness: str
    first_ifd_offset: int
    subfiles: List[SubfileReport] = field(default_factory=list)


def _field_report(tag: int, f: Field, *, load: bool) -> FieldReport:
    error = None
    if load:
        try:
            f.load()
        except TiffError as e:
            error = str(e)
    state = f.state
    field_type = f.field_type()
    value = f.current_value()
    if value is not None:
        shown = value.as_text() if field_type is FieldType.ASCII else value.values
    else:
        shown = f.raw_bytes()
    return FieldReport(
        tag=tag,
        name=tag_name(tag),
        type=field_type.name if field_type is not None else f"UNKNOWN({state.raw_type_code})",
        count=f.count(),
        state=type(state).__name__,
        offset=state.offset if isinstance(state, (NotLoaded, Loaded)) else None,
        value=shown,
        error=error,
    )


def build_report(path: str, reader: TiffReader, *, load: bool = False) -> InspectionReport:
    """Describe every subfile the reader has discovered."""
    report = InspectionReport(
        file_path=path,
        endianness=reader.endianness.value,
        first_ifd_offset=reader.offset_to_first_ifd,
    )
    for index, subfile in enumerate(reader.subfiles):
        report.subfiles.append(
            SubfileReport(
                index=index,
                offset=subfile.offset,
                next_offset=subfile.offset_to_next_ifd,
                fields=[_field_report(t, f, load=load) for t, f in subfile.fields.items()],
            )
        )
    return report


def _finite(obj: Any) -> Any:
    """Replace NaN and infinities with their names; JSON has no literal for them."""
    if isinstance(obj, float) and not math.isfinite(obj):
        return "NaN" if math.isnan(obj) else ("Infinity" if obj > 0 else "-Infinity")
    if isinstance(obj, list):
        return [_finite(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _finite(v) for k, v in obj.items()}
    return obj


def to_json_dict(report: InspectionReport) -> Dict[str, Any]:
    """Convert an InspectionReport to a strict JSON-serializable dict."""
    return _finite(to_dict(report))


def write_json(report: InspectionReport, path: str) -> None:
    """Write report to a file as pretty JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_json_dict(report), f, indent=2, allow_nan=False)
