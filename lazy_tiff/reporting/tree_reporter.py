# lazy_tiff/reporting/tree_reporter.py
"""
Console tree rendering of subfiles and their fields.
"""
from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from lazy_tiff.formats.tiff.field import Field
from lazy_tiff.formats.tiff.subfile import Subfile
from lazy_tiff.formats.tiff.tiff import TiffError
from lazy_tiff.formats.tiff.tiff_tags import tag_name
from lazy_tiff.formats.tiff.tiff_types import FieldType, FieldValue, Rational, SRational

console = Console()

NOT_LOADED = "(not loaded)"
MAX_VALUE_WIDTH = 70


def format_value(value: FieldValue) -> str:
    """Short human-readable rendering of a decoded value."""
    if value.field_type is FieldType.ASCII:
        text = " | ".join(repr(s) for s in value.as_text())
    elif value.field_type is FieldType.UNDEFINED:
        text = bytes(value.values).hex(" ")
    else:
        items = [
            f"{v.numerator}/{v.denominator}" if isinstance(v, (Rational, SRational)) else str(v)
            for v in value.values
        ]
        text = items[0] if len(items) == 1 else f"[{', '.join(items)}]"

    # Truncate long values to keep the tree readable
    if len(text) > MAX_VALUE_WIDTH:
        text = text[: MAX_VALUE_WIDTH - 3] + "..."
    return escape(text)


def _field_label(tag: int, field: Field, *, load: bool) -> str:
    field_type = field.field_type()
    if field_type is None:
        raw = field.raw_bytes() or b""
        return (
            f"[cyan]{tag_name(tag)}[/cyan] [dim](type {field.state.raw_type_code}, "
            f"count {field.count()})[/dim]: [yellow]raw {raw.hex(' ')}[/yellow]"
        )

    value: Optional[FieldValue] = field.value_if_local()
    try:
        if value is None:
            value = field.load() if load else field.current_value()
    except TiffError as e:
        # One unreadable value must not hide the rest of the tree
        shown = f"[red](load failed: {escape(str(e))})[/red]"
    else:
        shown = format_value(value) if value is not None else f"[dim]{NOT_LOADED}[/dim]"
    return (
        f"[cyan]{tag_name(tag)}[/cyan] [dim]({field_type.name}, count {field.count()})[/dim]: "
        f"{shown}"
    )


def build_tree(name: str, subfiles: List[Subfile], *, load: bool = False) -> Tree:
    """Build a rich Tree: one branch per subfile, one leaf per field."""
    root = Tree(f"[bold]{name}[/bold]")
    for index, subfile in enumerate(subfiles):
        branch = root.add(f"[bold magenta]Subfile {index}[/bold magenta] [dim]@ {subfile.offset}[/dim]")
        for tag, field in subfile.fields.items():
            branch.add(_field_label(tag, field, load=load))
    return root


def render_tree(name: str, subfiles: List[Subfile], *, load: bool = False) -> None:
    console.print(build_tree(name, subfiles, load=load))
