# lazy_tiff/cli.py
"""
cli.py

Rich console CLI:
- inspect: read every IFD of a TIFF file and print its fields as a tree.
           Out-of-line values are shown as "(not loaded)" unless --load.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from typing import Optional

from loguru import logger
from rich.console import Console

from lazy_tiff import __version__
from lazy_tiff.formats.tiff.reader import TiffReader
from lazy_tiff.formats.tiff.tiff import TiffError
from lazy_tiff.logging import configure_logging
from lazy_tiff.observability import Timer
from lazy_tiff.reporting.json_reporter import build_report, write_json
from lazy_tiff.reporting.tree_reporter import render_tree

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lazytiff",
        description="Lazy TIFF 6.0 reader: list the IFDs and tagged fields of a TIFF file.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_inspect = sub.add_parser("inspect", help="Show the subfiles and fields of a TIFF file")
    sp_inspect.add_argument("path", help="Path to a .tif/.tiff file")
    sp_inspect.add_argument(
        "--load", action="store_true", help="Load out-of-line values instead of skipping them"
    )
    sp_inspect.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp_inspect.add_argument(
        "--json-out", type=str, default=None, help="Write JSON report to this path"
    )

    sub.add_parser("version", help="Show the version of lazytiff")

    return p


def _inspect(path: str, *, load: bool, json_out: Optional[str]) -> int:
    if not os.path.exists(path):
        console.print(f"[red]File not found:[/red] {path}")
        return 2

    try:
        with TiffReader.open(path) as reader:
            with Timer("read_all_subfiles") as t_read:
                subfiles = reader.read_all_subfiles()
            logger.debug(
                "Read {n} subfile(s) in {ms:.2f}ms", n=len(subfiles), ms=t_read.duration_ms
            )

            render_tree(os.path.basename(path), subfiles, load=load)

            if json_out:
                write_json(build_report(path, reader, load=load), json_out)
                console.print(f"[dim]Wrote JSON report → {json_out}[/dim]")
    except (TiffError, OSError) as e:
        console.print(f"[red]Failed to read TIFF:[/red] {e}")
        return 2

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        console.print(f"lazytiff version {__version__}")
        return 0

    if args.cmd == "inspect":
        configure_logging(debug=args.debug)
        return _inspect(args.path, load=args.load, json_out=args.json_out)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
