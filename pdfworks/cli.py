#!/usr/bin/env python3
"""Command-line interface for pdfworks.

This module contains the argument parser and main() function for the
pdfworks CLI tool. Every subcommand drives the same session commands a
graphical front end would use, then writes the resulting download to the
output directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from pdfworks.backends import available_backends
from pdfworks.config import Settings, load_settings
from pdfworks.errors import PdfWorksError
from pdfworks.session import (
    Download,
    Session,
    ShowError,
    ShowEstimate,
    Step,
    Toolkit,
    add_files,
    preview_compression,
    run,
    select_file,
    start_compress,
    start_merge,
    start_number,
    start_split,
)
from pdfworks.types import (
    DEFAULT_LABEL_TEMPLATE,
    DEFAULT_OUTPUT_DIR,
    Anchor,
    Artifact,
    CompressionLevel,
    SplitMode,
    __version__,
)
from pdfworks.utils import format_bytes, hex_to_rgb, process_inputs, read_raw_file

logger = logging.getLogger(__name__)


# ============================================================================
# OUTPUT HELPERS
# ============================================================================


def save_artifact(
    artifact: Artifact, output_dir: Path, force: bool = False, quiet: bool = False
) -> bool:
    """
    Write a produced file into the output directory.

    Args:
        artifact: The file to write.
        output_dir: Target directory, created if missing.
        force: Overwrite an existing file without asking.
        quiet: Suppress output; existing files are then skipped.

    Returns:
        True if the file was written, False otherwise.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / artifact.filename

    if output_path.exists() and not force:
        if quiet:
            print(
                f"Skipping existing file '{output_path}' (use --force to overwrite).",
                file=sys.stderr,
            )
            return False
        print(f"File '{output_path}' exists. Overwrite? (Y/N): ", end="", flush=True)
        try:
            response = input().strip().lower()
            if response != "y":
                return False
        except EOFError:
            return False

    try:
        output_path.write_bytes(artifact.data)
    except OSError as e:
        print(f"Error writing '{output_path}': {e}", file=sys.stderr)
        return False

    if not quiet:
        print(f"  Saved: {output_path} ({format_bytes(len(artifact.data))})")
    return True


def apply_step(step: Step, args: argparse.Namespace) -> int:
    """Perform a step's effect and return the process exit code."""
    effect = step.effect
    if isinstance(effect, ShowError):
        print(f"Error: {effect.message}", file=sys.stderr)
        return 1
    if isinstance(effect, ShowEstimate):
        estimate = effect.estimate
        print(f"  Current size:   {format_bytes(estimate.before_bytes)}")
        print(f"  Estimated size: ~{format_bytes(estimate.after_estimate_bytes)}")
        return 0
    if isinstance(effect, Download):
        saved = save_artifact(effect.artifact, Path(args.directory), args.force, args.quiet)
        return 0 if saved else 1
    return 0


def _select(args: argparse.Namespace) -> Step:
    """Select the single input file named on the command line."""
    paths = process_inputs([args.input])
    if not paths:
        return Step(Session(), ShowError(f"No such file: {args.input}"))
    return select_file(Session(), read_raw_file(paths[0]))


# ============================================================================
# SUBCOMMANDS
# ============================================================================


def cmd_number(args: argparse.Namespace, toolkit: Toolkit) -> int:
    step = _select(args)
    if step.effect is not None:
        return apply_step(step, args)

    job = start_number(
        step.session,
        toolkit,
        expression=args.pages,
        anchor=args.position,
        template=args.template,
        font_size=args.font_size,
        color=hex_to_rgb(args.color),
    )
    return apply_step(run(step.session, job), args)


def cmd_compress(args: argparse.Namespace, toolkit: Toolkit) -> int:
    step = _select(args)
    if step.effect is not None:
        return apply_step(step, args)
    return apply_step(run(step.session, start_compress(step.session, toolkit, args.level)), args)


def cmd_estimate(args: argparse.Namespace, toolkit: Toolkit) -> int:
    step = _select(args)
    if step.effect is not None:
        return apply_step(step, args)

    levels = [args.level] if args.level else list(CompressionLevel)
    session = step.session
    for level in levels:
        if not args.quiet:
            print(f"{args.input} [{level.value}]")
        preview = preview_compression(session, toolkit, level)
        status = apply_step(preview, args)
        if status:
            return status
        session = preview.session
    return 0


def cmd_split(args: argparse.Namespace, toolkit: Toolkit) -> int:
    step = _select(args)
    if step.effect is not None:
        return apply_step(step, args)

    mode = SplitMode.EXPLODE if args.all else SplitMode.EXTRACT
    if mode is SplitMode.EXTRACT and args.pages is None:
        print("Error: split requires -p/--pages or --all.", file=sys.stderr)
        return 1
    job = start_split(step.session, toolkit, mode, args.pages or "")
    return apply_step(run(step.session, job), args)


def cmd_merge(args: argparse.Namespace, toolkit: Toolkit) -> int:
    paths = process_inputs(args.inputs)
    if not paths:
        print("Error: No PDF files found.", file=sys.stderr)
        return 1

    step = add_files(Session(), [read_raw_file(p) for p in paths])
    if step.effect is not None:
        return apply_step(step, args)

    if not args.quiet:
        for name in step.session.queue.names():
            print(f"  Adding: {name}")
    return apply_step(run(step.session, start_merge(step.session, toolkit)), args)


def cmd_info(args: argparse.Namespace, toolkit: Toolkit) -> int:
    paths = process_inputs(args.inputs)
    if not paths:
        print("Error: No PDF files found.", file=sys.stderr)
        return 1

    status = 0
    for path in paths:
        raw = read_raw_file(path)
        try:
            with toolkit.model.load(raw.data, raw.name) as doc:
                pages = toolkit.model.page_count(doc)
                print(f"File: {path}")
                print(f"Pages: {pages}")
                print(f"Size: {format_bytes(raw.size)}")
                if pages:
                    width, height = toolkit.model.page_size(doc, 0)
                    print(f"Page 1: {width:g} x {height:g} pt")
        except PdfWorksError as e:
            logger.debug(f"Info failed for {path}: {e}")
            print(f"Error: {path}: {e.user_message}", file=sys.stderr)
            status = 1
        print()
    return status


# ============================================================================
# ARGUMENT PARSING
# ============================================================================


def _anchor(text: str) -> Anchor:
    try:
        return Anchor.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _level(text: str) -> CompressionLevel:
    try:
        return CompressionLevel.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-d",
        "--directory",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    common.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force overwrite existing output files",
    )
    common.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress non-error output"
    )
    common.add_argument("--config", type=Path, help="JSON settings file")
    common.add_argument(
        "--backend",
        help=f"Document model backend (available: {', '.join(available_backends()['document'])})",
    )
    common.add_argument("--debug", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="pdfworks",
        description="Number, compress, split and merge PDF files.",
        epilog="""
Examples:
  pdfworks number report.pdf                         # Number every page, bottom center
  pdfworks number report.pdf -p 2-10 --position top-right
  pdfworks number report.pdf --template "Page {page} of {total}"
  pdfworks estimate scan.pdf                         # Size estimate for every level
  pdfworks compress scan.pdf -l low                  # Rasterize at low quality
  pdfworks split report.pdf -p 1-3,5                 # Extract pages into one PDF
  pdfworks split report.pdf --all                    # One PDF per page, zipped
  pdfworks merge a.pdf b.pdf c.pdf                   # Merge in the given order
  pdfworks merge /path/to/pdfs/ -d merged            # Merge every PDF in a directory
  pdfworks info report.pdf                           # Page count and size
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    number = sub.add_parser("number", parents=[common], help="Stamp page numbers")
    number.add_argument("input", help="PDF file")
    number.add_argument(
        "-p", "--pages", default="all", help='Pages to number: "all" or "1-3,5" (default: all)'
    )
    number.add_argument(
        "--position",
        type=_anchor,
        default=Anchor.BOTTOM_CENTER,
        help="Label position, e.g. top-left, middle-center (default: bottom-center)",
    )
    number.add_argument(
        "--template",
        default=DEFAULT_LABEL_TEMPLATE,
        help='Label text; {page} and {total} are filled in (default: "{page}")',
    )
    number.add_argument("--font-size", type=float, help="Font size in points")
    number.add_argument("--color", default="#000000", help="Text colour (default: #000000)")
    number.set_defaults(handler=cmd_number)

    compress = sub.add_parser("compress", parents=[common], help="Compress by rasterizing pages")
    compress.add_argument("input", help="PDF file")
    compress.add_argument(
        "-l", "--level", type=_level, default=CompressionLevel.MEDIUM,
        help="Compression level: low, medium, high (default: medium)",
    )
    compress.set_defaults(handler=cmd_compress)

    estimate = sub.add_parser("estimate", parents=[common], help="Estimate compressed size")
    estimate.add_argument("input", help="PDF file")
    estimate.add_argument(
        "-l", "--level", type=_level, help="Compression level (default: all levels)"
    )
    estimate.set_defaults(handler=cmd_estimate)

    split = sub.add_parser("split", parents=[common], help="Extract or explode pages")
    split.add_argument("input", help="PDF file")
    split_mode = split.add_mutually_exclusive_group()
    split_mode.add_argument("-p", "--pages", help='Pages to extract, e.g. "1-3,5"')
    split_mode.add_argument(
        "--all", action="store_true", help="Write every page as its own PDF into one archive"
    )
    split.set_defaults(handler=cmd_split)

    merge = sub.add_parser("merge", parents=[common], help="Merge PDFs in order")
    merge.add_argument(
        "inputs", nargs="+", help="PDF files or directories containing PDFs"
    )
    merge.set_defaults(handler=cmd_merge)

    info = sub.add_parser("info", parents=[common], help="Show page count and size")
    info.add_argument("inputs", nargs="+", help="PDF files or directories")
    info.set_defaults(handler=cmd_info)

    return parser


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    if args.backend:
        settings = replace(settings, document_backend=args.backend)
    return settings


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the pdfworks CLI."""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        parser.print_help()
        sys.exit(0)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = _settings(args)
        toolkit = Toolkit.from_settings(settings, progress=not args.quiet)
    except (KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(args.handler(args, toolkit))


if __name__ == "__main__":
    main()
