#!/usr/bin/env python3
"""Utility functions for the pdfworks package.

This module contains small self-contained helpers used by the command
layer and the CLI:
- Content type detection for user-supplied files
- Reading input paths (files or directories) into RawFile values
- Human-readable byte sizes
- Hex colour parsing for overlay text

Functions:
    detect_content_type: Guess a file's content type from name and bytes
    read_raw_file: Read one path into a RawFile
    process_inputs: Expand files/directories into a list of paths
    format_bytes: Format a byte count as "1.5 MB"
    hex_to_rgb: Parse "#rrggbb" into float RGB
"""

from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import List

from pdfworks.types import PDF_CONTENT_TYPE, Color, RawFile

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


def detect_content_type(name: str, data: bytes) -> str:
    """Guess the content type of a file.

    A file counts as a PDF when its name ends in ``.pdf`` (any case) or its
    bytes start with the PDF header. Anything else gets the type the
    standard ``mimetypes`` table gives its extension, or
    ``application/octet-stream``.

    Examples:
        >>> detect_content_type("report.PDF", b"")
        'application/pdf'
        >>> detect_content_type("notes.txt", b"hello")
        'text/plain'
    """
    if name.lower().endswith(".pdf") or data.startswith(PDF_MAGIC):
        return PDF_CONTENT_TYPE
    guessed, _ = mimetypes.guess_type(name)
    return guessed or "application/octet-stream"


def read_raw_file(path: Path) -> RawFile:
    """Read a file from disk into a RawFile named after its basename."""
    data = path.read_bytes()
    return RawFile(name=path.name, content_type=detect_content_type(path.name, data), data=data)


def process_inputs(inputs: List[str]) -> List[Path]:
    """Process input arguments into a list of file paths.

    Directories contribute every PDF directly inside them (case-insensitive
    extension match, sorted by name). Files are passed through whatever
    their type, so that the caller can reject non-PDFs with a proper
    message. Duplicates are removed, keeping the first occurrence.

    Args:
        inputs: File or directory paths as given on the command line.

    Returns:
        List of existing file paths, in input order.
    """
    files: List[Path] = []

    for inp in inputs:
        path = Path(inp)
        if path.is_dir():
            files.extend(sorted(path.glob("*.[pP][dD][fF]")))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning(f"Path not found: {path}")

    seen = set()
    unique_files: List[Path] = []
    for f in files:
        resolved = f.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_files.append(f)

    return unique_files


def format_bytes(size: float, decimals: int = 2) -> str:
    """Format a byte count for display.

    Examples:
        >>> format_bytes(0)
        '0 Bytes'
        >>> format_bytes(1536)
        '1.5 KB'
    """
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    value = round(value, max(decimals, 0))
    return f"{value:g} {units[exponent]}"


def hex_to_rgb(text: str) -> Color:
    """Parse ``#rrggbb`` into RGB floats in [0, 1].

    Unparseable input yields black rather than an error.
    """
    match = _HEX_COLOR_RE.match(text.strip())
    if match is None:
        logger.debug(f"Invalid colour '{text}', using black")
        return (0.0, 0.0, 0.0)
    r, g, b = (int(group, 16) / 255 for group in match.groups())
    return (r, g, b)
