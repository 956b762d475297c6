#!/usr/bin/env python3
"""Output file names for every operation."""

from __future__ import annotations

import os
import time
from typing import Optional


def numbered_name(name: str) -> str:
    return f"numbered-{name}"


def compressed_name(name: str) -> str:
    return f"compressed-{name}"


def split_name(name: str) -> str:
    return f"split-{name}"


def merged_name(timestamp_ms: Optional[int] = None) -> str:
    """``merged-<epoch milliseconds>.pdf``; the current time when not given."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"merged-{timestamp_ms}.pdf"


def exploded_archive_name(name: str, extension: str = ".zip") -> str:
    """Name of the archive holding every page, e.g. ``all-pages-report.zip``."""
    stem, _ = os.path.splitext(name)
    return f"all-pages-{stem}{extension}"
