#!/usr/bin/env python3
"""Shared types, constants, and type definitions for the pdfworks package.

This module contains the value types and constants used throughout the
pdfworks package. Centralizing these allows the pipelines, the backends and
the command layer to agree on one vocabulary.

Value Types:
    Anchor: Symbolic overlay position (vertical x horizontal)
    SplitMode: Extract selected pages or explode into single pages
    CompressionLevel: Named JPEG quality level
    RawFile: A user-supplied file (name, content type, bytes)
    QueueEntry: One member of a DocumentQueue
    SizeEstimate: Before/after figures of a compression preview
    Artifact: A produced output file ready for download

Constants:
    __version__: Package version string
    PDF_CONTENT_TYPE / ZIP_CONTENT_TYPE: Accepted input and archive types
    DEFAULT_MARGIN: Overlay margin in PDF points
    RASTER_SCALE: Upscale factor used when rasterizing for compression
    ESTIMATE_CORRECTION: Correction factor applied to preview estimates
    DEFAULT_QUALITY_TABLE: CompressionLevel -> encode quality in (0, 1]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

# ============================================================================
# VERSION AND METADATA
# ============================================================================

__version__ = "1.0.0"

# ============================================================================
# CONTENT TYPES
# ============================================================================

PDF_CONTENT_TYPE: str = "application/pdf"
ZIP_CONTENT_TYPE: str = "application/zip"

# ============================================================================
# OUTPUT CONFIGURATION
# ============================================================================

DEFAULT_OUTPUT_DIR: str = "pdf_out"

# ============================================================================
# LAYOUT AND COMPRESSION DEFAULTS
# ============================================================================

DEFAULT_MARGIN: float = 30.0  # PDF points between overlay text and page edge
DEFAULT_FONT_SIZE: int = 12
DEFAULT_LABEL_TEMPLATE: str = "{page}"

RASTER_SCALE: float = 1.5  # 1.5x of the page's native size
ESTIMATE_CORRECTION: float = 0.75  # Applied to extrapolated preview sizes

# ============================================================================
# ENUMERATIONS
# ============================================================================


class Anchor(Enum):
    """One of the 9 overlay positions on a page.

    Values are ``(vertical, horizontal)`` pairs; the string form used by the
    CLI and the command layer is ``"<vertical>-<horizontal>"``.
    """

    TOP_LEFT = ("top", "left")
    TOP_CENTER = ("top", "center")
    TOP_RIGHT = ("top", "right")
    MIDDLE_LEFT = ("middle", "left")
    MIDDLE_CENTER = ("middle", "center")
    MIDDLE_RIGHT = ("middle", "right")
    BOTTOM_LEFT = ("bottom", "left")
    BOTTOM_CENTER = ("bottom", "center")
    BOTTOM_RIGHT = ("bottom", "right")

    @property
    def vertical(self) -> str:
        return self.value[0]

    @property
    def horizontal(self) -> str:
        return self.value[1]

    @property
    def label(self) -> str:
        return f"{self.vertical}-{self.horizontal}"

    @classmethod
    def parse(cls, text: str) -> "Anchor":
        """Parse ``"bottom-center"`` (or ``bottom_center``) into an Anchor.

        Raises:
            ValueError: If the text names no known position.
        """
        key = text.strip().lower().replace("_", "-")
        for anchor in cls:
            if anchor.label == key:
                return anchor
        choices = ", ".join(a.label for a in cls)
        raise ValueError(f"Unknown position '{text}'. Choose one of: {choices}")


class SplitMode(Enum):
    """How the splitter produces its output."""

    EXTRACT = "extract"  # selected pages into one PDF
    EXPLODE = "explode"  # every page into its own PDF, archived


class CompressionLevel(Enum):
    """Named quality levels, ordered from smallest output to best quality."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, text: str) -> "CompressionLevel":
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown compression level '{text}'. Choose one of: {choices}")


# Mapping from compression level to encode quality factor in (0, 1].
# Higher levels must never map to a lower factor.
DEFAULT_QUALITY_TABLE: Dict[CompressionLevel, float] = {
    CompressionLevel.LOW: 0.3,
    CompressionLevel.MEDIUM: 0.6,
    CompressionLevel.HIGH: 0.85,
}

# ============================================================================
# VALUE TYPES
# ============================================================================

# RGB colour with float channels in [0, 1]
Color = Tuple[float, float, float]


@dataclass(frozen=True)
class RawFile:
    """A file as supplied by the user, before any parsing."""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class QueueEntry:
    """A queued input awaiting a merge."""

    file: RawFile
    display_name: str
    position: int


@dataclass(frozen=True)
class SizeEstimate:
    """Approximate before/after sizes for a compression preview.

    ``after_estimate_bytes`` extrapolates one sampled page to the whole
    document and is not a measurement of the real output.
    """

    before_bytes: int
    after_estimate_bytes: int


@dataclass(frozen=True)
class Artifact:
    """A produced output, either a PDF or an archive of PDFs."""

    filename: str
    data: bytes
    content_type: str = PDF_CONTENT_TYPE
