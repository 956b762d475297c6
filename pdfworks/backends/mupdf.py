#!/usr/bin/env python3
"""PyMuPDF (fitz) backends: document model and rasterizer.

PyMuPDF works in a top-left coordinate system with y growing downwards.
The providers convert from PDF user space (bottom-left origin) at the
boundary, so callers never see the difference.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence, Tuple

import fitz  # pymupdf
from PIL import Image

from pdfworks.backends.base import (
    Document,
    DocumentModelProvider,
    RasterizerProvider,
    register_backend,
)
from pdfworks.errors import ProcessingFailure, UnreadableDocument
from pdfworks.types import Color

logger = logging.getLogger(__name__)

# Base-14 Helvetica, available without embedding a font file
FONT_NAME = "helv"


def _open_pdf(data: bytes, name: str = "") -> "fitz.Document":
    try:
        native = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise UnreadableDocument(f"Cannot open '{name}': {e}") from e

    if native.needs_pass:
        native.close()
        raise UnreadableDocument(f"'{name}' is password protected")
    return native


def text_length(text: str, font_size: float) -> float:
    """Width of ``text`` in Helvetica, in points."""
    return float(fitz.get_text_length(text, fontname=FONT_NAME, fontsize=font_size))


def insert_text(
    page: "fitz.Page", text: str, x: float, y: float, font_size: float, color: Color
) -> None:
    """Draw text on a fitz page using a bottom-left origin."""
    height = page.rect.height
    page.insert_text(
        fitz.Point(x, height - y),
        text,
        fontsize=font_size,
        fontname=FONT_NAME,
        color=color,
    )


def insert_image(
    page: "fitz.Page", data: bytes, x: float, y: float, width: float, height: float
) -> None:
    """Draw an encoded image on a fitz page using a bottom-left origin."""
    page_height = page.rect.height
    rect = fitz.Rect(x, page_height - y - height, x + width, page_height - y)
    page.insert_image(rect, stream=data)


def render_overlay(width: float, height: float, draw: Callable[["fitz.Page"], None]) -> bytes:
    """Build a single transparent page of the given size and return its bytes.

    Used by backends that cannot draw by themselves: they stamp the overlay
    onto their own page instead.
    """
    overlay = fitz.open()
    try:
        page = overlay.new_page(width=width, height=height)
        draw(page)
        return overlay.tobytes()
    finally:
        overlay.close()


@register_backend
class MuPDFDocumentModel(DocumentModelProvider):
    """Document model on top of PyMuPDF."""

    name = "pymupdf"
    display_name = "PyMuPDF"
    install_hint = "pip install pymupdf"

    def load(self, data: bytes, name: str = "") -> Document:
        native = _open_pdf(data, name)
        logger.debug(f"Loaded '{name}' with PyMuPDF ({native.page_count} pages)")
        return Document(native, data=data, name=name)

    def new(self) -> Document:
        return Document(fitz.open())

    def save(self, doc: Document) -> bytes:
        return doc.native.tobytes(garbage=3, deflate=True)

    def page_count(self, doc: Document) -> int:
        return int(doc.native.page_count)

    def page_size(self, doc: Document, index: int) -> Tuple[float, float]:
        rect = doc.native[index].rect
        return float(rect.width), float(rect.height)

    def copy_pages(self, dst: Document, src: Document, indices: Sequence[int]) -> None:
        for index in indices:
            dst.native.insert_pdf(src.native, from_page=index, to_page=index)

    def add_page(self, doc: Document, width: float, height: float) -> int:
        doc.native.new_page(width=width, height=height)
        return int(doc.native.page_count) - 1

    def text_width(self, text: str, font_size: float) -> float:
        return text_length(text, font_size)

    def draw_text(
        self,
        doc: Document,
        index: int,
        text: str,
        x: float,
        y: float,
        font_size: float,
        color: Color = (0.0, 0.0, 0.0),
    ) -> None:
        insert_text(doc.native[index], text, x, y, font_size, color)

    def embed_raster(
        self,
        doc: Document,
        index: int,
        data: bytes,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        insert_image(doc.native[index], data, x, y, width, height)

    @classmethod
    def is_available(cls) -> bool:
        return True


@register_backend
class MuPDFRasterizer(RasterizerProvider):
    """Page renderer on top of PyMuPDF.

    Documents loaded by another backend are reopened from their source
    bytes once and the copy is kept with the document until it is closed.
    """

    name = "pymupdf"
    display_name = "PyMuPDF"
    install_hint = "pip install pymupdf"

    def _source(self, doc: Document) -> "fitz.Document":
        if isinstance(doc.native, fitz.Document):
            return doc.native
        return doc.companion("fitz", lambda: _open_pdf(doc.data, doc.name))

    def render_page(self, doc: Document, index: int, scale: float) -> Image.Image:
        try:
            page = self._source(doc).load_page(index)
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        except UnreadableDocument:
            raise
        except Exception as e:
            raise ProcessingFailure(f"Failed to render page {index + 1}: {e}") from e

    @classmethod
    def is_available(cls) -> bool:
        return True
