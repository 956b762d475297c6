#!/usr/bin/env python3
"""PyPDF2 document model.

Pages are collected into a PdfWriter as soon as a document is loaded, the
way pdfsplit-style tools copy reader pages into a writer. PyPDF2 cannot set
text or place images on its own, so drawing is done by stamping a one-page
overlay built with PyMuPDF onto the target page.
"""

from __future__ import annotations

import io
import logging
from typing import Sequence, Tuple

from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.generic import IndirectObject, NameObject

from pdfworks.backends.base import Document, DocumentModelProvider, register_backend
from pdfworks.backends.mupdf import insert_image, insert_text, render_overlay, text_length
from pdfworks.errors import UnreadableDocument
from pdfworks.types import Color

logger = logging.getLogger(__name__)


@register_backend
class PyPDF2DocumentModel(DocumentModelProvider):
    """Document model on top of PyPDF2's reader and writer."""

    name = "pypdf2"
    display_name = "PyPDF2"
    install_hint = "pip install PyPDF2"

    def load(self, data: bytes, name: str = "") -> Document:
        try:
            reader = PdfReader(io.BytesIO(data))
            if reader.is_encrypted:
                # Owner-password-only files open with an empty user password
                if reader.decrypt("") == 0:
                    raise UnreadableDocument(f"'{name}' is password protected")
            writer = PdfWriter()
            for page in reader.pages:
                writer.add_page(page)
        except UnreadableDocument:
            raise
        except Exception as e:
            raise UnreadableDocument(f"Cannot open '{name}': {e}") from e

        logger.debug(f"Loaded '{name}' with PyPDF2 ({len(reader.pages)} pages)")
        doc = Document(writer, data=data, name=name)
        doc.companion("reader", lambda: reader)
        return doc

    def new(self) -> Document:
        return Document(PdfWriter())

    def save(self, doc: Document) -> bytes:
        buffer = io.BytesIO()
        doc.native.write(buffer)
        return buffer.getvalue()

    def page_count(self, doc: Document) -> int:
        return len(doc.native.pages)

    def page_size(self, doc: Document, index: int) -> Tuple[float, float]:
        box = doc.native.pages[index].mediabox
        return float(box.width), float(box.height)

    def copy_pages(self, dst: Document, src: Document, indices: Sequence[int]) -> None:
        # Copy from the reader when there is one: its pages are the originals
        source = src.companion("reader", lambda: src.native)
        for index in indices:
            dst.native.add_page(source.pages[index])

    def add_page(self, doc: Document, width: float, height: float) -> int:
        doc.native.add_blank_page(width=width, height=height)
        return len(doc.native.pages) - 1

    def text_width(self, text: str, font_size: float) -> float:
        return text_length(text, font_size)

    def _stamp(self, doc: Document, index: int, overlay: bytes) -> None:
        stamp = PdfReader(io.BytesIO(overlay)).pages[0]
        page = doc.native.pages[index]
        page.merge_page(stamp)
        # merge_page leaves the combined content stream inline in the page
        # dictionary; streams have to be indirect objects or readers drop them
        contents = page.raw_get(NameObject("/Contents"))
        if not isinstance(contents, IndirectObject):
            page[NameObject("/Contents")] = doc.native._add_object(contents)

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
        width, height = self.page_size(doc, index)
        overlay = render_overlay(
            width, height, lambda page: insert_text(page, text, x, y, font_size, color)
        )
        self._stamp(doc, index, overlay)

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
        page_width, page_height = self.page_size(doc, index)
        overlay = render_overlay(
            page_width,
            page_height,
            lambda page: insert_image(page, data, x, y, width, height),
        )
        self._stamp(doc, index, overlay)

    @classmethod
    def is_available(cls) -> bool:
        return True
