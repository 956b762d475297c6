"""Shared pytest fixtures for pdfworks tests."""

import io
import sys
from pathlib import Path
from typing import Callable, List, Sequence

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdfworks.types import PDF_CONTENT_TYPE, RawFile

PAGE_HEIGHT = 300


def build_pdf(widths: Sequence[float], height: float = PAGE_HEIGHT) -> bytes:
    """Create a PDF whose page widths identify its pages.

    Every page carries the word "content" near its top-left corner so that
    it has a content stream and renders to something other than white.
    """
    import fitz

    doc = fitz.open()
    try:
        for width in widths:
            page = doc.new_page(width=width, height=height)
            page.insert_text(fitz.Point(10, 20), "content", fontsize=10)
        return doc.tobytes()
    finally:
        doc.close()


def page_widths(data: bytes) -> List[float]:
    """Return the width of every page of a PDF, rounded to whole points."""
    import fitz

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        return [round(page.rect.width) for page in doc]
    finally:
        doc.close()


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    """Factory building PDFs from a list of page widths."""
    return build_pdf


@pytest.fixture
def raw_pdf() -> Callable[..., RawFile]:
    """Factory wrapping PDF bytes into a RawFile."""

    def make(name: str, widths: Sequence[float] = (100, 110)) -> RawFile:
        return RawFile(name=name, content_type=PDF_CONTENT_TYPE, data=build_pdf(widths))

    return make


@pytest.fixture
def three_page_pdf() -> bytes:
    """A 3-page PDF with page widths 100, 110 and 120."""
    return build_pdf([100, 110, 120])


@pytest.fixture
def broken_pdf() -> bytes:
    """Bytes that no PDF library can parse."""
    return b"this is not a pdf file\n" * 20


@pytest.fixture
def letter_pdf(tmp_path: Path) -> Path:
    """A blank letter-size page written by PyPDF2 rather than PyMuPDF."""
    from PyPDF2 import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    path = tmp_path / "letter.pdf"
    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture
def pdf_dir(tmp_path: Path) -> Path:
    """A directory with two PDFs and one text file."""
    folder = tmp_path / "inputs"
    folder.mkdir()
    (folder / "a.pdf").write_bytes(build_pdf([100, 110]))
    (folder / "b.PDF").write_bytes(build_pdf([200]))
    (folder / "notes.txt").write_text("not a pdf")
    return folder


@pytest.fixture
def encrypted_pdf() -> bytes:
    """A PDF that needs a user password to open."""
    from PyPDF2 import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.encrypt("secret")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    """Create an empty directory."""
    empty = tmp_path / "empty"
    empty.mkdir()
    return empty
