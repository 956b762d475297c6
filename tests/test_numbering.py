"""Tests for pdfworks.numbering - page number stamping."""

import fitz
import pytest

from pdfworks.backends import get_document_model
from pdfworks.errors import EmptyResult
from pdfworks.numbering import format_label, number_pages
from pdfworks.types import Anchor

BACKENDS = ["pymupdf", "pypdf2"]


def words_by_page(data: bytes):
    """Return the extracted words of every page as (x0, y0, x1, y1, text) tuples."""
    doc = fitz.open(stream=data, filetype="pdf")
    try:
        return [[tuple(w[:5]) for w in page.get_text("words")] for page in doc]
    finally:
        doc.close()


def labels(words):
    return [w[4] for w in words if w[4] != "content"]


class TestFormatLabel:
    """Tests for format_label."""

    def test_page_only(self):
        """The default template is just the number."""
        assert format_label("{page}", 4, 9) == "4"

    def test_page_and_total(self):
        """Both placeholders are filled in."""
        assert format_label("Page {page} of {total}", 3, 10) == "Page 3 of 10"

    def test_no_placeholders(self):
        """A template without placeholders is used as is."""
        assert format_label("Draft", 1, 2) == "Draft"

    def test_repeated_placeholders(self):
        """Every occurrence of a placeholder is filled in."""
        assert format_label("{page}/{page} ({total}, {total})", 2, 5) == "2/2 (5, 5)"


@pytest.mark.parametrize("backend", BACKENDS)
class TestNumberPages:
    """Tests for number_pages with every document model."""

    def test_numbers_every_page(self, backend, three_page_pdf):
        """'all' stamps the page number on every page."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = number_pages(doc, "all", model)

        assert [labels(w) for w in words_by_page(result)] == [["1"], ["2"], ["3"]]

    def test_selected_pages_only(self, backend, three_page_pdf):
        """Pages outside the expression are left alone."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = number_pages(doc, "2", model)

        assert [labels(w) for w in words_by_page(result)] == [[], ["2"], []]

    def test_lenient_expression(self, backend, three_page_pdf):
        """Malformed tokens are dropped and ranges clamped."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = number_pages(doc, "abc, 3-9", model)

        assert [labels(w) for w in words_by_page(result)] == [[], [], ["3"]]

    def test_template_with_total(self, backend, three_page_pdf):
        """The total page count is available to the template."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = number_pages(doc, "1", model, template="Page {page} of {total}")

        assert labels(words_by_page(result)[0]) == ["Page", "1", "of", "3"]

    def test_empty_selection(self, backend, three_page_pdf):
        """An expression selecting nothing raises EmptyResult."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            with pytest.raises(EmptyResult):
                number_pages(doc, "7-9", model)

    def test_page_count_preserved(self, backend, three_page_pdf):
        """Numbering never adds or drops pages."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = number_pages(doc, "all", model)

        with model.load(result, "numbered.pdf") as numbered:
            assert model.page_count(numbered) == 3


class TestLabelPosition:
    """Tests that labels land where the anchor says."""

    def test_bottom_center(self, pdf_factory):
        """A bottom-center label sits centred, near the bottom edge."""
        model = get_document_model("pymupdf")
        with model.load(pdf_factory([200]), "doc.pdf") as doc:
            result = number_pages(doc, "all", model, anchor=Anchor.BOTTOM_CENTER)

        x0, y0, x1, y1, _ = [w for w in words_by_page(result)[0] if w[4] == "1"][0]
        # fitz reports top-left based coordinates; the page is 300 points high
        assert (x0 + x1) / 2 == pytest.approx(100, abs=2)
        assert 300 - 30 - 20 < y0 < y1 < 300 - 30 + 8

    def test_top_right(self, pdf_factory):
        """A top-right label ends one margin from the right edge."""
        model = get_document_model("pymupdf")
        with model.load(pdf_factory([200]), "doc.pdf") as doc:
            result = number_pages(
                doc, "all", model, anchor=Anchor.TOP_RIGHT, template="{page}/{total}"
            )

        x0, y0, x1, y1, _ = [w for w in words_by_page(result)[0] if w[4] == "1/1"][0]
        assert x1 == pytest.approx(200 - 30, abs=2)
        assert y0 < 30 < y1 < 30 + 8
