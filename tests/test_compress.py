"""Tests for pdfworks.compress - rasterizing compression and size previews."""

import io
import random

import pytest
from PIL import Image

from conftest import page_widths
from pdfworks.backends import get_document_model, get_rasterizer
from pdfworks.backends.base import Document, RasterizerProvider
from pdfworks.compress import compress, encode_jpeg, estimate_preview, jpeg_quality
from pdfworks.errors import ProcessingFailure
from pdfworks.types import DEFAULT_QUALITY_TABLE, CompressionLevel


class NoiseRasterizer(RasterizerProvider):
    """Renders every page as the same deterministic noise image."""

    name = "noise"

    def __init__(self, size=(120, 160)):
        rng = random.Random(1234)
        pixels = bytes(rng.getrandbits(8) for _ in range(size[0] * size[1] * 3))
        self.image = Image.frombytes("RGB", size, pixels)
        self.calls = []

    def render_page(self, doc, index, scale):
        self.calls.append(index)
        return self.image.copy()

    @classmethod
    def is_available(cls):
        return True


class FailingRasterizer(RasterizerProvider):
    """Fails on one page."""

    name = "failing"

    def __init__(self, fail_on=1):
        self.fail_on = fail_on

    def render_page(self, doc, index, scale):
        if index == self.fail_on:
            raise RuntimeError("renderer crashed")
        return Image.new("RGB", (50, 50), "white")

    @classmethod
    def is_available(cls):
        return True


class EmptyModel:
    """Just enough of a document model to report zero pages."""

    def page_count(self, doc):
        return 0


class TestJpegQuality:
    """Tests for jpeg_quality and encode_jpeg."""

    @pytest.mark.parametrize(
        "factor,expected", [(0.3, 30), (0.85, 85), (1.0, 100), (0.001, 1), (1.5, 100)]
    )
    def test_scale(self, factor, expected):
        """Factors map to Pillow's 1-100 scale."""
        assert jpeg_quality(factor) == expected

    def test_encode_is_jpeg(self):
        """Encoded output is a JPEG of the same size."""
        data = encode_jpeg(Image.new("RGB", (20, 10), "red"), 0.6)
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "JPEG"
            assert img.size == (20, 10)

    def test_encode_converts_mode(self):
        """RGBA input is converted before encoding."""
        data = encode_jpeg(Image.new("RGBA", (8, 8)), 0.6)
        assert data[:2] == b"\xff\xd8"


class TestEstimatePreview:
    """Tests for estimate_preview."""

    def test_formula(self, three_page_pdf):
        """after = sample size x pages x correction."""
        model = get_document_model("pymupdf")
        rasterizer = NoiseRasterizer()
        sample = len(encode_jpeg(rasterizer.image, DEFAULT_QUALITY_TABLE[CompressionLevel.LOW]))

        with model.load(three_page_pdf, "doc.pdf") as doc:
            estimate = estimate_preview(doc, CompressionLevel.LOW, model, rasterizer)

        assert estimate.before_bytes == len(three_page_pdf)
        assert estimate.after_estimate_bytes == int(sample * 3 * 0.75)

    def test_renders_first_page_only(self, three_page_pdf):
        """Only page 1 is rendered."""
        model = get_document_model("pymupdf")
        rasterizer = NoiseRasterizer()
        with model.load(three_page_pdf, "doc.pdf") as doc:
            estimate_preview(doc, CompressionLevel.MEDIUM, model, rasterizer)
        assert rasterizer.calls == [0]

    def test_monotonic_in_level(self, three_page_pdf):
        """Higher levels never estimate a smaller size."""
        model = get_document_model("pymupdf")
        rasterizer = NoiseRasterizer()
        with model.load(three_page_pdf, "doc.pdf") as doc:
            sizes = [
                estimate_preview(doc, level, model, rasterizer).after_estimate_bytes
                for level in CompressionLevel
            ]
        assert sizes == sorted(sizes)

    def test_zero_pages(self):
        """A document without pages estimates zero."""
        doc = Document(native=None, data=b"12345", name="empty.pdf")
        estimate = estimate_preview(doc, CompressionLevel.HIGH, EmptyModel(), NoiseRasterizer())
        assert estimate.before_bytes == 5
        assert estimate.after_estimate_bytes == 0

    def test_real_rasterizer(self, three_page_pdf):
        """The PyMuPDF rasterizer gives a positive estimate."""
        model = get_document_model("pymupdf")
        with model.load(three_page_pdf, "doc.pdf") as doc:
            estimate = estimate_preview(doc, CompressionLevel.HIGH, model, get_rasterizer())
        assert estimate.after_estimate_bytes > 0

    def test_render_failure(self, three_page_pdf):
        """A failing render surfaces as ProcessingFailure."""
        model = get_document_model("pymupdf")
        with model.load(three_page_pdf, "doc.pdf") as doc:
            with pytest.raises(ProcessingFailure):
                estimate_preview(doc, CompressionLevel.LOW, model, FailingRasterizer(fail_on=0))


@pytest.mark.parametrize("backend", ["pymupdf", "pypdf2"])
class TestCompress:
    """Tests for compress with every document model."""

    def test_page_count_and_sizes(self, backend, three_page_pdf):
        """Output pages match the rasters: input width x 1.5."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = compress(doc, CompressionLevel.MEDIUM, model, get_rasterizer())

        assert page_widths(result) == [150, 165, 180]

    def test_pages_are_images(self, backend, three_page_pdf):
        """Every output page holds one embedded image."""
        import fitz

        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            result = compress(doc, CompressionLevel.LOW, model, get_rasterizer())

        out = fitz.open(stream=result, filetype="pdf")
        try:
            assert [len(page.get_images()) for page in out] == [1, 1, 1]
        finally:
            out.close()

    def test_monotonic_in_level(self, backend, three_page_pdf):
        """Higher levels never produce a smaller file for the same rasters."""
        model = get_document_model(backend)
        rasterizer = NoiseRasterizer()
        with model.load(three_page_pdf, "doc.pdf") as doc:
            sizes = [len(compress(doc, level, model, rasterizer)) for level in CompressionLevel]
        assert sizes == sorted(sizes)

    def test_page_failure(self, backend, three_page_pdf):
        """A failure on any page aborts with ProcessingFailure."""
        model = get_document_model(backend)
        with model.load(three_page_pdf, "doc.pdf") as doc:
            with pytest.raises(ProcessingFailure, match="Page 2"):
                compress(doc, CompressionLevel.LOW, model, FailingRasterizer(fail_on=1))

    def test_zero_pages(self, backend):
        """A document without pages cannot be compressed."""
        doc = Document(native=None, name="empty.pdf")
        with pytest.raises(ProcessingFailure):
            compress(doc, CompressionLevel.LOW, EmptyModel(), NoiseRasterizer())
