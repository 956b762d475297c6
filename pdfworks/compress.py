#!/usr/bin/env python3
"""Rasterize-and-reassemble PDF compression.

Every page is rendered to pixels, re-encoded as JPEG and placed full-bleed
on a page of a brand-new document. Text and vector content become pixels,
which is what makes scanned or image-heavy files shrink.

Stages per page, strictly in page order:

    render (scale 1.5) -> encode JPEG -> add page -> embed image

The preview path runs the first two stages on page 1 only and extrapolates.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Mapping

from PIL import Image
from tqdm import tqdm

from pdfworks.backends.base import Document, DocumentModelProvider, RasterizerProvider
from pdfworks.errors import PdfWorksError, ProcessingFailure
from pdfworks.types import (
    DEFAULT_QUALITY_TABLE,
    ESTIMATE_CORRECTION,
    RASTER_SCALE,
    CompressionLevel,
    SizeEstimate,
)

logger = logging.getLogger(__name__)

PREVIEW_PAGE_INDEX = 0


def jpeg_quality(factor: float) -> int:
    """Convert a quality factor in (0, 1] to Pillow's 1-100 JPEG scale."""
    return max(1, min(100, int(round(factor * 100))))


def encode_jpeg(image: Image.Image, factor: float) -> bytes:
    """Encode a raster as baseline JPEG at the given quality factor."""
    if image.mode != "RGB":
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=jpeg_quality(factor))
    return buffer.getvalue()


def estimate_preview(
    document: Document,
    level: CompressionLevel,
    model: DocumentModelProvider,
    rasterizer: RasterizerProvider,
    quality_table: Mapping[CompressionLevel, float] = DEFAULT_QUALITY_TABLE,
    scale: float = RASTER_SCALE,
    correction: float = ESTIMATE_CORRECTION,
) -> SizeEstimate:
    """Estimate the compressed size from one sample page.

    The sample page's encoded size is multiplied by the page count and a
    correction factor. The figure is an approximation for display only:
    real pages vary, and PDF structure adds overhead the estimate ignores.

    Args:
        document: Loaded source document.
        level: Compression level to preview.
        model: Document model used for the page count.
        rasterizer: Renderer for the sample page.
        quality_table: Level to encode quality factor mapping.
        scale: Render scale relative to page size in points.
        correction: Factor applied to the extrapolated size.

    Returns:
        SizeEstimate with the source size and the approximate output size.

    Raises:
        ProcessingFailure: If the sample page cannot be rendered or encoded.
    """
    total_pages = model.page_count(document)
    if total_pages == 0:
        return SizeEstimate(before_bytes=document.byte_size, after_estimate_bytes=0)

    try:
        raster = rasterizer.render_page(document, PREVIEW_PAGE_INDEX, scale)
        sample = encode_jpeg(raster, quality_table[level])
    except PdfWorksError:
        raise
    except Exception as e:
        raise ProcessingFailure(f"Preview failed: {e}") from e

    after = int(len(sample) * total_pages * correction)
    logger.debug(
        f"Preview of '{document.name}': sample {len(sample):,} bytes x "
        f"{total_pages} pages x {correction} = {after:,} bytes"
    )
    return SizeEstimate(before_bytes=document.byte_size, after_estimate_bytes=after)


def compress(
    document: Document,
    level: CompressionLevel,
    model: DocumentModelProvider,
    rasterizer: RasterizerProvider,
    quality_table: Mapping[CompressionLevel, float] = DEFAULT_QUALITY_TABLE,
    scale: float = RASTER_SCALE,
    progress: bool = False,
) -> bytes:
    """Rebuild a document from JPEG renderings of its pages.

    Each new page is exactly the size of its raster, and the image fills it.

    Raises:
        ProcessingFailure: If any page fails. Nothing is returned in that case.
    """
    quality = quality_table[level]
    total_pages = model.page_count(document)
    if total_pages == 0:
        raise ProcessingFailure(f"'{document.name}' has no pages")

    output = model.new()
    try:
        pages: Iterable[int] = tqdm(
            range(total_pages),
            desc=f"Compressing {document.name}".strip(),
            unit="page",
            disable=not progress,
        )
        for index in pages:
            try:
                raster = rasterizer.render_page(document, index, scale)
                jpeg = encode_jpeg(raster, quality)
                width, height = raster.size
                new_index = model.add_page(output, width, height)
                model.embed_raster(output, new_index, jpeg, 0, 0, width, height)
            except PdfWorksError:
                raise
            except Exception as e:
                raise ProcessingFailure(f"Page {index + 1}: {e}") from e
            logger.debug(f"Page {index + 1}: {len(jpeg):,} bytes | {width}x{height}")

        try:
            return model.save(output)
        except Exception as e:
            raise ProcessingFailure(f"Could not save compressed document: {e}") from e
    finally:
        output.close()
