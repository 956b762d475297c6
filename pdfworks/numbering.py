#!/usr/bin/env python3
"""Stamp page numbers onto a PDF.

Labels are built from a template where ``{page}`` is the page number and
``{total}`` the page count, e.g. ``"Page {page} of {total}"``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from tqdm import tqdm

from pdfworks.backends.base import Document, DocumentModelProvider
from pdfworks.errors import PdfWorksError, ProcessingFailure
from pdfworks.layout import place
from pdfworks.ranges import parse_page_range
from pdfworks.types import (
    DEFAULT_FONT_SIZE,
    DEFAULT_LABEL_TEMPLATE,
    DEFAULT_MARGIN,
    Anchor,
    Color,
)

logger = logging.getLogger(__name__)


def format_label(template: str, page: int, total: int) -> str:
    """Fill in a label template.

    Examples:
        >>> format_label("Page {page} of {total}", 3, 10)
        'Page 3 of 10'
    """
    return template.replace("{page}", str(page)).replace("{total}", str(total))


def number_pages(
    document: Document,
    expression: str,
    model: DocumentModelProvider,
    anchor: Anchor = Anchor.BOTTOM_CENTER,
    template: str = DEFAULT_LABEL_TEMPLATE,
    font_size: float = DEFAULT_FONT_SIZE,
    color: Color = (0.0, 0.0, 0.0),
    margin: float = DEFAULT_MARGIN,
    progress: bool = False,
) -> bytes:
    """Draw a page label on every page the expression selects.

    The expression is parsed leniently: invalid parts are ignored, and only
    an expression that selects nothing at all is an error.

    Args:
        document: Loaded document; it is modified in place.
        expression: Page range such as ``"all"`` or ``"2-5,8"``.
        model: Document model backend.
        anchor: Where on the page the label goes.
        template: Label template.
        font_size: Font size in points.
        color: RGB fill colour, channels in [0, 1].
        margin: Distance from the page edge in points.
        progress: Show a progress bar.

    Returns:
        The numbered document as PDF bytes.

    Raises:
        EmptyResult: If the expression selects no pages. Nothing is drawn.
        ProcessingFailure: If drawing or saving fails.
    """
    total_pages = model.page_count(document)
    selected = parse_page_range(expression, total_pages, strict=False)

    pages: Iterable[int] = tqdm(
        selected, desc=f"Numbering {document.name}".strip(), unit="page", disable=not progress
    )
    try:
        for page_number in pages:
            index = page_number - 1
            width, height = model.page_size(document, index)
            label = format_label(template, page_number, total_pages)
            text_width = model.text_width(label, font_size)
            x, y = place(anchor, width, height, text_width, font_size, margin)
            model.draw_text(document, index, label, x, y, font_size, color)
        data = model.save(document)
    except PdfWorksError:
        raise
    except Exception as e:
        raise ProcessingFailure(f"Numbering '{document.name}': {e}") from e

    logger.debug(f"Numbered {len(selected)} of {total_pages} page(s) at {anchor.label}")
    return data
