#!/usr/bin/env python3
"""Page extraction and per-page splitting.

Two modes:
- extract: copy a selected page set into one new PDF
- explode: one single-page PDF per source page, bundled into an archive
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from tqdm import tqdm

from pdfworks.backends.base import ArchiveProvider, Document, DocumentModelProvider
from pdfworks.errors import EmptyResult, MalformedExpression, PdfWorksError, ProcessingFailure

logger = logging.getLogger(__name__)


def page_entry_name(page_number: int, source_name: str) -> str:
    """Archive entry name of one exploded page, e.g. ``page_3_report.pdf``."""
    return f"page_{page_number}_{source_name}"


def _single(
    document: Document, model: DocumentModelProvider, indices: Sequence[int]
) -> bytes:
    output = model.new()
    try:
        model.copy_pages(output, document, indices)
        return model.save(output)
    finally:
        output.close()


def extract_pages(
    document: Document, pages: Sequence[int], model: DocumentModelProvider
) -> bytes:
    """Copy the given pages into a new PDF.

    Pages are written in ascending page order regardless of the order in
    ``pages``, and each page appears once.

    Args:
        document: Loaded source document.
        pages: 1-based page numbers, as produced by parse_page_range().
        model: Document model backend.

    Raises:
        EmptyResult: If ``pages`` is empty. The document is not touched.
        MalformedExpression: If a page number does not exist in the document.
        ProcessingFailure: If copying or saving fails.
    """
    ordered = sorted(set(pages))
    if not ordered:
        raise EmptyResult("No pages selected")

    total_pages = model.page_count(document)
    if ordered[0] < 1 or ordered[-1] > total_pages:
        raise MalformedExpression(
            f"Pages {ordered} out of bounds (PDF has {total_pages} pages)"
        )

    try:
        data = _single(document, model, [p - 1 for p in ordered])
    except PdfWorksError:
        raise
    except Exception as e:
        raise ProcessingFailure(f"Extracting pages {ordered}: {e}") from e

    logger.debug(f"Extracted {len(ordered)} page(s) from '{document.name}'")
    return data


def explode_pages(
    document: Document,
    source_name: str,
    model: DocumentModelProvider,
    archiver: ArchiveProvider,
    progress: bool = False,
) -> bytes:
    """Split every page into its own PDF and pack them into one archive.

    Entries are named ``page_<n>_<source_name>`` and appear in page order.

    Raises:
        ProcessingFailure: If any page cannot be copied or the archive fails.
    """
    total_pages = model.page_count(document)
    entries: List[Tuple[str, bytes]] = []

    pages: Iterable[int] = tqdm(
        range(total_pages),
        desc=f"Splitting {source_name}",
        unit="file",
        disable=not progress,
    )
    try:
        for index in pages:
            page_pdf = _single(document, model, [index])
            entries.append((page_entry_name(index + 1, source_name), page_pdf))
        data = archiver.pack(entries)
    except PdfWorksError:
        raise
    except Exception as e:
        raise ProcessingFailure(f"Splitting '{source_name}': {e}") from e

    logger.debug(f"Split '{source_name}' into {len(entries)} file(s)")
    return data
