#!/usr/bin/env python3
"""Concatenate PDFs in queue order."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from tqdm import tqdm

from pdfworks.backends.base import Document, DocumentModelProvider
from pdfworks.errors import InsufficientInputs, PdfWorksError, ProcessingFailure
from pdfworks.queue import MIN_MERGE_INPUTS
from pdfworks.types import QueueEntry

logger = logging.getLogger(__name__)


def merge_documents(
    documents: Sequence[Document], model: DocumentModelProvider, progress: bool = False
) -> bytes:
    """Append all pages of each document, in the order given.

    Page order in the output is (document position, source page index);
    nothing is re-sorted.

    Raises:
        InsufficientInputs: If fewer than two documents are given.
        ProcessingFailure: If a page cannot be copied or the result saved.
    """
    if len(documents) < MIN_MERGE_INPUTS:
        raise InsufficientInputs(
            f"Merging needs {MIN_MERGE_INPUTS} documents, got {len(documents)}"
        )

    output = model.new()
    total_pages = 0
    try:
        docs: Iterable[Document] = tqdm(
            documents, desc="Merging", unit="file", disable=not progress
        )
        for doc in docs:
            count = model.page_count(doc)
            model.copy_pages(output, doc, range(count))
            total_pages += count
            logger.debug(f"  Adding: {doc.name} ({count} pages)")
        data = model.save(output)
    except PdfWorksError:
        raise
    except Exception as e:
        raise ProcessingFailure(f"Error merging PDFs: {e}") from e
    finally:
        output.close()

    logger.info(f"Merged {len(documents)} PDFs ({total_pages} pages)")
    return data


def merge_queue(
    entries: Sequence[QueueEntry], model: DocumentModelProvider, progress: bool = False
) -> bytes:
    """Load every queued file in position order and merge them.

    Raises:
        InsufficientInputs: If fewer than two entries are queued.
        UnreadableDocument: If any entry fails to load. No output is produced.
    """
    if len(entries) < MIN_MERGE_INPUTS:
        raise InsufficientInputs(
            f"Merging needs {MIN_MERGE_INPUTS} documents, got {len(entries)}"
        )

    loaded: List[Document] = []
    try:
        for entry in sorted(entries, key=lambda e: e.position):
            loaded.append(model.load(entry.file.data, entry.display_name))
        return merge_documents(loaded, model, progress=progress)
    finally:
        for doc in loaded:
            doc.close()
