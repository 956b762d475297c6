#!/usr/bin/env python3
"""Package initialization and public API for pdfworks.

This module exports the public API for the pdfworks package, making it
usable both as a CLI tool and as a Python library.

Public API:
    # Pipelines
    number_pages(document, expression, model, ...) -> bytes
    estimate_preview(document, level, model, rasterizer, ...) -> SizeEstimate
    compress(document, level, model, rasterizer, ...) -> bytes
    extract_pages(document, pages, model) -> bytes
    explode_pages(document, source_name, model, archiver) -> bytes
    merge_documents(documents, model) -> bytes
    merge_queue(entries, model) -> bytes

    # Page ranges and layout
    parse_page_range(expression, total_pages, strict) -> List[int]
    place(anchor, page_width, page_height, text_width, font_size, margin)

    # Merge queue and session commands
    DocumentQueue
    Session, Toolkit, select_file, add_files, start_merge, run, ...

    # Backend management
    get_document_model(name) -> DocumentModelProvider
    get_rasterizer(name) -> RasterizerProvider
    get_archiver(name) -> ArchiveProvider
    available_backends() -> Dict[str, List[str]]

Usage as a library:
    ```python
    from pdfworks import get_document_model, number_pages, Anchor

    model = get_document_model("pymupdf")
    with model.load(open("report.pdf", "rb").read(), "report.pdf") as doc:
        data = number_pages(doc, "all", model, anchor=Anchor.TOP_RIGHT)
    ```

Usage as CLI:
    ```bash
    python -m pdfworks number report.pdf
    pdfworks merge a.pdf b.pdf -d out
    ```
"""

from __future__ import annotations

# Version and types
from pdfworks.types import (
    __version__,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_QUALITY_TABLE,
    PDF_CONTENT_TYPE,
    Anchor,
    Artifact,
    CompressionLevel,
    QueueEntry,
    RawFile,
    SizeEstimate,
    SplitMode,
)

# Errors
from pdfworks.errors import (
    PdfWorksError,
    InvalidInputType,
    UnreadableDocument,
    MalformedExpression,
    EmptyResult,
    IndexOutOfBounds,
    InvalidPermutation,
    InsufficientInputs,
    ProcessingFailure,
)

# Pipelines
from pdfworks.ranges import parse_page_range
from pdfworks.layout import place
from pdfworks.numbering import number_pages
from pdfworks.compress import compress, estimate_preview
from pdfworks.split import extract_pages, explode_pages
from pdfworks.merge import merge_documents, merge_queue
from pdfworks.queue import DocumentQueue

# Backend management
from pdfworks.backends import (
    Document,
    DocumentModelProvider,
    RasterizerProvider,
    ArchiveProvider,
    get_document_model,
    get_rasterizer,
    get_archiver,
    available_backends,
)

# Settings and session
from pdfworks.config import Settings, load_settings
from pdfworks.session import (
    Session,
    Toolkit,
    Download,
    ShowError,
    ShowEstimate,
    select_file,
    add_files,
    remove_file,
    reorder_files,
    move_file,
    reset,
    preview_compression,
    start_number,
    start_compress,
    start_split,
    start_merge,
    execute,
    settle,
    run,
)

# CLI
from pdfworks.cli import main

__all__ = [
    # Version and types
    "__version__",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_QUALITY_TABLE",
    "PDF_CONTENT_TYPE",
    "Anchor",
    "Artifact",
    "CompressionLevel",
    "QueueEntry",
    "RawFile",
    "SizeEstimate",
    "SplitMode",
    # Errors
    "PdfWorksError",
    "InvalidInputType",
    "UnreadableDocument",
    "MalformedExpression",
    "EmptyResult",
    "IndexOutOfBounds",
    "InvalidPermutation",
    "InsufficientInputs",
    "ProcessingFailure",
    # Pipelines
    "parse_page_range",
    "place",
    "number_pages",
    "compress",
    "estimate_preview",
    "extract_pages",
    "explode_pages",
    "merge_documents",
    "merge_queue",
    "DocumentQueue",
    # Backend management
    "Document",
    "DocumentModelProvider",
    "RasterizerProvider",
    "ArchiveProvider",
    "get_document_model",
    "get_rasterizer",
    "get_archiver",
    "available_backends",
    # Settings and session
    "Settings",
    "load_settings",
    "Session",
    "Toolkit",
    "Download",
    "ShowError",
    "ShowEstimate",
    "select_file",
    "add_files",
    "remove_file",
    "reorder_files",
    "move_file",
    "reset",
    "preview_compression",
    "start_number",
    "start_compress",
    "start_split",
    "start_merge",
    "execute",
    "settle",
    "run",
    # CLI
    "main",
]
