#!/usr/bin/env python3
"""Error taxonomy for pdfworks.

Every error raised by the pipelines derives from PdfWorksError and carries
a short ``user_message`` suitable for display. The detailed cause stays in
``str(error)`` and in the log, and is never shown to the user verbatim.
"""

from __future__ import annotations

from typing import Optional


class PdfWorksError(Exception):
    """Base class for all pdfworks errors."""

    user_message: str = "An unexpected error occurred."

    def __init__(self, detail: str = "", user_message: Optional[str] = None) -> None:
        super().__init__(detail or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class InvalidInputType(PdfWorksError):
    """A supplied file is not a PDF."""

    user_message = "Please select a PDF file."


class UnreadableDocument(PdfWorksError):
    """The document model could not load a file (corrupt, encrypted, ...)."""

    user_message = "Could not read the PDF. It may be corrupted or protected."


class MalformedExpression(PdfWorksError):
    """A page range expression was rejected in strict mode."""

    user_message = "Invalid page range. Please use numbers and hyphens (e.g., 1-3, 5)."


class EmptyResult(PdfWorksError):
    """A page range expression selected no pages."""

    user_message = "Please enter a valid page range."


class IndexOutOfBounds(PdfWorksError):
    """A queue position does not exist."""

    user_message = "That file is no longer in the list."


class InvalidPermutation(PdfWorksError):
    """A reorder request was not a permutation of the queue."""

    user_message = "The file order could not be changed."


class InsufficientInputs(PdfWorksError):
    """A merge was requested with fewer than two documents."""

    user_message = "Add at least 2 files to merge."


class ProcessingFailure(PdfWorksError):
    """A rasterize, encode or copy step failed part-way through."""

    user_message = "An error occurred while processing the PDF."
