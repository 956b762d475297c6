#!/usr/bin/env python3
"""Backend registry and factory functions.

This module provides the public API for obtaining provider instances:
- get_document_model(): DocumentModelProvider by name
- get_rasterizer(): RasterizerProvider by name
- get_archiver(): ArchiveProvider by name
- available_backends(): names of usable backends per kind

Every backend module registers its classes with @register_backend; this
module imports them all so that registration happens on package import.

Usage:
    model = get_document_model("pymupdf")
    doc = model.load(pdf_bytes, "report.pdf")
    print(model.page_count(doc))
"""

from __future__ import annotations

from typing import Any, Dict, List

from pdfworks.backends.base import (
    ArchiveProvider,
    Document,
    DocumentModelProvider,
    Provider,
    RasterizerProvider,
    get_registry,
)

# ============================================================================
# IMPORT ALL BACKENDS TO TRIGGER REGISTRATION
# ============================================================================

from pdfworks.backends import archive  # noqa: F401
from pdfworks.backends import mupdf  # noqa: F401
from pdfworks.backends import pypdf2  # noqa: F401

__all__ = [
    "Document",
    "DocumentModelProvider",
    "RasterizerProvider",
    "ArchiveProvider",
    "get_document_model",
    "get_rasterizer",
    "get_archiver",
    "available_backends",
]

DEFAULT_DOCUMENT_MODEL = "pymupdf"
DEFAULT_RASTERIZER = "pymupdf"
DEFAULT_ARCHIVER = "zip"


def _get(kind: str, name: str, **kwargs: Any) -> Provider:
    registry = get_registry(kind)
    if name not in registry:
        raise KeyError(
            f"Unknown {kind} backend: '{name}'. "
            f"Available backends: {', '.join(registry)}"
        )
    return registry[name](**kwargs)


def get_document_model(name: str = DEFAULT_DOCUMENT_MODEL) -> DocumentModelProvider:
    """Instantiate a document model backend by name.

    Raises:
        KeyError: If no document model is registered under ``name``.
    """
    provider = _get("document", name)
    assert isinstance(provider, DocumentModelProvider)
    return provider


def get_rasterizer(name: str = DEFAULT_RASTERIZER) -> RasterizerProvider:
    """Instantiate a rasterizer backend by name."""
    provider = _get("raster", name)
    assert isinstance(provider, RasterizerProvider)
    return provider


def get_archiver(name: str = DEFAULT_ARCHIVER) -> ArchiveProvider:
    """Instantiate an archive backend by name."""
    provider = _get("archive", name)
    assert isinstance(provider, ArchiveProvider)
    return provider


def available_backends() -> Dict[str, List[str]]:
    """Return usable backend names, keyed by provider kind."""
    result: Dict[str, List[str]] = {}
    for kind in ("document", "raster", "archive"):
        result[kind] = [
            name for name, cls in get_registry(kind).items() if cls.is_available()
        ]
    return result
