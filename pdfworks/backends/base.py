#!/usr/bin/env python3
"""Provider interfaces for PDF libraries.

The pipelines in pdfworks never talk to a PDF library directly. They depend
on three small contracts:

    DocumentModelProvider   load/save documents, copy and add pages,
                            measure and draw text, embed raster images
    RasterizerProvider      render a page to a PIL image
    ArchiveProvider         pack named byte blobs into one archive

Adding a New Backend:
    1. Create a module in pdfworks/backends/
    2. Subclass one of the providers below and implement its abstract methods
    3. Decorate the class with @register_backend
    4. Import the module in pdfworks/backends/__init__.py

Example:
    ```python
    from pdfworks.backends.base import ArchiveProvider, register_backend

    @register_backend
    class TarArchiver(ArchiveProvider):
        name = "tar"
        extension = ".tar"
        content_type = "application/x-tar"

        def pack(self, entries):
            ...

        @classmethod
        def is_available(cls) -> bool:
            return True
    ```

Coordinates:
    Page indices are 0-based at this level. Geometry is PDF user space:
    origin at the bottom-left corner, y growing upwards, units in points.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Sequence, Tuple, Type

from PIL import Image

from pdfworks.types import Color

# ============================================================================
# DOCUMENT HANDLE
# ============================================================================


class Document:
    """Handle to a loaded or newly created PDF.

    Attributes:
        native: The backend library's own document object.
        data: The bytes the document was loaded from (empty for new ones).
        name: The source file name, if any.
    """

    def __init__(self, native: Any, data: bytes = b"", name: str = "") -> None:
        self.native = native
        self.data = data
        self.name = name
        self.closed = False
        # Auxiliary objects opened on demand (e.g. a renderer's own copy)
        self._companions: Dict[str, Any] = {}

    @property
    def byte_size(self) -> int:
        return len(self.data)

    def companion(self, key: str, factory: Callable[[], Any]) -> Any:
        """Return the auxiliary object stored under ``key``, creating it once."""
        if key not in self._companions:
            self._companions[key] = factory()
        return self._companions[key]

    def close(self) -> None:
        """Release the native object and its companions. Safe to call twice."""
        if self.closed:
            return
        for obj in [self.native, *self._companions.values()]:
            closer = getattr(obj, "close", None)
            if callable(closer):
                closer()
        self._companions.clear()
        self.closed = True

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Document(name={self.name!r}, bytes={self.byte_size})"


# ============================================================================
# BACKEND REGISTRY
# ============================================================================

# Registry per provider kind: kind -> backend name -> class (not instance).
_REGISTRY: Dict[str, Dict[str, Type["Provider"]]] = {}


def register_backend(cls: Type["Provider"]) -> Type["Provider"]:
    """Class decorator adding a provider class to the registry."""
    _REGISTRY.setdefault(cls.kind, {})[cls.name] = cls
    return cls


def get_registry(kind: str) -> Dict[str, Type["Provider"]]:
    """Return a copy of the ``name -> class`` mapping for one provider kind."""
    return dict(_REGISTRY.get(kind, {}))


# ============================================================================
# ABSTRACT PROVIDERS
# ============================================================================


class Provider(ABC):
    """Common class attributes of every backend."""

    kind: str = ""  # "document", "raster" or "archive"
    name: str = ""  # e.g. "pymupdf"
    display_name: str = ""
    install_hint: str = ""

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Check whether the backend's library can be imported."""
        ...


class DocumentModelProvider(Provider):
    """Loads, edits and saves PDF documents."""

    kind = "document"

    @abstractmethod
    def load(self, data: bytes, name: str = "") -> Document:
        """Parse PDF bytes.

        Raises:
            UnreadableDocument: If the bytes are corrupt, encrypted or not a PDF.
        """
        ...

    @abstractmethod
    def new(self) -> Document:
        """Create an empty document."""
        ...

    @abstractmethod
    def save(self, doc: Document) -> bytes:
        """Serialize a document to PDF bytes."""
        ...

    @abstractmethod
    def page_count(self, doc: Document) -> int:
        ...

    @abstractmethod
    def page_size(self, doc: Document, index: int) -> Tuple[float, float]:
        """Return ``(width, height)`` of a page in points."""
        ...

    @abstractmethod
    def copy_pages(self, dst: Document, src: Document, indices: Sequence[int]) -> None:
        """Append copies of ``src`` pages to ``dst``, in the order given."""
        ...

    @abstractmethod
    def add_page(self, doc: Document, width: float, height: float) -> int:
        """Append a blank page and return its index."""
        ...

    @abstractmethod
    def text_width(self, text: str, font_size: float) -> float:
        """Width of ``text`` set in Helvetica at ``font_size``."""
        ...

    @abstractmethod
    def draw_text(
        self,
        doc: Document,
        index: int,
        text: str,
        x: float,
        y: float,
        font_size: float,
        color: Color = (0.0, 0.0, 0.0),
    ) -> None:
        """Draw ``text`` in Helvetica with its baseline starting at (x, y)."""
        ...

    @abstractmethod
    def embed_raster(
        self,
        doc: Document,
        index: int,
        data: bytes,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw an encoded image (JPEG or PNG) into the given rectangle."""
        ...


class RasterizerProvider(Provider):
    """Renders PDF pages to pixels."""

    kind = "raster"

    @abstractmethod
    def render_page(self, doc: Document, index: int, scale: float) -> Image.Image:
        """Render one page at ``scale`` times its size in points.

        Raises:
            ProcessingFailure: If the page cannot be rendered.
        """
        ...


class ArchiveProvider(Provider):
    """Bundles several named payloads into one download."""

    kind = "archive"
    extension: str = ""
    content_type: str = ""

    @abstractmethod
    def pack(self, entries: List[Tuple[str, bytes]]) -> bytes:
        """Pack ``(name, data)`` entries, preserving their order."""
        ...
