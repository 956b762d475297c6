#!/usr/bin/env python3
"""ZIP archive backend."""

from __future__ import annotations

import io
import zipfile
from typing import List, Tuple

from pdfworks.backends.base import ArchiveProvider, register_backend
from pdfworks.types import ZIP_CONTENT_TYPE


@register_backend
class ZipArchiver(ArchiveProvider):
    """Packs entries into an in-memory, deflate-compressed ZIP file."""

    name = "zip"
    display_name = "ZIP"
    extension = ".zip"
    content_type = ZIP_CONTENT_TYPE

    def pack(self, entries: List[Tuple[str, bytes]]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, data in entries:
                zf.writestr(name, data)
        return buffer.getvalue()

    @classmethod
    def is_available(cls) -> bool:
        return True
