"""Backend protocol for PDF decoding and encoding."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..document import Document


class PDFBackend(Protocol):
    """Protocol defining the byte-level operations the merge core relies on."""

    def load(self, pdf_path: Path) -> Document:
        """Decode the PDF at *pdf_path* into a :class:`Document`."""

    def save(self, document: Document, destination: Path) -> None:
        """Serialize *document* and persist it at *destination*."""
