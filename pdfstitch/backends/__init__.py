"""Backend abstractions for PDF Stitch."""

from .base import PDFBackend
from .pypdf_backend import PypdfBackend

__all__ = [
    "PDFBackend",
    "PypdfBackend",
]
