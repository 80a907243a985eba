"""
PDF Stitch - Merge PDF files and directories of PDF files into one document.

Inputs are expanded to a flat list of PDF files (directories only up to a
given depth), checked for unsafe requests, merged at the object graph level
and saved with one outline entry per merged file.

Quick Start:
    >>> from pdfstitch import merge_pdfs
    >>> result = merge_pdfs(['intro.pdf', 'chapters'], 'book.pdf', depth='1')
    >>> result.files

Main Classes:
    - MergeJob: Build, check and run a merge
    - DocumentMerger: Object graph merge of loaded documents
    - Document: In-memory PDF object graph

Data Classes:
    - MergeOptions: Policy flags of a merge run
    - RunSuccess: Result of a merge run
    - Bookmark: Outline entry marking the start of a merged file
    - Depth: Directory recursion bound

Exceptions:
    - PdfStitchError: Base exception
    - MergeBuildError: Invalid arguments
    - MergeCheckError: Rejected by the pre-flight checks
    - MergeRunError: Collecting, merging or saving failed

For CLI usage, use the 'pdfstitch' command after installation.
"""

__version__ = "1.0.0"

# Core classes
from pdfstitch.document import Document, ObjectKind
from pdfstitch.merger import DocumentMerger, merge_documents
from pdfstitch.finalizer import finalize
from pdfstitch.job import JobState, MergeJob, merge_pdfs

# Data types
from pdfstitch.depth import Depth, DepthKind
from pdfstitch.ordering import OrderMode
from pdfstitch.types import Bookmark, MergeOptions, RunSuccess

# Collection and checks
from pdfstitch.collector import collect_pdf_paths
from pdfstitch.validators import check_merge

# Exceptions
from pdfstitch.exceptions import (
    PdfStitchError,
    MergeBuildError,
    MergeCheckError,
    MergeRunError,
)

__author__ = "PDF Stitch Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "MergeJob",
    "JobState",
    "DocumentMerger",
    "Document",
    "ObjectKind",
    # Functions
    "merge_pdfs",
    "merge_documents",
    "finalize",
    "collect_pdf_paths",
    "check_merge",
    # Data types
    "Depth",
    "DepthKind",
    "OrderMode",
    "Bookmark",
    "MergeOptions",
    "RunSuccess",
    # Exceptions
    "PdfStitchError",
    "MergeBuildError",
    "MergeCheckError",
    "MergeRunError",
    # Version info
    "__version__",
]
