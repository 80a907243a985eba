from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfstitch.document import Document  # noqa: E402


def write_pdf(path: Path, pages: int = 1, title: str | None = None, width: float = 72) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=width, height=72)
    if title is not None:
        writer.add_metadata({"/Title": title})
    with path.open("wb") as handle:
        writer.write(handle)
    return path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, pages: int = 1, title: str | None = None, width: float = 72) -> Path:
        return write_pdf(tmp_path / filename, pages=pages, title=title, width=width)

    return _create


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    return write_pdf(tmp_path / "empty.pdf", pages=0)


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", pages=2, title="Document One", width=100)
    pdf2 = pdf_factory("two.pdf", pages=3, width=200)
    return [pdf1, pdf2]


@pytest.fixture()
def pdf_tree(tmp_path: Path) -> Path:
    """``dirX`` holding ``a.pdf``, ``b.pdf``, ``notes.txt`` and ``dirY/c.pdf``."""

    root = tmp_path / "dirX"
    write_pdf(root / "a.pdf")
    write_pdf(root / "b.pdf")
    write_pdf(root / "dirY" / "c.pdf")
    (root / "notes.txt").write_text("not a pdf", encoding="utf-8")
    return root


def build_document(pages: int = 1, pages_fields: dict | None = None, nested: bool = False) -> Document:
    """Return a :class:`~pdfstitch.document.Document` with a minimal page tree.

    Object 1 is the catalog and object 2 the page tree root. With *nested*
    the pages hang below an intermediate node carrying ``/MediaBox``.
    """

    document = Document()
    catalog_id, root_id = (1, 0), (2, 0)
    parent_id = (3, 0) if nested else root_id
    first_page = 4 if nested else 3
    page_ids = [(first_page + index, 0) for index in range(pages)]

    for page_id in page_ids:
        page = DictionaryObject()
        page[NameObject("/Type")] = NameObject("/Page")
        page[NameObject("/Parent")] = document.reference(parent_id)
        if not nested:
            page[NameObject("/MediaBox")] = ArrayObject(NumberObject(v) for v in (0, 0, 72, 72))
        document.set_object(page_id, page)

    def pages_node(kids, parent=None):
        node = DictionaryObject()
        node[NameObject("/Type")] = NameObject("/Pages")
        node[NameObject("/Kids")] = ArrayObject(document.reference(kid) for kid in kids)
        node[NameObject("/Count")] = NumberObject(len(page_ids))
        if parent is not None:
            node[NameObject("/Parent")] = document.reference(parent)
        return node

    if nested:
        root = pages_node([parent_id])
        inner = pages_node(page_ids, parent=root_id)
        inner[NameObject("/MediaBox")] = ArrayObject(NumberObject(v) for v in (0, 0, 144, 144))
        document.set_object(parent_id, inner)
    else:
        root = pages_node(page_ids)
    for key, value in (pages_fields or {}).items():
        root[NameObject(key)] = value
    document.set_object(root_id, root)

    catalog = DictionaryObject()
    catalog[NameObject("/Type")] = NameObject("/Catalog")
    catalog[NameObject("/Pages")] = document.reference(root_id)
    document.set_object(catalog_id, catalog)
    document.trailer[NameObject("/Root")] = document.reference(catalog_id)
    return document


class MemoryBackend:
    """Backend serving pre-built documents by path; saved documents are kept."""

    def __init__(self, documents: dict) -> None:
        self.documents = {Path(path): factory for path, factory in documents.items()}
        self.saved: dict = {}

    def load(self, pdf_path: Path) -> Document:
        return self.documents[Path(pdf_path)]()

    def save(self, document: Document, destination: Path) -> None:
        self.saved[Path(destination)] = document


@pytest.fixture()
def document_factory() -> Callable[..., Document]:
    return build_document


@pytest.fixture()
def memory_backend() -> Callable[[dict], MemoryBackend]:
    return MemoryBackend
