"""Object graph merge of several independently numbered PDF documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject, PdfObject

from .backends import PDFBackend, PypdfBackend
from .document import Document, ObjectKind
from .exceptions import CatalogIsNoneError, RootPageNotFoundError
from .types import Bookmark, ObjectId
from .utils import PathLike, ensure_iterable

LOGGER = logging.getLogger("pdfstitch.merge")

BOOKMARK_TITLE = "Page_{number}"

# Keys rebuilt from scratch once every source has been visited.
_REBUILT_PAGES_KEYS = ("/Kids", "/Count", "/Parent")


def _version_key(version: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError:
        return (0,)


class DocumentMerger:
    """Combine the object graphs of several PDF files into one document.

    Every source is renumbered past the ids already in use, its pages are
    collected in page-tree order and its objects are dispatched by
    :class:`~pdfstitch.document.ObjectKind`: the first catalog and the first
    page tree root become canonical, outlines are dropped and everything else
    is copied as is. The page tree of the result is flat.
    """

    def __init__(self, backend: Optional[PDFBackend] = None) -> None:
        self.backend: PDFBackend = backend or PypdfBackend()
        self._handlers: Mapping[ObjectKind, Callable[[ObjectId, PdfObject], None]] = {
            ObjectKind.CATALOG: self._take_catalog,
            ObjectKind.PAGES: self._take_pages,
            ObjectKind.PAGE: self._skip_page,
            ObjectKind.OUTLINES: self._discard_outline,
            ObjectKind.OUTLINE: self._discard_outline,
            ObjectKind.OTHER: self._copy_object,
        }
        self._reset()

    @property
    def handled_kinds(self) -> frozenset[ObjectKind]:
        return frozenset(self._handlers)

    def _reset(self) -> None:
        self._target = Document()
        self._catalog: Optional[Tuple[ObjectId, DictionaryObject]] = None
        self._pages: Optional[Tuple[ObjectId, DictionaryObject]] = None
        self._page_map: Dict[ObjectId, DictionaryObject] = {}

    # ------------------------------------------------------------------
    # Per kind handlers
    # ------------------------------------------------------------------
    def _take_catalog(self, oid: ObjectId, obj: PdfObject) -> None:
        if self._catalog is None:
            self._catalog = (oid, obj)
        else:
            LOGGER.debug("Discarding catalog %d %d", *oid)

    def _take_pages(self, oid: ObjectId, obj: PdfObject) -> None:
        if self._pages is None:
            self._pages = (oid, DictionaryObject(obj))
            return
        # Fields seen earlier win over the ones of later page tree nodes.
        canonical_id, accumulated = self._pages
        merged = DictionaryObject(obj)
        merged.update(accumulated)
        self._pages = (canonical_id, merged)

    def _skip_page(self, oid: ObjectId, obj: PdfObject) -> None:
        """Pages are taken from the page tree walk, not from the object table."""

    def _discard_outline(self, oid: ObjectId, obj: PdfObject) -> None:
        LOGGER.debug("Discarding outline object %d %d", *oid)

    def _copy_object(self, oid: ObjectId, obj: PdfObject) -> None:
        self._target.set_object(oid, obj)

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------
    def _collect_pages(self, source: Document, bookmark_number: int) -> None:
        first = True
        for page_id, inherited in source.iter_pages():
            page = DictionaryObject(source.objects[page_id])
            for key, value in inherited.items():
                if key not in page:
                    page[NameObject(key)] = value
            if first:
                self._target.add_bookmark(
                    Bookmark(BOOKMARK_TITLE.format(number=bookmark_number), page_id)
                )
                first = False
            self._page_map[page_id] = page

        if first:
            LOGGER.warning("Source document has no pages, its bookmark has no target yet")
            self._target.add_bookmark(Bookmark(BOOKMARK_TITLE.format(number=bookmark_number), None))

    def _absorb(self, source: Document) -> None:
        if _version_key(source.version) > _version_key(self._target.version):
            self._target.version = source.version
        if "/Info" in source.trailer and "/Info" not in self._target.trailer:
            self._target.trailer[NameObject("/Info")] = source.trailer.raw_get("/Info")

        for oid in sorted(source.objects):
            obj = source.objects[oid]
            self._handlers[ObjectKind.of(obj)](oid, obj)

    def merge(self, inputs: Iterable[PathLike]) -> Document:
        """Load and merge *inputs* in order, returning the combined document.

        Raises:
            CouldNotLoadInputError: If a source cannot be decoded.
            RootPageNotFoundError: If no source has a page tree root.
            CatalogIsNoneError: If no source has a catalog.
        """

        self._reset()
        paths: Sequence[Path] = ensure_iterable(inputs)
        next_id = 1

        for number, path in enumerate(paths, start=1):
            LOGGER.debug("Processing input PDF %s", path)
            source = self.backend.load(path)
            source.renumber_objects_with(next_id - 1)
            next_id = source.max_id + 1

            self._collect_pages(source, number)
            self._absorb(source)

        target = self._target
        target.max_id = max(target.max_id, next_id - 1)

        if self._pages is None:
            LOGGER.error("No page tree root found in %d input(s)", len(paths))
            raise RootPageNotFoundError()
        pages_id, pages = self._pages
        pages_ref = target.reference(pages_id)

        for page_id, page in self._page_map.items():
            page[NameObject("/Parent")] = pages_ref
            target.set_object(page_id, page)

        if self._catalog is None:
            LOGGER.error("No catalog found in %d input(s)", len(paths))
            raise CatalogIsNoneError()
        catalog_id, catalog_obj = self._catalog

        for key in _REBUILT_PAGES_KEYS:
            pages.pop(key, None)
        pages[NameObject("/Type")] = NameObject(ObjectKind.PAGES.value)
        pages[NameObject("/Count")] = NumberObject(len(self._page_map))
        pages[NameObject("/Kids")] = ArrayObject(target.reference(page_id) for page_id in self._page_map)
        target.set_object(pages_id, pages)

        catalog = DictionaryObject(catalog_obj)
        catalog[NameObject("/Pages")] = pages_ref
        catalog.pop("/Outlines", None)
        target.set_object(catalog_id, catalog)

        target.trailer[NameObject("/Root")] = target.reference(catalog_id)

        LOGGER.info("Merged %d page(s) from %d input(s)", len(self._page_map), len(paths))
        return target


def merge_documents(inputs: Iterable[PathLike], backend: Optional[PDFBackend] = None) -> Document:
    """Convenience wrapper around :meth:`DocumentMerger.merge`."""

    return DocumentMerger(backend).merge(inputs)


__all__ = ["DocumentMerger", "merge_documents", "BOOKMARK_TITLE"]
