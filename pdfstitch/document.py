"""In-memory PDF object graph used as the merge workspace.

A :class:`Document` is an arena of pypdf generic objects keyed by
``(number, generation)``. References between objects are
:class:`~pypdf.generic.IndirectObject` values bound to the owning document,
so renumbering is a single remap pass over the table instead of following
the graph.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    NullObject,
    PdfObject,
    StreamObject,
)

from .types import Bookmark, ObjectId

LOGGER = logging.getLogger("pdfstitch.document")

DEFAULT_VERSION = "1.5"

# Attributes a page may inherit from its ancestors in the page tree.
INHERITABLE_PAGE_ATTRIBUTES = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")

Reference = Union[IndirectObject, ObjectId, int]


class ObjectKind(str, Enum):
    """Classification of an object by its ``/Type`` entry."""

    CATALOG = "/Catalog"
    PAGES = "/Pages"
    PAGE = "/Page"
    OUTLINES = "/Outlines"
    OUTLINE = "/Outline"
    OTHER = "other"

    @classmethod
    def of(cls, obj: Any) -> "ObjectKind":
        if not isinstance(obj, DictionaryObject):
            return cls.OTHER
        type_name = obj.get("/Type")
        if isinstance(type_name, NameObject):
            try:
                return cls(str(type_name))
            except ValueError:
                return cls.OTHER
        return cls.OTHER


def object_id(reference: Reference) -> ObjectId:
    """Return the ``(number, generation)`` pair addressed by *reference*."""

    if isinstance(reference, IndirectObject):
        return reference.idnum, reference.generation
    if isinstance(reference, int):
        return reference, 0
    return reference


def rebind(value: Any, remap: Mapping[ObjectId, ObjectId], owner: Any) -> Any:
    """Return a copy of *value* whose references follow *remap*.

    Containers are rebuilt, scalars are returned as they are. References are
    rebound to *owner*; those missing from *remap* point at nothing and
    become ``null``.
    """

    if isinstance(value, IndirectObject):
        target = remap.get((value.idnum, value.generation))
        if target is None:
            LOGGER.debug("Dropping dangling reference %d %d R", value.idnum, value.generation)
            return NullObject()
        return IndirectObject(target[0], target[1], owner)

    if isinstance(value, StreamObject):
        stream: StreamObject
        stream = EncodedStreamObject() if "/Filter" in value else DecodedStreamObject()
        stream._data = value._data
        for key, item in value.items():
            stream[NameObject(key)] = rebind(item, remap, owner)
        return stream

    if isinstance(value, DictionaryObject):
        dictionary = DictionaryObject()
        for key, item in value.items():
            dictionary[NameObject(key)] = rebind(item, remap, owner)
        return dictionary

    if isinstance(value, ArrayObject):
        return ArrayObject(rebind(item, remap, owner) for item in value)

    return value


class Document:
    """Mutable object table with a trailer and synthetic bookmarks."""

    def __init__(self, version: str = DEFAULT_VERSION) -> None:
        self.version = version
        self.objects: Dict[ObjectId, PdfObject] = {}
        self.trailer = DictionaryObject()
        self.max_id = 0
        self.bookmarks: List[Bookmark] = []

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, reference: Reference) -> bool:
        return object_id(reference) in self.objects

    # ------------------------------------------------------------------
    # Object access
    # ------------------------------------------------------------------
    def get_object(self, reference: Reference) -> Optional[PdfObject]:
        """Return the object behind *reference* (``None`` when missing).

        :meth:`IndirectObject.get_object` delegates here for references
        bound to this document.
        """
        return self.objects.get(object_id(reference))

    def resolve(self, value: Any) -> Any:
        """Follow *value* if it is a reference, otherwise return it."""
        if isinstance(value, IndirectObject):
            return self.get_object(value)
        return value

    def reference(self, oid: ObjectId) -> IndirectObject:
        return IndirectObject(oid[0], oid[1], self)

    def add_object(self, obj: PdfObject) -> ObjectId:
        """Store *obj* under a freshly minted id and return that id."""
        self.max_id += 1
        oid = (self.max_id, 0)
        self.objects[oid] = obj
        return oid

    def set_object(self, oid: ObjectId, obj: PdfObject) -> None:
        self.objects[oid] = obj
        self.max_id = max(self.max_id, oid[0])

    def refresh_max_id(self) -> int:
        self.max_id = max((number for number, _ in self.objects), default=0)
        return self.max_id

    @property
    def catalog_id(self) -> Optional[ObjectId]:
        root = self.trailer.get("/Root")
        if isinstance(root, IndirectObject):
            return object_id(root)
        return None

    @property
    def catalog(self) -> Optional[DictionaryObject]:
        oid = self.catalog_id
        if oid is None:
            return None
        catalog = self.objects.get(oid)
        return catalog if isinstance(catalog, DictionaryObject) else None

    # ------------------------------------------------------------------
    # Renumbering
    # ------------------------------------------------------------------
    def renumber(self, remap: Mapping[ObjectId, ObjectId]) -> None:
        """Move every object to ``remap[old_id]`` and fix every reference.

        Objects without an entry in *remap* are dropped.
        """
        objects: Dict[ObjectId, PdfObject] = {}
        for oid, obj in self.objects.items():
            new_id = remap.get(oid)
            if new_id is None:
                continue
            objects[new_id] = rebind(obj, remap, self)
        self.objects = objects
        self.trailer = rebind(self.trailer, remap, self)
        for bookmark in self.bookmarks:
            if bookmark.page is not None:
                bookmark.page = remap.get(bookmark.page)
        self.refresh_max_id()

    def renumber_objects_with(self, offset: int) -> None:
        """Shift every object number by *offset*."""
        if offset == 0:
            return
        self.renumber({(number, generation): (number + offset, generation) for number, generation in self.objects})

    def renumber_objects(self) -> None:
        """Renumber contiguously from 1 in the current id order."""
        remap = {oid: (index, 0) for index, oid in enumerate(sorted(self.objects), start=1)}
        self.renumber(remap)

    # ------------------------------------------------------------------
    # Page tree
    # ------------------------------------------------------------------
    def iter_pages(self) -> Iterator[Tuple[ObjectId, Dict[str, Any]]]:
        """Yield ``(page_id, inherited)`` for every page in tree order.

        *inherited* holds the inheritable attributes found on the page's
        ancestors; it is empty when the page tree is flat.
        """
        catalog = self.catalog
        if catalog is None:
            return
        root = catalog.get("/Pages")
        if not isinstance(root, IndirectObject):
            return
        yield from self._walk(object_id(root), {}, set())

    def _walk(
        self,
        node_id: ObjectId,
        inherited: Dict[str, Any],
        visited: set[ObjectId],
    ) -> Iterator[Tuple[ObjectId, Dict[str, Any]]]:
        if node_id in visited:
            LOGGER.warning("Page tree cycle detected at object %d %d", *node_id)
            return
        visited.add(node_id)

        node = self.objects.get(node_id)
        if not isinstance(node, DictionaryObject):
            return

        if ObjectKind.of(node) is ObjectKind.PAGE or "/Kids" not in node:
            yield node_id, inherited
            return

        attributes = dict(inherited)
        for key in INHERITABLE_PAGE_ATTRIBUTES:
            if key in node:
                attributes[key] = node.raw_get(key)

        kids = self.resolve(node.get("/Kids"))
        if not isinstance(kids, ArrayObject):
            return
        for kid in kids:
            if isinstance(kid, IndirectObject):
                yield from self._walk(object_id(kid), attributes, visited)

    def page_ids(self) -> List[ObjectId]:
        return [page_id for page_id, _ in self.iter_pages()]

    def add_bookmark(self, bookmark: Bookmark) -> None:
        self.bookmarks.append(bookmark)


__all__ = [
    "Document",
    "ObjectKind",
    "ObjectId",
    "DEFAULT_VERSION",
    "INHERITABLE_PAGE_ATTRIBUTES",
    "object_id",
    "rebind",
]
