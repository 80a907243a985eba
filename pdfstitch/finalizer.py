"""Post-merge passes that turn a merged object graph into a saveable document."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, List, Optional, Set

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    StreamObject,
    TextStringObject,
)

from .document import Document, ObjectKind, object_id
from .types import Bookmark, ObjectId

LOGGER = logging.getLogger("pdfstitch.finalize")


def adjust_zero_pages(document: Document) -> int:
    """Point bookmarks without a valid page at the first page.

    Returns the number of bookmarks that were retargeted.
    """

    page_ids = document.page_ids()
    first_page: Optional[ObjectId] = page_ids[0] if page_ids else None
    known = set(page_ids)
    adjusted = 0
    for bookmark in document.bookmarks:
        if bookmark.page in known:
            continue
        bookmark.page = first_page
        adjusted += 1
    if adjusted:
        LOGGER.debug("Retargeted %d bookmark(s) to the first page", adjusted)
    return adjusted


def _outline_item(document: Document, bookmark: Bookmark, parent: IndirectObject) -> DictionaryObject:
    item = DictionaryObject()
    item[NameObject("/Title")] = TextStringObject(bookmark.title)
    item[NameObject("/Parent")] = parent
    item[NameObject("/Dest")] = ArrayObject(
        [document.reference(bookmark.page), NameObject("/Fit")]
    )
    item[NameObject("/C")] = ArrayObject(FloatObject(channel) for channel in bookmark.color)
    item[NameObject("/F")] = NumberObject(bookmark.flags)
    return item


def build_outline(document: Document) -> Optional[ObjectId]:
    """Attach a flat outline built from ``document.bookmarks`` to the catalog.

    Bookmarks that still have no page (the document has no pages at all)
    are left out. Returns the id of the outline root, or ``None`` when no
    outline was written.
    """

    catalog = document.catalog
    if catalog is None:
        return None
    bookmarks: List[Bookmark] = [bookmark for bookmark in document.bookmarks if bookmark.page is not None]
    if not bookmarks:
        catalog.pop("/Outlines", None)
        return None

    root = DictionaryObject({NameObject("/Type"): NameObject(ObjectKind.OUTLINES.value)})
    root_id = document.add_object(root)
    root_ref = document.reference(root_id)

    item_ids = [document.add_object(_outline_item(document, bookmark, root_ref)) for bookmark in bookmarks]
    for index, item_id in enumerate(item_ids):
        item = document.objects[item_id]
        if index > 0:
            item[NameObject("/Prev")] = document.reference(item_ids[index - 1])
        if index < len(item_ids) - 1:
            item[NameObject("/Next")] = document.reference(item_ids[index + 1])

    root[NameObject("/First")] = document.reference(item_ids[0])
    root[NameObject("/Last")] = document.reference(item_ids[-1])
    root[NameObject("/Count")] = NumberObject(len(item_ids))
    catalog[NameObject("/Outlines")] = root_ref
    LOGGER.debug("Built outline with %d item(s)", len(item_ids))
    return root_id


def _references(value: Any) -> List[ObjectId]:
    found: List[ObjectId] = []
    pending = [value]
    while pending:
        current = pending.pop()
        if isinstance(current, IndirectObject):
            found.append(object_id(current))
        elif isinstance(current, DictionaryObject):
            pending.extend(current.values())
        elif isinstance(current, ArrayObject):
            pending.extend(current)
    return found


def prune_unreferenced(document: Document) -> int:
    """Drop every object not reachable from the trailer.

    Returns the number of removed objects.
    """

    reachable: Set[ObjectId] = set()
    queue = deque(_references(document.trailer))
    while queue:
        oid = queue.popleft()
        if oid in reachable or oid not in document.objects:
            continue
        reachable.add(oid)
        queue.extend(_references(document.objects[oid]))

    removed = [oid for oid in document.objects if oid not in reachable]
    for oid in removed:
        del document.objects[oid]
    if removed:
        LOGGER.debug("Pruned %d unreferenced object(s)", len(removed))
        document.renumber_objects()
    return len(removed)


def compress_streams(document: Document) -> int:
    """Flate-encode streams that carry no filter, when it makes them smaller."""

    compressed = 0
    for oid, obj in list(document.objects.items()):
        if not isinstance(obj, StreamObject) or "/Filter" in obj:
            continue
        encoded = obj.flate_encode()
        if len(encoded._data) < len(obj._data):
            document.objects[oid] = encoded
            compressed += 1
    return compressed


def compress(document: Document) -> None:
    removed = prune_unreferenced(document)
    compressed = compress_streams(document)
    LOGGER.debug("Compression removed %d object(s), encoded %d stream(s)", removed, compressed)


def finalize(document: Document) -> Document:
    """Run the post-merge passes on *document* in place and return it.

    1. renumber every object contiguously from 1
    2. retarget bookmarks that point nowhere to the first page
    3. build the outline from the bookmarks
    4. prune unreachable objects and compress streams
    """

    document.max_id = len(document.objects)
    document.renumber_objects()
    adjust_zero_pages(document)
    build_outline(document)
    compress(document)
    LOGGER.info(
        "Finalized document: %d object(s), %d bookmark(s)", len(document), len(document.bookmarks)
    )
    return document


__all__ = [
    "adjust_zero_pages",
    "build_outline",
    "compress",
    "compress_streams",
    "finalize",
    "prune_unreferenced",
]
