"""pypdf backend implementation for PDF Stitch."""

from __future__ import annotations

import io
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, List

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import DictionaryObject, IndirectObject, NameObject, NumberObject, StreamObject

from ..document import DEFAULT_VERSION, Document, rebind
from ..exceptions import CouldNotLoadInputError, CouldNotSaveTheOutputError
from ..types import ObjectId
from .base import PDFBackend

LOGGER = logging.getLogger("pdfstitch.backend")

_HEADER_VERSION = re.compile(r"%PDF-(\d+\.\d+)")

# Serialization containers: their content is already expanded by the reader.
_CONTAINER_TYPES = {"/XRef", "/ObjStm"}

_BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


def _header_version(header: str) -> str:
    match = _HEADER_VERSION.match(header)
    return match.group(1) if match else DEFAULT_VERSION


def _object_ids(reader: PdfReader) -> List[ObjectId]:
    ids: set[ObjectId] = set()
    for generation, entries in reader.xref.items():
        free = reader.xref_free_entry.get(generation, {})
        for number in entries:
            if number > 0 and not free.get(number, False):
                ids.add((number, generation))
    ids.update((number, 0) for number in reader.xref_objStm)
    return sorted(ids)


def read_document(reader: PdfReader) -> Document:
    """Copy every indirect object of *reader* into a new :class:`Document`."""

    document = Document(version=_header_version(reader.pdf_header))
    raw_objects = {}
    for oid in _object_ids(reader):
        obj = reader.get_object(IndirectObject(oid[0], oid[1], reader))
        if obj is None:
            continue
        if isinstance(obj, StreamObject) and obj.get("/Type") in _CONTAINER_TYPES:
            continue
        raw_objects[oid] = obj

    identity = {oid: oid for oid in raw_objects}
    for oid, obj in raw_objects.items():
        document.set_object(oid, rebind(obj, identity, document))

    trailer = DictionaryObject()
    for key in ("/Root", "/Info"):
        if key in reader.trailer:
            trailer[NameObject(key)] = reader.trailer.raw_get(key)
    document.trailer = rebind(trailer, identity, document)
    return document


def write_document(document: Document, stream: BinaryIO) -> None:
    """Write *document* as a complete PDF file with a classic xref table."""

    stream.write(f"%PDF-{document.version}\n".encode())
    stream.write(_BINARY_MARKER)

    offsets: Dict[int, tuple[int, int]] = {}
    for oid in sorted(document.objects):
        number, generation = oid
        offsets[number] = (stream.tell(), generation)
        stream.write(f"{number} {generation} obj\n".encode())
        document.objects[oid].write_to_stream(stream)
        stream.write(b"\nendobj\n")

    size = max(offsets, default=0) + 1
    xref_offset = stream.tell()
    stream.write(f"xref\n0 {size}\n".encode())
    stream.write(b"0000000000 65535 f \n")
    for number in range(1, size):
        offset, generation = offsets.get(number, (0, 0))
        state = "n" if number in offsets else "f"
        stream.write(f"{offset:010d} {generation:05d} {state} \n".encode())

    trailer = DictionaryObject()
    trailer[NameObject("/Size")] = NumberObject(size)
    for key in ("/Root", "/Info"):
        if key in document.trailer:
            trailer[NameObject(key)] = document.trailer.raw_get(key)
    stream.write(b"trailer\n")
    trailer.write_to_stream(stream)
    stream.write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode())


def _apply_output_mode(temp_path: Path, path: Path) -> None:
    """Give *temp_path* the permissions *path* has, or would get when created."""

    if path.exists():
        shutil.copymode(path, temp_path)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(temp_path, 0o666 & ~umask)


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, pdf_path: Path) -> Document:
        path = Path(pdf_path)
        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            LOGGER.error("Unable to read PDF file %s: %s", path, exc)
            raise CouldNotLoadInputError(path=path) from exc

        try:
            reader = PdfReader(io.BytesIO(raw_bytes))
            if reader.is_encrypted:
                raise CouldNotLoadInputError(
                    f"encrypted pdf files aren't supported (`{path}`)", path=path
                )
            document = read_document(reader)
        except CouldNotLoadInputError:
            raise
        except PdfReadError as exc:
            LOGGER.error("Corrupted or invalid PDF file %s: %s", path, exc)
            raise CouldNotLoadInputError(path=path) from exc
        except Exception as exc:  # pragma: no cover - decoder errors vary
            LOGGER.error("Unexpected error reading PDF %s: %s", path, exc)
            raise CouldNotLoadInputError(path=path) from exc

        LOGGER.debug(
            "Loaded %s: version %s, %d object(s)", path, document.version, len(document)
        )
        return document

    def save(self, document: Document, destination: Path) -> None:
        path = Path(destination)
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", delete=False, dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp"
            ) as handle:
                temp_path = Path(handle.name)
                write_document(document, handle)
            _apply_output_mode(temp_path, path)
            temp_path.replace(path)
        except Exception as exc:
            LOGGER.error("Failed to write merged PDF to %s: %s", path, exc)
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise CouldNotSaveTheOutputError(path=path) from exc

        LOGGER.info("Wrote %s", path)
