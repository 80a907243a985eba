"""Utility helpers for :mod:`pdfstitch`."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

PathLike = Union[str, Path]

PDF_EXTENSION = "pdf"

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")

# Windows separators count too.
_SEPARATORS = re.compile(r"[\\/]")
_DIRECTORY_REFERENCES = {".", ".."}


def ensure_path(path: PathLike) -> Path:
    """Return a :class:`~pathlib.Path` for *path* with surrounding blanks removed.

    Paths are deliberately not resolved: the validator must see the literal
    components the user typed.
    """

    if isinstance(path, Path):
        return path
    return Path(path.strip())


def ensure_iterable(paths: Iterable[PathLike]) -> list[Path]:
    """Convert an iterable of paths to :class:`Path` objects."""

    return [ensure_path(path) for path in paths]


def has_directory_reference(path: PathLike) -> bool:
    """Return ``True`` if any component of *path* is ``.`` or ``..``.

    The raw string is inspected because :class:`~pathlib.Path` silently drops
    ``.`` components.
    """

    return any(part in _DIRECTORY_REFERENCES for part in _SEPARATORS.split(str(path)))


def has_pdf_extension(path: PathLike) -> bool:
    """Return ``True`` if *path* ends with the (case-sensitive) ``.pdf`` suffix."""

    return Path(path).suffix == f".{PDF_EXTENSION}"


def find_repetition(paths: Sequence[Path]) -> Optional[Path]:
    """Return the first path that appears more than once in *paths*."""

    seen: set[Path] = set()
    for path in paths:
        if path in seen:
            return path
        seen.add(path)
    return None


def format_file_size(size_bytes: int) -> str:
    """Render a byte count for the merge summary table, e.g. ``"1.5 MB"``."""

    size = float(size_bytes)
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {_SIZE_UNITS[-1]}"


__all__ = [
    "PathLike",
    "PDF_EXTENSION",
    "ensure_path",
    "ensure_iterable",
    "has_directory_reference",
    "has_pdf_extension",
    "find_repetition",
    "format_file_size",
]
