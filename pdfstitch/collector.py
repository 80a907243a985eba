"""Depth-bounded expansion of file and directory inputs into PDF paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Sequence

from .depth import Depth
from .exceptions import CouldNotReadEntryError, EntryDoesNotExistError
from .utils import PathLike, ensure_path, has_pdf_extension

LOGGER = logging.getLogger("pdfstitch.collector")


def _list_directory(directory: Path) -> List[Path]:
    try:
        with os.scandir(directory) as entries:
            children = [Path(entry.path) for entry in entries]
    except OSError as exc:
        LOGGER.error("Failed to read directory %s: %s", directory, exc)
        raise CouldNotReadEntryError(path=directory) from exc
    # os.scandir order is filesystem dependent.
    return sorted(children, key=lambda child: child.name)


def collect_pdf_paths(
    entries: Sequence[PathLike],
    depth: Depth,
    cur_depth: int = 0,
) -> List[Path]:
    """Expand *entries* into an ordered list of ``.pdf`` file paths.

    Files ending in ``.pdf`` are kept as they are, directories are listed and
    their children collected one layer deeper. Once *cur_depth* goes past the
    limit of *depth* nothing more is collected. Entries that are neither a
    pdf file nor a directory are ignored.

    Args:
        entries: Files and directories, in the order they should be merged.
        depth: Recursion bound for directory entries.
        cur_depth: Layer of *entries* (``0`` for the literal CLI arguments).

    Raises:
        EntryDoesNotExistError: If an entry is missing.
        CouldNotReadEntryError: If a directory cannot be listed.
    """

    if depth.exceeded_by(cur_depth):
        LOGGER.debug("Depth %s exceeded at layer %d", depth, cur_depth)
        return []

    collected: List[Path] = []
    for entry in entries:
        path = ensure_path(entry)
        if not path.exists():
            LOGGER.error("Input entry %s does not exist", path)
            raise EntryDoesNotExistError(path=path)

        if path.is_file():
            if has_pdf_extension(path):
                LOGGER.debug("Collected %s (layer %d)", path, cur_depth)
                collected.append(path)
            else:
                LOGGER.debug("Skipping non pdf file %s", path)
        elif path.is_dir():
            children = _list_directory(path)
            collected.extend(collect_pdf_paths(children, depth, cur_depth + 1))

    if cur_depth == 0:
        LOGGER.info("Collected %d pdf file(s) from %d input(s)", len(collected), len(entries))
    return collected


__all__ = ["collect_pdf_paths"]
