"""Merge order applied to the collected source files."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .exceptions import EntryDoesNotExistError, UnparseableOrderModeError


def _modified_time(path: Path) -> float:
    try:
        return os.stat(path).st_mtime
    except OSError as exc:
        raise EntryDoesNotExistError(path=path) from exc


class OrderMode(str, Enum):
    """Decide how to order the collected inputs before merging."""

    ALPHA = "alpha"
    DATETIME = "datetime"
    DEFAULT = "def"

    @classmethod
    def parse(cls, value: Optional[str]) -> "OrderMode":
        if value is None:
            return cls.DEFAULT
        token = value.strip().lower()
        try:
            return cls(token)
        except ValueError:
            raise UnparseableOrderModeError(token) from None

    def apply(self, paths: Sequence[Path]) -> List[Path]:
        """Return *paths* sorted according to this mode.

        Raises:
            EntryDoesNotExistError: If a file is gone before its timestamp is read.
        """

        if self is OrderMode.ALPHA:
            return sorted(paths, key=str)
        if self is OrderMode.DATETIME:
            # sorted() is stable: equal timestamps keep collector order
            return sorted(paths, key=_modified_time)
        return list(paths)


__all__ = ["OrderMode"]
