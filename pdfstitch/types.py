"""
Type definitions and dataclasses for PDF Stitch.

This module defines data structures shared by the merge pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .depth import Depth
from .ordering import OrderMode

ObjectId = Tuple[int, int]

BOOKMARK_BLUE: Tuple[float, float, float] = (0.0, 0.0, 1.0)


@dataclass
class Bookmark:
    """
    Synthetic outline entry marking where a source document begins.

    Attributes:
        title: Text shown in the outline panel
        color: RGB components in the 0-1 range
        flags: Outline item flags (1 italic, 2 bold)
        page: Object id of the target page, ``None`` when the source
            document had no pages
    """
    title: str
    page: Optional[ObjectId]
    color: Tuple[float, float, float] = BOOKMARK_BLUE
    flags: int = 0


@dataclass(frozen=True)
class MergeOptions:
    """
    Policy flags controlling a merge run.

    Attributes:
        override: Replace the output file if it already exists
        allow_repetition: Accept the same input more than once
        create_parent_dirs: Create missing directories of the output path
        depth: How many directory layers are expanded
        order: Order applied to the collected files
    """
    override: bool = False
    allow_repetition: bool = False
    create_parent_dirs: bool = False
    depth: Depth = field(default_factory=Depth.not_specified)
    order: OrderMode = OrderMode.DEFAULT


@dataclass
class RunSuccess:
    """
    Result of a successful merge run.

    Attributes:
        files: Merged source files, in merge order
        seconds: Elapsed wall-clock time
        output: Path of the written document
    """
    files: List[Path]
    seconds: float
    output: Path

    def __str__(self) -> str:
        return f"merged successfully ({len(self.files)} files)"


__all__ = ["ObjectId", "Bookmark", "MergeOptions", "RunSuccess", "BOOKMARK_BLUE"]
