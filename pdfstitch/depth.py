"""Directory recursion bound used when an input argument is a directory."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import UnparseableDepthError

INFINITE_TOKEN = "*"

_DIGITS = re.compile(r"^[0-9]+$")


class DepthKind(str, Enum):
    """How far directory inputs are expanded."""

    NOT_SPECIFIED = "not-specified"
    MAX = "max"
    INFINITE = "infinite"


@dataclass(frozen=True)
class Depth:
    """
    Recursion bound for the path collector.

    Attributes:
        kind: One of :class:`DepthKind`.
        limit: Number of directory layers to descend, only set for
            :attr:`DepthKind.MAX` (always >= 1).
    """

    kind: DepthKind = DepthKind.NOT_SPECIFIED
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is DepthKind.MAX:
            if self.limit is None or self.limit < 1:
                raise ValueError("Depth limit must be >= 1")
        elif self.limit is not None:
            raise ValueError(f"Depth limit is only valid for {DepthKind.MAX.value!r}")

    @classmethod
    def not_specified(cls) -> "Depth":
        return cls()

    @classmethod
    def until(cls, limit: int) -> "Depth":
        return cls(DepthKind.MAX, limit)

    @classmethod
    def infinite(cls) -> "Depth":
        return cls(DepthKind.INFINITE)

    @classmethod
    def parse(cls, value: Optional[str]) -> "Depth":
        """
        Parse a CLI depth token.

        ``None`` means the flag was not given, ``"*"`` is unbounded and any
        positive integer limits the expansion to that many layers.

        Raises:
            UnparseableDepthError: For ``"0"`` or any non numeric token.
        """
        if value is None:
            return cls.not_specified()

        token = value.strip()
        if token == INFINITE_TOKEN:
            return cls.infinite()
        if not _DIGITS.match(token) or int(token) == 0:
            raise UnparseableDepthError(token)
        return cls.until(int(token))

    @property
    def is_specified(self) -> bool:
        return self.kind is not DepthKind.NOT_SPECIFIED

    def exceeded_by(self, cur_depth: int) -> bool:
        """Return ``True`` when *cur_depth* lies beyond this bound."""
        if self.kind is DepthKind.INFINITE:
            return False
        if self.kind is DepthKind.MAX:
            return cur_depth > self.limit
        # Without a depth no directory layer may be entered.
        return cur_depth > 0

    def __str__(self) -> str:
        if self.kind is DepthKind.MAX:
            return str(self.limit)
        if self.kind is DepthKind.INFINITE:
            return INFINITE_TOKEN
        return "not specified"


__all__ = ["Depth", "DepthKind", "INFINITE_TOKEN"]
