"""Helpers for computing split chunks and output names."""

from __future__ import annotations

from typing import List

from ...exceptions import PDFValidationError
from ...types import PageRange, SplitMode


def chunk_ranges(page_count: int, mode: SplitMode) -> List[PageRange]:
    """Partition ``1..page_count`` into consecutive runs of ``mode.chunk_size`` pages."""

    size = mode.chunk_size
    return [
        PageRange(start, min(start + size - 1, page_count))
        for start in range(1, page_count + 1, size)
    ]


def part_name(stem: str, index: int) -> str:
    return f"{stem}_part{index}.pdf"


def coerce_mode(value: object, n: object = None) -> SplitMode:
    """Build a :class:`SplitMode` from a mode instance or a mode name."""

    if isinstance(value, SplitMode):
        return value
    if value is None or value == "one_per_page":
        return SplitMode.one_per_page()
    if value == "every_n":
        if n is None:
            return SplitMode.every_n(1)
        try:
            return SplitMode.every_n(int(n))
        except (TypeError, ValueError) as exc:
            raise PDFValidationError(f"Chunk size must be a whole number, got {n!r}") from exc
    raise PDFValidationError(f"Unsupported split mode: {value}")
