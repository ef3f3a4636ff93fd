"""Split a document into standalone parts."""

from __future__ import annotations

from .split import extract_range, page_count, split_pdf, split_preview
from .utils import chunk_ranges, part_name

__all__ = ["chunk_ranges", "extract_range", "page_count", "part_name", "split_pdf", "split_preview"]
