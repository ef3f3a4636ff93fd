"""Read-only document inspection."""

from __future__ import annotations

from .inspect import organiser_metadata, page_boxes, pdf_properties, raw_diagnostics

__all__ = ["organiser_metadata", "page_boxes", "pdf_properties", "raw_diagnostics"]
