"""Reorder, insert and rotate pages."""

from __future__ import annotations

from .organise import reorganize_document, reorganize_pdf, rotate_document, rotate_pdf_pages

__all__ = ["reorganize_document", "reorganize_pdf", "rotate_document", "rotate_pdf_pages"]
