"""Combine several documents into one."""

from __future__ import annotations

from .merge import merge_pdfs, mix_pdfs

__all__ = ["merge_pdfs", "mix_pdfs"]
