"""Structural compression with a pluggable image codec."""

from __future__ import annotations

from .compress import ImageCodec, compress_pdf, image_candidates

__all__ = ["ImageCodec", "compress_pdf", "image_candidates"]
