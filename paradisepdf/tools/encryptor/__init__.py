"""Password protection and unlocking."""

from __future__ import annotations

from .encrypt import is_pdf_encrypted, protect_pdf, unlock_pdf

__all__ = ["is_pdf_encrypted", "protect_pdf", "unlock_pdf"]
