"""
Custom exceptions for Paradise PDF.

Every failure surfaced by the engine derives from :class:`ParadisePDFError`
and falls into one of four families: I/O, format, validation and path.
"""

from __future__ import annotations

from pathlib import Path


class ParadisePDFError(Exception):
    """Base exception for all Paradise PDF errors."""

    def __init__(self, message: str = "", *, path: str | Path | None = None) -> None:
        text = message or self.default_message
        if path is not None:
            text = f"{text} ({path})"
        super().__init__(text)
        self.message = text
        self.path = Path(path) if path is not None else None

    @property
    def default_message(self) -> str:
        return "An unknown PDF error occurred."


class PDFIOError(ParadisePDFError):
    """Raised when a file cannot be read or written."""

    @property
    def default_message(self) -> str:
        return "Unable to access file."


class PDFFormatError(ParadisePDFError):
    """Raised when the object graph cannot be parsed, even after repair."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class DanglingReferenceError(PDFFormatError):
    """Raised when a required reference points at an object that does not exist."""

    @property
    def default_message(self) -> str:
        return "Reference points at a missing object."


class PDFValidationError(ParadisePDFError):
    """Raised when an operation-specific precondition fails."""

    @property
    def default_message(self) -> str:
        return "Operation precondition failed."


class EncryptedPDFError(PDFValidationError):
    """Raised when a PDF is encrypted and the supplied password does not open it."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be processed without a password."


class CompressionError(PDFValidationError):
    """Raised when compression settings are rejected."""

    @property
    def default_message(self) -> str:
        return "Compression failed."


class PDFPathError(ParadisePDFError):
    """Raised when a path is not the expected kind of filesystem entry."""

    @property
    def default_message(self) -> str:
        return "Path is not a file."


__all__ = [
    "ParadisePDFError",
    "PDFIOError",
    "PDFFormatError",
    "DanglingReferenceError",
    "PDFValidationError",
    "EncryptedPDFError",
    "CompressionError",
    "PDFPathError",
]
