"""Paradise PDF: a PDF object-graph engine for splitting, merging, mixing,
reorganizing, rotating, protecting and inspecting documents.

Quick Start:
    >>> from paradisepdf import SplitMode, split_pdf, merge_pdfs
    >>> parts = split_pdf('input.pdf', 'out/', SplitMode.every_n(3))
    >>> merge_pdfs(parts, 'rejoined.pdf')

Every operation is also registered as a tool and can be driven through
:data:`registry` with a :class:`ConversionContext`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .exceptions import (
    CompressionError,
    DanglingReferenceError,
    EncryptedPDFError,
    ParadisePDFError,
    PDFFormatError,
    PDFIOError,
    PDFPathError,
    PDFValidationError,
)
from .tools import load_builtin_plugins
from .tools.common.interfaces import BaseTool, ConversionContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry
from .tools.compressor import ImageCodec, compress_pdf
from .tools.encryptor import is_pdf_encrypted, protect_pdf, unlock_pdf
from .tools.inspector import organiser_metadata, page_boxes, pdf_properties, raw_diagnostics
from .tools.merger import merge_pdfs, mix_pdfs
from .tools.organiser import reorganize_pdf, rotate_pdf_pages
from .tools.splitter import page_count, split_pdf, split_preview
from .types import (
    CompressionResult,
    CompressionSettings,
    EncodedImage,
    ImageCandidate,
    ImageInfo,
    PageAction,
    PageBoxes,
    PageMetadata,
    PageRange,
    PdfDiagnostics,
    PdfProperties,
    SplitMode,
    SplitPreview,
    SplitPreviewItem,
)

__version__ = "1.0.0"

load_builtin_plugins()

__all__ = [
    "page_count",
    "split_preview",
    "split_pdf",
    "merge_pdfs",
    "mix_pdfs",
    "reorganize_pdf",
    "rotate_pdf_pages",
    "protect_pdf",
    "unlock_pdf",
    "is_pdf_encrypted",
    "page_boxes",
    "organiser_metadata",
    "pdf_properties",
    "raw_diagnostics",
    "compress_pdf",
    "split_document",
    "merge_documents",
    "mix_documents",
    "protect_document",
    "unlock_document",
    "compress_document",
    "ConversionContext",
    "BaseTool",
    "ToolRegistry",
    "registry",
    "register_tool",
    "ImageCodec",
    "CompressionResult",
    "CompressionSettings",
    "EncodedImage",
    "ImageCandidate",
    "ImageInfo",
    "PageAction",
    "PageBoxes",
    "PageMetadata",
    "PageRange",
    "PdfDiagnostics",
    "PdfProperties",
    "SplitMode",
    "SplitPreview",
    "SplitPreviewItem",
    "ParadisePDFError",
    "PDFIOError",
    "PDFFormatError",
    "PDFValidationError",
    "PDFPathError",
    "EncryptedPDFError",
    "DanglingReferenceError",
    "CompressionError",
]


def split_document(
    input: str | Path,
    output_dir: str | Path | None = None,
    *,
    mode: str = "one_per_page",
    n: int | None = None,
) -> list[Path]:
    """Convenience wrapper around the split plugin."""

    context = ConversionContext(input_path=input, output_path=output_dir, config={"mode": mode, "n": n})
    tool = registry.create("split", context)
    return tool.run()


def merge_documents(inputs: Iterable[str | Path], output: str | Path) -> Path:
    """Convenience wrapper around the merge plugin."""

    context = ConversionContext(output_path=output, config={"inputs": list(inputs)})
    tool = registry.create("merge", context)
    return tool.run()


def mix_documents(inputs: Iterable[str | Path], output: str | Path) -> Path:
    """Convenience wrapper around the mix plugin."""

    context = ConversionContext(output_path=output, config={"inputs": list(inputs)})
    tool = registry.create("mix", context)
    return tool.run()


def protect_document(
    input: str | Path,
    output: str | Path,
    password: str,
    *,
    owner_password: str | None = None,
) -> Path:
    """Convenience wrapper around the encrypt plugin."""

    context = ConversionContext(
        input_path=input,
        output_path=output,
        config={"password": password, "owner_password": owner_password},
    )
    tool = registry.create("encrypt", context)
    return tool.run()


def unlock_document(input: str | Path, output: str | Path, password: str) -> Path:
    """Convenience wrapper around the decrypt plugin."""

    context = ConversionContext(input_path=input, output_path=output, config={"password": password})
    tool = registry.create("decrypt", context)
    return tool.run()


def compress_document(
    input: str | Path,
    output: str | Path,
    *,
    settings: CompressionSettings | None = None,
    codec: ImageCodec | None = None,
) -> CompressionResult:
    """Convenience wrapper around the compression plugin."""

    context = ConversionContext(
        input_path=input,
        output_path=output,
        config={"settings": settings, "codec": codec},
    )
    tool = registry.create("compress", context)
    return tool.run()
