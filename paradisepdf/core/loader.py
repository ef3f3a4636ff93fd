"""Load a PDF file into a :class:`~paradisepdf.core.model.Document`.

The source file is memory-mapped read-only and parsed with
:class:`pypdf.PdfReader`. When the standard parse fails, the loader looks
for the last ``startxref`` directive shortly before the final ``%%EOF``
marker and retries against the original bytes followed by a small
synthesized trailer, without copying the original bytes.
"""

from __future__ import annotations

import io
import mmap
import re
from collections import deque
from pathlib import Path
from typing import Any

from pypdf import PasswordType, PdfReader
from pypdf.errors import DependencyError, PyPdfError
from pypdf.generic import IndirectObject, NameObject, NullObject

from ..exceptions import EncryptedPDFError, PDFFormatError, PDFIOError
from .model import Document, ObjectId, copy_object, iter_references
from .utils import ensure_file, get_logger

LOGGER = get_logger("paradisepdf.loader")

REPAIR_LOOKBACK = 128
TRAILER_KEYS = ("/Root", "/Info", "/ID")

_EOF_MARKER = b"%%EOF"
_STARTXREF_PATTERN = re.compile(rb"startxref\s*(\d+)")
_PARSE_ERRORS = (PyPdfError, ValueError, KeyError, IndexError, TypeError, AttributeError)


class _PatchedSource(io.RawIOBase):
    """Seekable read-only view over ``base`` followed by ``tail``."""

    def __init__(self, base: Any, tail: bytes) -> None:
        super().__init__()
        self._base = base
        self._tail = tail
        self._split = len(base)
        self._size = self._split + len(tail)
        self._position = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._position + offset
        elif whence == io.SEEK_END:
            target = self._size + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")
        if target < 0:
            raise ValueError("Negative seek position")
        self._position = target
        return self._position

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        written = 0
        while written < len(view) and self._position < self._size:
            wanted = len(view) - written
            if self._position < self._split:
                chunk = self._base[self._position : min(self._position + wanted, self._split)]
            else:
                start = self._position - self._split
                chunk = self._tail[start : start + wanted]
            view[written : written + len(chunk)] = chunk
            written += len(chunk)
            self._position += len(chunk)
        return written


def find_startxref(buffer: Any, lookback: int = REPAIR_LOOKBACK) -> int | None:
    """Return the last ``startxref`` offset declared shortly before ``%%EOF``."""

    end = buffer.rfind(_EOF_MARKER)
    if end < 0:
        end = len(buffer)
    window = bytes(buffer[max(0, end - lookback) : end])
    matches = list(_STARTXREF_PATTERN.finditer(window))
    if not matches:
        return None
    return int(matches[-1].group(1))


def repair_patch(offset: int) -> bytes:
    return b"\n\nstartxref\n%d\n%%%%EOF" % offset


def _version_from_header(header: str) -> str:
    if header.startswith("%PDF-"):
        return header[5:].strip() or "1.7"
    return "1.7"


def _materialize(reader: PdfReader, source: Path | None) -> Document:
    """Copy every object reachable from the trailer into a detached store."""

    document = Document(version=_version_from_header(reader.pdf_header), source=source)
    document.encrypted = reader.is_encrypted

    pending: deque[IndirectObject] = deque()
    trailer = reader.trailer
    for key in TRAILER_KEYS:
        if key not in trailer:
            continue
        value = copy_object(trailer.raw_get(key))
        document.trailer[NameObject(key)] = value
        pending.extend(iter_references(value))

    missing: set[ObjectId] = set()
    while pending:
        object_id = ObjectId.of(pending.popleft())
        if object_id in document.objects or object_id in missing:
            continue
        raw = reader.get_object(IndirectObject(object_id.number, object_id.generation, reader))
        if raw is None or isinstance(raw, NullObject):
            missing.add(object_id)
            continue
        obj = copy_object(raw)
        document.put(object_id, obj)
        pending.extend(iter_references(obj))

    if missing:
        LOGGER.debug("%d referenced objects could not be read", len(missing))
    if document.catalog is None:
        raise PDFFormatError("Document has no catalog.", path=source)
    return document


def _parse(stream: Any, password: str | None, source: Path | None) -> Document:
    reader = PdfReader(stream, strict=False)
    if reader.is_encrypted:
        try:
            outcome = reader.decrypt(password or "")
        except (NotImplementedError, DependencyError) as exc:
            raise EncryptedPDFError(f"Unsupported encryption: {exc}", path=source) from exc
        if outcome == PasswordType.NOT_DECRYPTED:
            raise EncryptedPDFError(path=source)
    return _materialize(reader, source)


def parse_document(buffer: Any, *, password: str | None = None, source: Path | None = None) -> Document:
    """Parse a bytes-like *buffer*, attempting a trailer repair on failure."""

    try:
        return _parse(_PatchedSource(buffer, b""), password, source)
    except _PARSE_ERRORS as original:
        offset = find_startxref(buffer)
        if offset is None:
            raise PDFFormatError(f"Unable to parse PDF: {original}", path=source) from original
        LOGGER.warning("Standard parse failed (%s); retrying with startxref %d", original, offset)
        try:
            document = _parse(_PatchedSource(buffer, repair_patch(offset)), password, source)
        except _PARSE_ERRORS:
            raise PDFFormatError(f"Unable to parse PDF: {original}", path=source) from original
        LOGGER.info("Recovered %s using startxref %d", source or "document", offset)
        return document


def load_document(path: str | Path, *, password: str | None = None) -> Document:
    """Load *path* into a fully materialized :class:`Document`."""

    source = ensure_file(path)
    try:
        with source.open("rb") as handle:
            try:
                buffer = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
            except ValueError as exc:
                raise PDFFormatError("File is empty.", path=source) from exc
    except OSError as exc:
        raise PDFIOError(f"Unable to read file: {exc.strerror or exc}", path=source) from exc

    try:
        document = parse_document(buffer, password=password, source=source)
    finally:
        buffer.close()
    LOGGER.debug("Loaded %s: %d objects, version %s", source, len(document.objects), document.version)
    return document


def require_unencrypted(document: Document) -> Document:
    """Refuse to rewrite an encrypted document, even one opened with the empty password."""

    if document.encrypted:
        raise EncryptedPDFError("PDF is encrypted; unlock it first.", path=document.source)
    return document


def load_for_rewrite(path: str | Path) -> Document:
    return require_unencrypted(load_document(path))


__all__ = [
    "REPAIR_LOOKBACK",
    "find_startxref",
    "load_document",
    "load_for_rewrite",
    "parse_document",
    "repair_patch",
    "require_unencrypted",
]
