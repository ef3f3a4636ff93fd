"""Prune, renumber and serialize documents."""

from __future__ import annotations

import io
from collections import deque
from pathlib import Path
from typing import Any

from pypdf.generic import DictionaryObject, IndirectObject, NameObject, NullObject, NumberObject, PdfObject

from .model import Document, ObjectId, reference, rewrite_references
from .utils import atomic_write, get_logger, resolve_path

LOGGER = get_logger("paradisepdf.writer")

BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


def prune(document: Document) -> int:
    """Drop objects unreachable from the trailer and null dangling references.

    Returns the number of objects removed.
    """

    live: set[ObjectId] = set()
    pending: deque[ObjectId] = deque()
    dangling = 0

    def visit(ref: IndirectObject) -> PdfObject:
        nonlocal dangling
        object_id = ObjectId.of(ref)
        if object_id not in document.objects:
            dangling += 1
            return NullObject()
        if object_id not in live:
            live.add(object_id)
            pending.append(object_id)
        return ref

    rewrite_references(document.trailer, visit)
    while pending:
        rewrite_references(document.objects[pending.popleft()], visit)

    unreachable = [object_id for object_id in document.objects if object_id not in live]
    for object_id in unreachable:
        del document.objects[object_id]
    if dangling:
        LOGGER.warning("Replaced %d dangling references with null", dangling)
    LOGGER.debug("Pruned %d unreachable objects", len(unreachable))
    return len(unreachable)


def renumber(document: Document) -> dict[ObjectId, ObjectId]:
    """Assign compact identifiers ``1..N`` with generation 0."""

    mapping = {old: ObjectId(index, 0) for index, old in enumerate(sorted(document.objects), start=1)}

    def visit(ref: IndirectObject) -> PdfObject:
        target = mapping.get(ObjectId.of(ref))
        return reference(target) if target is not None else NullObject()

    document.objects = {
        mapping[old]: rewrite_references(obj, visit) for old, obj in sorted(document.objects.items())
    }
    rewrite_references(document.trailer, visit)
    document.max_id = len(mapping)
    return mapping


def _xref_table(offsets: dict[int, tuple[int, int]], size: int) -> bytes:
    free = [number for number in range(1, size) if number not in offsets]
    next_free = dict(zip([0, *free], [*free, 0]))
    lines = [b"xref\n", b"0 %d\n" % size, b"%010d 65535 f \n" % next_free[0]]
    for number in range(1, size):
        if number in offsets:
            offset, generation = offsets[number]
            lines.append(b"%010d %05d n \n" % (offset, generation))
        else:
            lines.append(b"%010d 00001 f \n" % next_free[number])
    return b"".join(lines)


def serialize(document: Document, *, encryption: Any = None, encrypt_entry: ObjectId | None = None) -> bytes:
    """Write *document* as a classic cross-reference table PDF.

    When *encryption* (a :class:`pypdf._encryption.Encryption`) is given,
    every object except *encrypt_entry* is encrypted with its own key.
    """

    stream = io.BytesIO()
    stream.write(f"%PDF-{document.version}\n".encode("ascii"))
    stream.write(BINARY_MARKER)

    offsets: dict[int, tuple[int, int]] = {}
    for object_id in sorted(document.objects):
        obj = document.objects[object_id]
        offsets[object_id.number] = (stream.tell(), object_id.generation)
        stream.write(b"%d %d obj\n" % (object_id.number, object_id.generation))
        if encryption is not None and object_id != encrypt_entry:
            obj = encryption.encrypt_object(obj, object_id.number, object_id.generation)
        obj.write_to_stream(stream)
        stream.write(b"\nendobj\n")

    size = max([document.max_id, *offsets]) + 1
    startxref = stream.tell()
    stream.write(_xref_table(offsets, size))

    trailer = DictionaryObject()
    for key, value in document.trailer.items():
        trailer[NameObject(key)] = value
    trailer[NameObject("/Size")] = NumberObject(size)
    stream.write(b"trailer\n")
    trailer.write_to_stream(stream)
    stream.write(b"\nstartxref\n%d\n%%%%EOF\n" % startxref)
    return stream.getvalue()


def compact(document: Document) -> Document:
    prune(document)
    renumber(document)
    return document


def save_document(document: Document, destination: str | Path) -> Path:
    """Compact *document* and write it atomically to *destination*."""

    target = resolve_path(destination)
    payload = serialize(compact(document))
    atomic_write(target, payload)
    LOGGER.debug("Wrote %d bytes to %s", len(payload), target)
    return target


def detached_copy(document: Document) -> Document:
    """Return a compacted clone, leaving *document* untouched."""

    return compact(document.clone())


__all__ = ["compact", "detached_copy", "prune", "renumber", "save_document", "serialize"]
