"""Combine independently loaded documents into one object store."""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterable, Sequence, TypeVar

from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject, TextStringObject

from ..exceptions import PDFValidationError
from .model import Document, ObjectId, as_id, copy_object, reference
from .pages import DEFAULT_MEDIA_BOX, INHERITABLE_KEYS, flatten, inherited, materialize_inherited, page_map, rectangle_object
from .utils import get_logger

LOGGER = get_logger("paradisepdf.combine")

MIX_VERSION = "1.7"
PRODUCER = "Paradise PDF"

T = TypeVar("T")


def combine(destination: Document, source: Document) -> dict[ObjectId, ObjectId]:
    """Move every object of *source* into *destination* under disjoint identifiers.

    Identifiers are shifted by ``destination.max_id`` with generation reset
    to 0. References inside the copied objects are rewritten through the
    returned mapping; references that dangled in *source* become ``null``.
    """

    offset = destination.max_id
    ceiling = offset + max([source.max_id, *(object_id.number for object_id in source.objects)])
    id_map: dict[ObjectId, ObjectId] = {}
    taken: set[ObjectId] = set()
    for object_id in sorted(source.objects):
        target = ObjectId(object_id.number + offset, 0)
        if target in destination.objects or target in taken:
            ceiling += 1
            target = ObjectId(ceiling, 0)
        taken.add(target)
        id_map[object_id] = target

    for object_id, target in id_map.items():
        destination.objects[target] = copy_object(source.objects[object_id], id_map)
    destination.max_id = max(destination.max_id, ceiling)
    LOGGER.debug("Combined %d objects at offset %d", len(id_map), offset)
    return id_map


def round_robin(sequences: Iterable[Sequence[T]]) -> list[T]:
    """Interleave *sequences*, skipping any that are exhausted."""

    marker = object()
    ordered: list[T] = []
    for row in zip_longest(*sequences, fillvalue=marker):
        ordered.extend(item for item in row if item is not marker)
    return ordered


def _version_key(version: str) -> tuple[int, ...]:
    parts = []
    for part in version.split("."):
        parts.append(int(part) if part.isdigit() else 0)
    return tuple(parts)


def _page_root(document: Document) -> tuple[ObjectId, DictionaryObject]:
    catalog = document.require_catalog()
    root_id = as_id(catalog.get("/Pages"))
    root = document.get(root_id) if root_id is not None else None
    if root_id is None or not isinstance(root, DictionaryObject):
        root_id = flatten(document, [])
        root = document.require(root_id)
    return root_id, root


def _shield_from_parent(document: Document, page: DictionaryObject, parent: DictionaryObject) -> None:
    # Keeps attributes of the new parent from leaking onto an appended page.
    for key in INHERITABLE_KEYS:
        if key in page or inherited(document, parent, key) is None:
            continue
        if key == "/Rotate":
            page[NameObject(key)] = NumberObject(0)
        elif key == "/Resources":
            page[NameObject(key)] = DictionaryObject()
        elif key == "/MediaBox":
            page[NameObject(key)] = rectangle_object(DEFAULT_MEDIA_BOX)
        elif "/MediaBox" in page:
            page[NameObject(key)] = copy_object(page.get("/MediaBox"))


def append_pages(destination: Document, source: Document) -> list[ObjectId]:
    """Combine *source* into *destination* and append its pages to the root ``Kids``."""

    source_pages = list(page_map(source).values())
    for object_id in source_pages:
        materialize_inherited(source, object_id)

    id_map = combine(destination, source)
    root_id, root = _page_root(destination)
    kids = destination.lookup(root, "/Kids", ArrayObject)
    if kids is None:
        kids = ArrayObject()
        root[NameObject("/Kids")] = kids

    appended = [id_map[object_id] for object_id in source_pages]
    for object_id in appended:
        page = destination.require(object_id)
        _shield_from_parent(destination, page, root)
        kids.append(reference(object_id))
        page[NameObject("/Parent")] = reference(root_id)
    root[NameObject("/Count")] = NumberObject(len(page_map(destination)))
    return appended


def merge_documents(documents: Sequence[Document]) -> Document:
    """Concatenate *documents* onto the first one, keeping its page tree shape."""

    if not documents:
        raise PDFValidationError("At least one document is required.")
    destination = documents[0]
    for source in documents[1:]:
        append_pages(destination, source)
        if _version_key(source.version) > _version_key(destination.version):
            destination.version = source.version
    return destination


def mix_documents(documents: Sequence[Document]) -> Document:
    """Interleave the pages of *documents* round-robin into a fresh document."""

    if not documents:
        raise PDFValidationError("At least one document is required.")
    mixed = Document(version=MIX_VERSION)
    orders: list[list[ObjectId]] = []
    for source in documents:
        source_pages = list(page_map(source).values())
        for object_id in source_pages:
            materialize_inherited(source, object_id)
        id_map = combine(mixed, source)
        orders.append([id_map[object_id] for object_id in source_pages])

    catalog = DictionaryObject()
    catalog[NameObject("/Type")] = NameObject("/Catalog")
    mixed.trailer[NameObject("/Root")] = reference(mixed.add(catalog))
    info = DictionaryObject()
    info[NameObject("/Producer")] = TextStringObject(PRODUCER)
    mixed.trailer[NameObject("/Info")] = reference(mixed.add(info))

    flatten(mixed, round_robin(orders))
    return mixed


__all__ = ["MIX_VERSION", "append_pages", "combine", "merge_documents", "mix_documents", "round_robin"]
