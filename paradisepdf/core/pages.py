"""Page tree reading and rewriting.

``page_map`` walks ``Catalog.Pages`` depth-first and numbers the leaves in
reading order. ``flatten`` replaces whatever tree exists with a single
Pages node listing the given pages, which is how reorganize, split and mix
rebuild their output.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    PdfObject,
)

from .model import Document, ObjectId, as_id, copy_object, number, reference
from .utils import get_logger

LOGGER = get_logger("paradisepdf.pages")

DEFAULT_MEDIA_BOX = (0.0, 0.0, 612.0, 792.0)
INHERITABLE_KEYS = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")
# Catalog entries that point into the page tree and are dropped once it is rebuilt.
PAGE_TREE_DEPENDENTS = (
    "/Outlines",
    "/AcroForm",
    "/StructTreeRoot",
    "/Dests",
    "/PageLabels",
    "/OpenAction",
    "/Threads",
)

Rectangle = tuple[float, float, float, float]


def page_map(document: Document) -> dict[int, ObjectId]:
    """Return ``{page_number: ObjectId}`` in document order, numbered from 1."""

    catalog = document.catalog
    if catalog is None:
        return {}
    pages: dict[int, ObjectId] = {}
    visited: set[ObjectId] = set()
    stack: list[Any] = [catalog.get("/Pages")]
    while stack:
        object_id = as_id(stack.pop())
        if object_id is None or object_id in visited:
            continue
        visited.add(object_id)
        node = document.get(object_id)
        if not isinstance(node, DictionaryObject):
            continue
        kids = document.lookup(node, "/Kids", ArrayObject)
        if kids is not None:
            stack.extend(reversed(kids))
        elif document.lookup(node, "/Type") != "/Pages":
            pages[len(pages) + 1] = object_id
    return pages


def _inherited_raw(document: Document, node: Any, key: str) -> PdfObject | None:
    visited: set[ObjectId] = set()
    current = document.resolve(node)
    while isinstance(current, DictionaryObject):
        if key in current:
            return current.get(key)
        parent = as_id(current.get("/Parent"))
        if parent is None or parent in visited:
            return None
        visited.add(parent)
        current = document.get(parent)
    return None


def inherited(document: Document, node: Any, key: str) -> PdfObject | None:
    """Resolve *key* on a page, falling back along its ``/Parent`` chain."""

    return document.resolve(_inherited_raw(document, node, key))


def rectangle(document: Document, value: Any) -> Rectangle | None:
    """Interpret *value* as a four-number rectangle; ``None`` otherwise."""

    array = document.resolve(value)
    if not isinstance(array, ArrayObject) or len(array) != 4:
        return None
    bounds = []
    for item in array:
        item = document.resolve(item)
        if not isinstance(item, (NumberObject, FloatObject)):
            return None
        bounds.append(float(item))
    return bounds[0], bounds[1], bounds[2], bounds[3]


def rectangle_object(bounds: Iterable[float]) -> ArrayObject:
    return ArrayObject(number(value) for value in bounds)


def media_box(document: Document, page: Any) -> Rectangle | None:
    return rectangle(document, inherited(document, page, "/MediaBox"))


def rotation(document: Document, page: Any) -> int:
    value = inherited(document, page, "/Rotate")
    if isinstance(value, (NumberObject, FloatObject)):
        return int(value)
    return 0


def materialize_inherited(document: Document, object_id: ObjectId) -> None:
    """Copy inherited attributes onto the page so it no longer needs its ancestors."""

    page = document.get(object_id)
    if not isinstance(page, DictionaryObject):
        return
    for key in INHERITABLE_KEYS:
        if key in page:
            continue
        value = _inherited_raw(document, page, key)
        if value is not None:
            page[NameObject(key)] = copy_object(value)


def first_media_box(document: Document) -> Rectangle:
    pages = page_map(document)
    if pages:
        box = media_box(document, pages[1])
        if box is not None:
            return box
    return DEFAULT_MEDIA_BOX


def blank_page(document: Document, box: Sequence[float] | None = None) -> ObjectId:
    """Create a page with no content and an empty resource dictionary."""

    contents = document.add(DecodedStreamObject())
    page = DictionaryObject()
    page[NameObject("/Type")] = NameObject("/Page")
    page[NameObject("/MediaBox")] = rectangle_object(box or DEFAULT_MEDIA_BOX)
    page[NameObject("/Resources")] = DictionaryObject()
    page[NameObject("/Contents")] = reference(contents)
    return document.add(page)


def clone_page(document: Document, object_id: ObjectId) -> ObjectId:
    """Shallow-copy a page dictionary under a new identifier."""

    return document.add(copy_object(document.require(object_id)))


def discard_pages(document: Document, keep: Iterable[ObjectId]) -> int:
    """Delete every page object that is not in *keep*.

    Later pruning turns references to the deleted pages into ``null``, so
    objects reachable only through them are not carried along.
    """

    kept = set(keep)
    dropped = [object_id for object_id in page_map(document).values() if object_id not in kept]
    for object_id in dropped:
        del document.objects[object_id]
    return len(dropped)


def flatten(document: Document, page_ids: Sequence[ObjectId]) -> ObjectId:
    """Replace the page tree with one Pages node whose kids are *page_ids*.

    A page listed more than once is cloned so each leaf has a single parent.
    """

    catalog = document.require_catalog()
    ordered: list[ObjectId] = []
    seen: set[ObjectId] = set()
    for object_id in page_ids:
        materialize_inherited(document, object_id)
        if object_id in seen:
            object_id = clone_page(document, object_id)
        seen.add(object_id)
        ordered.append(object_id)

    root_id = document.allocate()
    root = DictionaryObject()
    root[NameObject("/Type")] = NameObject("/Pages")
    root[NameObject("/Kids")] = ArrayObject(reference(object_id) for object_id in ordered)
    root[NameObject("/Count")] = NumberObject(len(ordered))
    document.put(root_id, root)

    for object_id in ordered:
        page = document.require(object_id)
        page[NameObject("/Parent")] = reference(root_id)
    catalog[NameObject("/Pages")] = reference(root_id)

    for key in PAGE_TREE_DEPENDENTS:
        if key in catalog:
            del catalog[key]
    LOGGER.debug("Flattened page tree into %s with %d pages", root_id, len(ordered))
    return root_id


__all__ = [
    "DEFAULT_MEDIA_BOX",
    "INHERITABLE_KEYS",
    "blank_page",
    "clone_page",
    "discard_pages",
    "first_media_box",
    "flatten",
    "inherited",
    "materialize_inherited",
    "media_box",
    "page_map",
    "rectangle",
    "rectangle_object",
    "rotation",
]
