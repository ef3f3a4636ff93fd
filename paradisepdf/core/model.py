"""In-memory object model shared by every Paradise PDF operation.

A :class:`Document` is an arena: a mapping from :class:`ObjectId` to a
:mod:`pypdf.generic` object. References between objects are
``IndirectObject`` instances that carry no reader, so they are never
dereferenced implicitly; every lookup goes through the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, NamedTuple

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    PdfObject,
    StreamObject,
)

from ..exceptions import DanglingReferenceError, PDFFormatError


class ObjectId(NamedTuple):
    """Identifier of an indirect object: ``(number, generation)``."""

    number: int
    generation: int = 0

    @classmethod
    def of(cls, ref: IndirectObject) -> "ObjectId":
        return cls(ref.idnum, ref.generation)

    def __str__(self) -> str:
        return f"{self.number} {self.generation} R"


def reference(object_id: ObjectId) -> IndirectObject:
    """Return a detached reference to *object_id*."""

    return IndirectObject(object_id.number, object_id.generation, None)


def as_id(value: Any) -> ObjectId | None:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, IndirectObject):
        return ObjectId(value.idnum, value.generation)
    return None


def iter_references(obj: PdfObject) -> Iterator[IndirectObject]:
    """Yield every reference held directly or by nested direct containers of *obj*."""

    stack: list[Any] = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, IndirectObject):
            yield current
        elif isinstance(current, DictionaryObject):
            stack.extend(current.values())
        elif isinstance(current, ArrayObject):
            stack.extend(current)


def rewrite_references(obj: PdfObject, replace: Callable[[IndirectObject], PdfObject]) -> PdfObject:
    """Replace references inside *obj* in place with ``replace(ref)``."""

    if isinstance(obj, IndirectObject):
        return replace(obj)
    if isinstance(obj, DictionaryObject):
        for key, value in list(obj.items()):
            obj[key] = rewrite_references(value, replace)
    elif isinstance(obj, ArrayObject):
        for index, value in enumerate(obj):
            obj[index] = rewrite_references(value, replace)
    return obj


def copy_object(obj: PdfObject, remap: Mapping[ObjectId, ObjectId] | None = None) -> PdfObject:
    """Deep-copy the direct structure of *obj*, detaching every reference.

    When *remap* is given, references are translated through it and a
    reference missing from the mapping becomes ``null``. Stream payloads are
    copied as raw bytes so encoded data is never re-encoded.
    """

    if isinstance(obj, IndirectObject):
        target = ObjectId(obj.idnum, obj.generation)
        if remap is not None:
            mapped = remap.get(target)
            if mapped is None:
                return NullObject()
            target = mapped
        return reference(target)
    if isinstance(obj, StreamObject):
        stream: StreamObject = EncodedStreamObject() if "/Filter" in obj else DecodedStreamObject()
        for key, value in obj.items():
            if key == "/Length":
                continue
            stream[NameObject(key)] = copy_object(value, remap)
        stream._data = bytes(obj._data or b"")
        return stream
    if isinstance(obj, DictionaryObject):
        result = DictionaryObject()
        for key, value in obj.items():
            result[NameObject(key)] = copy_object(value, remap)
        return result
    if isinstance(obj, ArrayObject):
        return ArrayObject(copy_object(item, remap) for item in obj)
    if obj is None:
        return NullObject()
    return obj


def number(value: float) -> PdfObject:
    """Wrap *value* in the narrowest numeric PDF object."""

    if float(value).is_integer():
        return NumberObject(int(value))
    return FloatObject(value)


@dataclass
class Document:
    """Owns the object store, trailer and identifier counter of one PDF."""

    objects: dict[ObjectId, PdfObject] = field(default_factory=dict)
    trailer: DictionaryObject = field(default_factory=DictionaryObject)
    max_id: int = 0
    version: str = "1.7"
    encrypted: bool = False
    source: Path | None = None

    def __contains__(self, target: object) -> bool:
        object_id = as_id(target)
        return object_id is not None and object_id in self.objects

    def get(self, target: Any) -> PdfObject | None:
        """Return the object addressed by *target* or ``None`` when absent."""

        object_id = as_id(target)
        if object_id is None:
            return None
        return self.objects.get(object_id)

    def require(self, target: Any) -> PdfObject:
        obj = self.get(target)
        if obj is None:
            raise DanglingReferenceError(f"Reference {as_id(target)} points at a missing object.")
        return obj

    def resolve(self, value: Any) -> PdfObject | None:
        """Follow *value* through any chain of references.

        *value* may also be an :class:`ObjectId`. Direct objects are returned
        unchanged; a dangling or cyclic chain resolves to ``None``.
        """

        if isinstance(value, ObjectId):
            value = reference(value)
        seen: set[ObjectId] = set()
        while isinstance(value, IndirectObject):
            object_id = ObjectId.of(value)
            if object_id in seen:
                return None
            seen.add(object_id)
            value = self.objects.get(object_id)
        if isinstance(value, NullObject):
            return None
        return value

    def lookup(self, container: Any, key: str, kind: type | tuple[type, ...] | None = None) -> Any:
        """Resolve ``container[key]``; ``None`` when missing or not of *kind*."""

        container = self.resolve(container)
        if not isinstance(container, DictionaryObject):
            return None
        value = self.resolve(container.get(key))
        if kind is not None and not isinstance(value, kind):
            return None
        return value

    def allocate(self) -> ObjectId:
        self.max_id += 1
        return ObjectId(self.max_id, 0)

    def add(self, obj: PdfObject) -> ObjectId:
        """Store *obj* under a freshly allocated identifier."""

        object_id = self.allocate()
        self.objects[object_id] = obj
        return object_id

    def put(self, object_id: ObjectId, obj: PdfObject) -> None:
        self.objects[object_id] = obj
        self.max_id = max(self.max_id, object_id.number)

    @property
    def catalog(self) -> DictionaryObject | None:
        return self.lookup(self.trailer, "/Root", DictionaryObject)

    def require_catalog(self) -> DictionaryObject:
        catalog = self.catalog
        if catalog is None:
            raise PDFFormatError("Document has no catalog.", path=self.source)
        return catalog

    @property
    def info(self) -> DictionaryObject | None:
        return self.lookup(self.trailer, "/Info", DictionaryObject)

    def clone(self) -> "Document":
        """Return an independent copy sharing no mutable objects with this one."""

        return Document(
            objects={object_id: copy_object(obj) for object_id, obj in self.objects.items()},
            trailer=copy_object(self.trailer),
            max_id=self.max_id,
            version=self.version,
            encrypted=self.encrypted,
            source=self.source,
        )


__all__ = [
    "Document",
    "ObjectId",
    "as_id",
    "copy_object",
    "iter_references",
    "number",
    "reference",
    "rewrite_references",
]
