from __future__ import annotations

import pytest
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
)

from paradisepdf.core.model import Document, ObjectId, as_id, copy_object, iter_references, reference
from paradisepdf.exceptions import DanglingReferenceError, PDFFormatError


def test_object_id_formats_like_a_reference() -> None:
    assert str(ObjectId(12, 3)) == "12 3 R"
    assert ObjectId.of(IndirectObject(4, 1, None)) == ObjectId(4, 1)
    assert as_id(reference(ObjectId(7))) == ObjectId(7, 0)
    assert as_id(NumberObject(7)) is None


def test_allocate_and_put_track_the_highest_identifier() -> None:
    document = Document()
    first = document.add(NumberObject(1))
    second = document.allocate()
    assert (first, second) == (ObjectId(1), ObjectId(2))

    document.put(ObjectId(40), NumberObject(2))
    assert document.max_id == 40
    assert document.allocate() == ObjectId(41)


def test_resolve_follows_chains_and_stops_on_cycles() -> None:
    document = Document()
    document.put(ObjectId(1), reference(ObjectId(2)))
    document.put(ObjectId(2), NumberObject(5))
    document.put(ObjectId(3), reference(ObjectId(4)))
    document.put(ObjectId(4), reference(ObjectId(3)))
    document.put(ObjectId(5), NullObject())

    assert document.resolve(reference(ObjectId(1))) == 5
    assert document.resolve(ObjectId(2)) == 5
    assert document.resolve(reference(ObjectId(3))) is None
    assert document.resolve(reference(ObjectId(5))) is None
    assert document.resolve(reference(ObjectId(99))) is None


def test_require_reports_dangling_references() -> None:
    document = Document()
    with pytest.raises(DanglingReferenceError) as excinfo:
        document.require(reference(ObjectId(9)))
    assert "9 0 R" in str(excinfo.value)
    assert isinstance(excinfo.value, PDFFormatError)


def test_lookup_checks_the_value_kind() -> None:
    document = Document()
    target = document.add(NumberObject(3))
    container = DictionaryObject()
    container[NameObject("/Count")] = reference(target)

    assert document.lookup(container, "/Count") == 3
    assert document.lookup(container, "/Count", NumberObject) == 3
    assert document.lookup(container, "/Count", ArrayObject) is None
    assert document.lookup(container, "/Missing") is None
    assert document.lookup(NumberObject(1), "/Count") is None


def test_catalog_is_required_for_page_operations() -> None:
    document = Document()
    assert document.catalog is None
    with pytest.raises(PDFFormatError):
        document.require_catalog()


def test_copy_object_detaches_and_remaps_references() -> None:
    original = DictionaryObject()
    original[NameObject("/Kids")] = ArrayObject([IndirectObject(1, 0, None), IndirectObject(2, 0, None)])

    copied = copy_object(original, {ObjectId(1): ObjectId(10)})
    kids = copied.get("/Kids")
    assert as_id(kids[0]) == ObjectId(10)
    assert isinstance(kids[1], NullObject)

    copied[NameObject("/Extra")] = NumberObject(1)
    assert "/Extra" not in original


def test_copy_object_keeps_stream_payload() -> None:
    stream = DecodedStreamObject()
    stream.set_data(b"q Q")
    stream[NameObject("/Length")] = NumberObject(3)

    copied = copy_object(stream)
    assert copied.get_data() == b"q Q"
    assert "/Length" not in copied
    assert copied is not stream


def test_iter_references_finds_nested_references(make_document) -> None:
    document = make_document([100, 200])
    catalog = document.require_catalog()
    found = {as_id(ref) for ref in iter_references(catalog)}
    assert found == {as_id(catalog.get("/Pages"))}


def test_clone_is_independent(make_document) -> None:
    document = make_document([100])
    clone = document.clone()
    clone.require_catalog()[NameObject("/Lang")] = NameObject("/en")

    assert "/Lang" not in document.require_catalog()
    assert clone.objects.keys() == document.objects.keys()
    assert clone.max_id == document.max_id
