from __future__ import annotations

import io

from pypdf import PdfReader
from pypdf.generic import NameObject, NullObject, NumberObject

from paradisepdf.core.model import ObjectId, reference
from paradisepdf.core.pages import page_map
from paradisepdf.core.writer import compact, detached_copy, prune, renumber, save_document, serialize


def test_prune_drops_unreachable_objects(make_document) -> None:
    document = make_document([100])
    orphan = document.add(NumberObject(7))

    removed = prune(document)

    assert removed == 1
    assert orphan not in document
    assert len(page_map(document)) == 1


def test_prune_nulls_dangling_references(make_document) -> None:
    document = make_document([100])
    catalog = document.require_catalog()
    catalog[NameObject("/Outlines")] = reference(ObjectId(500))

    prune(document)

    assert isinstance(catalog.get("/Outlines"), NullObject)


def test_renumber_compacts_identifiers(make_document) -> None:
    document = make_document([100, 200])
    document.put(ObjectId(90), NumberObject(1))
    document.require_catalog()[NameObject("/Extra")] = reference(ObjectId(90))

    renumber(document)

    assert sorted(document.objects) == [ObjectId(number) for number in range(1, len(document.objects) + 1)]
    assert document.max_id == len(document.objects)
    assert document.lookup(document.require_catalog(), "/Extra") == 1
    assert len(page_map(document)) == 2


def test_serialize_produces_readable_pdf(make_document) -> None:
    document = compact(make_document([100, 200]))
    payload = serialize(document)

    assert payload.startswith(b"%PDF-1.7\n")
    assert payload.rstrip().endswith(b"%%EOF")
    reader = PdfReader(io.BytesIO(payload))
    assert [float(page.mediabox.width) for page in reader.pages] == [100.0, 200.0]
    assert reader.metadata.title == "Built"
    assert reader.trailer["/Size"] == len(document.objects) + 1


def test_save_document_writes_atomically(make_document, tmp_path) -> None:
    destination = tmp_path / "nested" / "out.pdf"

    save_document(make_document([100]), destination)

    assert destination.exists()
    assert len(PdfReader(destination).pages) == 1
    assert [path.name for path in destination.parent.iterdir()] == ["out.pdf"]


def test_detached_copy_leaves_original_untouched(make_document) -> None:
    document = make_document([100])
    orphan = document.add(NumberObject(7))

    copy = detached_copy(document)

    assert orphan in document
    assert len(copy.objects) == len(document.objects) - 1
