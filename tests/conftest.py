from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    PdfObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from paradisepdf.core.model import Document, reference  # noqa: E402
from paradisepdf.core.pages import media_box, page_map, rectangle_object  # noqa: E402


def pdf_dict(entries: dict[str, PdfObject]) -> DictionaryObject:
    result = DictionaryObject()
    for key, value in entries.items():
        result[NameObject(key)] = value
    return result


def build_document(widths: Sequence[float], height: float = 100.0) -> Document:
    """Build an in-memory document whose pages are told apart by MediaBox width.

    Every page has its own content stream and shares one font resource.
    """

    document = Document(version="1.7")
    font_id = document.add(
        pdf_dict(
            {
                "/Type": NameObject("/Font"),
                "/Subtype": NameObject("/Type1"),
                "/BaseFont": NameObject("/Helvetica"),
            }
        )
    )
    catalog_id = document.allocate()
    root_id = document.allocate()
    kids = ArrayObject()
    for index, width in enumerate(widths, start=1):
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 12 Tf (page {index}) Tj ET".encode("ascii"))
        content_id = document.add(content)
        page = pdf_dict(
            {
                "/Type": NameObject("/Page"),
                "/Parent": reference(root_id),
                "/MediaBox": rectangle_object((0, 0, width, height)),
                "/Resources": pdf_dict({"/Font": pdf_dict({"/F1": reference(font_id)})}),
                "/Contents": reference(content_id),
            }
        )
        kids.append(reference(document.add(page)))
    document.put(
        root_id,
        pdf_dict({"/Type": NameObject("/Pages"), "/Kids": kids, "/Count": NumberObject(len(widths))}),
    )
    document.put(catalog_id, pdf_dict({"/Type": NameObject("/Catalog"), "/Pages": reference(root_id)}))
    document.trailer[NameObject("/Root")] = reference(catalog_id)
    document.trailer[NameObject("/Info")] = reference(
        document.add(pdf_dict({"/Title": TextStringObject("Built")}))
    )
    return document


def document_widths(document: Document) -> list[float]:
    return [media_box(document, object_id)[2] for object_id in page_map(document).values()]


def write_pdf(path: Path, widths: Sequence[float], height: float = 100.0, title: str | None = None) -> Path:
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=height)
    if title is not None:
        writer.add_metadata({"/Title": title})
    with path.open("wb") as handle:
        writer.write(handle)
    return path


def file_widths(path: Path) -> list[int]:
    return [round(float(page.mediabox.width)) for page in PdfReader(path).pages]


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "paradisepdf-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def ten_page_pdf(tmp_path: Path) -> Path:
    """Ten pages whose widths are 101..110 so each page is identifiable."""

    return write_pdf(tmp_path / "ten.pdf", [100 + number for number in range(1, 11)])


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, widths: Sequence[float] = (72,), title: str | None = None) -> Path:
        return write_pdf(tmp_path / filename, widths, title=title)

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", title="Document One")
    pdf2 = pdf_factory("two.pdf")
    return [pdf1, pdf2]


@pytest.fixture()
def make_document() -> Callable[..., Document]:
    return build_document


@pytest.fixture()
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, widths: Sequence[float], height: float = 100.0) -> Path:
        return write_pdf(tmp_path / filename, widths, height=height)

    return _create


@pytest.fixture()
def page_widths() -> Callable[[Document | Path], list[float]]:
    """Return page widths of an in-memory document or of a file read with pypdf."""

    def _widths(target: Document | Path) -> list[float]:
        if isinstance(target, Document):
            return document_widths(target)
        return file_widths(target)

    return _widths


def add_gray_image(document: Document, page_number: int = 1, width: int = 4, height: int = 2) -> None:
    """Attach an unfiltered grayscale image XObject to a page's resources."""

    image = DecodedStreamObject()
    image.set_data(bytes(range(width * height)))
    for key, value in {
        "/Type": NameObject("/XObject"),
        "/Subtype": NameObject("/Image"),
        "/Width": NumberObject(width),
        "/Height": NumberObject(height),
        "/ColorSpace": NameObject("/DeviceGray"),
        "/BitsPerComponent": NumberObject(8),
    }.items():
        image[NameObject(key)] = value
    page = document.require(page_map(document)[page_number])
    resources = document.resolve(page.get("/Resources"))
    resources[NameObject("/XObject")] = pdf_dict({"/Im1": reference(document.add(image))})


@pytest.fixture()
def with_image() -> Callable[..., None]:
    return add_gray_image


@pytest.fixture()
def owner_locked_pdf(tmp_path: Path) -> Path:
    """Three pages that open with the empty user password but carry an owner password."""

    pdf_path = write_pdf(tmp_path / "locked-source.pdf", [101, 102, 103])
    writer = PdfWriter(clone_from=pdf_path)
    writer.encrypt(user_password="", owner_password="owner", permissions_flag=0, algorithm="RC4-128")
    locked = tmp_path / "locked.pdf"
    with locked.open("wb") as stream:
        writer.write(stream)
    return locked
