"""Read-only inspection: page geometry, orientation, properties and raw bytes."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pypdf.generic import DictionaryObject, FloatObject, NumberObject

from ...core.loader import load_document
from ...core.model import Document
from ...core.pages import inherited, media_box, page_map, rectangle, rotation
from ...core.utils import ensure_file, get_logger
from ...exceptions import PDFIOError, PDFValidationError
from ...types import ImageInfo, PageBoxes, PageMetadata, PdfDiagnostics, PdfProperties
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("paradisepdf.tools.inspect")

DIAGNOSTIC_WINDOW = 1024


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("latin-1")
    if isinstance(value, (NumberObject, FloatObject)):
        return str(value)
    return None


def _name(value: Any) -> str | None:
    text = _text(value)
    if text is None:
        return None
    return text[1:] if text.startswith("/") else text


def _dimension(value: float) -> str:
    return f"{round(value, 1):g}"


def boxes_of(document: Document) -> list[PageBoxes]:
    result = []
    for number, object_id in page_map(document).items():
        page = document.get(object_id)
        result.append(
            PageBoxes(
                page_number=number,
                media_box=rectangle(document, inherited(document, page, "/MediaBox")),
                crop_box=rectangle(document, inherited(document, page, "/CropBox")),
                bleed_box=rectangle(document, document.lookup(page, "/BleedBox")),
                trim_box=rectangle(document, document.lookup(page, "/TrimBox")),
                art_box=rectangle(document, document.lookup(page, "/ArtBox")),
            )
        )
    return result


def metadata_of(document: Document) -> list[PageMetadata]:
    result = []
    for number, object_id in page_map(document).items():
        box = media_box(document, object_id)
        landscape = box is not None and abs(box[2] - box[0]) > abs(box[3] - box[1])
        result.append(PageMetadata(number, landscape, rotation(document, object_id)))
    return result


def properties_of(document: Document) -> PdfProperties:
    pages = page_map(document)
    page_size = None
    if pages:
        box = media_box(document, pages[1])
        if box is not None:
            page_size = f"{_dimension(abs(box[2] - box[0]))} x {_dimension(abs(box[3] - box[1]))} pt"

    metadata: dict[str, str] = {}
    info = document.info
    if info is not None:
        for key, value in info.items():
            text = _text(document.resolve(value))
            if text is not None:
                metadata[key[1:]] = text

    fonts: set[str] = set()
    images: list[ImageInfo] = []
    for object_id in sorted(document.objects):
        obj = document.objects[object_id]
        if not isinstance(obj, DictionaryObject):
            continue
        if document.lookup(obj, "/Type") == "/Font":
            font = _name(document.lookup(obj, "/BaseFont"))
            if font:
                fonts.add(font)
        if document.lookup(obj, "/Subtype") == "/Image":
            width = document.lookup(obj, "/Width", (NumberObject, FloatObject))
            height = document.lookup(obj, "/Height", (NumberObject, FloatObject))
            if width is not None and height is not None:
                images.append(ImageInfo(int(width), int(height)))

    return PdfProperties(
        version=document.version,
        page_count=len(pages),
        page_size=page_size,
        metadata=metadata,
        created=metadata.get("CreationDate"),
        modified=metadata.get("ModDate"),
        encrypted=document.encrypted,
        producer=metadata.get("Producer"),
        creator=metadata.get("Creator"),
        fonts=sorted(fonts),
        images=images,
    )


def page_boxes(path: str | Path) -> list[PageBoxes]:
    return boxes_of(load_document(path))


def organiser_metadata(path: str | Path) -> list[PageMetadata]:
    return metadata_of(load_document(path))


def pdf_properties(path: str | Path) -> PdfProperties:
    return properties_of(load_document(path))


def raw_diagnostics(path: str | Path, window: int = DIAGNOSTIC_WINDOW) -> PdfDiagnostics:
    """Return the leading and trailing bytes of *path* without parsing it."""

    source = ensure_file(path)
    try:
        with source.open("rb") as handle:
            size = os.fstat(handle.fileno()).st_size
            header = handle.read(window)
            handle.seek(max(0, size - window))
            trailer = handle.read(window)
    except OSError as exc:
        raise PDFIOError(f"Unable to read file: {exc.strerror or exc}", path=source) from exc
    return PdfDiagnostics(
        header=header.decode("latin-1"),
        trailer=trailer.decode("latin-1"),
        file_size=size,
    )


_REPORTS = {
    "boxes": page_boxes,
    "metadata": organiser_metadata,
    "properties": pdf_properties,
    "diagnostics": raw_diagnostics,
}


@register_tool("inspect")
class InspectTool(BaseTool):
    name = "inspect"

    def run(self) -> Any:
        report = self.context.config.get("report", "properties")
        try:
            handler = _REPORTS[report]
        except KeyError as exc:
            raise PDFValidationError(f"Unknown report: {report}") from exc
        LOGGER.debug("Building %s report for %s", report, self.context.input_path)
        return self.finish(handler(self.context.require_input()))
