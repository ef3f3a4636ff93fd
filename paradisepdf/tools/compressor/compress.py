"""Compression tool.

The engine decides which objects to touch: it strips optional structures,
Flate-encodes unfiltered streams, and offers every image XObject to a
pluggable :class:`ImageCodec`. Pixel recompression itself lives in the
codec.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Protocol

from pypdf.filters import FlateDecode
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    NameObject,
    NumberObject,
    StreamObject,
)

from ...core.loader import load_for_rewrite
from ...core.model import Document, ObjectId
from ...core.pages import page_map
from ...core.utils import ensure_file, format_file_size, get_logger, resolve_path
from ...core.writer import save_document
from ...exceptions import CompressionError
from ...types import CompressionResult, CompressionSettings, EncodedImage, ImageCandidate
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("paradisepdf.tools.compress")


class ImageCodec(Protocol):
    def recompress(self, image: ImageCandidate, settings: CompressionSettings) -> EncodedImage | None:
        """Return a replacement for *image*, or ``None`` to keep it."""


def _filters(document: Document, stream: StreamObject) -> list[str]:
    value = document.lookup(stream, "/Filter")
    if isinstance(value, NameObject):
        return [str(value)]
    if isinstance(value, ArrayObject):
        return [str(item) for item in (document.resolve(entry) for entry in value) if isinstance(item, NameObject)]
    return []


def image_candidates(document: Document) -> Iterator[tuple[ObjectId, ImageCandidate]]:
    """Yield every image XObject that may be handed to a codec."""

    for object_id in sorted(document.objects):
        obj = document.objects[object_id]
        if not isinstance(obj, StreamObject) or document.lookup(obj, "/Subtype") != "/Image":
            continue
        mask = document.lookup(obj, "/ImageMask", BooleanObject)
        if mask is not None and mask.value:
            continue
        width = document.lookup(obj, "/Width", NumberObject)
        height = document.lookup(obj, "/Height", NumberObject)
        if width is None or height is None:
            continue
        bits = document.lookup(obj, "/BitsPerComponent", NumberObject)
        color_space = document.lookup(obj, "/ColorSpace", NameObject)
        yield object_id, ImageCandidate(
            object_number=object_id.number,
            width=int(width),
            height=int(height),
            filters=_filters(document, obj),
            bits_per_component=int(bits) if bits is not None else None,
            color_space=str(color_space) if color_space is not None else None,
            data=bytes(obj._data),
        )


def strip_structures(document: Document, settings: CompressionSettings) -> int:
    """Delete the optional catalog and page entries *settings* asks to remove."""

    page_keys = []
    if settings.remove_metadata:
        page_keys.append("/Metadata")
    if settings.remove_thumbnails:
        page_keys.append("/Thumb")
    if settings.remove_annotations:
        page_keys.append("/Annots")
    if settings.remove_application_data:
        page_keys.append("/PieceInfo")
    catalog_keys = [key for key in page_keys if key in ("/Metadata", "/PieceInfo")]

    removed = 0
    targets: list[tuple[Any, list[str]]] = [(document.catalog, catalog_keys)]
    targets.extend((document.get(object_id), page_keys) for object_id in page_map(document).values())
    for target, keys in targets:
        if not isinstance(target, DictionaryObject):
            continue
        for key in keys:
            if key in target:
                del target[key]
                removed += 1
    return removed


def compress_streams(document: Document) -> int:
    """Flate-encode streams without a filter when that makes them smaller."""

    encoded = 0
    for object_id, obj in list(document.objects.items()):
        if not isinstance(obj, DecodedStreamObject) or "/Filter" in obj or not obj._data:
            continue
        data = FlateDecode.encode(bytes(obj._data))
        if len(data) >= len(obj._data):
            continue
        stream = EncodedStreamObject()
        for key, value in obj.items():
            if key != "/Length":
                stream[NameObject(key)] = value
        stream[NameObject("/Filter")] = NameObject("/FlateDecode")
        stream._data = data
        document.objects[object_id] = stream
        encoded += 1
    return encoded


def recompress_images(document: Document, settings: CompressionSettings, codec: ImageCodec) -> int:
    """Replace each image the codec re-encodes to a smaller payload."""

    replaced = 0
    for object_id, candidate in list(image_candidates(document)):
        result = codec.recompress(candidate, settings)
        if result is None or len(result.data) >= len(candidate.data):
            continue
        original = document.objects[object_id]
        stream = EncodedStreamObject()
        for key, value in original.items():
            if key not in ("/Length", "/Filter", "/DecodeParms"):
                stream[NameObject(key)] = value
        stream[NameObject("/Filter")] = NameObject(result.filter)
        if result.width is not None:
            stream[NameObject("/Width")] = NumberObject(result.width)
        if result.height is not None:
            stream[NameObject("/Height")] = NumberObject(result.height)
        if result.filter == "/DCTDecode":
            stream[NameObject("/BitsPerComponent")] = NumberObject(8)
        stream._data = result.data
        document.objects[object_id] = stream
        replaced += 1
        LOGGER.debug("Replaced image %s (%d -> %d bytes)", object_id, len(candidate.data), len(result.data))
    return replaced


def compress_pdf(
    input_path: str | Path,
    output_path: str | Path,
    settings: CompressionSettings | None = None,
    codec: ImageCodec | None = None,
) -> CompressionResult:
    """Compress *input_path* writing the output to *output_path*."""

    settings = settings or CompressionSettings()
    if not 1 <= settings.image_quality <= 100:
        raise CompressionError(f"Image quality must be between 1 and 100, got {settings.image_quality}")

    source = ensure_file(input_path)
    document = load_for_rewrite(source)
    removed = strip_structures(document, settings)
    images = recompress_images(document, settings, codec) if codec is not None else 0
    encoded = compress_streams(document) if settings.compress_streams else 0
    destination = save_document(document, resolve_path(output_path))

    result = CompressionResult(
        input_path=source,
        output_path=destination,
        original_size=source.stat().st_size,
        compressed_size=destination.stat().st_size,
        images_replaced=images,
    )
    LOGGER.info(
        "Compressed %s: %s -> %s (%d entries removed, %d streams encoded, %d images replaced)",
        source.name,
        format_file_size(result.original_size),
        format_file_size(result.compressed_size),
        removed,
        encoded,
        images,
    )
    return result


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> CompressionResult:
        context = self.context
        settings = context.config.get("settings")
        if isinstance(settings, dict):
            settings = CompressionSettings(**settings)
        LOGGER.debug("Compressing %s to %s", context.input_path, context.output_path)
        result = compress_pdf(
            context.require_input(),
            context.require_output(),
            settings,
            codec=context.config.get("codec"),
        )
        return self.finish(result)
