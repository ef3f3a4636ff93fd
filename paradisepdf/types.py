"""
Type definitions and dataclasses for Paradise PDF.

This module defines the values passed into and returned from the public
operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

Box = Tuple[float, float, float, float]


class SplitModeKind(str, Enum):
    EVERY_N = "every_n"
    ONE_PER_PAGE = "one_per_page"


@dataclass(frozen=True)
class SplitMode:
    """How a document is cut into parts: fixed-size runs or one page each."""

    kind: SplitModeKind
    n: int = 1

    @classmethod
    def every_n(cls, n: int) -> "SplitMode":
        return cls(SplitModeKind.EVERY_N, max(int(n), 1))

    @classmethod
    def one_per_page(cls) -> "SplitMode":
        return cls(SplitModeKind.ONE_PER_PAGE, 1)

    @property
    def chunk_size(self) -> int:
        if self.kind is SplitModeKind.ONE_PER_PAGE:
            return 1
        return max(self.n, 1)


@dataclass(frozen=True)
class PageRange:
    """An inclusive, 1-based page range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"Invalid page range {self.start}-{self.end}")

    @property
    def label(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}–{self.end}"

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __iter__(self):
        return iter(range(self.start, self.end + 1))


@dataclass
class SplitPreviewItem:
    output_name: str
    range_label: str


@dataclass
class SplitPreview:
    """What a split would produce, without writing anything."""

    source_name: str
    page_count: int
    items: List[SplitPreviewItem] = field(default_factory=list)


class PageActionKind(str, Enum):
    EXISTING = "existing"
    BLANK = "blank"


@dataclass(frozen=True)
class PageAction:
    """One entry of a reorganization: keep an existing page or insert a blank one."""

    kind: PageActionKind
    page_number: Optional[int] = None

    @classmethod
    def existing(cls, page_number: int) -> "PageAction":
        return cls(PageActionKind.EXISTING, int(page_number))

    @classmethod
    def blank(cls) -> "PageAction":
        return cls(PageActionKind.BLANK)

    @classmethod
    def parse(cls, token: str) -> "PageAction":
        """Parse ``"3"`` as an existing page and ``"blank"`` (or ``"b"``) as a blank one."""

        text = token.strip().lower()
        if text in {"blank", "b"}:
            return cls.blank()
        return cls.existing(int(text))


@dataclass
class PageBoxes:
    page_number: int
    media_box: Optional[Box] = None
    crop_box: Optional[Box] = None
    bleed_box: Optional[Box] = None
    trim_box: Optional[Box] = None
    art_box: Optional[Box] = None


@dataclass
class PageMetadata:
    page_number: int
    is_landscape: bool
    rotation: int = 0


@dataclass
class ImageInfo:
    width: int
    height: int


@dataclass
class PdfProperties:
    """
    Document-level properties.

    Attributes:
        version: Declared format version, e.g. ``"1.7"``
        page_count: Number of pages in the page tree
        page_size: Size of the first page, e.g. ``"612 x 792 pt"``
        metadata: Every string entry of the Info dictionary
        created: Raw ``/CreationDate`` value
        modified: Raw ``/ModDate`` value
        encrypted: Whether the source file was encrypted
        producer: ``/Producer`` entry
        creator: ``/Creator`` entry
        fonts: Sorted, de-duplicated base font names
        images: Pixel dimensions of every image XObject
    """

    version: str
    page_count: int
    page_size: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    created: Optional[str] = None
    modified: Optional[str] = None
    encrypted: bool = False
    producer: Optional[str] = None
    creator: Optional[str] = None
    fonts: List[str] = field(default_factory=list)
    images: List[ImageInfo] = field(default_factory=list)


@dataclass
class PdfDiagnostics:
    header: str
    trailer: str
    file_size: int


@dataclass
class CompressionSettings:
    """
    Options for :func:`paradisepdf.compress_pdf`.

    Attributes:
        image_quality: Target quality handed to the image codec (1-100)
        max_image_dpi: Resolution ceiling handed to the image codec
        remove_metadata: Drop XMP metadata streams
        remove_thumbnails: Drop embedded page thumbnails
        remove_annotations: Drop page annotations
        remove_application_data: Drop ``/PieceInfo`` private data
        compress_streams: Flate-encode streams that carry no filter
    """

    image_quality: int = 75
    max_image_dpi: Optional[int] = 150
    remove_metadata: bool = False
    remove_thumbnails: bool = True
    remove_annotations: bool = False
    remove_application_data: bool = True
    compress_streams: bool = True


@dataclass
class ImageCandidate:
    """An image XObject offered to an image codec."""

    object_number: int
    width: int
    height: int
    filters: List[str]
    bits_per_component: Optional[int]
    color_space: Optional[str]
    data: bytes


@dataclass
class EncodedImage:
    """Replacement payload returned by an image codec."""

    data: bytes
    filter: str = "/DCTDecode"
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class CompressionResult:
    input_path: Path
    output_path: Path
    original_size: int
    compressed_size: int
    images_replaced: int = 0
    success: bool = True

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size
