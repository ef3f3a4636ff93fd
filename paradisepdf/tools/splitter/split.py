"""Split tools: page count, split preview and whole-document split."""

from __future__ import annotations

from pathlib import Path

from ...core.loader import load_document, load_for_rewrite
from ...core.model import Document
from ...core.pages import discard_pages, flatten, page_map
from ...core.utils import ensure_directory, ensure_file, get_logger
from ...core.writer import save_document
from ...exceptions import PDFValidationError
from ...types import PageRange, SplitMode, SplitPreview, SplitPreviewItem
from ..common.interfaces import BaseTool, ProgressCallback
from ..common.pipeline import register_tool
from .utils import chunk_ranges, coerce_mode, part_name

LOGGER = get_logger("paradisepdf.tools.split")


def page_count(path: str | Path) -> int:
    return len(page_map(load_document(path)))


def _require_pages(document: Document, source: Path) -> int:
    count = len(page_map(document))
    if count == 0:
        raise PDFValidationError("PDF has no pages.", path=source)
    return count


def split_preview(path: str | Path, mode: SplitMode) -> SplitPreview:
    """Describe the parts :func:`split_pdf` would write, without writing them."""

    source = ensure_file(path)
    count = _require_pages(load_document(source), source)
    items = [
        SplitPreviewItem(output_name=part_name(source.stem, index), range_label=page_range.label)
        for index, page_range in enumerate(chunk_ranges(count, mode), start=1)
    ]
    return SplitPreview(source_name=source.name, page_count=count, items=items)


def extract_range(document: Document, page_range: PageRange) -> Document:
    """Return a new document holding only the pages in *page_range*.

    Pages outside the range are deleted from the copy before pruning, so
    objects referenced only by them are not carried over.
    """

    part = document.clone()
    pages = page_map(part)
    selected = [pages[number] for number in page_range if number in pages]
    discard_pages(part, selected)
    flatten(part, selected)
    return part


def _notify(progress: ProgressCallback | None, current: int, total: int) -> None:
    if progress is None:
        return
    try:
        progress(current, total)
    except Exception as exc:  # progress observers must not interrupt a split
        LOGGER.warning("Progress callback failed at %d/%d: %s", current, total, exc)


def split_pdf(
    path: str | Path,
    output_dir: str | Path | None = None,
    mode: SplitMode | None = None,
    progress: ProgressCallback | None = None,
) -> list[Path]:
    """Write every chunk of *path* as ``<stem>_part<i>.pdf`` and return the paths."""

    source = ensure_file(path)
    mode = mode or SplitMode.one_per_page()
    document = load_for_rewrite(source)
    count = _require_pages(document, source)
    directory = ensure_directory(output_dir) if output_dir is not None else source.parent

    ranges = chunk_ranges(count, mode)
    written: list[Path] = []
    for index, page_range in enumerate(ranges, start=1):
        destination = directory / part_name(source.stem, index)
        LOGGER.debug("Writing pages %s to %s", page_range.label, destination)
        save_document(extract_range(document, page_range), destination)
        written.append(destination)
        _notify(progress, index, len(ranges))

    LOGGER.info("Split %s into %d parts", source.name, len(written))
    return written


@register_tool("page-count")
class PageCountTool(BaseTool):
    name = "page-count"

    def run(self) -> int:
        return self.finish(page_count(self.context.require_input()))


@register_tool("split-preview")
class SplitPreviewTool(BaseTool):
    name = "split-preview"

    def run(self) -> SplitPreview:
        config = self.context.config
        mode = coerce_mode(config.get("mode"), config.get("n"))
        return self.finish(split_preview(self.context.require_input(), mode))


@register_tool("split")
class SplitTool(BaseTool):
    name = "split"

    def run(self) -> list[Path]:
        context = self.context
        mode = coerce_mode(context.config.get("mode"), context.config.get("n"))
        results = split_pdf(
            context.require_input(),
            context.output_path,
            mode,
            progress=context.config.get("progress"),
        )
        return self.finish(results)
