"""Organiser tools: page reorganization with blank insertion, and rotation."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

from pypdf.generic import NameObject, NumberObject

from ...core.loader import load_for_rewrite
from ...core.model import Document, ObjectId
from ...core.pages import blank_page, discard_pages, first_media_box, flatten, page_map, rotation
from ...core.utils import ensure_file, get_logger, resolve_path
from ...core.writer import save_document
from ...types import PageAction, PageActionKind
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("paradisepdf.tools.organise")


def reorganize_document(document: Document, actions: Iterable[PageAction]) -> list[ObjectId]:
    """Rebuild the page tree from *actions*.

    Existing-page actions naming a page that does not exist are skipped.
    Pages not named by any action are removed.
    """

    pages = page_map(document)
    box = first_media_box(document)
    ordered: list[ObjectId] = []
    for action in actions:
        if action.kind is PageActionKind.BLANK:
            ordered.append(blank_page(document, box))
        elif action.page_number in pages:
            ordered.append(pages[action.page_number])
        else:
            LOGGER.debug("Skipping action for missing page %s", action.page_number)
    discard_pages(document, ordered)
    flatten(document, ordered)
    return ordered


def rotate_document(document: Document, rotations: Mapping[int, int]) -> int:
    """Add each angle delta to its page's rotation, normalized into ``[0, 360)``."""

    pages = page_map(document)
    rotated = 0
    for page_number, delta in rotations.items():
        object_id = pages.get(int(page_number))
        if object_id is None:
            LOGGER.debug("Skipping rotation for missing page %s", page_number)
            continue
        page = document.require(object_id)
        page[NameObject("/Rotate")] = NumberObject((rotation(document, page) + int(delta)) % 360)
        rotated += 1
    return rotated


def reorganize_pdf(path: str | Path, actions: Iterable[PageAction], output: str | Path) -> Path:
    document = load_for_rewrite(path)
    ordered = reorganize_document(document, actions)
    destination = save_document(document, resolve_path(output))
    LOGGER.info("Reorganized %s into %s (%d pages)", Path(path).name, destination, len(ordered))
    return destination


def rotate_pdf_pages(path: str | Path, rotations: Mapping[int, int], output: str | Path | None = None) -> Path:
    """Rotate pages of *path*; the result replaces the source unless *output* is given."""

    source = ensure_file(path)
    document = load_for_rewrite(source)
    rotated = rotate_document(document, rotations)
    destination = save_document(document, resolve_path(output) if output is not None else source)
    LOGGER.info("Rotated %d page(s) of %s", rotated, source.name)
    return destination


def _coerce_actions(raw: Iterable[object]) -> list[PageAction]:
    actions: list[PageAction] = []
    for item in raw:
        if isinstance(item, PageAction):
            actions.append(item)
        elif isinstance(item, int):
            actions.append(PageAction.existing(item))
        else:
            actions.append(PageAction.parse(str(item)))
    return actions


@register_tool("organise")
class OrganiseTool(BaseTool):
    name = "organise"

    def run(self) -> Path:
        context = self.context
        actions = _coerce_actions(context.config.get("actions", []))
        return self.finish(reorganize_pdf(context.require_input(), actions, context.require_output()))


@register_tool("rotate")
class RotateTool(BaseTool):
    name = "rotate"

    def run(self) -> Path:
        context = self.context
        rotations = {int(page): int(angle) for page, angle in context.config.get("rotations", {}).items()}
        return self.finish(rotate_pdf_pages(context.require_input(), rotations, context.output_path))
