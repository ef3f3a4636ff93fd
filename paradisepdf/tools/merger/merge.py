"""Merge and mix tools: sequential concatenation and round-robin interleaving."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ...core.combine import merge_documents, mix_documents
from ...core.loader import load_for_rewrite
from ...core.model import Document
from ...core.pages import page_map
from ...core.utils import get_logger, resolve_path
from ...core.writer import save_document
from ...exceptions import PDFValidationError
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("paradisepdf.tools.merge")

PathLike = str | Path


def _load_all(inputs: Iterable[PathLike]) -> list[Document]:
    """Load every input; the first failure aborts the whole batch."""

    paths = list(inputs)
    if not paths:
        raise PDFValidationError("No input PDFs provided")
    return [load_for_rewrite(path) for path in paths]


def merge_pdfs(inputs: Iterable[PathLike], output: PathLike) -> Path:
    """Append the pages of every input, in order, to the first input's page tree."""

    documents = _load_all(inputs)
    merged = merge_documents(documents)
    destination = save_document(merged, resolve_path(output))
    LOGGER.info("Merged %d PDFs into %s (%d pages)", len(documents), destination, len(page_map(merged)))
    return destination


def mix_pdfs(inputs: Iterable[PathLike], output: PathLike) -> Path:
    """Interleave the pages of every input round-robin into a new document."""

    documents = _load_all(inputs)
    mixed = mix_documents(documents)
    destination = save_document(mixed, resolve_path(output))
    LOGGER.info("Mixed %d PDFs into %s (%d pages)", len(documents), destination, len(page_map(mixed)))
    return destination


def _inputs(tool: BaseTool) -> list[Path]:
    context = tool.context
    inputs = context.config.get("inputs")
    if inputs is None:
        if context.input_path is None:
            raise PDFValidationError("No input PDFs provided")
        inputs = [context.input_path]
    return [resolve_path(path) for path in inputs]


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> Path:
        inputs = _inputs(self)
        output = self.context.require_output()
        LOGGER.debug("Merging %d input(s) into %s", len(inputs), output)
        return self.finish(merge_pdfs(inputs, output))


@register_tool("mix")
class MixTool(BaseTool):
    name = "mix"

    def run(self) -> Path:
        inputs = _inputs(self)
        output = self.context.require_output()
        LOGGER.debug("Mixing %d input(s) into %s", len(inputs), output)
        return self.finish(mix_pdfs(inputs, output))
