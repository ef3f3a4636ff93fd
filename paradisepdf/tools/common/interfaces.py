"""Core interfaces and context objects shared by Paradise PDF tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ...core.utils import ensure_file, resolve_path
from ...exceptions import PDFValidationError

ProgressCallback = Callable[[int, int], None]


@dataclass
class ConversionContext:
    """Holds the inputs and configuration of one tool invocation.

    A context never caches a loaded document; each ``run`` loads
    its sources afresh and releases them when it returns.
    """

    input_path: Path | None = None
    output_path: Path | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.input_path, (str, Path)) and self.input_path is not None:
            self.input_path = resolve_path(self.input_path)
        if isinstance(self.output_path, (str, Path)) and self.output_path is not None:
            self.output_path = resolve_path(self.output_path)

    def require_input(self) -> Path:
        if self.input_path is None:
            raise PDFValidationError("ConversionContext requires an input_path")
        return ensure_file(self.input_path)

    def require_output(self) -> Path:
        if self.output_path is None:
            raise PDFValidationError("ConversionContext requires an output_path")
        return self.output_path


class BaseTool:
    """Base class for all pluggable Paradise PDF tools."""

    name: str

    def __init__(self, context: ConversionContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError

    def finish(self, result: Any) -> Any:
        self.context.resources["result"] = result
        return result
