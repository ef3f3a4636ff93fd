"""Utilities shared by the Paradise PDF engine and its tools."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..exceptions import PDFIOError, PDFPathError


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    resolved = Path(path).expanduser().resolve()
    return resolved


def ensure_file(path: str | Path) -> Path:
    """Resolve *path* and require it to be an existing regular file."""

    resolved = resolve_path(path)
    if not resolved.is_file():
        raise PDFPathError("Path is not a file.", path=resolved)
    return resolved


def ensure_directory(path: str | Path) -> Path:
    resolved = resolve_path(path)
    if not resolved.is_dir():
        raise PDFPathError("Output path is not a directory.", path=resolved)
    return resolved


def atomic_write(destination: Path, payload: bytes) -> Path:
    """Write *payload* next to *destination* and move it into place in one step."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile("wb", delete=False, dir=destination.parent, suffix=".tmp") as handle:
            temp_path = Path(handle.name)
            handle.write(payload)
        temp_path.replace(destination)
    except OSError as exc:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise PDFIOError(f"Unable to write output: {exc}", path=destination) from exc
    return destination


def format_file_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
