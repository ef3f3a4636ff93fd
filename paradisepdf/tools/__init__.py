"""Namespace for pluggable Paradise PDF tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .splitter import split  # noqa: F401  # register split and split-preview tools
    from .merger import merge  # noqa: F401  # register merge and mix tools
    from .organiser import organise  # noqa: F401  # register organise and rotate tools
    from .encryptor import encrypt  # noqa: F401
    from .inspector import inspect  # noqa: F401
    from .compressor import compress  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
