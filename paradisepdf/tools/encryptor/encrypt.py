"""Encryption tools: password protection and unlocking."""

from __future__ import annotations

from pathlib import Path

from ...core.encryption import encrypt_document
from ...core.loader import load_document
from ...core.utils import atomic_write, ensure_file, get_logger, resolve_path
from ...core.writer import save_document
from ...exceptions import EncryptedPDFError, PDFValidationError
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("paradisepdf.tools.encrypt")

PathLike = str | Path


def is_pdf_encrypted(path: PathLike) -> bool:
    """Return ``True`` when *path* is encrypted, whether or not a password is needed."""

    try:
        return load_document(path).encrypted
    except EncryptedPDFError:
        return True


def protect_pdf(
    input: PathLike,
    output: PathLike,
    password: str,
    *,
    owner_password: str | None = None,
) -> Path:
    """Encrypt *input* with *password* and write the result to *output*.

    The owner password defaults to the user password.
    """

    if not password:
        raise PDFValidationError("A non-empty password is required")
    source = ensure_file(input)
    document = load_document(source)
    payload = encrypt_document(document, password, owner_password)
    destination = atomic_write(resolve_path(output), payload)
    LOGGER.info("Protected %s as %s", source.name, destination)
    return destination


def unlock_pdf(input: PathLike, output: PathLike, password: str) -> Path:
    """Open *input* with *password* and write an unencrypted copy to *output*."""

    source = ensure_file(input)
    document = load_document(source, password=password)
    document.encrypted = False
    destination = save_document(document, resolve_path(output))
    LOGGER.info("Unlocked %s as %s", source.name, destination)
    return destination


@register_tool("encrypt")
class EncryptTool(BaseTool):
    name = "encrypt"

    def run(self) -> Path:
        context = self.context
        password = context.config.get("password")
        owner_password = context.config.get("owner_password")
        LOGGER.debug(
            "Encrypting %s to %s with owner password %s",
            context.input_path,
            context.output_path,
            "<provided>" if owner_password else "<default>",
        )
        result = protect_pdf(
            context.require_input(),
            context.require_output(),
            password,
            owner_password=owner_password,
        )
        return self.finish(result)


@register_tool("decrypt")
class DecryptTool(BaseTool):
    name = "decrypt"

    def run(self) -> Path:
        context = self.context
        password = context.config.get("password")
        if password is None:
            raise PDFValidationError("A password is required for decryption")
        LOGGER.debug("Decrypting %s to %s", context.input_path, context.output_path)
        return self.finish(unlock_pdf(context.require_input(), context.require_output(), password))
