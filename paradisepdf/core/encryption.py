"""Password protection using the standard security handler."""

from __future__ import annotations

import hashlib
import time

# Encryption.make, write_entry and encrypt_object are private API; checked against pypdf 4.x to 6.x.
from pypdf._encryption import EncryptAlgorithm, Encryption
from pypdf.constants import UserAccessPermissions
from pypdf.generic import ArrayObject, ByteStringObject, NameObject, TextStringObject

from ..exceptions import EncryptedPDFError
from .model import Document, reference
from .utils import get_logger
from .writer import detached_copy, serialize

LOGGER = get_logger("paradisepdf.encryption")

ALGORITHM = EncryptAlgorithm.RC4_128


def _string_bytes(value: object) -> bytes | None:
    if isinstance(value, (ByteStringObject, TextStringObject)):
        return bytes(value.original_bytes)
    return None


def ensure_file_identifier(document: Document) -> bytes:
    """Make sure the trailer carries a two-slot ``/ID`` and return its first slot.

    A missing or malformed identifier is replaced with an MD5 digest of the
    current time, written into both slots.
    """

    value = document.resolve(document.trailer.get("/ID"))
    if isinstance(value, ArrayObject) and len(value) == 2:
        slots = [_string_bytes(document.resolve(item)) for item in value]
        if all(slot is not None for slot in slots):
            document.trailer[NameObject("/ID")] = ArrayObject(ByteStringObject(slot) for slot in slots)
            return slots[0]

    seed = hashlib.md5(str(time.time_ns()).encode("ascii")).digest()
    LOGGER.debug("Synthesized file identifier %s", seed.hex())
    document.trailer[NameObject("/ID")] = ArrayObject([ByteStringObject(seed), ByteStringObject(seed)])
    return seed


def encrypt_document(document: Document, user_password: str, owner_password: str | None = None) -> bytes:
    """Return the serialized, password-protected form of *document*.

    The document itself is not modified; encryption is applied to a clone.
    """

    if document.encrypted:
        raise EncryptedPDFError("PDF is already encrypted.", path=document.source)

    working = detached_copy(document)
    first_id = ensure_file_identifier(working)
    encryption = Encryption.make(ALGORITHM, UserAccessPermissions.all(), first_id)
    entry = encryption.write_entry(user_password, owner_password or user_password)
    entry_id = working.add(entry)
    working.trailer[NameObject("/Encrypt")] = reference(entry_id)
    return serialize(working, encryption=encryption, encrypt_entry=entry_id)


__all__ = ["ensure_file_identifier", "encrypt_document"]
