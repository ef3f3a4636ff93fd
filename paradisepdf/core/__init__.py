"""Document object-graph engine."""

from __future__ import annotations

from .combine import combine, merge_documents, mix_documents, round_robin
from .encryption import encrypt_document, ensure_file_identifier
from .loader import load_document, parse_document
from .model import Document, ObjectId, copy_object, reference
from .pages import blank_page, flatten, page_map
from .writer import prune, renumber, save_document, serialize

__all__ = [
    "Document",
    "ObjectId",
    "blank_page",
    "combine",
    "copy_object",
    "encrypt_document",
    "ensure_file_identifier",
    "flatten",
    "load_document",
    "merge_documents",
    "mix_documents",
    "page_map",
    "parse_document",
    "prune",
    "reference",
    "renumber",
    "round_robin",
    "save_document",
    "serialize",
]
