from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfReader

from paradisepdf import (
    EncryptedPDFError,
    PageAction,
    PDFValidationError,
    compress_pdf,
    is_pdf_encrypted,
    merge_pdfs,
    mix_pdfs,
    protect_document,
    protect_pdf,
    reorganize_pdf,
    rotate_pdf_pages,
    split_pdf,
    unlock_document,
    unlock_pdf,
)


def test_protect_pdf_encrypts_document(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "secured.pdf"
    protect_pdf(sample_pdf, output, "secret")

    reader = PdfReader(str(output))
    assert reader.is_encrypted is True
    assert is_pdf_encrypted(output) is True
    assert reader.decrypt("secret") != 0
    assert len(reader.pages) == 5
    assert reader.metadata.title == "Sample"


def test_protect_pdf_synthesizes_matching_identifier(sample_pdf: Path, tmp_path: Path) -> None:
    assert "/ID" not in PdfReader(sample_pdf).trailer
    output = tmp_path / "secured.pdf"

    protect_pdf(sample_pdf, output, "secret")

    first, second = PdfReader(output).trailer["/ID"]
    assert len(first) == 16
    assert first == second


def test_protect_pdf_with_owner_password(sample_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "secured.pdf"
    protect_pdf(sample_pdf, output, "reader", owner_password="owner")

    assert PdfReader(output).decrypt("owner") != 0
    assert PdfReader(output).decrypt("reader") != 0
    assert PdfReader(output).decrypt("nobody") == 0


def test_protect_pdf_leaves_source_untouched(sample_pdf: Path, tmp_path: Path) -> None:
    before = sample_pdf.read_bytes()
    protect_pdf(sample_pdf, tmp_path / "secured.pdf", "secret")
    assert sample_pdf.read_bytes() == before
    assert is_pdf_encrypted(sample_pdf) is False


def test_protect_pdf_refuses_already_encrypted(sample_pdf: Path, tmp_path: Path) -> None:
    first = tmp_path / "first.pdf"
    protect_pdf(sample_pdf, first, "secret")

    with pytest.raises(EncryptedPDFError):
        protect_pdf(first, tmp_path / "second.pdf", "another")


def test_protect_pdf_requires_password(sample_pdf: Path, tmp_path: Path) -> None:
    with pytest.raises(PDFValidationError):
        protect_pdf(sample_pdf, tmp_path / "secured.pdf", "")


def test_unlock_pdf_decrypts_document(sample_pdf: Path, tmp_path: Path) -> None:
    protected = tmp_path / "protected.pdf"
    unlocked = tmp_path / "unlocked.pdf"
    protect_pdf(sample_pdf, protected, "secret")

    unlock_pdf(protected, unlocked, "secret")

    reader = PdfReader(unlocked)
    assert reader.is_encrypted is False
    assert len(reader.pages) == 5
    assert reader.metadata.title == "Sample"


def test_unlock_pdf_rejects_wrong_password(sample_pdf: Path, tmp_path: Path) -> None:
    protected = tmp_path / "protected.pdf"
    protect_pdf(sample_pdf, protected, "secret")

    with pytest.raises(EncryptedPDFError):
        unlock_pdf(protected, tmp_path / "unlocked.pdf", "wrong")


def test_protect_and_unlock_wrappers(sample_pdf: Path, tmp_path: Path) -> None:
    protected = protect_document(sample_pdf, tmp_path / "protected.pdf", "secret")
    unlocked = unlock_document(protected, tmp_path / "unlocked.pdf", "secret")

    assert is_pdf_encrypted(protected) is True
    assert is_pdf_encrypted(unlocked) is False


@pytest.mark.parametrize(
    "operation",
    [
        pytest.param(lambda src, out: rotate_pdf_pages(src, {1: 90}), id="rotate-in-place"),
        pytest.param(lambda src, out: rotate_pdf_pages(src, {1: 90}, out / "rotated.pdf"), id="rotate"),
        pytest.param(lambda src, out: reorganize_pdf(src, [PageAction.existing(2)], out / "reordered.pdf"), id="reorganize"),
        pytest.param(lambda src, out: split_pdf(src, out), id="split"),
        pytest.param(lambda src, out: merge_pdfs([src, src], out / "merged.pdf"), id="merge"),
        pytest.param(lambda src, out: mix_pdfs([src, src], out / "mixed.pdf"), id="mix"),
        pytest.param(lambda src, out: compress_pdf(src, out / "compressed.pdf"), id="compress"),
    ],
)
def test_rewrites_refuse_owner_protected_source(owner_locked_pdf: Path, tmp_path: Path, operation) -> None:
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    original = owner_locked_pdf.read_bytes()

    with pytest.raises(EncryptedPDFError, match="unlock it first"):
        operation(owner_locked_pdf, output_dir)

    assert owner_locked_pdf.read_bytes() == original
    assert list(output_dir.iterdir()) == []


def test_merge_refuses_owner_protected_later_input(sample_pdf: Path, owner_locked_pdf: Path, tmp_path: Path) -> None:
    with pytest.raises(EncryptedPDFError):
        merge_pdfs([sample_pdf, owner_locked_pdf], tmp_path / "merged.pdf")

    assert not (tmp_path / "merged.pdf").exists()


def test_owner_protected_source_can_be_unlocked_then_rotated(owner_locked_pdf: Path, tmp_path: Path) -> None:
    assert is_pdf_encrypted(owner_locked_pdf) is True

    unlocked = unlock_pdf(owner_locked_pdf, tmp_path / "unlocked.pdf", "")
    rotate_pdf_pages(unlocked, {1: 90})

    reader = PdfReader(unlocked)
    assert reader.is_encrypted is False
    assert reader.pages[0].get("/Rotate") == 90
