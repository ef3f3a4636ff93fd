from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfReader

from paradisepdf import PDFFormatError, PDFValidationError, merge_documents, merge_pdfs, mix_documents, mix_pdfs


def test_merge_pdfs_creates_output(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    output = tmp_path / "merged.pdf"

    result = merge_pdfs(sample_pdfs, output)

    assert result == output.resolve()
    reader = PdfReader(result)
    assert len(reader.pages) == 2
    assert reader.metadata.get("/Title") == "Document One"


def test_merge_pdfs_appends_in_input_order(make_pdf, tmp_path: Path, page_widths) -> None:
    first = make_pdf("a.pdf", [101, 102])
    second = make_pdf("b.pdf", [201])
    third = make_pdf("c.pdf", [301, 302])

    result = merge_pdfs([first, second, third], tmp_path / "merged.pdf")

    assert page_widths(result) == [101, 102, 201, 301, 302]


def test_merge_pdfs_does_not_modify_inputs(make_pdf, tmp_path: Path) -> None:
    first = make_pdf("a.pdf", [101])
    second = make_pdf("b.pdf", [201])
    before = first.read_bytes()

    merge_pdfs([first, second], tmp_path / "merged.pdf")

    assert first.read_bytes() == before


def test_merge_same_file_twice(make_pdf, tmp_path: Path, page_widths) -> None:
    single = make_pdf("a.pdf", [101, 102])

    result = merge_pdfs([single, single], tmp_path / "twice.pdf")

    assert page_widths(result) == [101, 102, 101, 102]


def test_merge_pdfs_no_inputs(tmp_path: Path) -> None:
    with pytest.raises(PDFValidationError):
        merge_pdfs([], tmp_path / "out.pdf")
    with pytest.raises(PDFValidationError):
        mix_pdfs([], tmp_path / "out.pdf")


def test_merge_pdfs_aborts_on_unreadable_input(make_pdf, tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"not a pdf\n")
    output = tmp_path / "merged.pdf"

    with pytest.raises(PDFFormatError):
        merge_pdfs([make_pdf("a.pdf", [101]), broken], output)
    assert not output.exists()


def test_mix_pdfs_interleaves_round_robin(make_pdf, tmp_path: Path, page_widths) -> None:
    first = make_pdf("a.pdf", [101, 102])
    second = make_pdf("b.pdf", [201, 202, 203])

    result = mix_pdfs([first, second], tmp_path / "mixed.pdf")

    assert page_widths(result) == [101, 201, 102, 202, 203]
    reader = PdfReader(result)
    assert reader.pdf_header == "%PDF-1.7"
    assert reader.metadata.producer == "Paradise PDF"


def test_mix_three_documents(make_pdf, tmp_path: Path, page_widths) -> None:
    inputs = [make_pdf("a.pdf", [101]), make_pdf("b.pdf", [201, 202]), make_pdf("c.pdf", [301, 302, 303])]

    result = mix_pdfs(inputs, tmp_path / "mixed.pdf")

    assert page_widths(result) == [101, 201, 301, 202, 302, 303]


def test_merge_and_mix_wrappers(tmp_path: Path, sample_pdfs: list[Path]) -> None:
    merged = merge_documents(sample_pdfs, tmp_path / "merged.pdf")
    mixed = mix_documents(sample_pdfs, tmp_path / "mixed.pdf")

    assert len(PdfReader(merged).pages) == 2
    assert len(PdfReader(mixed).pages) == 2
