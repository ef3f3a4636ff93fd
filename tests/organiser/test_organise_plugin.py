from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader

from paradisepdf.tools import load_builtin_plugins
from paradisepdf.tools.common.interfaces import ConversionContext
from paradisepdf.tools.common.pipeline import registry


def setup_module(module):
    load_builtin_plugins()


def test_organise_tool_accepts_mixed_actions(make_pdf, tmp_path: Path, page_widths) -> None:
    source = make_pdf("source.pdf", [101, 102])
    context = ConversionContext(
        input_path=source,
        output_path=tmp_path / "out.pdf",
        config={"actions": [2, "blank", "1"]},
    )
    result = registry.create("organise", context).run()
    assert page_widths(result) == [102, 101, 101]


def test_rotate_tool(make_pdf, tmp_path: Path) -> None:
    source = make_pdf("source.pdf", [101, 102])
    output = tmp_path / "rotated.pdf"
    context = ConversionContext(input_path=source, output_path=output, config={"rotations": {"2": "270"}})
    registry.create("rotate", context).run()
    assert [page.rotation for page in PdfReader(output).pages] == [0, 270]
