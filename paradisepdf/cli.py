"""
Command-line interface for Paradise PDF.
"""

import logging
import sys
from functools import wraps

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from paradisepdf import __version__
from paradisepdf.core.utils import format_file_size
from paradisepdf.exceptions import ParadisePDFError
from paradisepdf.tools.common.interfaces import ConversionContext
from paradisepdf.tools.common.pipeline import registry
from paradisepdf.types import CompressionSettings, PageAction

console = Console()


def _run(name, input_path=None, output_path=None, **config):
    context = ConversionContext(input_path=input_path, output_path=output_path, config=config)
    return registry.create(name, context).run()


def handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ParadisePDFError, ValueError) as e:
            console.print(f"[bold red]✗ Error:[/bold red] {e}")
            sys.exit(1)

    return wrapper


def _format_box(box):
    if box is None:
        return "-"
    return " ".join(f"{value:g}" for value in box)


def _parse_rotation(token):
    page, _, angle = token.partition("=")
    if not angle:
        raise click.BadParameter(f"Expected PAGE=ANGLE, got '{token}'")
    return int(page), int(angle)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    Paradise PDF - split, merge, mix, reorganize, rotate and protect PDF files.
    """
    if verbose:
        logging.getLogger("paradisepdf").setLevel(logging.DEBUG)


@cli.command(name="count")
@click.argument('input_pdf', type=click.Path())
@handle_errors
def count(input_pdf):
    """Print the number of pages in INPUT_PDF."""
    console.print(_run("page-count", input_pdf))


@cli.command(name="preview")
@click.argument('input_pdf', type=click.Path())
@click.option('--every', '-n', type=int, default=None, help='Pages per part (default: one page per part)')
@handle_errors
def preview(input_pdf, every):
    """
    Show the parts a split would produce without writing them.

    Example:

        paradise-pdf preview report.pdf --every 3
    """
    mode = "every_n" if every is not None else "one_per_page"
    result = _run("split-preview", input_pdf, mode=mode, n=every)

    table = Table(title=f"{result.source_name} ({result.page_count} pages)")
    table.add_column("Output", style="cyan")
    table.add_column("Pages", style="green")
    for item in result.items:
        table.add_row(item.output_name, item.range_label)
    console.print(table)


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path())
@click.option('--output-dir', '-o', type=click.Path(), default=None, help='Output directory (default: next to the input)')
@click.option('--every', '-n', type=int, default=None, help='Pages per part (default: one page per part)')
@handle_errors
def split(input_pdf, output_dir, every):
    """
    Split INPUT_PDF into parts named <stem>_part<i>.pdf.

    Examples:

        paradise-pdf split report.pdf

        paradise-pdf split report.pdf -o parts --every 10
    """
    mode = "every_n" if every is not None else "one_per_page"
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Splitting", total=None)

        def update_progress(current, total):
            progress.update(task, completed=current, total=total)

        created = _run("split", input_pdf, output_dir, mode=mode, n=every, progress=update_progress)

    console.print(f"[bold green]✓ Wrote {len(created)} files[/bold green]")
    for path in created:
        console.print(f"  • {path.name}")


@cli.command(name="merge")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path())
@click.option('--output', '-o', required=True, type=click.Path(), help='Merged output file')
@handle_errors
def merge(input_pdfs, output):
    """Append the pages of every INPUT_PDFS, in order, into one file."""
    result = _run("merge", output_path=output, inputs=list(input_pdfs))
    console.print(f"[bold green]✓ Merged {len(input_pdfs)} files into {result}[/bold green]")


@cli.command(name="mix")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path())
@click.option('--output', '-o', required=True, type=click.Path(), help='Mixed output file')
@handle_errors
def mix(input_pdfs, output):
    """Interleave the pages of INPUT_PDFS one at a time, round-robin."""
    result = _run("mix", output_path=output, inputs=list(input_pdfs))
    console.print(f"[bold green]✓ Mixed {len(input_pdfs)} files into {result}[/bold green]")


@cli.command(name="organise")
@click.argument('input_pdf', type=click.Path())
@click.argument('actions')
@click.option('--output', '-o', required=True, type=click.Path(), help='Reorganized output file')
@handle_errors
def organise(input_pdf, actions, output):
    """
    Rebuild INPUT_PDF from a comma-separated ACTIONS list.

    Each action is a page number or "blank".

    Example:

        paradise-pdf organise report.pdf "3,1,blank,2" -o reordered.pdf
    """
    parsed = [PageAction.parse(token) for token in actions.split(",") if token.strip()]
    result = _run("organise", input_pdf, output, actions=parsed)
    console.print(f"[bold green]✓ Wrote {result}[/bold green]")


@cli.command(name="rotate")
@click.argument('input_pdf', type=click.Path())
@click.option('--rotate', '-r', 'rotations', multiple=True, required=True, help='PAGE=ANGLE, repeatable')
@click.option('--output', '-o', type=click.Path(), default=None, help='Output file (default: modify in place)')
@handle_errors
def rotate(input_pdf, rotations, output):
    """
    Rotate pages by a relative angle.

    Example:

        paradise-pdf rotate scan.pdf -r 1=90 -r 3=-90
    """
    mapping = dict(_parse_rotation(token) for token in rotations)
    result = _run("rotate", input_pdf, output, rotations=mapping)
    console.print(f"[bold green]✓ Rotated {len(mapping)} page(s) in {result}[/bold green]")


@cli.command(name="protect")
@click.argument('input_pdf', type=click.Path())
@click.option('--output', '-o', required=True, type=click.Path(), help='Encrypted output file')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='User password')
@click.option('--owner-password', default=None, help='Owner password (default: user password)')
@handle_errors
def protect(input_pdf, output, password, owner_password):
    """Write a password-protected copy of INPUT_PDF."""
    result = _run("encrypt", input_pdf, output, password=password, owner_password=owner_password)
    console.print(f"[bold green]✓ Protected copy written to {result}[/bold green]")


@cli.command(name="unlock")
@click.argument('input_pdf', type=click.Path())
@click.option('--output', '-o', required=True, type=click.Path(), help='Unencrypted output file')
@click.option('--password', prompt=True, hide_input=True, help='Document password')
@handle_errors
def unlock(input_pdf, output, password):
    """Write an unencrypted copy of a protected INPUT_PDF."""
    result = _run("decrypt", input_pdf, output, password=password)
    console.print(f"[bold green]✓ Unlocked copy written to {result}[/bold green]")


@cli.command(name="boxes")
@click.argument('input_pdf', type=click.Path())
@handle_errors
def boxes(input_pdf):
    """Show the page boxes of every page."""
    table = Table(title="Page Boxes")
    for column in ("Page", "MediaBox", "CropBox", "BleedBox", "TrimBox", "ArtBox"):
        table.add_column(column)
    for item in _run("inspect", input_pdf, report="boxes"):
        table.add_row(
            str(item.page_number),
            _format_box(item.media_box),
            _format_box(item.crop_box),
            _format_box(item.bleed_box),
            _format_box(item.trim_box),
            _format_box(item.art_box),
        )
    console.print(table)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path())
@handle_errors
def info(input_pdf):
    """Display document properties, fonts and images."""
    props = _run("inspect", input_pdf, report="properties")

    table = Table(title="PDF Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", props.version)
    table.add_row("Pages", str(props.page_count))
    table.add_row("Page size", props.page_size or "-")
    table.add_row("Encrypted", "yes" if props.encrypted else "no")
    for key, value in sorted(props.metadata.items()):
        table.add_row(key, value)
    table.add_row("Fonts", ", ".join(props.fonts) or "-")
    table.add_row("Images", str(len(props.images)))
    console.print(table)


@cli.command(name="diagnostics")
@click.argument('input_pdf', type=click.Path())
@handle_errors
def diagnostics(input_pdf):
    """Dump the raw header and trailer bytes of INPUT_PDF."""
    report = _run("inspect", input_pdf, report="diagnostics")
    console.print(f"[bold]File size:[/bold] {format_file_size(report.file_size)}")
    console.rule("Header")
    console.print(report.header, markup=False, highlight=False)
    console.rule("Trailer")
    console.print(report.trailer, markup=False, highlight=False)


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path())
@click.option('--output', '-o', required=True, type=click.Path(), help='Compressed output file')
@click.option('--remove-metadata', is_flag=True, help='Drop XMP metadata streams')
@click.option('--remove-annotations', is_flag=True, help='Drop page annotations')
@click.option('--keep-thumbnails', is_flag=True, help='Keep embedded page thumbnails')
@handle_errors
def compress(input_pdf, output, remove_metadata, remove_annotations, keep_thumbnails):
    """Remove optional structures and compress unfiltered streams."""
    settings = CompressionSettings(
        remove_metadata=remove_metadata,
        remove_annotations=remove_annotations,
        remove_thumbnails=not keep_thumbnails,
    )
    result = _run("compress", input_pdf, output, settings=settings)
    console.print(
        f"[bold green]✓ {format_file_size(result.original_size)} → "
        f"{format_file_size(result.compressed_size)}[/bold green]"
    )


if __name__ == '__main__':
    cli()
