"""
pdfh CLI
=========
Command-line interface for the pdfh library.

Commands:
    create      Embed an HTML (or plain text) file in a new PDFH document
    extract     Recover the embedded HTML from a PDFH document
    inspect     Show embedded files, pages and metadata of a PDF
    validate    Validate an HTML file or the payload of a PDFH document
    version     Show version information

Usage::

    pdfh create notes.html -o notes.pdf --conformance PDFH-1b
    pdfh extract notes.pdf --body
    pdfh inspect notes.pdf --format json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..models.document import PAGE_SIZES, PDFH_NAMESPACE, PDFH_VERSION

console = Console()
err_console = Console(stderr=True)


def _decode_utf8(data: bytes, path: Path) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        err_console.print(f"[red]✗ {path.name} is not valid UTF-8: {e}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="pdfh")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool) -> None:
    """
    pdfh – HTML embedded in PDF.

    Creates PDF files that carry an exact copy of an HTML document and
    recovers it again.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Output path (default: input name with .pdf suffix)")
@click.option("--text", "as_text", is_flag=True, help="Treat the input as plain text")
@click.option("--title", default=None, help="Document title (default: input file stem)")
@click.option("--author", default=None)
@click.option("--conformance", type=click.Choice(["PDFH-1a", "PDFH-1b"]), default="PDFH-1b",
              show_default=True)
@click.option("--coordinate-mapping", is_flag=True,
              help="Declare per-element coordinate mapping (PDFH-1a)")
@click.option("--page-size", type=click.Choice([k.lower() for k in PAGE_SIZES]), default="letter",
              show_default=True)
@click.option("--margin", type=float, default=72.0, show_default=True,
              help="Uniform page margin in points")
def create(
    input_path: Path,
    output: Path | None,
    as_text: bool,
    title: str | None,
    author: str | None,
    conformance: str,
    coordinate_mapping: bool,
    page_size: str,
    margin: float,
) -> None:
    """Embed an HTML file in a new PDFH document."""
    from pydantic import ValidationError

    from ..models.document import PageMargins, PdfhWriterOptions
    from ..pdf.writer import create_pdfh
    from ..schema.text import text_to_html
    from ..validator.conformance import validate_html

    raw = _decode_utf8(input_path.read_bytes(), input_path)
    html = text_to_html(raw) if as_text else raw

    validation = validate_html(html)
    if not validation.passed:
        err_console.print("[red]✗ HTML failed validation:[/red]")
        for issue in validation.errors:
            err_console.print(f"  [red]ERROR[/red] [{issue.code}] {issue.message}")
        sys.exit(1)
    for issue in validation.warnings:
        console.print(f"  [yellow]WARNING[/yellow] [{issue.code}] {issue.message}")

    try:
        options = PdfhWriterOptions(
            html=html,
            title=title or input_path.stem,
            author=author,
            conformance_level=conformance,
            include_coordinate_mapping=coordinate_mapping,
            page_size=PAGE_SIZES[page_size.upper()],
            margins=PageMargins.uniform(margin),
        )
    except ValidationError as e:
        err_console.print(f"[red]Invalid options: {e}[/red]")
        sys.exit(2)

    pdf_bytes = create_pdfh(options)

    output_path = output or input_path.with_suffix(".pdf")
    output_path.write_bytes(pdf_bytes)

    console.print(f"[green]✓[/green] PDFH written to [bold]{output_path}[/bold]")
    console.print(f"  Conformance: {conformance}")
    console.print(f"  Size: {len(pdf_bytes):,} bytes")


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the HTML here instead of standard output")
@click.option("--body", is_flag=True, help="Only the body region, trimmed for display")
def extract(pdf_path: Path, output: Path | None, body: bool) -> None:
    """Recover the embedded HTML from a PDFH document."""
    from ..pdf.reader import extract_pdfh

    result = extract_pdfh(pdf_path.read_bytes())
    if not result.is_pdfh or result.content is None:
        err_console.print(f"[red]{result.error}[/red]")
        sys.exit(1)

    html = result.content.body() if body else result.content.html
    if output:
        # Bytes, so that line endings are written back untouched
        output.write_bytes(html.encode("utf-8"))
        console.print(f"[green]✓[/green] HTML written to [bold]{output}[/bold]")
    else:
        click.echo(html, nl=False)


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["rich", "json"]), default="rich")
def inspect(pdf_path: Path, output_format: str) -> None:
    """Inspect embedded files, pages and metadata of a PDF."""
    from ..pdf.reader import extract_pdfh, list_embedded_files

    data = pdf_path.read_bytes()
    files = list_embedded_files(data)
    result = extract_pdfh(data)
    content = result.content

    if output_format == "json":
        output = {
            "file": str(pdf_path),
            "is_pdfh": result.is_pdfh,
            "error": result.error,
            "embedded_files": [
                {
                    "name": f.name,
                    "size": f.size,
                    "content_type": f.content_type,
                    "relationship": f.relationship,
                }
                for f in files
            ],
        }
        if content is not None:
            output.update({
                "version": content.version,
                "conformance_level": content.conformance_level.value,
                "pages": [p.model_dump(mode="json") for p in content.pages],
                "metadata": content.metadata.model_dump(mode="json", exclude_none=True)
                if content.metadata else None,
            })
        click.echo(json.dumps(output, indent=2, default=str))
        return

    status = "[bold green]PDFH[/bold green]" if result.is_pdfh else "[yellow]plain PDF[/yellow]"
    console.print()
    console.print(Panel(
        f"[bold]{pdf_path.name}[/bold]\n"
        f"Type: {status}  |  Embedded files: [cyan]{len(files)}[/cyan]",
        title="PDFH Inspection",
        border_style="cyan",
    ))

    if files:
        t = Table(title="Embedded Files", box=box.ROUNDED)
        t.add_column("#")
        t.add_column("Name")
        t.add_column("Type")
        t.add_column("Relationship")
        t.add_column("Size", justify="right")
        for i, f in enumerate(files, 1):
            t.add_row(
                str(i),
                f"[cyan]{f.name}[/cyan]",
                f.content_type or "—",
                f.relationship or "—",
                f"{f.size:,}",
            )
        console.print(t)

    if content is not None:
        meta = content.metadata
        t = Table(title="Document", box=box.SIMPLE)
        t.add_column("Field", style="dim")
        t.add_column("Value")
        t.add_row("Version", content.version)
        t.add_row("Conformance", content.conformance_level.value)
        t.add_row("Pages", str(len(content.pages)))
        if meta:
            t.add_row("Title", meta.title or "—")
            t.add_row("Author", meta.author or "—")
            t.add_row("Producer", meta.producer or "—")
            t.add_row("Created", str(meta.creation_date or "—"))
        console.print(t)

        preview = content.body()[:300]
        if len(content.body()) > 300:
            preview += "\n  ... (truncated)"
        console.print(Panel(preview, title="Body Preview", border_style="dim"))
    else:
        console.print(f"\n[yellow]{result.error}[/yellow]")
    console.print()


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Exit with code 1 if any warnings")
@click.option("--json-output", is_flag=True, help="Output results as JSON")
def validate(path: Path, strict: bool, json_output: bool) -> None:
    """Validate an HTML file, or the HTML embedded in a PDFH document."""
    from ..pdf.reader import extract_pdfh
    from ..schema.wrapper import is_pdfh_html
    from ..validator.conformance import validate_html, validate_pdfh_html

    data = path.read_bytes()
    if data.startswith(b"%PDF"):
        extracted = extract_pdfh(data)
        if not extracted.is_pdfh or extracted.content is None:
            err_console.print(f"[red]{extracted.error}[/red]")
            sys.exit(1)
        html = extracted.content.html
        result = validate_pdfh_html(html)
    else:
        html = _decode_utf8(data, path)
        result = validate_pdfh_html(html) if is_pdfh_html(html) else validate_html(html)

    if json_output:
        click.echo(json.dumps({
            "file": str(path),
            "passed": result.passed,
            "errors": [{"code": i.code, "msg": i.message} for i in result.errors],
            "warnings": [{"code": i.code, "msg": i.message} for i in result.warnings],
        }, indent=2))
    else:
        status_str = "[bold green]PASS[/bold green]" if result.passed else "[bold red]FAIL[/bold red]"
        console.print(Panel(
            f"[bold]{path.name}[/bold]\n"
            f"Status: {status_str}  |  "
            f"Errors: {len(result.errors)}  |  Warnings: {len(result.warnings)}",
            title="PDFH Validation",
            border_style="blue",
        ))
        for issue in result.issues:
            color = "red" if issue.severity.value == "ERROR" else "yellow"
            console.print(f"  [{color}]{issue.severity.value}[/{color}] [{issue.code}] {issue.message}")

    exit_code = 0
    if not result.passed:
        exit_code = 1
    elif strict and result.warnings:
        exit_code = 1
    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# version info
# ---------------------------------------------------------------------------


@cli.command("version")
def show_version() -> None:
    """Show detailed version and format information."""
    console.print(Panel(
        f"[bold cyan]pdfh[/bold cyan] v{__version__}\n\n"
        "HTML embedded in PDF – Python implementation\n"
        f"Format version: PDFH {PDFH_VERSION}\n"
        f"Namespace:      {PDFH_NAMESPACE}\n"
        "Conformance:    PDFH-1a, PDFH-1b",
        title="pdfh",
        border_style="cyan",
    ))


if __name__ == "__main__":
    cli()
