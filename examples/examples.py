"""
Examples for pdfh
==================
Three complete examples of HTML travelling inside a PDF container.

Run:
    python examples/examples.py
"""

from __future__ import annotations

import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pdfh import (
    PAGE_SIZES,
    BoundingBox,
    ConformanceLevel,
    CoordinateMapping,
    PdfhValidationError,
    PdfhWriterOptions,
    add_coordinate_mapping,
    create_pdfh,
    extract_pdfh,
    list_embedded_files,
    text_to_html,
    unwrap_body,
    validate_html,
)


# ---------------------------------------------------------------------------
# Example 1: Report round trip
# ---------------------------------------------------------------------------


def example_report_round_trip() -> None:
    """
    Example 1: A finance report written as HTML and saved as PDFH.

    The PDF opens in any viewer; the exact HTML comes back out for
    re-rendering on screen.
    """
    print("\n" + "="*60)
    print("EXAMPLE 1: Report round trip (PDFH-1b)")
    print("="*60)

    html = (
        "<h1>Q4 Revenue</h1>\n"
        "<table>\n"
        "  <tr><th>Line</th><th>USD</th></tr>\n"
        "  <tr><td>Revenue</td><td>4,200,000</td></tr>\n"
        "  <tr><td>Net Income</td><td>840,000</td></tr>\n"
        "</table>"
    )

    options = PdfhWriterOptions(
        html=html,
        title="Q4 Revenue",
        author="Finance",
        conformance_level=ConformanceLevel.PDFH_1B,
        page_size=PAGE_SIZES["A4"],
        metadata_date=datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
    )
    pdf_bytes = create_pdfh(options)
    print(f"  PDF size: {len(pdf_bytes):,} bytes")

    with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as f:
        pdf_path = Path(f.name)
    pdf_path.write_bytes(pdf_bytes)
    print(f"  Written to: {pdf_path}")

    for ef in list_embedded_files(pdf_path):
        print(f"  Embedded: {ef.name} ({ef.content_type}, {ef.size:,} bytes)")

    result = extract_pdfh(pdf_path)
    content = result.content
    print(f"  Conformance: {content.conformance_level.value}, pages: {len(content.pages)}")
    print(f"  Exact round trip: {unwrap_body(content.html) == html}")

    pdf_path.unlink(missing_ok=True)
    print("  ✓ Example 1 complete")


# ---------------------------------------------------------------------------
# Example 2: Coordinate mapping
# ---------------------------------------------------------------------------


def example_coordinate_mapping() -> None:
    """
    Example 2: PDFH-1a with element coordinates.

    Elements carry the page and rectangle they occupy, so a viewer can link
    the HTML view back to the PDF page.
    """
    print("\n" + "="*60)
    print("EXAMPLE 2: Coordinate mapping (PDFH-1a)")
    print("="*60)

    heading = add_coordinate_mapping(
        "<h1>Summary</h1>",
        CoordinateMapping(
            element_id="summary",
            page=1,
            bbox=BoundingBox(x=72, y=702, width=300, height=22),
        ),
    )
    html = heading + "\n<p>All targets met.</p>"

    pdf_bytes = create_pdfh(
        html=html,
        title="Summary",
        conformance_level=ConformanceLevel.PDFH_1A,
        include_coordinate_mapping=True,
    )
    content = extract_pdfh(pdf_bytes).content
    for page in content.pages:
        for mapping in page.coordinate_mappings:
            print(f"  Page {page.page_number}: #{mapping.element_id} at {mapping.bbox}")
    print("  ✓ Example 2 complete")


# ---------------------------------------------------------------------------
# Example 3: Plain text and validation
# ---------------------------------------------------------------------------


def example_text_and_validation() -> None:
    """
    Example 3: Plain text notes converted to HTML, plus a rejected input.
    """
    print("\n" + "="*60)
    print("EXAMPLE 3: Plain text and validation")
    print("="*60)

    notes = "Meeting notes\n\n- Budget approved\n- Hiring paused\n\n1. Send minutes\n2. Book room"
    html = text_to_html(notes)
    print(f"  Converted HTML:\n    {html.replace(chr(10), chr(10) + '    ')}")

    result = validate_html('<p onclick="track()">Hi</p><script>init()</script>')
    print(f"  Validation: {result}")
    for issue in result.warnings:
        print(f"    {issue.code}: {issue.message}")

    try:
        create_pdfh(html="   ", conformance_level=ConformanceLevel.PDFH_1B)
    except PdfhValidationError as e:
        print(f"  Rejected: {e}")
    print("  ✓ Example 3 complete")


# ---------------------------------------------------------------------------
# Run all examples
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    example_report_round_trip()
    example_coordinate_mapping()
    example_text_and_validation()

    print("\n" + "="*60)
    print("All examples completed successfully.")
    print("="*60 + "\n")
