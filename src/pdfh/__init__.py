"""
pdfh – HTML embedded in PDF
============================
Reference implementation of the PDFH container format: a valid, viewable PDF
that carries an exact copy of a structured HTML document as a reserved
embedded file (``pdfh-content.html``).

Conformance levels:
    PDFH-1b   HTML embedding only
    PDFH-1a   HTML embedding plus optional per-element coordinate mapping

Quick Start::

    from pdfh import ConformanceLevel, create_pdfh, extract_pdfh

    pdf_bytes = create_pdfh(
        html="<h1>Title</h1>\\n<p>Line one.</p>",
        title="Quarterly Notes",
        conformance_level=ConformanceLevel.PDFH_1B,
    )

    result = extract_pdfh(pdf_bytes)
    if result.is_pdfh:
        print(result.content.conformance_level, len(result.content.pages))
        print(result.content.body())
"""

__version__ = "0.1.0"
__format_version__ = "1.0"

# Core models
from .models.document import (
    DEFAULT_MARGINS,
    DEFAULT_PAGE_SIZE,
    PAGE_SIZES,
    PDFH_EMBEDDED_FILENAME,
    PDFH_MIME_TYPE,
    PDFH_NAMESPACE,
    PDFH_VERSION,
    BoundingBox,
    ConformanceLevel,
    CoordinateMapping,
    EmbeddedFile,
    HtmlMetadata,
    PageMargins,
    PageSize,
    PdfhContent,
    PdfhMetadata,
    PdfhPage,
    PdfhReaderResult,
    PdfhWriterOptions,
)

# Errors
from .exceptions import PdfhError, PdfhValidationError

# Schema
from .schema import (
    add_coordinate_mapping,
    extract_body_content,
    extract_coordinate_mappings,
    extract_metadata,
    is_pdfh_html,
    is_valid_conformance_level,
    text_to_html,
    unwrap_body,
    wrap_html,
)

# Validator
from .validator.conformance import (
    HtmlValidator,
    PdfhHtmlValidator,
    Severity,
    ValidationIssue,
    ValidationResult,
    validate_html,
    validate_pdfh_html,
)

# PDF I/O
from .pdf.reader import (
    PdfhReader,
    extract_body_html,
    extract_html,
    extract_pdfh,
    extract_pdfh_async,
    get_pdfh_metadata,
    is_pdfh_file,
    list_embedded_files,
)
from .pdf.render import TextPageRenderer
from .pdf.writer import PdfhWriter, create_pdfh, create_pdfh_async

__all__ = [
    # Models
    "DEFAULT_MARGINS",
    "DEFAULT_PAGE_SIZE",
    "PAGE_SIZES",
    "PDFH_EMBEDDED_FILENAME",
    "PDFH_MIME_TYPE",
    "PDFH_NAMESPACE",
    "PDFH_VERSION",
    "BoundingBox",
    "ConformanceLevel",
    "CoordinateMapping",
    "EmbeddedFile",
    "HtmlMetadata",
    "PageMargins",
    "PageSize",
    "PdfhContent",
    "PdfhMetadata",
    "PdfhPage",
    "PdfhReaderResult",
    "PdfhWriterOptions",
    # Errors
    "PdfhError",
    "PdfhValidationError",
    # Schema
    "add_coordinate_mapping",
    "extract_body_content",
    "extract_coordinate_mappings",
    "extract_metadata",
    "is_pdfh_html",
    "is_valid_conformance_level",
    "text_to_html",
    "unwrap_body",
    "wrap_html",
    # Validation
    "HtmlValidator",
    "PdfhHtmlValidator",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "validate_html",
    "validate_pdfh_html",
    # PDF I/O
    "PdfhReader",
    "PdfhWriter",
    "TextPageRenderer",
    "create_pdfh",
    "create_pdfh_async",
    "extract_body_html",
    "extract_html",
    "extract_pdfh",
    "extract_pdfh_async",
    "get_pdfh_metadata",
    "is_pdfh_file",
    "list_embedded_files",
]
