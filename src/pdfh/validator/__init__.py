from .conformance import (
    HtmlValidator,
    PdfhHtmlValidator,
    Severity,
    ValidationIssue,
    ValidationResult,
    validate_html,
    validate_pdfh_html,
)

__all__ = [
    "HtmlValidator",
    "PdfhHtmlValidator",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "validate_html",
    "validate_pdfh_html",
]
