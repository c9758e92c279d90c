"""
Exceptions raised by the PDFH write path.

The read path never raises for bad input: unreadable or foreign PDFs are
reported through :class:`pdfh.models.document.PdfhReaderResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validator.conformance import ValidationResult


class PdfhError(Exception):
    """Base exception for all PDFH errors."""


class PdfhValidationError(PdfhError):
    """Raised when HTML fails validation before any PDF work begins."""

    def __init__(self, result: "ValidationResult") -> None:
        self.result = result
        messages = ", ".join(issue.message for issue in result.errors)
        super().__init__(f"Invalid HTML: {messages}")
