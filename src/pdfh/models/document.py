"""
PDFH Document – Core Model
===========================
Python representation of the PDFH container format: a valid PDF that carries
exactly one reserved embedded file holding a wrapped HTML document.

This module defines the format constants, the conformance levels and the
Pydantic models exchanged by the writer and the reader.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Format constants
# ---------------------------------------------------------------------------

PDFH_NAMESPACE = "https://pdfh.org/2025/schema"
PDFH_VERSION = "1.0"
PDFH_EMBEDDED_FILENAME = "pdfh-content.html"
PDFH_MIME_TYPE = "text/html"
PDFH_DEFAULT_TITLE = "PDFH Document"
PDFH_GENERATOR = "pdfh v0.1.0"
PDFH_PRODUCER = f"PDFH Writer v{PDFH_VERSION}"
COORDINATE_MAPPING_ENABLED = "enabled"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ConformanceLevel(str, Enum):
    """
    PDFH conformance levels.

    PDFH_1A – full: HTML embedding plus optional per-element coordinate mapping.
    PDFH_1B – basic: HTML embedding only.
    """
    PDFH_1A = "PDFH-1a"
    PDFH_1B = "PDFH-1b"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class PageSize(BaseModel):
    """Page size in PDF points (72 points = 1 inch)."""
    model_config = ConfigDict(frozen=True)

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class PageMargins(BaseModel):
    """Page margins in PDF points."""
    model_config = ConfigDict(frozen=True)

    top: float = Field(72.0, ge=0)
    right: float = Field(72.0, ge=0)
    bottom: float = Field(72.0, ge=0)
    left: float = Field(72.0, ge=0)

    @classmethod
    def uniform(cls, value: float) -> "PageMargins":
        return cls(top=value, right=value, bottom=value, left=value)


PAGE_SIZES: dict[str, PageSize] = {
    "LETTER": PageSize(width=612, height=792),
    "LEGAL": PageSize(width=612, height=1008),
    "A4": PageSize(width=595.28, height=841.89),
    "A3": PageSize(width=841.89, height=1190.55),
}

DEFAULT_PAGE_SIZE = PAGE_SIZES["LETTER"]
DEFAULT_MARGINS = PageMargins()


class BoundingBox(BaseModel):
    """Rectangle in page coordinate space."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class CoordinateMapping(BaseModel):
    """Associates an HTML element with its position on a rendered page (PDFH-1a)."""
    model_config = ConfigDict(frozen=True)

    element_id: str
    page: int = Field(..., ge=1, description="Page number (1-based)")
    bbox: BoundingBox


class PdfhPage(BaseModel):
    """Geometry of a single page of the PDF container."""
    page_number: int = Field(..., ge=1)
    width: float
    height: float
    coordinate_mappings: list[CoordinateMapping] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

class PdfhMetadata(BaseModel):
    """Standard PDF document information (Info dictionary)."""
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: list[str] = Field(default_factory=list)
    creation_date: datetime | None = None
    modification_date: datetime | None = None
    creator: str | None = None
    producer: str | None = None


class HtmlMetadata(BaseModel):
    """
    Metadata declared by the ``pdfh:*`` meta tags of a wrapped document.

    Absent declarations stay ``None``. ``conformance_level`` holds the raw
    declared string so that unrecognized values can be reported by the
    validator.
    """
    version: str | None = None
    conformance_level: str | None = None
    generator: str | None = None
    created: str | None = None
    has_coordinate_mapping: bool = False

    def conformance(self) -> ConformanceLevel | None:
        """The declared conformance level, or None if absent or unrecognized."""
        try:
            return ConformanceLevel(self.conformance_level)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Writer / reader exchange models
# ---------------------------------------------------------------------------

class PdfhWriterOptions(BaseModel):
    """Options for creating a PDFH document."""
    html: str
    title: str = PDFH_DEFAULT_TITLE
    author: str | None = None
    conformance_level: ConformanceLevel
    include_coordinate_mapping: bool = False
    page_size: PageSize = DEFAULT_PAGE_SIZE
    margins: PageMargins = DEFAULT_MARGINS
    metadata_date: datetime | None = Field(
        None, description="Pins every embedded timestamp (for deterministic output)"
    )

    @model_validator(mode="after")
    def validate_content_area(self) -> "PdfhWriterOptions":
        if self.margins.left + self.margins.right >= self.page_size.width:
            raise ValueError("horizontal margins leave no content area on the page")
        if self.margins.top + self.margins.bottom >= self.page_size.height:
            raise ValueError("vertical margins leave no content area on the page")
        return self


class PdfhContent(BaseModel):
    """Content model recovered from a PDFH container."""
    html: str = Field(..., description="The full wrapped HTML, exactly as embedded")
    version: str
    conformance_level: ConformanceLevel
    metadata: PdfhMetadata | None = None
    pages: list[PdfhPage] = Field(default_factory=list)

    def body(self) -> str:
        """Body region of the embedded document, trimmed for display."""
        from ..schema.wrapper import extract_body_content

        return extract_body_content(self.html)


class PdfhReaderResult(BaseModel):
    """Outcome of a read: either content or an error string, never an exception."""
    is_pdfh: bool
    content: PdfhContent | None = None
    error: str | None = None


@dataclass
class EmbeddedFile:
    """A named file carried inside a PDF container."""
    name: str
    data: bytes
    content_type: str | None = None
    description: str | None = None
    relationship: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)
