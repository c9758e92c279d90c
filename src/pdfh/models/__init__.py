from .document import (
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

__all__ = [
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
]
