from .reader import (
    PdfhReader,
    extract_body_html,
    extract_html,
    extract_pdfh,
    extract_pdfh_async,
    get_pdfh_metadata,
    is_pdfh_file,
    list_embedded_files,
)
from .render import TextPageRenderer
from .writer import PdfhWriter, create_pdfh, create_pdfh_async

__all__ = [
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
