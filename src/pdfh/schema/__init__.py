from .text import text_to_html
from .wrapper import (
    ATTR_BBOX,
    ATTR_ELEMENT_ID,
    ATTR_PAGE,
    add_coordinate_mapping,
    escape_html,
    extract_body_content,
    extract_coordinate_mappings,
    extract_metadata,
    format_timestamp,
    is_pdfh_html,
    is_valid_conformance_level,
    unwrap_body,
    wrap_html,
)

__all__ = [
    "ATTR_BBOX",
    "ATTR_ELEMENT_ID",
    "ATTR_PAGE",
    "add_coordinate_mapping",
    "escape_html",
    "extract_body_content",
    "extract_coordinate_mappings",
    "extract_metadata",
    "format_timestamp",
    "is_pdfh_html",
    "is_valid_conformance_level",
    "text_to_html",
    "unwrap_body",
    "wrap_html",
]
