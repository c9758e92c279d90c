"""
PDFH Schema Wrapper
====================
Wraps caller HTML in the PDFH document envelope and recovers metadata and body
content from wrapped documents.

Matching is intentionally shallow: the envelope places its meta tags in a
fixed, simple form, so patterns and substring checks are used instead of an
HTML parser. Anything not produced by :func:`wrap_html` is matched on a
best-effort basis only.

Example::

    from pdfh.schema import wrap_html, extract_metadata
    from pdfh.models.document import ConformanceLevel

    wrapped = wrap_html("<h1>Hello</h1>", conformance_level=ConformanceLevel.PDFH_1B)
    meta = extract_metadata(wrapped)
    print(meta.version, meta.conformance_level)
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from ..models.document import (
    COORDINATE_MAPPING_ENABLED,
    PDFH_DEFAULT_TITLE,
    PDFH_GENERATOR,
    PDFH_NAMESPACE,
    PDFH_VERSION,
    BoundingBox,
    ConformanceLevel,
    CoordinateMapping,
    HtmlMetadata,
)

logger = logging.getLogger(__name__)


META_VERSION = "pdfh:version"
META_CONFORMANCE = "pdfh:conformance"
META_GENERATOR = "pdfh:generator"
META_CREATED = "pdfh:created"
META_COORDINATE_MAPPING = "pdfh:coordinate-mapping"

# PDFH-1a coordinate mapping attributes
ATTR_PAGE = "data-pdfh-page"
ATTR_BBOX = "data-pdfh-bbox"
ATTR_ELEMENT_ID = "data-pdfh-id"

_BODY_RE = re.compile(r"<body[^>]*>([\s\S]*?)</body>", re.IGNORECASE)
# Exact boundaries written by wrap_html around the caller content
_ENVELOPE_BODY_OPEN = "\n</head>\n<body>\n"
_ENVELOPE_BODY_CLOSE = "\n</body>\n</html>"
_FIRST_TAG_RE = re.compile(r"^(<\w+)")
_MAPPED_TAG_RE = re.compile(r"<\w+\b[^>]*\b" + ATTR_BBOX + r"\s*=[^>]*>", re.IGNORECASE)

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

DEFAULT_STYLES = """\
    /* PDFH default styles for display */
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 100%;
      margin: 0;
      padding: 20px;
      box-sizing: border-box;
    }
    h1, h2, h3, h4, h5, h6 {
      margin-top: 1.5em;
      margin-bottom: 0.5em;
      line-height: 1.3;
    }
    h1 { font-size: 2em; }
    h2 { font-size: 1.5em; }
    h3 { font-size: 1.25em; }
    p { margin: 1em 0; }
    table {
      border-collapse: collapse;
      width: 100%;
      margin: 1em 0;
    }
    th, td {
      border: 1px solid #ddd;
      padding: 8px;
      text-align: left;
    }
    th { background-color: #f5f5f5; }
    code {
      background-color: #f4f4f4;
      padding: 2px 6px;
      border-radius: 3px;
      font-family: 'Consolas', 'Monaco', monospace;
    }
    pre {
      background-color: #f4f4f4;
      padding: 16px;
      border-radius: 4px;
      overflow-x: auto;
    }
    pre code {
      background: none;
      padding: 0;
    }
    ul, ol {
      margin: 1em 0;
      padding-left: 2em;
    }
    li { margin: 0.5em 0; }
    a { color: #0066cc; }
    img { max-width: 100%; height: auto; }
    blockquote {
      margin: 1em 0;
      padding-left: 1em;
      border-left: 4px solid #ddd;
      color: #666;
    }"""


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------


def wrap_html(
    content: str,
    *,
    conformance_level: ConformanceLevel | str,
    title: str = PDFH_DEFAULT_TITLE,
    include_coordinate_mapping: bool = False,
    created: datetime | None = None,
) -> str:
    """
    Produce a complete PDFH document around ``content``.

    Parameters
    ----------
    content:
        Caller HTML. Inserted into the body verbatim.
    conformance_level:
        PDFH-1a or PDFH-1b.
    title:
        Document title. The only field that is entity-escaped.
    include_coordinate_mapping:
        Emit the ``pdfh:coordinate-mapping`` declaration.
    created:
        Timestamp to declare instead of the current time.
    """
    level = ConformanceLevel(conformance_level)
    head = [
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        _meta(META_VERSION, PDFH_VERSION),
        _meta(META_CONFORMANCE, level.value),
        _meta(META_GENERATOR, PDFH_GENERATOR),
        _meta(META_CREATED, format_timestamp(created)),
    ]
    if include_coordinate_mapping:
        head.append(_meta(META_COORDINATE_MAPPING, COORDINATE_MAPPING_ENABLED))
    head.append(f"  <title>{escape_html(title)}</title>")
    head.append(f"  <style>\n{DEFAULT_STYLES}\n  </style>")

    wrapped = (
        "<!DOCTYPE html>\n"
        f'<html xmlns="{PDFH_NAMESPACE}" lang="en">\n'
        "<head>\n"
        + "\n".join(head)
        + _ENVELOPE_BODY_OPEN
        + content
        + _ENVELOPE_BODY_CLOSE
    )
    logger.debug(f"Wrapped {len(content)} chars of HTML as {level.value}")
    return wrapped


def format_timestamp(value: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    if value is None:
        value = datetime.now(tz=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    stamp = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def escape_html(text: str) -> str:
    """Escape the five HTML special characters."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def _meta(name: str, content: str) -> str:
    return f'  <meta name="{name}" content="{content}">'


# ---------------------------------------------------------------------------
# Unwrapping
# ---------------------------------------------------------------------------


def extract_body_content(html: str) -> str:
    """
    Return the inner region of the first body element, stripped at its edges.

    Intended for display. Returns ``html`` unchanged when there is no body.
    """
    match = _BODY_RE.search(html)
    return match.group(1).strip() if match else html


def unwrap_body(html: str) -> str:
    """
    Return the caller content of a document produced by :func:`wrap_html`.

    The content is cut between the envelope's own ``<body>`` line and its
    trailing ``</body>``/``</html>``, so body tags inside the content do not
    end it early and the result equals the original input exactly. Other
    documents fall back to the first body element, minus one newline on each
    side.
    """
    start = html.find(_ENVELOPE_BODY_OPEN)
    end = html.rfind(_ENVELOPE_BODY_CLOSE)
    if start != -1 and end >= start + len(_ENVELOPE_BODY_OPEN):
        return html[start + len(_ENVELOPE_BODY_OPEN):end]

    match = _BODY_RE.search(html)
    if not match:
        return html
    inner = match.group(1)
    if inner.startswith("\n"):
        inner = inner[1:]
    if inner.endswith("\n"):
        inner = inner[:-1]
    return inner


def extract_metadata(html: str) -> HtmlMetadata:
    """
    Read the ``pdfh:*`` meta declarations from ``html``.

    Each declaration is looked up independently; ``name`` and ``content`` may
    appear in either order.
    """
    return HtmlMetadata(
        version=_meta_content(html, META_VERSION),
        conformance_level=_meta_content(html, META_CONFORMANCE),
        generator=_meta_content(html, META_GENERATOR),
        created=_meta_content(html, META_CREATED),
        has_coordinate_mapping=(
            _meta_content(html, META_COORDINATE_MAPPING) == COORDINATE_MAPPING_ENABLED
        ),
    )


def _meta_content(html: str, name: str) -> str | None:
    key = re.escape(name)
    match = re.search(
        rf"""<meta[^>]*name=["']{key}["'][^>]*content=["']([^"']*)["']""",
        html,
        re.IGNORECASE,
    )
    if match:
        return match.group(1)
    # content before name
    match = re.search(
        rf"""<meta[^>]*content=["']([^"']*)["'][^>]*name=["']{key}["']""",
        html,
        re.IGNORECASE,
    )
    return match.group(1) if match else None


def is_pdfh_html(html: str) -> bool:
    """Cheap structural gate: namespace, version and conformance markers present."""
    return (
        PDFH_NAMESPACE in html
        and META_VERSION in html
        and META_CONFORMANCE in html
    )


def is_valid_conformance_level(value: str | None) -> bool:
    return value in {level.value for level in ConformanceLevel}


# ---------------------------------------------------------------------------
# Coordinate mapping (PDFH-1a)
# ---------------------------------------------------------------------------


def add_coordinate_mapping(element_html: str, mapping: CoordinateMapping) -> str:
    """Insert coordinate attributes into the first tag of ``element_html``."""
    bbox = mapping.bbox
    attrs = (
        f'{ATTR_PAGE}="{mapping.page}" '
        f'{ATTR_BBOX}="{_num(bbox.x)},{_num(bbox.y)},{_num(bbox.width)},{_num(bbox.height)}"'
    )
    if mapping.element_id:
        attrs += f' {ATTR_ELEMENT_ID}="{escape_html(mapping.element_id)}"'
    return _FIRST_TAG_RE.sub(lambda m: f"{m.group(1)} {attrs}", element_html, count=1)


def extract_coordinate_mappings(html: str) -> list[CoordinateMapping]:
    """
    Collect coordinate mappings from elements carrying ``data-pdfh-*`` attributes.

    Tags with a missing or malformed page/bbox are skipped. Elements without
    ``data-pdfh-id`` (or ``id``) get a positional id.
    """
    mappings: list[CoordinateMapping] = []
    for index, match in enumerate(_MAPPED_TAG_RE.finditer(html), start=1):
        tag = match.group(0)
        page = _attr(tag, ATTR_PAGE)
        bbox = _attr(tag, ATTR_BBOX)
        if page is None or bbox is None:
            continue
        try:
            x, y, width, height = (float(v) for v in bbox.split(","))
            mappings.append(
                CoordinateMapping(
                    element_id=_attr(tag, ATTR_ELEMENT_ID) or _attr(tag, "id") or f"pdfh-el-{index}",
                    page=int(page),
                    bbox=BoundingBox(x=x, y=y, width=width, height=height),
                )
            )
        except ValueError:
            logger.debug(f"Skipping malformed coordinate mapping: {tag[:80]}")
    return mappings


def _attr(tag: str, name: str) -> str | None:
    match = re.search(rf"""\s{re.escape(name)}\s*=\s*["']([^"']*)["']""", tag, re.IGNORECASE)
    return match.group(1) if match else None


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
