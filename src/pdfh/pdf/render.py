"""
Page Renderer
==============
Draws a plain-text projection of HTML onto PDF pages with pikepdf.

The rendering only has to give ordinary PDF viewers something sensible to
show. It carries no round-trip obligations: the authoritative HTML travels as
an embedded file.
"""

from __future__ import annotations

import html as html_lib
import logging
import math
import re

import pikepdf
from pikepdf import Name, Operator

from ..models.document import DEFAULT_MARGINS, DEFAULT_PAGE_SIZE, PageMargins, PageSize

logger = logging.getLogger(__name__)


TITLE_FONT_SIZE = 18
BODY_FONT_SIZE = 12
FOOTER_FONT_SIZE = 8
LINE_HEIGHT = 16
TITLE_GAP = 30
# Average Helvetica advance as a fraction of the font size
AVG_CHAR_WIDTH = 0.5

_FONT_KEY = "/F1"


def html_to_text(html: str) -> str:
    """Project HTML to plain text for visual rendering."""
    text = re.sub(r"<script[^>]*>[\s\S]*?</script>", "", html, flags=re.IGNORECASE)
    text = re.sub(r"<style[^>]*>[\s\S]*?</style>", "", text, flags=re.IGNORECASE)
    text = re.sub(r"</(p|div|h[1-6]|li|tr|br|hr)[^>]*>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<(br|hr)[^>]*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<li[^>]*>", "\n• ", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = html_lib.unescape(text)
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


def wrap_text(text: str, max_width: float, font_size: float) -> list[str]:
    """Greedy word wrap using an approximate character width."""
    chars_per_line = max(1, math.floor(max_width / (font_size * AVG_CHAR_WIDTH)))
    lines: list[str] = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        current = ""
        for word in paragraph.split():
            if len(current) + len(word) + 1 <= chars_per_line:
                current = f"{current} {word}" if current else word
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines


def _pdf_text(text: str) -> pikepdf.String:
    # Standard 14 fonts with WinAnsiEncoding; anything else becomes '?'
    return pikepdf.String(text.encode("cp1252", errors="replace"))


def _show_text(
    x: float, y: float, text: str, size: float, gray: float = 0.0
) -> list[tuple[list, Operator]]:
    return [
        ([], Operator("BT")),
        ([gray], Operator("g")),
        ([Name(_FONT_KEY), size], Operator("Tf")),
        ([x, y], Operator("Td")),
        ([_pdf_text(text)], Operator("Tj")),
        ([], Operator("ET")),
    ]


class TextPageRenderer:
    """
    Renders HTML as flowed Helvetica text.

    Usage::

        renderer = TextPageRenderer()
        count = renderer.render(pdf, "<h1>Hi</h1>", title="Doc")
    """

    def render(
        self,
        pdf: pikepdf.Pdf,
        html: str,
        *,
        title: str,
        page_size: PageSize = DEFAULT_PAGE_SIZE,
        margins: PageMargins = DEFAULT_MARGINS,
        footer: str | None = None,
    ) -> int:
        """
        Append pages showing ``html`` to ``pdf``.

        Returns the number of pages added (always at least one).
        """
        width, height = page_size.width, page_size.height
        content_width = width - margins.left - margins.right
        lines = wrap_text(html_to_text(html), content_width, BODY_FONT_SIZE)

        font = pdf.make_indirect(
            pikepdf.Dictionary(
                Type=Name.Font,
                Subtype=Name.Type1,
                BaseFont=Name.Helvetica,
                Encoding=Name.WinAnsiEncoding,
            )
        )

        pages: list[list[tuple[list, Operator]]] = []
        ops = _show_text(margins.left, height - margins.top, title, TITLE_FONT_SIZE)
        y = height - margins.top - TITLE_GAP
        for line in lines:
            if y < margins.bottom:
                pages.append(ops)
                ops = []
                y = height - margins.top
            if line:
                ops.extend(_show_text(margins.left, y, line, BODY_FONT_SIZE))
            y -= LINE_HEIGHT
        pages.append(ops)

        if footer and margins.bottom - 20 >= 0:
            pages[0].extend(
                _show_text(margins.left, margins.bottom - 20, footer, FOOTER_FONT_SIZE, gray=0.5)
            )

        for ops in pages:
            page_dict = pikepdf.Dictionary(
                Type=Name.Page,
                MediaBox=pikepdf.Array([0, 0, width, height]),
                Resources=pikepdf.Dictionary(Font=pikepdf.Dictionary({_FONT_KEY: font})),
                Contents=pdf.make_stream(pikepdf.unparse_content_stream(ops)),
            )
            pdf.pages.append(pikepdf.Page(page_dict))

        logger.debug(f"Rendered {len(lines)} text lines onto {len(pages)} page(s)")
        return len(pages)
