"""
Plain text to HTML
===================
Turns raw text into simple, well-formed HTML made of paragraphs and lists.
"""

from __future__ import annotations

import re

from .wrapper import escape_html

UNORDERED_LIST_PREFIX = re.compile(r"^(\s*[-*•])\s+")
ORDERED_LIST_PREFIX = re.compile(r"^(\s*\d+\.)\s+")


def text_to_html(raw_text: str) -> str:
    """
    Convert ``raw_text`` to HTML.

    Blank lines separate blocks. Consecutive lines form one paragraph joined
    with ``<br>``; lines starting with ``-``, ``*`` or ``•`` form an unordered
    list and lines starting with ``1.`` style numbers an ordered list.
    """
    lines = raw_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    blocks: list[str] = []
    paragraph: list[str] = []
    items: list[str] = []
    list_type: str | None = None

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append("<p>" + "<br>".join(escape_html(line) for line in paragraph) + "</p>")
            paragraph.clear()

    def flush_list() -> None:
        nonlocal list_type
        if items and list_type:
            inner = "".join(f"<li>{escape_html(item)}</li>" for item in items)
            blocks.append(f"<{list_type}>{inner}</{list_type}>")
        items.clear()
        list_type = None

    for line in lines:
        if not line.strip():
            flush_list()
            flush_paragraph()
            continue

        for prefix, kind in ((UNORDERED_LIST_PREFIX, "ul"), (ORDERED_LIST_PREFIX, "ol")):
            if prefix.match(line):
                flush_paragraph()
                if list_type and list_type != kind:
                    flush_list()
                list_type = kind
                items.append(prefix.sub("", line, count=1).strip())
                break
        else:
            flush_list()
            paragraph.append(line)

    flush_list()
    flush_paragraph()
    return "\n\n".join(blocks)
