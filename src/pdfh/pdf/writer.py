"""
PDF Writer
===========
Creates PDFH files with pikepdf: a viewable PDF whose reserved embedded file
carries the wrapped HTML document.

Supports:
- Rendering a visual text representation of the HTML onto pages
- Document information (Title, Author, Producer, PDFH custom fields)
- Embedding the wrapped HTML as ``pdfh-content.html`` (AFRelationship /Source)
- Registration in the catalog /AF associated-files array
- Serialization to bytes or to a file

Example::

    from pdfh.pdf import create_pdfh

    pdf_bytes = create_pdfh(html="<h1>Hello</h1>", conformance_level="PDFH-1b")
"""

from __future__ import annotations

import asyncio
import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pikepdf

from ..exceptions import PdfhValidationError
from ..models.document import (
    DEFAULT_MARGINS,
    DEFAULT_PAGE_SIZE,
    PDFH_DEFAULT_TITLE,
    PDFH_EMBEDDED_FILENAME,
    PDFH_GENERATOR,
    PDFH_MIME_TYPE,
    PDFH_PRODUCER,
    PDFH_VERSION,
    ConformanceLevel,
    PageMargins,
    PageSize,
    PdfhWriterOptions,
)
from ..schema.wrapper import wrap_html
from ..validator.conformance import validate_html
from .render import TextPageRenderer

logger = logging.getLogger(__name__)

PDFH_SUBJECT = "PDFH Document"
PDFH_ATTACHMENT_DESCRIPTION = "PDFH embedded HTML content"


def pdf_date(value: datetime) -> str:
    """Format a datetime as a PDF date string (UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("D:%Y%m%d%H%M%S+00'00'")


class PdfhWriter:
    """
    Context-manager-based builder for PDFH containers.

    Usage::

        with PdfhWriter() as w:
            w.render(html, title="Report")
            w.set_metadata(title="Report", conformance_level=ConformanceLevel.PDFH_1B)
            w.embed_html(wrapped_html)
            data = w.to_bytes()
    """

    def __init__(self, renderer: TextPageRenderer | None = None) -> None:
        self._pdf = pikepdf.new()
        self._renderer = renderer or TextPageRenderer()

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "PdfhWriter":
        return self

    def __exit__(self, *_: Any) -> None:
        self._pdf.close()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def render(
        self,
        html: str,
        *,
        title: str = PDFH_DEFAULT_TITLE,
        page_size: PageSize = DEFAULT_PAGE_SIZE,
        margins: PageMargins = DEFAULT_MARGINS,
        footer: str | None = None,
    ) -> int:
        """Add pages with a visual representation of ``html``. Returns the page count added."""
        return self._renderer.render(
            self._pdf,
            html,
            title=title,
            page_size=page_size,
            margins=margins,
            footer=footer,
        )

    def set_metadata(
        self,
        *,
        title: str,
        conformance_level: ConformanceLevel,
        author: str | None = None,
        date: datetime | None = None,
    ) -> None:
        """Fill the document information dictionary, including the PDFH custom fields."""
        stamp = pdf_date(date or datetime.now(tz=timezone.utc))
        info = self._pdf.docinfo
        info["/Title"] = title
        info["/Subject"] = PDFH_SUBJECT
        info["/Creator"] = PDFH_GENERATOR
        info["/Producer"] = PDFH_PRODUCER
        info["/CreationDate"] = stamp
        info["/ModDate"] = stamp
        if author:
            info["/Author"] = author
        info["/PDFHVersion"] = PDFH_VERSION
        info["/PDFHConformance"] = ConformanceLevel(conformance_level).value

    def embed_html(
        self,
        html: str,
        *,
        filename: str = PDFH_EMBEDDED_FILENAME,
        date: datetime | None = None,
    ) -> pikepdf.Object:
        """
        Attach ``html`` as a UTF-8 embedded file marked as the document's source.

        Returns the file specification dictionary.
        """
        data = html.encode("utf-8")
        stamp = pdf_date(date or datetime.now(tz=timezone.utc))
        filespec = pikepdf.AttachedFileSpec(
            self._pdf,
            data,
            description=PDFH_ATTACHMENT_DESCRIPTION,
            filename=filename,
            mime_type=PDFH_MIME_TYPE,
            creation_date=stamp,
            mod_date=stamp,
            relationship=pikepdf.Name.Source,
        )
        self._pdf.attachments[filename] = filespec

        fs_obj = filespec.obj
        if not fs_obj.is_indirect:
            fs_obj = self._pdf.make_indirect(fs_obj)
        self._register_associated_file(fs_obj, filename)

        logger.debug(f"Embedded {len(data)} bytes as {filename}")
        return fs_obj

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize the PDF. The file ID is derived from content, so output is reproducible."""
        buffer = io.BytesIO()
        self._pdf.save(buffer, deterministic_id=True)
        return buffer.getvalue()

    def save(self, output: str | Path) -> None:
        Path(output).write_bytes(self.to_bytes())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _register_associated_file(self, fs_obj: pikepdf.Object, filename: str) -> None:
        """
        Make ``fs_obj`` the only catalog /AF entry for ``filename``.

        Newer pikepdf releases already list attachments in /AF when they are
        added; any entry under the same name is replaced rather than kept.
        """
        catalog = self._pdf.Root
        existing = catalog.get("/AF")
        kept = [
            entry
            for entry in (existing if isinstance(existing, pikepdf.Array) else [])
            if not (
                isinstance(entry, pikepdf.Dictionary)
                and str(entry.get("/UF", entry.get("/F", ""))) == filename
            )
        ]
        catalog["/AF"] = pikepdf.Array([*kept, fs_obj])

    @property
    def pdf(self) -> pikepdf.Pdf:
        """Direct access to the underlying pikepdf.Pdf object."""
        return self._pdf


# ---------------------------------------------------------------------------
# Codec encode path
# ---------------------------------------------------------------------------


def create_pdfh(
    options: PdfhWriterOptions | None = None,
    *,
    renderer: TextPageRenderer | None = None,
    **kwargs: Any,
) -> bytes:
    """
    Create a PDFH document and return its bytes.

    Accepts either a :class:`PdfhWriterOptions` or its fields as keywords.
    Raises :class:`PdfhValidationError` before any PDF work when the HTML is
    invalid.
    """
    if options is None:
        options = PdfhWriterOptions(**kwargs)

    validation = validate_html(options.html)
    if not validation.passed:
        raise PdfhValidationError(validation)
    for warning in validation.warnings:
        logger.info(f"HTML warning {warning.code}: {warning.message}")

    date = options.metadata_date or datetime.now(tz=timezone.utc)
    level = options.conformance_level

    wrapped = wrap_html(
        options.html,
        title=options.title,
        conformance_level=level,
        include_coordinate_mapping=options.include_coordinate_mapping,
        created=date,
    )

    with PdfhWriter(renderer) as writer:
        writer.render(
            options.html,
            title=options.title,
            page_size=options.page_size,
            margins=options.margins,
            footer=f"[PDFH Document - {level.value}]",
        )
        writer.set_metadata(
            title=options.title,
            conformance_level=level,
            author=options.author,
            date=date,
        )
        writer.embed_html(wrapped, date=date)
        data = writer.to_bytes()

    logger.info(f"Created {level.value} document ({len(data)} bytes)")
    return data


async def create_pdfh_async(
    options: PdfhWriterOptions | None = None, **kwargs: Any
) -> bytes:
    """Run :func:`create_pdfh` as one worker-thread task."""
    return await asyncio.to_thread(create_pdfh, options, **kwargs)
