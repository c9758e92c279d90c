"""
PDF Reader
===========
Locates and decodes the PDFH payload of a PDF container.

Embedded files are discovered via:
- The catalog /Names -> /EmbeddedFiles name tree
- The catalog /AF associated-files array (PDF/A-3 style)

Any PDF is valid input: a container without the reserved attachment, or bytes
that do not parse at all, yield a negative :class:`PdfhReaderResult` rather
than an exception.

Example::

    from pdfh.pdf import extract_pdfh

    result = extract_pdfh(pdf_bytes)
    if result.is_pdfh:
        print(result.content.conformance_level, len(result.content.pages))
    else:
        print(result.error)
"""

from __future__ import annotations

import asyncio
import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

import pikepdf

from ..models.document import (
    PDFH_EMBEDDED_FILENAME,
    PDFH_VERSION,
    ConformanceLevel,
    EmbeddedFile,
    PdfhContent,
    PdfhMetadata,
    PdfhPage,
    PdfhReaderResult,
)
from ..schema.wrapper import extract_body_content, extract_coordinate_mappings, extract_metadata

logger = logging.getLogger(__name__)

NOT_PDFH_ERROR = "No PDFH content found in PDF"

# Failures a damaged or foreign PDF can raise anywhere in the object graph
READ_ERRORS = (
    pikepdf.PdfError,
    UnicodeDecodeError,
    OSError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
)

PdfSource = bytes | bytearray | str | Path | BinaryIO


class PdfhReader:
    """
    Context-manager-based, read-only view of a PDF container.

    Exposes the container through a small surface (embedded files, page
    geometry, document information) so that the codec does not depend on the
    pikepdf object model. The container is never modified.
    """

    def __init__(self, source: PdfSource) -> None:
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        elif isinstance(source, Path):
            source = str(source)
        self._pdf = pikepdf.open(source)

    def __enter__(self) -> "PdfhReader":
        return self

    def __exit__(self, *_: Any) -> None:
        self._pdf.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_embedded_files(self) -> list[EmbeddedFile]:
        """
        Enumerate embedded files.

        The name tree comes first; catalog /AF entries are added when their
        name was not already seen.
        """
        files: list[EmbeddedFile] = []
        seen: set[str] = set()

        for name, filespec in self._pdf.attachments.items():
            ef = self._embedded_file(name, filespec.obj)
            if ef is not None:
                seen.add(ef.name)
                files.append(ef)

        associated = self._pdf.Root.get("/AF")
        if isinstance(associated, pikepdf.Array):
            for fs in associated:
                if not isinstance(fs, pikepdf.Dictionary):
                    continue
                name = self._str_or_none(fs.get("/UF") or fs.get("/F"))
                if name is None or name in seen:
                    continue
                ef = self._embedded_file(name, fs)
                if ef is not None:
                    seen.add(ef.name)
                    files.append(ef)

        return files

    def find_embedded_file(self, name: str = PDFH_EMBEDDED_FILENAME) -> EmbeddedFile | None:
        """Return the embedded file registered under exactly ``name``."""
        for ef in self.list_embedded_files():
            if ef.name == name:
                return ef
        return None

    def pages(self) -> list[PdfhPage]:
        """Page numbers and dimensions in PDF points."""
        pages: list[PdfhPage] = []
        for number, page in enumerate(self._pdf.pages, start=1):
            x0, y0, x1, y1 = (float(v) for v in page.mediabox)
            pages.append(PdfhPage(page_number=number, width=abs(x1 - x0), height=abs(y1 - y0)))
        return pages

    def page_count(self) -> int:
        return len(self._pdf.pages)

    def info_value(self, key: str) -> str | None:
        """A document information entry as text, or None."""
        info = self._pdf.trailer.get("/Info")
        if not isinstance(info, pikepdf.Dictionary):
            return None
        return self._str_or_none(info.get(key if key.startswith("/") else f"/{key}"))

    def document_metadata(self) -> PdfhMetadata:
        """Standard document information entries."""
        keywords = self.info_value("/Keywords")
        return PdfhMetadata(
            title=self.info_value("/Title"),
            author=self.info_value("/Author"),
            subject=self.info_value("/Subject"),
            keywords=[k.strip() for k in keywords.split(",") if k.strip()] if keywords else [],
            creation_date=self._date_or_none(self.info_value("/CreationDate")),
            modification_date=self._date_or_none(self.info_value("/ModDate")),
            creator=self.info_value("/Creator"),
            producer=self.info_value("/Producer"),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _embedded_file(self, name: str, fs: pikepdf.Dictionary) -> EmbeddedFile | None:
        """Read one file specification dictionary (/EF -> /UF or /F stream)."""
        try:
            ef = fs.get("/EF")
            stream = (ef.get("/UF") or ef.get("/F")) if isinstance(ef, pikepdf.Dictionary) else None
            if not isinstance(stream, pikepdf.Stream):
                logger.debug(f"Embedded file {name!r} has no file stream")
                return None
            data = stream.read_bytes()
        except READ_ERRORS as exc:
            logger.debug(f"Skipping unreadable embedded file {name!r}: {exc}")
            return None

        return EmbeddedFile(
            name=name,
            data=data,
            content_type=self._name_or_none(stream.get("/Subtype")),
            description=self._str_or_none(fs.get("/Desc")),
            relationship=self._name_or_none(fs.get("/AFRelationship")),
        )

    @staticmethod
    def _name_or_none(val: Any) -> str | None:
        if not isinstance(val, pikepdf.Name):
            return None
        return str(val).lstrip("/") or None

    @staticmethod
    def _str_or_none(val: Any) -> str | None:
        if val is None:
            return None
        s = str(val)
        return s if s else None

    @staticmethod
    def _date_or_none(val: str | None) -> datetime | None:
        if not val:
            return None
        try:
            stamp = val[2:] if val.startswith("D:") else val
            return datetime.strptime(stamp[:14], "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Codec decode path
# ---------------------------------------------------------------------------


def list_embedded_files(data: PdfSource) -> list[EmbeddedFile]:
    """All embedded files of a PDF; an empty list if it cannot be parsed."""
    try:
        with PdfhReader(data) as reader:
            return reader.list_embedded_files()
    except READ_ERRORS as exc:
        logger.warning(f"Could not list embedded files: {exc}")
        return []


def is_pdfh_file(data: PdfSource) -> bool:
    """True iff the PDF carries an embedded file with the reserved PDFH name."""
    return any(ef.name == PDFH_EMBEDDED_FILENAME for ef in list_embedded_files(data))


def extract_pdfh(data: PdfSource) -> PdfhReaderResult:
    """
    Recover the PDFH content model from a PDF.

    The embedded bytes are decoded as UTF-8 with no further normalization, so
    ``result.content.html`` is exactly the document that was embedded.
    """
    try:
        with PdfhReader(data) as reader:
            payload = reader.find_embedded_file(PDFH_EMBEDDED_FILENAME)
            if payload is None:
                return PdfhReaderResult(is_pdfh=False, error=NOT_PDFH_ERROR)

            html = payload.data.decode("utf-8")
            meta = extract_metadata(html)

            version = meta.version or reader.info_value("/PDFHVersion") or PDFH_VERSION
            conformance = (
                meta.conformance()
                or _conformance_or_none(reader.info_value("/PDFHConformance"))
                or ConformanceLevel.PDFH_1B
            )

            pages = reader.pages()
            if meta.has_coordinate_mapping:
                _attach_mappings(pages, html)

            content = PdfhContent(
                html=html,
                version=version,
                conformance_level=conformance,
                metadata=reader.document_metadata(),
                pages=pages,
            )
    except READ_ERRORS as exc:
        logger.warning(f"PDFH extraction failed: {exc}")
        return PdfhReaderResult(is_pdfh=False, error=str(exc) or "Failed to read PDF")

    return PdfhReaderResult(is_pdfh=True, content=content)


def extract_html(data: PdfSource) -> str | None:
    """The full embedded HTML document, or None."""
    result = extract_pdfh(data)
    return result.content.html if result.content else None


def extract_body_html(data: PdfSource) -> str | None:
    """The body region of the embedded HTML, trimmed for display, or None."""
    html = extract_html(data)
    return extract_body_content(html) if html is not None else None


def get_pdfh_metadata(data: PdfSource) -> dict[str, Any]:
    """Summary of a PDFH container without returning the HTML itself."""
    result = extract_pdfh(data)
    if not result.content:
        return {"is_pdfh": False}
    content = result.content
    return {
        "is_pdfh": True,
        "version": content.version,
        "conformance_level": content.conformance_level.value,
        "page_count": len(content.pages),
        "title": content.metadata.title if content.metadata else None,
    }


async def extract_pdfh_async(data: PdfSource) -> PdfhReaderResult:
    """Run :func:`extract_pdfh` as one worker-thread task."""
    return await asyncio.to_thread(extract_pdfh, data)


def _conformance_or_none(value: str | None) -> ConformanceLevel | None:
    try:
        return ConformanceLevel(value)
    except ValueError:
        return None


def _attach_mappings(pages: list[PdfhPage], html: str) -> None:
    by_number = {p.page_number: p for p in pages}
    for mapping in extract_coordinate_mappings(html):
        page = by_number.get(mapping.page)
        if page is not None:
            page.coordinate_mappings.append(mapping)
