"""
Test Suite for pdfh
====================
Tests for the schema wrapper, validator, writer, reader and the PDF
round-trip of the embedded HTML.
"""

from __future__ import annotations

import asyncio
import dataclasses
import io
from datetime import datetime, timezone
from pathlib import Path

import pikepdf
import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pdfh import (
    PAGE_SIZES,
    PDFH_EMBEDDED_FILENAME,
    PDFH_NAMESPACE,
    BoundingBox,
    ConformanceLevel,
    CoordinateMapping,
    PageMargins,
    PdfhReader,
    PdfhValidationError,
    PdfhWriter,
    PdfhWriterOptions,
    Severity,
    ValidationIssue,
    add_coordinate_mapping,
    create_pdfh,
    create_pdfh_async,
    extract_body_content,
    extract_body_html,
    extract_coordinate_mappings,
    extract_html,
    extract_metadata,
    extract_pdfh,
    extract_pdfh_async,
    get_pdfh_metadata,
    is_pdfh_file,
    is_pdfh_html,
    is_valid_conformance_level,
    list_embedded_files,
    text_to_html,
    unwrap_body,
    validate_html,
    validate_pdfh_html,
    wrap_html,
)
from pdfh.models.document import PDFH_GENERATOR, PDFH_PRODUCER
from pdfh.pdf.reader import NOT_PDFH_ERROR
from pdfh.pdf.render import html_to_text, wrap_text


FIXED_DATE = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
SCENARIO_HTML = "<h1>Title</h1>\n<p>Line one.</p>\n<p>Line two.</p>"


# ===========================================================================
# Fixtures
# ===========================================================================


def _blank_pdf() -> pikepdf.Pdf:
    pdf = pikepdf.new()
    pdf.add_blank_page(page_size=(612, 792))
    return pdf


def _to_bytes(pdf: pikepdf.Pdf) -> bytes:
    buffer = io.BytesIO()
    pdf.save(buffer)
    pdf.close()
    return buffer.getvalue()


@pytest.fixture
def scenario_pdf() -> bytes:
    """PDFH-1b document built from the basic three-line scenario."""
    return create_pdfh(
        html=SCENARIO_HTML,
        title="Scenario",
        author="QA Team",
        conformance_level=ConformanceLevel.PDFH_1B,
        metadata_date=FIXED_DATE,
    )


@pytest.fixture
def plain_pdf() -> bytes:
    """Ordinary PDF without any embedded files."""
    return _to_bytes(_blank_pdf())


@pytest.fixture
def foreign_attachment_pdf() -> bytes:
    """PDF carrying an HTML attachment under a non-reserved name."""
    pdf = _blank_pdf()
    pdf.attachments["notes.html"] = pikepdf.AttachedFileSpec(
        pdf, b"<p>not the payload</p>", mime_type="text/html"
    )
    return _to_bytes(pdf)


# ===========================================================================
# Schema Tests
# ===========================================================================


class TestWrapHtml:
    """Tests for the PDFH document envelope."""

    def test_body_is_verbatim(self) -> None:
        html = "<div>\r\n  <span> A\tB </span>\r\n</div>"
        wrapped = wrap_html(html, conformance_level=ConformanceLevel.PDFH_1B)
        assert "<body>\n" + html + "\n</body>" in wrapped

    def test_required_declarations(self) -> None:
        wrapped = wrap_html("<p>x</p>", conformance_level="PDFH-1a", created=FIXED_DATE)
        assert wrapped.startswith("<!DOCTYPE html>\n")
        assert f'<html xmlns="{PDFH_NAMESPACE}" lang="en">' in wrapped
        assert '<meta charset="UTF-8">' in wrapped
        assert '<meta name="pdfh:version" content="1.0">' in wrapped
        assert '<meta name="pdfh:conformance" content="PDFH-1a">' in wrapped
        assert f'<meta name="pdfh:generator" content="{PDFH_GENERATOR}">' in wrapped
        assert '<meta name="pdfh:created" content="2025-01-15T12:00:00.000Z">' in wrapped

    def test_coordinate_mapping_declared_only_on_request(self) -> None:
        without = wrap_html("<p>x</p>", conformance_level=ConformanceLevel.PDFH_1A)
        with_map = wrap_html(
            "<p>x</p>",
            conformance_level=ConformanceLevel.PDFH_1A,
            include_coordinate_mapping=True,
        )
        assert "pdfh:coordinate-mapping" not in without
        assert '<meta name="pdfh:coordinate-mapping" content="enabled">' in with_map

    def test_title_is_escaped(self) -> None:
        wrapped = wrap_html(
            "<p>x</p>",
            title="R&D <\"Q4\"> 'draft'",
            conformance_level=ConformanceLevel.PDFH_1B,
        )
        assert "<title>R&amp;D &lt;&quot;Q4&quot;&gt; &#039;draft&#039;</title>" in wrapped

    def test_default_title(self) -> None:
        wrapped = wrap_html("<p>x</p>", conformance_level=ConformanceLevel.PDFH_1B)
        assert "<title>PDFH Document</title>" in wrapped

    def test_pinned_timestamp_is_deterministic(self) -> None:
        a = wrap_html("<p>x</p>", conformance_level="PDFH-1b", created=FIXED_DATE)
        b = wrap_html("<p>x</p>", conformance_level="PDFH-1b", created=FIXED_DATE)
        assert a == b

    def test_naive_timestamp_treated_as_utc(self) -> None:
        wrapped = wrap_html(
            "<p>x</p>", conformance_level="PDFH-1b", created=datetime(2025, 3, 1, 8, 30)
        )
        assert 'content="2025-03-01T08:30:00.000Z"' in wrapped

    def test_unknown_conformance_rejected(self) -> None:
        with pytest.raises(ValueError):
            wrap_html("<p>x</p>", conformance_level="PDFH-2")


class TestUnwrapHtml:
    """Tests for body and metadata extraction."""

    def test_extract_body_content_trims_boundary(self) -> None:
        wrapped = wrap_html("  <p>a</p>\n\n", conformance_level="PDFH-1b")
        assert extract_body_content(wrapped) == "<p>a</p>"

    def test_extract_body_content_without_body(self) -> None:
        fragment = "  <p>no body here</p>  "
        assert extract_body_content(fragment) == fragment

    def test_extract_body_content_with_attributes(self) -> None:
        assert extract_body_content('<BODY class="x">\n<p>a</p>\n</BODY>') == "<p>a</p>"

    def test_unwrap_body_is_exact(self) -> None:
        html = "\n\n  <p>a</p>\r\n\t\n"
        wrapped = wrap_html(html, conformance_level="PDFH-1b")
        assert unwrap_body(wrapped) == html

    def test_unwrap_body_with_nested_document(self) -> None:
        html = "<!DOCTYPE html>\n<html><head></head><body>\n<p>x</p>\n</body>\n</html>"
        wrapped = wrap_html(html, conformance_level="PDFH-1b", created=FIXED_DATE)
        assert unwrap_body(wrapped) == html
        assert wrap_html(unwrap_body(wrapped), conformance_level="PDFH-1b", created=FIXED_DATE) == wrapped

    def test_unwrap_body_without_envelope(self) -> None:
        assert unwrap_body("<html><body>\n<p>a</p>\n</body></html>") == "<p>a</p>"
        assert unwrap_body("<p>no body</p>") == "<p>no body</p>"

    def test_metadata_from_wrapped(self) -> None:
        wrapped = wrap_html("<p>x</p>", conformance_level="PDFH-1b", created=FIXED_DATE)
        meta = extract_metadata(wrapped)
        assert meta.version == "1.0"
        assert meta.conformance_level == "PDFH-1b"
        assert meta.conformance() == ConformanceLevel.PDFH_1B
        assert meta.generator == PDFH_GENERATOR
        assert meta.created == "2025-01-15T12:00:00.000Z"
        assert meta.has_coordinate_mapping is False

    def test_metadata_absent_fields_are_none(self) -> None:
        meta = extract_metadata('<meta name="pdfh:version" content="1.0">')
        assert meta.version == "1.0"
        assert meta.conformance_level is None
        assert meta.generator is None
        assert meta.created is None

    def test_metadata_attribute_order_insensitive(self) -> None:
        name_first = (
            '<meta name="pdfh:version" content="1.0">'
            '<meta name="pdfh:conformance" content="PDFH-1a">'
            '<meta name="pdfh:coordinate-mapping" content="enabled">'
        )
        content_first = (
            "<meta content='1.0' name='pdfh:version'>"
            '<meta content="PDFH-1a" name="pdfh:conformance">'
            '<meta content="enabled" name="pdfh:coordinate-mapping">'
        )
        assert extract_metadata(name_first) == extract_metadata(content_first)
        assert extract_metadata(content_first).has_coordinate_mapping is True

    def test_coordinate_mapping_requires_sentinel(self) -> None:
        meta = extract_metadata('<meta name="pdfh:coordinate-mapping" content="on">')
        assert meta.has_coordinate_mapping is False

    def test_unrecognized_conformance_kept_raw(self) -> None:
        meta = extract_metadata('<meta name="pdfh:conformance" content="PDFH-9z">')
        assert meta.conformance_level == "PDFH-9z"
        assert meta.conformance() is None

    def test_is_pdfh_html(self) -> None:
        assert is_pdfh_html(wrap_html("<p>x</p>", conformance_level="PDFH-1b"))
        assert not is_pdfh_html("<html><body><p>x</p></body></html>")
        assert not is_pdfh_html(f'<html xmlns="{PDFH_NAMESPACE}"><meta name="pdfh:version">')

    def test_is_valid_conformance_level(self) -> None:
        assert is_valid_conformance_level("PDFH-1a")
        assert is_valid_conformance_level("PDFH-1b")
        assert not is_valid_conformance_level("pdfh-1b")
        assert not is_valid_conformance_level(None)


class TestCoordinateMapping:
    """Tests for PDFH-1a element coordinate attributes."""

    def test_add_and_extract(self) -> None:
        mapping = CoordinateMapping(
            element_id="intro",
            page=1,
            bbox=BoundingBox(x=72, y=100, width=468, height=24.5),
        )
        tagged = add_coordinate_mapping('<p class="lead">Hi</p>', mapping)
        assert tagged == (
            '<p data-pdfh-page="1" data-pdfh-bbox="72,100,468,24.5" '
            'data-pdfh-id="intro" class="lead">Hi</p>'
        )
        assert extract_coordinate_mappings(tagged) == [mapping]

    def test_extract_without_id_uses_position(self) -> None:
        html = (
            '<h1 data-pdfh-bbox="0,0,10,10" data-pdfh-page="2">A</h1>'
            '<p id="second" data-pdfh-page="1" data-pdfh-bbox="1,2,3,4">B</p>'
        )
        mappings = extract_coordinate_mappings(html)
        assert [m.element_id for m in mappings] == ["pdfh-el-1", "second"]
        assert mappings[0].page == 2

    def test_malformed_bbox_skipped(self) -> None:
        html = '<p data-pdfh-page="1" data-pdfh-bbox="1,2,three">x</p>'
        assert extract_coordinate_mappings(html) == []


class TestTextToHtml:
    """Tests for the plain text converter."""

    def test_paragraphs_and_line_breaks(self) -> None:
        assert text_to_html("Line one\nLine two\n\nLine three") == (
            "<p>Line one<br>Line two</p>\n\n<p>Line three</p>"
        )

    def test_unordered_list(self) -> None:
        assert text_to_html("- First\n- Second\n\nParagraph") == (
            "<ul><li>First</li><li>Second</li></ul>\n\n<p>Paragraph</p>"
        )

    def test_ordered_list(self) -> None:
        assert text_to_html("1. Alpha\n2. Beta") == "<ol><li>Alpha</li><li>Beta</li></ol>"

    def test_escapes_and_crlf(self) -> None:
        assert text_to_html("a < b\r\nc & d") == "<p>a &lt; b<br>c &amp; d</p>"


# ===========================================================================
# Validator Tests
# ===========================================================================


class TestHtmlValidator:
    """Tests for validate_html."""

    def test_empty_content(self) -> None:
        result = validate_html("")
        assert not result.passed
        assert result.codes == ["EMPTY_CONTENT"]
        assert result.errors[0].severity == Severity.ERROR

    def test_whitespace_only_content(self) -> None:
        assert validate_html(" \n\t\r\n").codes == ["EMPTY_CONTENT"]

    def test_clean_html_has_no_issues(self) -> None:
        result = validate_html(SCENARIO_HTML)
        assert result.passed
        assert result.issues == []

    def test_large_html_warning(self) -> None:
        result = validate_html("<p>" + "a" * 1_000_100 + "</p>")
        assert result.passed
        assert "LARGE_HTML" in [w.code for w in result.warnings]

    def test_event_handler_warning(self) -> None:
        result = validate_html('<p onclick="x()">hi</p>')
        assert result.passed
        assert "EVENT_HANDLERS" in [w.code for w in result.warnings]

    def test_script_warning(self) -> None:
        result = validate_html("<p>a</p><SCRIPT>alert(1)</SCRIPT>")
        assert "SCRIPT_TAG" in [w.code for w in result.warnings]

    def test_external_resources_warning(self) -> None:
        result = validate_html('<img src="https://example.com/a.png"><a href=\'http://x\'>x</a>')
        assert "EXTERNAL_RESOURCES" in [w.code for w in result.warnings]

    def test_relative_resources_no_warning(self) -> None:
        result = validate_html('<img src="a.png"><a href="#top">x</a>')
        assert "EXTERNAL_RESOURCES" not in result.codes

    def test_unclosed_tags_beyond_slack(self) -> None:
        assert "UNCLOSED_TAGS" in validate_html("<div>" * 7).codes

    def test_unclosed_tags_within_slack(self) -> None:
        assert "UNCLOSED_TAGS" not in validate_html("<div>" * 5).codes

    def test_void_elements_not_counted(self) -> None:
        html = "<br>" * 10 + "<hr><img src='a.png'><p>x</p>"
        assert "UNCLOSED_TAGS" not in validate_html(html).codes

    def test_self_closing_not_counted(self) -> None:
        html = "<x-icon/>" * 10 + "<p>x</p>"
        assert "UNCLOSED_TAGS" not in validate_html(html).codes

    def test_warning_order_is_stable(self) -> None:
        html = '<script>x()</script><p onclick="y()"><img src="https://a/b.png"></p>'
        assert validate_html(html).codes == ["SCRIPT_TAG", "EVENT_HANDLERS", "EXTERNAL_RESOURCES"]

    def test_summary(self) -> None:
        summary = validate_html("").summary()
        assert summary.startswith("Validation failed.")
        assert "EMPTY_CONTENT: HTML content is empty" in summary
        assert str(validate_html("<p>x</p>")) == "[PASS] 0 error(s), 0 warning(s)"

    def test_issue_fields(self) -> None:
        fields = [f.name for f in dataclasses.fields(ValidationIssue)]
        assert fields == ["code", "severity", "message"]


class TestPdfhHtmlValidator:
    """Tests for validate_pdfh_html."""

    def test_pdfh_1a_without_coordinates_warns(self) -> None:
        wrapped = wrap_html(
            "<p>x</p>",
            conformance_level=ConformanceLevel.PDFH_1A,
            include_coordinate_mapping=False,
        )
        result = validate_pdfh_html(wrapped)
        assert result.passed
        assert result.errors == []
        assert [w.code for w in result.warnings] == ["PDFH_1A_NO_COORDINATES"]

    def test_pdfh_1a_with_coordinates_clean(self) -> None:
        wrapped = wrap_html(
            "<p>x</p>",
            conformance_level=ConformanceLevel.PDFH_1A,
            include_coordinate_mapping=True,
        )
        assert validate_pdfh_html(wrapped).issues == []

    def test_pdfh_1b_clean(self) -> None:
        wrapped = wrap_html(SCENARIO_HTML, conformance_level=ConformanceLevel.PDFH_1B)
        assert validate_pdfh_html(wrapped).issues == []

    def test_plain_html_fails(self) -> None:
        result = validate_pdfh_html("<p>hi</p>")
        assert not result.passed
        for code in ("MISSING_PDFH_STRUCTURE", "MISSING_NAMESPACE", "MISSING_VERSION", "MISSING_CONFORMANCE"):
            assert code in [e.code for e in result.errors]

    def test_invalid_conformance(self) -> None:
        wrapped = wrap_html("<p>x</p>", conformance_level="PDFH-1b")
        tampered = wrapped.replace('content="PDFH-1b"', 'content="PDFH-2x"')
        result = validate_pdfh_html(tampered)
        assert not result.passed
        assert [e.code for e in result.errors] == ["INVALID_CONFORMANCE"]

    def test_base_rules_still_apply(self) -> None:
        wrapped = wrap_html('<p onclick="x()">x</p>', conformance_level="PDFH-1b")
        assert "EVENT_HANDLERS" in validate_pdfh_html(wrapped).codes


# ===========================================================================
# Rendering Tests
# ===========================================================================


class TestRender:
    """Tests for the plain-text page projection."""

    def test_html_to_text(self) -> None:
        text = html_to_text(
            "<style>p{}</style><h1>T</h1><ul><li>a</li><li>b</li></ul>"
            "<script>x()</script><p>&amp; &#x1F600;</p>"
        )
        assert "p{}" not in text
        assert "x()" not in text
        assert "• a" in text
        assert "& \U0001F600" in text

    def test_wrap_text(self) -> None:
        lines = wrap_text("aaa bbb ccc", max_width=42, font_size=12)
        assert lines == ["aaa bbb", "ccc"]


# ===========================================================================
# Writer Tests
# ===========================================================================


class TestWriter:
    """Tests for create_pdfh and PdfhWriter."""

    def test_produces_pdf(self, scenario_pdf: bytes) -> None:
        assert scenario_pdf.startswith(b"%PDF-")

    def test_invalid_html_fails_fast(self) -> None:
        with pytest.raises(PdfhValidationError) as exc_info:
            create_pdfh(html="   ", conformance_level=ConformanceLevel.PDFH_1B)
        assert str(exc_info.value) == "Invalid HTML: HTML content is empty"
        assert exc_info.value.result.codes == ["EMPTY_CONTENT"]

    def test_warnings_do_not_block(self) -> None:
        data = create_pdfh(
            html='<p onclick="x()">hi</p><script>y()</script>',
            conformance_level=ConformanceLevel.PDFH_1B,
        )
        assert is_pdfh_file(data)

    def test_accepts_options_model(self) -> None:
        options = PdfhWriterOptions(html="<p>x</p>", conformance_level="PDFH-1a")
        assert extract_pdfh(create_pdfh(options)).content.conformance_level == ConformanceLevel.PDFH_1A

    def test_margins_must_leave_content_area(self) -> None:
        with pytest.raises(ValueError):
            PdfhWriterOptions(
                html="<p>x</p>",
                conformance_level="PDFH-1b",
                margins=PageMargins.uniform(400),
            )

    def test_deterministic_output(self) -> None:
        kwargs = dict(html=SCENARIO_HTML, conformance_level="PDFH-1b", metadata_date=FIXED_DATE)
        assert create_pdfh(**kwargs) == create_pdfh(**kwargs)

    def test_page_size(self) -> None:
        data = create_pdfh(
            html="<p>x</p>", conformance_level="PDFH-1b", page_size=PAGE_SIZES["A4"]
        )
        page = extract_pdfh(data).content.pages[0]
        assert page.width == pytest.approx(595.28)
        assert page.height == pytest.approx(841.89)

    def test_default_page_size_is_letter(self, scenario_pdf: bytes) -> None:
        page = extract_pdfh(scenario_pdf).content.pages[0]
        assert (page.width, page.height) == (612, 792)

    def test_long_content_paginates(self) -> None:
        html = "\n".join(f"<p>Paragraph {i}</p>" for i in range(200))
        data = create_pdfh(html=html, conformance_level="PDFH-1b")
        assert len(extract_pdfh(data).content.pages) > 1

    def test_document_information(self, scenario_pdf: bytes) -> None:
        meta = extract_pdfh(scenario_pdf).content.metadata
        assert meta.title == "Scenario"
        assert meta.author == "QA Team"
        assert meta.subject == "PDFH Document"
        assert meta.creator == PDFH_GENERATOR
        assert meta.producer == PDFH_PRODUCER == "PDFH Writer v1.0"
        assert meta.creation_date == FIXED_DATE
        assert meta.modification_date == FIXED_DATE

    def test_custom_info_fields(self, scenario_pdf: bytes) -> None:
        with PdfhReader(scenario_pdf) as reader:
            assert reader.info_value("PDFHVersion") == "1.0"
            assert reader.info_value("/PDFHConformance") == "PDFH-1b"

    def test_registered_as_associated_file(self, scenario_pdf: bytes) -> None:
        with pikepdf.open(io.BytesIO(scenario_pdf)) as pdf:
            af = pdf.Root.AF
            assert len(af) == 1
            assert af[0].AFRelationship == pikepdf.Name.Source
            assert str(af[0].UF) == PDFH_EMBEDDED_FILENAME

    def test_reembedding_keeps_one_associated_file(self) -> None:
        with PdfhWriter() as writer:
            writer.render("<p>b</p>")
            writer.embed_html("<p>a</p>")
            writer.embed_html("<p>b</p>")
            writer.embed_html("<p>c</p>", filename="extra.html")
            data = writer.to_bytes()

        with pikepdf.open(io.BytesIO(data)) as pdf:
            af = pdf.Root.AF
            assert sorted(str(fs.UF) for fs in af) == ["extra.html", PDFH_EMBEDDED_FILENAME]
            payload = next(fs for fs in af if str(fs.UF) == PDFH_EMBEDDED_FILENAME)
            assert payload.EF.F.read_bytes() == b"<p>b</p>"
        assert extract_html(data) == "<p>b</p>"

    def test_unicode_title(self) -> None:
        data = create_pdfh(html="<p>x</p>", title="Überblick 中文", conformance_level="PDFH-1b")
        assert extract_pdfh(data).content.metadata.title == "Überblick 中文"


# ===========================================================================
# Reader Tests
# ===========================================================================


class TestReader:
    """Tests for attachment discovery and classification."""

    def test_is_pdfh_file(self, scenario_pdf: bytes) -> None:
        assert is_pdfh_file(scenario_pdf)

    def test_attachment_presence(self, scenario_pdf: bytes) -> None:
        files = list_embedded_files(scenario_pdf)
        payload = [f for f in files if f.name == PDFH_EMBEDDED_FILENAME]
        assert len(payload) == 1
        assert payload[0].content_type in (None, "text/html")
        assert payload[0].relationship == "Source"
        assert payload[0].description == "PDFH embedded HTML content"

    def test_plain_pdf_is_not_pdfh(self, plain_pdf: bytes) -> None:
        assert not is_pdfh_file(plain_pdf)
        assert list_embedded_files(plain_pdf) == []
        result = extract_pdfh(plain_pdf)
        assert result.is_pdfh is False
        assert result.content is None
        assert result.error == NOT_PDFH_ERROR

    def test_other_attachment_name_is_not_pdfh(self, foreign_attachment_pdf: bytes) -> None:
        assert [f.name for f in list_embedded_files(foreign_attachment_pdf)] == ["notes.html"]
        assert not is_pdfh_file(foreign_attachment_pdf)
        result = extract_pdfh(foreign_attachment_pdf)
        assert result.is_pdfh is False
        assert result.error

    def test_malformed_bytes(self) -> None:
        garbage = b"this is not a pdf at all"
        result = extract_pdfh(garbage)
        assert result.is_pdfh is False
        assert result.error
        assert not is_pdfh_file(garbage)
        assert list_embedded_files(garbage) == []

    def test_undecodable_payload_is_reported(self) -> None:
        pdf = _blank_pdf()
        pdf.attachments[PDFH_EMBEDDED_FILENAME] = pikepdf.AttachedFileSpec(pdf, b"\xff\xfe<p>")
        data = _to_bytes(pdf)
        assert is_pdfh_file(data)
        result = extract_pdfh(data)
        assert result.is_pdfh is False
        assert result.error

    def test_reads_from_path(self, scenario_pdf: bytes, tmp_path: Path) -> None:
        path = tmp_path / "scenario.pdf"
        path.write_bytes(scenario_pdf)
        assert extract_pdfh(path).is_pdfh
        assert extract_pdfh(str(path)).is_pdfh

    def test_info_dictionary_fallback(self) -> None:
        with PdfhWriter() as writer:
            writer.render("<p>bare</p>", title="Bare")
            writer.set_metadata(title="Bare", conformance_level=ConformanceLevel.PDFH_1A)
            writer.embed_html("<p>bare</p>")
            data = writer.to_bytes()

        content = extract_pdfh(data).content
        assert content.html == "<p>bare</p>"
        assert content.version == "1.0"
        assert content.conformance_level == ConformanceLevel.PDFH_1A

    def test_defaults_without_any_metadata(self) -> None:
        with PdfhWriter() as writer:
            writer.render("<p>bare</p>", title="Bare")
            writer.embed_html("<p>bare</p>")
            data = writer.to_bytes()

        content = extract_pdfh(data).content
        assert content.version == "1.0"
        assert content.conformance_level == ConformanceLevel.PDFH_1B

    def test_coordinate_mappings_attached_to_pages(self) -> None:
        mapping = CoordinateMapping(
            element_id="title", page=1, bbox=BoundingBox(x=72, y=700, width=300, height=20)
        )
        html = add_coordinate_mapping("<h1>Title</h1>", mapping) + "\n<p>Body</p>"
        data = create_pdfh(
            html=html,
            conformance_level=ConformanceLevel.PDFH_1A,
            include_coordinate_mapping=True,
        )
        content = extract_pdfh(data).content
        assert content.pages[0].coordinate_mappings == [mapping]

    def test_helpers(self, scenario_pdf: bytes, plain_pdf: bytes) -> None:
        assert extract_html(scenario_pdf).startswith("<!DOCTYPE html>")
        assert extract_body_html(scenario_pdf) == SCENARIO_HTML
        assert extract_html(plain_pdf) is None
        assert extract_body_html(plain_pdf) is None

    def test_get_pdfh_metadata(self, scenario_pdf: bytes, plain_pdf: bytes) -> None:
        assert get_pdfh_metadata(scenario_pdf) == {
            "is_pdfh": True,
            "version": "1.0",
            "conformance_level": "PDFH-1b",
            "page_count": 1,
            "title": "Scenario",
        }
        assert get_pdfh_metadata(plain_pdf) == {"is_pdfh": False}


# ===========================================================================
# Round-Trip Tests
# ===========================================================================


ROUND_TRIP_CASES = {
    "basic": SCENARIO_HTML,
    "empty-lines": "\n\n<p>a</p>\n\n\n<p>b</p>\n\n",
    "whitespace-crlf": "<div>\r\n  <span> A\tB </span>\r\n</div>",
    "tab-space-runs": "<pre>\t\t  col1\t \tcol2    </pre>",
    "entities": "<p>&amp; &lt; &gt; &quot; &#039; &#x1F600; &nbsp;</p>",
    "unicode": "<p>\U0001F600 中文 éè \U00010348</p>",
    "lone-cr": "<p>a\rb</p>",
    "full-document": "<html><body><p>x</p></body></html>",
    "envelope-like-tail": "<p>a</p>\n</body>\n</html>",
}


class TestRoundTrip:
    """The embedded HTML must come back byte-for-byte."""

    @pytest.mark.parametrize("html", ROUND_TRIP_CASES.values(), ids=ROUND_TRIP_CASES.keys())
    @pytest.mark.parametrize("level", list(ConformanceLevel))
    def test_exact_round_trip(self, html: str, level: ConformanceLevel) -> None:
        data = create_pdfh(html=html, conformance_level=level, metadata_date=FIXED_DATE)
        result = extract_pdfh(data)

        assert result.is_pdfh
        expected = wrap_html(html, conformance_level=level, created=FIXED_DATE)
        assert result.content.html == expected
        assert unwrap_body(result.content.html) == html

    @pytest.mark.parametrize("html", ROUND_TRIP_CASES.values(), ids=ROUND_TRIP_CASES.keys())
    def test_rewrap_is_idempotent(self, html: str) -> None:
        data = create_pdfh(html=html, conformance_level="PDFH-1b", metadata_date=FIXED_DATE)
        extracted = extract_pdfh(data).content.html
        rewrapped = wrap_html(unwrap_body(extracted), conformance_level="PDFH-1b", created=FIXED_DATE)
        assert rewrapped == extracted

    def test_scenario(self, scenario_pdf: bytes) -> None:
        result = extract_pdfh(scenario_pdf)
        assert result.is_pdfh is True
        assert result.error is None
        assert result.content.conformance_level == ConformanceLevel.PDFH_1B
        assert result.content.version == "1.0"
        assert len(result.content.pages) >= 1
        assert result.content.body() == SCENARIO_HTML.strip()
        assert validate_pdfh_html(result.content.html).passed


# ===========================================================================
# Concurrency Tests
# ===========================================================================


class TestAsync:
    """Independent documents processed concurrently do not interact."""

    def test_concurrent_create_and_extract(self) -> None:
        bodies = [f"<p>Document {i}</p>" for i in range(4)]

        async def run() -> list[str]:
            pdfs = await asyncio.gather(*(
                create_pdfh_async(html=b, conformance_level="PDFH-1b") for b in bodies
            ))
            results = await asyncio.gather(*(extract_pdfh_async(p) for p in pdfs))
            return [unwrap_body(r.content.html) for r in results]

        assert asyncio.run(run()) == bodies
