"""
Conformance Validator
======================
Structural and heuristic checks on HTML destined for (or recovered from) a
PDFH container.

Returns structured ValidationResult objects. Errors block document creation;
warnings are advisory only.

Example::

    from pdfh.validator import validate_html

    result = validate_html(html)
    if not result.passed:
        for issue in result.errors:
            print(f"[{issue.severity.value}] {issue.code}: {issue.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..models.document import PDFH_NAMESPACE, ConformanceLevel
from ..schema.wrapper import extract_metadata, is_pdfh_html, is_valid_conformance_level


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass
class ValidationIssue:
    code: str
    severity: Severity
    message: str


@dataclass
class ValidationResult:
    """Result of a validation run. Issues keep the order they were found in."""
    passed: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def codes(self) -> list[str]:
        return [i.code for i in self.issues]

    def summary(self) -> str:
        """Human-readable report of the run."""
        parts = ["Validation passed." if self.passed else "Validation failed."]
        if self.errors:
            parts.append(f"\nErrors ({len(self.errors)}):")
            parts.extend(f"  - {i.code}: {i.message}" for i in self.errors)
        if self.warnings:
            parts.append(f"\nWarnings ({len(self.warnings)}):")
            parts.extend(f"  - {i.code}: {i.message}" for i in self.warnings)
        return "\n".join(parts)

    def __str__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {len(self.errors)} error(s), {len(self.warnings)} warning(s)"


# ---------------------------------------------------------------------------
# HTML Validator
# ---------------------------------------------------------------------------


VOID_ELEMENTS = frozenset({
    "br", "hr", "img", "input", "meta", "link", "area",
    "base", "col", "embed", "param", "source", "track", "wbr",
})

# Allowed difference between opening and closing tag counts
TAG_BALANCE_SLACK = 5
LARGE_HTML_THRESHOLD = 1_000_000

_OPEN_TAG_RE = re.compile(r"<(\w+)[^>]*(?<!/)\s*>")
_CLOSE_TAG_RE = re.compile(r"</(\w+)>")
_SCRIPT_RE = re.compile(r"<script", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
_EXTERNAL_RE = re.compile(r"""(?:src|href)\s*=\s*["']https?:""", re.IGNORECASE)


class HtmlValidator:
    """
    Validates arbitrary HTML content before it is embedded.

    Rules implemented:
    - EMPTY_CONTENT       (error)   content is empty or whitespace only
    - UNCLOSED_TAGS       (warning) open/close tag counts differ by more than 5
    - SCRIPT_TAG          (warning) <script> present
    - EVENT_HANDLERS      (warning) inline on*= handler attributes present
    - EXTERNAL_RESOURCES  (warning) src/href pointing at http(s)
    - LARGE_HTML          (warning) payload longer than 1,000,000 characters

    The tag balance rule is an approximation, not a structural guarantee.
    """

    def validate(self, html: str) -> ValidationResult:
        issues: list[ValidationIssue] = []

        def add(code: str, sev: Severity, msg: str) -> None:
            issues.append(ValidationIssue(code, sev, msg))

        if not html.strip():
            add("EMPTY_CONTENT", Severity.ERROR, "HTML content is empty")
            return ValidationResult(passed=False, issues=issues)

        open_tags = [
            m.group(1).lower()
            for m in _OPEN_TAG_RE.finditer(html)
            if m.group(1).lower() not in VOID_ELEMENTS
        ]
        close_tags = _CLOSE_TAG_RE.findall(html)
        if abs(len(open_tags) - len(close_tags)) > TAG_BALANCE_SLACK:
            add("UNCLOSED_TAGS", Severity.WARNING, "HTML may contain unclosed tags")

        if _SCRIPT_RE.search(html):
            add(
                "SCRIPT_TAG",
                Severity.WARNING,
                "HTML contains script tags which will not execute in PDF",
            )

        if _EVENT_HANDLER_RE.search(html):
            add(
                "EVENT_HANDLERS",
                Severity.WARNING,
                "HTML contains event handlers which will not work in PDF",
            )

        if _EXTERNAL_RE.search(html):
            add(
                "EXTERNAL_RESOURCES",
                Severity.WARNING,
                "HTML references external resources which may not be embedded",
            )

        if len(html) > LARGE_HTML_THRESHOLD:
            add(
                "LARGE_HTML",
                Severity.WARNING,
                f"HTML payload is large ({len(html):,} characters) and may be slow to process",
            )

        passed = not any(i.severity == Severity.ERROR for i in issues)
        return ValidationResult(passed=passed, issues=issues)


# ---------------------------------------------------------------------------
# PDFH HTML Validator
# ---------------------------------------------------------------------------


class PdfhHtmlValidator:
    """
    Validates a wrapped PDFH document.

    Runs every HtmlValidator rule, then:
    - MISSING_PDFH_STRUCTURE  (error)   namespace/version/conformance markers absent
    - MISSING_NAMESPACE       (error)   PDFH namespace URI absent
    - MISSING_VERSION         (error)   pdfh:version meta absent
    - MISSING_CONFORMANCE     (error)   pdfh:conformance meta absent
    - INVALID_CONFORMANCE     (error)   conformance is not PDFH-1a or PDFH-1b
    - PDFH_1A_NO_COORDINATES  (warning) PDFH-1a without coordinate mapping
    """

    def __init__(self, html_validator: HtmlValidator | None = None) -> None:
        self._html_validator = html_validator or HtmlValidator()

    def validate(self, html: str) -> ValidationResult:
        base = self._html_validator.validate(html)
        issues = list(base.issues)

        def add(code: str, sev: Severity, msg: str) -> None:
            issues.append(ValidationIssue(code, sev, msg))

        if not is_pdfh_html(html):
            add(
                "MISSING_PDFH_STRUCTURE",
                Severity.ERROR,
                "HTML does not contain required PDFH metadata",
            )

        if PDFH_NAMESPACE not in html:
            add(
                "MISSING_NAMESPACE",
                Severity.ERROR,
                f"HTML does not include PDFH namespace: {PDFH_NAMESPACE}",
            )

        metadata = extract_metadata(html)

        if not metadata.version:
            add("MISSING_VERSION", Severity.ERROR, "PDFH version metadata is missing")

        if not metadata.conformance_level:
            add("MISSING_CONFORMANCE", Severity.ERROR, "PDFH conformance level is missing")
        elif not is_valid_conformance_level(metadata.conformance_level):
            add(
                "INVALID_CONFORMANCE",
                Severity.ERROR,
                f"Invalid conformance level: {metadata.conformance_level}",
            )

        if (
            metadata.conformance_level == ConformanceLevel.PDFH_1A.value
            and not metadata.has_coordinate_mapping
        ):
            add(
                "PDFH_1A_NO_COORDINATES",
                Severity.WARNING,
                "PDFH-1a conformance level typically includes coordinate mapping",
            )

        passed = not any(i.severity == Severity.ERROR for i in issues)
        return ValidationResult(passed=passed, issues=issues)


def validate_html(html: str) -> ValidationResult:
    """Validate caller HTML before embedding."""
    return HtmlValidator().validate(html)


def validate_pdfh_html(html: str) -> ValidationResult:
    """Validate a wrapped PDFH document."""
    return PdfhHtmlValidator().validate(html)
