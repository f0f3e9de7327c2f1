"""Domain models for content features.

Provides dataclasses for TOC entries, image references and the
validation report produced by integrity checks.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass
class TocEntry:
    """A single entry in a table of contents.

    Represents a heading at any level (# through ######) with support
    for nesting and anchor links.
    """

    title: str
    level: int  # 1 for #, 2 for ##, ...
    anchor: str  # URL-friendly slug or explicit {#id}
    children: list["TocEntry"] = field(default_factory=list)


@dataclass
class PageToc:
    """TOC for a single chapter file."""

    path: str
    entries: list[TocEntry] = field(default_factory=list)


@dataclass
class BookToc:
    """Full book TOC with nested structure."""

    title: str
    depth: int
    pages: list[PageToc] = field(default_factory=list)

    def flatten(self) -> list[TocEntry]:
        """Get all entries in document order, parents before children."""
        result: list[TocEntry] = []

        def walk(entries: list[TocEntry]) -> None:
            for entry in entries:
                result.append(entry)
                walk(entry.children)

        for page in self.pages:
            walk(page.entries)
        return result

    def to_markdown(self) -> str:
        """Render the TOC as markdown."""
        lines = [f"# {self.title}", ""]
        for page in self.pages:
            for entry in page.entries:
                lines.extend(_render_toc_entry(entry, 0))
        return "\n".join(lines)


@dataclass
class ImageRef:
    """A reference to an image in chapter content."""

    alt_text: str
    path: str
    line_number: int
    exists: bool = True  # Validated during page scan


class Severity(Enum):
    """How serious a validation issue is."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single problem found in a book project."""

    severity: Severity
    code: str  # e.g. missing-page, preview-order
    message: str
    path: Optional[str] = None


@dataclass
class ValidationReport:
    """Result of validating a book project."""

    issues: list[ValidationIssue] = field(default_factory=list)

    def add(
        self,
        severity: Severity,
        code: str,
        message: str,
        path: Optional[str] = None,
    ) -> None:
        """Record an issue."""
        self.issues.append(ValidationIssue(severity, code, message, path))

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def ok(self) -> bool:
        """True if no errors were found (warnings are allowed)."""
        return not self.errors

    def codes(self) -> list[str]:
        """Issue codes in the order they were found."""
        return [i.code for i in self.issues]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "ok": self.ok,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [
                {
                    "severity": i.severity.value,
                    "code": i.code,
                    "message": i.message,
                    "path": i.path,
                }
                for i in self.issues
            ],
        }


def slugify(text: str) -> str:
    """Convert heading text to an identifier the way Pandoc does.

    Keeps letters, digits, underscores, hyphens and periods, joins words
    with hyphens, and drops everything before the first letter. Falls
    back to "section" when nothing is left.
    """
    text = re.sub(r"[^\w\s.-]", "", text.lower())
    text = "-".join(text.split())
    text = re.sub(r"^[\W\d_]+", "", text)
    return text or "section"


def _render_toc_entry(entry: TocEntry, base_indent: int) -> list[str]:
    """Render a TOC entry and its children."""
    indent = "  " * base_indent
    lines = [f"{indent}- [{entry.title}](#{entry.anchor})"]
    for child in entry.children:
        lines.extend(_render_toc_entry(child, base_indent + 1))
    return lines
