"""Validation service implementation.

Checks a book project for the integrity problems that would make a
Pandoc build fail or produce a broken book.
"""

import logging
from collections import Counter

from ..domain import BookProject, Severity, ValidationReport
from ..errors import UnreadableFileError
from ..repositories.interfaces import IFileRepository
from .content_service import ContentService

logger = logging.getLogger(__name__)


class ValidationService:
    """Service for validating a book project against its manifest."""

    def __init__(self, file_repo: IFileRepository, content_service: ContentService) -> None:
        """Initialize the validation service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
            content_service: Service for extracting image references.
        """
        self._file_repo = file_repo
        self._content_service = content_service

    def validate(self, project: BookProject, check_images: bool = True) -> ValidationReport:
        """Run all checks on a project.

        Args:
            project: The book project to validate.
            check_images: If True, also check image references in pages.

        Returns:
            ValidationReport listing every issue found.
        """
        report = ValidationReport()
        manifest = project.manifest

        existing = self._check_pages(project, manifest.pages, "missing-page", report)
        existing_preview = self._check_pages(
            project, manifest.preview_pages, "missing-preview-page", report
        )
        self._check_duplicates(manifest.pages, "pages", report)
        self._check_duplicates(manifest.preview_pages, "previewPages", report)
        self._check_preview_order(manifest.pages, manifest.preview_pages, report)

        for page in dict.fromkeys(existing + existing_preview):
            self._check_content(project, page, report, check_images)

        logger.debug(
            "Validated %s: %d error(s), %d warning(s)",
            project.root,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def _check_pages(
        self,
        project: BookProject,
        pages: list[str],
        code: str,
        report: ValidationReport,
    ) -> list[str]:
        """Report pages that don't resolve to a file; return those that do."""
        existing: list[str] = []
        for page in pages:
            if self._file_repo.is_file(project.resolve(page)):
                existing.append(page)
            else:
                report.add(Severity.ERROR, code, f"Page not found: {page}", page)
        return existing

    def _check_duplicates(
        self, pages: list[str], key: str, report: ValidationReport
    ) -> None:
        counts = Counter(pages)
        for page, count in counts.items():
            if count > 1:
                report.add(
                    Severity.WARNING,
                    "duplicate-page",
                    f"{page} is listed {count} times in {key}",
                    page,
                )

    def _check_preview_order(
        self, pages: list[str], preview_pages: list[str], report: ValidationReport
    ) -> None:
        """Check that pages shared by both lists keep the same relative order.

        The longest run of shared preview pages already in book order is
        kept (earlier pages win ties), and every other shared page is
        reported once, naming a kept page it conflicts with.
        """
        position: dict[str, int] = {}
        for idx, page in enumerate(pages):
            position.setdefault(page, idx)

        shared = [(page, position[page]) for page in preview_pages if page in position]
        if not shared:
            return

        # lengths[i]: longest in-order run ending at shared[i]
        lengths = [1] * len(shared)
        for i, (_, pos) in enumerate(shared):
            for j in range(i):
                if shared[j][1] <= pos and lengths[j] + 1 > lengths[i]:
                    lengths[i] = lengths[j] + 1

        best = max(lengths)
        i = lengths.index(best)
        kept = {i}
        while lengths[i] > 1:
            i = next(
                j
                for j in range(i)
                if lengths[j] == lengths[i] - 1 and shared[j][1] <= shared[i][1]
            )
            kept.add(i)

        for i, (page, pos) in enumerate(shared):
            if i in kept:
                continue
            before = [j for j in kept if j < i and shared[j][1] > pos]
            if before:
                other = shared[max(before)][0]
                message = f"{page} comes after {other} in previewPages but before it in pages"
            else:
                after = min(j for j in kept if j > i and shared[j][1] < pos)
                other = shared[after][0]
                message = f"{page} comes before {other} in previewPages but after it in pages"
            report.add(Severity.WARNING, "preview-order", message, page)

    def _check_content(
        self,
        project: BookProject,
        page: str,
        report: ValidationReport,
        check_images: bool,
    ) -> None:
        path = project.resolve(page)
        try:
            content = self._file_repo.read_file(path)
        except UnreadableFileError as e:
            report.add(Severity.ERROR, "unreadable-page", f"Cannot read {page}: {e.reason}", page)
            return

        if not content.strip():
            report.add(Severity.WARNING, "empty-page", f"Page is empty: {page}", page)
            return

        if not check_images:
            return

        for img in self._content_service.validate_images(content, path, root=project.root):
            report.add(
                Severity.WARNING,
                "missing-image",
                f"{page}:{img.line_number}: image not found: {img.path}",
                page,
            )
