"""Tests for project validation and content scanning."""

import pytest
from unittest.mock import Mock

from bookbuild.domain import BookProject, Severity, ValidationReport
from bookbuild.repositories import FileRepository
from bookbuild.services.content_service import ContentService, iter_prose_lines
from bookbuild.services.validation_service import ValidationService


@pytest.fixture
def mock_file_repo():
    """Create a mock file repository."""
    repo = Mock()
    repo.exists.return_value = True
    return repo


@pytest.fixture
def content_service(mock_file_repo):
    """Create a ContentService with mock dependencies."""
    return ContentService(mock_file_repo)


@pytest.fixture
def validation_service():
    """Create a ValidationService over the real file system."""
    file_repo = FileRepository()
    return ValidationService(file_repo, ContentService(file_repo))


class TestImageExtraction:
    """Tests for image extraction functionality."""

    def test_extract_simple_images(self, content_service, tmp_path):
        """Test extracting simple image references."""
        content = """# Chapter

![Logo](images/logo.png)

Some text.

![Diagram](./diagrams/flow.svg "Request flow")
"""
        images = content_service.extract_images(content, tmp_path / "page.md", validate=False)

        assert len(images) == 2
        assert images[0].alt_text == "Logo"
        assert images[0].path == "images/logo.png"
        assert images[0].line_number == 3
        assert images[1].path == "./diagrams/flow.svg"
        assert images[1].line_number == 7

    def test_images_in_code_blocks_ignored(self, content_service, tmp_path):
        """Test that image syntax inside fenced code is not a reference."""
        content = "~~~\n![Not](an-image.png)\n~~~\n"
        assert content_service.extract_images(content, tmp_path / "page.md") == []

    def test_external_urls_assumed_present(self, content_service, mock_file_repo, tmp_path):
        """Test that external URLs are not checked on disk."""
        mock_file_repo.exists.return_value = False
        content = "![External](https://example.com/image.png)\n"

        images = content_service.extract_images(content, tmp_path / "page.md")

        assert images[0].exists is True
        mock_file_repo.exists.assert_not_called()

    def test_validate_checks_page_dir_then_root(self, content_service, mock_file_repo, tmp_path):
        """Test that an image found relative to the book root counts."""
        page = tmp_path / "src" / "pages" / "page.md"
        content = "![Found](src/images/a.png)\n![Missing](b.png)\n"

        def exists_side_effect(path):
            return str(path).endswith("src/images/a.png") and "pages" not in str(path)

        mock_file_repo.exists.side_effect = exists_side_effect

        missing = content_service.validate_images(content, page, root=tmp_path)

        assert [img.path for img in missing] == ["b.png"]


class TestProseLines:
    """Tests for fenced code block skipping."""

    def test_longer_fence_needs_matching_close(self):
        content = "````\n```\ninside\n````\noutside\n"
        assert [line for _, line in iter_prose_lines(content)] == ["outside", ""]

    def test_fence_with_info_string(self):
        content = "before\n```scala\nval x = 1\n```\nafter"
        lines = list(iter_prose_lines(content))
        assert lines == [(1, "before"), (5, "after")]


class TestValidateProject:
    """Tests for the integrity checks on a book project."""

    def test_valid_project(self, validation_service, project):
        """Test that the fixture book has no issues."""
        report = validation_service.validate(project)

        assert report.ok
        assert report.issues == []

    def test_missing_page_is_error(self, validation_service, project, book_root):
        (book_root / "src" / "pages" / "links.md").unlink()

        report = validation_service.validate(project)

        assert not report.ok
        assert report.codes() == ["missing-page"]
        assert report.errors[0].path == "src/pages/links.md"

    def test_missing_preview_page_is_error(self, validation_service, project, book_root):
        (book_root / "src" / "pages" / "preview" / "prologue.md").unlink()

        report = validation_service.validate(project)

        assert report.codes() == ["missing-preview-page"]
        assert report.errors[0].severity is Severity.ERROR

    def test_directory_is_not_a_page(self, validation_service, project):
        project.manifest.pages.append("src/pages")

        report = validation_service.validate(project)

        assert "missing-page" in report.codes()

    def test_preview_order_is_warning(self, validation_service, project):
        """Test the links/solutions swap found in the Essential Play manifest."""
        project.manifest.preview_pages = [
            "src/pages/preview/prologue.md",
            "src/pages/intro/index.md",
            "src/pages/solutions.md",
            "src/pages/links.md",
        ]

        report = validation_service.validate(project)

        assert report.ok
        assert report.codes() == ["preview-order"]
        assert report.warnings[0].path == "src/pages/links.md"
        assert "src/pages/solutions.md" in report.warnings[0].message

    def test_preview_only_pages_do_not_affect_order(self, validation_service, project):
        project.manifest.preview_pages = [
            "src/pages/intro/index.md",
            "src/pages/preview/prologue.md",
            "src/pages/basics/index.md",
        ]

        report = validation_service.validate(project)

        assert report.issues == []

    def test_duplicate_page_is_warning(self, validation_service, project):
        project.manifest.pages.append("src/pages/links.md")

        report = validation_service.validate(project)

        assert "duplicate-page" in report.codes()
        assert report.ok

    def test_empty_page_is_warning(self, validation_service, project, book_root):
        (book_root / "src" / "pages" / "links.md").write_text("\n\n")

        report = validation_service.validate(project)

        assert report.codes() == ["empty-page"]

    def test_missing_image_is_warning(self, validation_service, project, book_root):
        (book_root / "src" / "images" / "routes.png").unlink()

        report = validation_service.validate(project)

        assert report.codes() == ["missing-image"]
        assert "routes.md:8" in report.warnings[0].message

    def test_image_check_can_be_skipped(self, validation_service, project, book_root):
        (book_root / "src" / "images" / "routes.png").unlink()

        report = validation_service.validate(project, check_images=False)

        assert report.issues == []

    def test_report_to_dict(self, validation_service, project, book_root):
        (book_root / "src" / "pages" / "links.md").unlink()

        data = validation_service.validate(project).to_dict()

        assert data["ok"] is False
        assert data["errors"] == 1
        assert data["issues"][0]["severity"] == "error"

    def test_absolute_page_paths(self, validation_service, book_root, manifest):
        """Test that absolute manifest paths are used as-is."""
        manifest.pages = [str(book_root / "src" / "pages" / "links.md")]
        manifest.preview_pages = []

        report = validation_service.validate(BookProject(root=book_root, manifest=manifest))

        assert report.issues == []

    def test_non_utf8_page_is_error(self, validation_service, project, book_root):
        """Test that a page with invalid bytes is reported, not raised."""
        (book_root / "src" / "pages" / "links.md").write_bytes(b"# Links\n\ncaf\xe9\n")

        report = validation_service.validate(project)

        assert not report.ok
        assert report.codes() == ["unreadable-page"]
        assert report.errors[0].path == "src/pages/links.md"
        assert "UTF-8" in report.errors[0].message


class TestPreviewOrder:
    """Tests for which preview pages are blamed for ordering problems."""

    def check(self, validation_service, pages, preview_pages):
        report = ValidationReport()
        validation_service._check_preview_order(pages, preview_pages, report)
        return report

    def test_early_outlier_is_the_only_page_reported(self, validation_service):
        report = self.check(validation_service, ["a", "b", "c", "d"], ["c", "a", "b"])

        assert [i.path for i in report.issues] == ["c"]
        assert report.issues[0].message == "c comes before a in previewPages but after it in pages"

    def test_late_outlier_is_reported(self, validation_service):
        report = self.check(validation_service, ["a", "b", "c", "d"], ["b", "c", "d", "a"])

        assert [i.path for i in report.issues] == ["a"]
        assert "a comes after d" in report.issues[0].message

    def test_swap_blames_later_page(self, validation_service):
        report = self.check(validation_service, ["a", "b"], ["b", "a"])

        assert [i.path for i in report.issues] == ["a"]

    def test_in_order_with_preview_only_pages(self, validation_service):
        report = self.check(validation_service, ["a", "b", "c"], ["x", "a", "y", "c"])

        assert report.issues == []
