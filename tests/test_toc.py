"""Tests for table of contents extraction.

Tests:
- ATX and setext headings
- Depth limiting by tocDepth
- Pandoc heading attributes and explicit ids
- Headings inside fenced code blocks
- Book-level TOC over full and preview page lists
"""

import pytest
from unittest.mock import Mock

from bookbuild.domain.content import BookToc, PageToc, TocEntry, slugify
from bookbuild.repositories import FileRepository
from bookbuild.services.toc_service import TocService


@pytest.fixture
def toc_service():
    """Create a TocService with a mock file repository."""
    return TocService(Mock())


@pytest.fixture
def disk_toc_service():
    """Create a TocService over the real file system."""
    return TocService(FileRepository())


class TestParseHeadings:
    """Test heading extraction from a single page."""

    def test_atx_headings_nest_by_level(self, toc_service):
        content = "# Basics\n\n## Actions\n\n## Routes\n\n# JSON\n"
        entries = toc_service.parse_headings(content, depth=2)

        assert [e.title for e in entries] == ["Basics", "JSON"]
        assert [c.title for c in entries[0].children] == ["Actions", "Routes"]
        assert entries[0].children[0].level == 2

    def test_depth_limits_entries(self, toc_service):
        content = "# One\n## Two\n### Three\n#### Four\n"

        depth1 = toc_service.parse_headings(content, depth=1)
        depth3 = toc_service.parse_headings(content, depth=3)

        assert [e.title for e in depth1] == ["One"]
        assert depth1[0].children == []
        assert depth3[0].children[0].children[0].title == "Three"
        assert depth3[0].children[0].children[0].children == []

    def test_setext_headings(self, toc_service):
        content = "Getting Started\n===============\n\nInstalling\n----------\n\ntext\n"
        entries = toc_service.parse_headings(content, depth=2)

        assert entries[0].title == "Getting Started"
        assert entries[0].level == 1
        assert entries[0].children[0].title == "Installing"

    def test_horizontal_rule_after_blank_is_not_heading(self, toc_service):
        content = "Some paragraph.\n\n---\n\nMore.\n"
        assert toc_service.parse_headings(content, depth=2) == []

    def test_code_block_headings_ignored(self, toc_service):
        content = "# Real\n\n```bash\n# comment in a shell script\n```\n\n## Also Real\n"
        entries = toc_service.parse_headings(content, depth=2)

        assert [e.title for e in entries] == ["Real"]
        assert [c.title for c in entries[0].children] == ["Also Real"]

    def test_explicit_id_becomes_anchor(self, toc_service):
        entries = toc_service.parse_headings("# Futures {#sec:futures .unnumbered}\n", depth=2)

        assert entries[0].title == "Futures"
        assert entries[0].anchor == "sec:futures"

    def test_class_only_attributes_stripped(self, toc_service):
        entries = toc_service.parse_headings("# Solutions to Exercises {.unnumbered}\n", depth=1)

        assert entries[0].title == "Solutions to Exercises"
        assert entries[0].anchor == "solutions-to-exercises"

    def test_anchor_keeps_periods(self, toc_service):
        entries = toc_service.parse_headings("## Play 2.3\n", depth=2)
        assert entries[0].anchor == "play-2.3"

    def test_closing_hashes_stripped(self, toc_service):
        entries = toc_service.parse_headings("## Reads and Writes ##\n", depth=2)
        assert entries[0].title == "Reads and Writes"

    def test_hash_without_space_is_not_heading(self, toc_service):
        assert toc_service.parse_headings("#hashtag\n", depth=2) == []

    def test_frontmatter_ignored(self, toc_service):
        toc = toc_service.extract_page_toc("a.md", "---\ntitle: x\n---\n# Body\n", depth=1)
        assert [e.title for e in toc.entries] == ["Body"]


class TestBookToc:
    """Test book-level TOC across pages."""

    def test_full_book_toc(self, disk_toc_service, project):
        toc = disk_toc_service.build_book_toc(project)

        titles = [e.title for e in toc.flatten()]
        assert titles == [
            "Introduction",
            "The Basics",
            "Actions",
            "Routes",
            "Links",
            "Solutions",
        ]
        assert toc.depth == 2

    def test_preview_toc(self, disk_toc_service, project):
        toc = disk_toc_service.build_book_toc(project, preview=True)

        assert [p.path for p in toc.pages][0] == "src/pages/preview/prologue.md"
        assert "Routes" not in [e.title for e in toc.flatten()]

    def test_depth_override(self, disk_toc_service, project):
        toc = disk_toc_service.build_book_toc(project, depth=3)
        assert "Action Builders" in [e.title for e in toc.flatten()]

    def test_missing_page_raises(self, disk_toc_service, project, book_root):
        (book_root / "src" / "pages" / "links.md").unlink()

        with pytest.raises(FileNotFoundError):
            disk_toc_service.build_book_toc(project)

    def test_generate_markdown(self, disk_toc_service, project):
        markdown = disk_toc_service.generate_toc_markdown(project)

        assert markdown.startswith("# Essential Play\n")
        assert "- [Introduction](#intro)" in markdown
        assert "  - [Actions](#actions)" in markdown


class TestBookTocRendering:
    """Test TOC dataclass rendering."""

    def test_to_markdown_nests_children(self):
        toc = BookToc(
            title="Book",
            depth=2,
            pages=[
                PageToc(
                    path="a.md",
                    entries=[
                        TocEntry(
                            title="Chapter",
                            level=1,
                            anchor="chapter",
                            children=[TocEntry(title="Section", level=2, anchor="section")],
                        )
                    ],
                )
            ],
        )

        assert toc.to_markdown() == "# Book\n\n- [Chapter](#chapter)\n  - [Section](#section)"


class TestSlugify:
    """Test that heading identifiers follow Pandoc's rules."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Reads and Writes", "reads-and-writes"),
            ("Play 2.3", "play-2.3"),
            ("Using snake_case", "using-snake_case"),
            ("Dogs: A Love Story", "dogs-a-love-story"),
            ("1.2 Routes", "routes"),
            ("Pre - Post", "pre---post"),
            ("2015", "section"),
        ],
    )
    def test_slugify(self, title, expected):
        assert slugify(title) == expected
