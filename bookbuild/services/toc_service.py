"""TOC (Table of Contents) service implementation.

Provides functionality to extract a hierarchical table of contents from
the pages of a book, limited to the manifest's tocDepth, the way Pandoc
builds the TOC of the rendered book.
"""

import logging
import re

from ..domain import BookProject, slugify
from ..domain.content import BookToc, PageToc, TocEntry
from ..repositories.interfaces import IFileRepository
from .content_service import iter_prose_lines, strip_frontmatter

logger = logging.getLogger(__name__)


class TocService:
    """Service for extracting and building table of contents.

    Extracts hierarchical TOC from ATX (# Title) and setext (underlined)
    headings and builds both page-level and book-level TOCs.
    """

    # Pattern for ATX headings, with optional closing hashes
    ATX_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")

    # Setext underlines: === for level 1, --- for level 2
    SETEXT_PATTERN = re.compile(r"^(=+|-+)\s*$")

    # Pandoc heading attributes: {#id .class key=value}
    ATTRIBUTES_PATTERN = re.compile(r"\s*\{([^}]*)\}\s*$")

    def __init__(self, file_repo: IFileRepository) -> None:
        """Initialize the TOC service with required dependencies.

        Args:
            file_repo: Repository for reading page content.
        """
        self._file_repo = file_repo

    def extract_page_toc(self, path: str, content: str, depth: int) -> PageToc:
        """Extract TOC entries from a single page.

        Args:
            path: Manifest path of the page (for reference only).
            content: The page's markdown content.
            depth: Deepest heading level to include.

        Returns:
            PageToc with hierarchical entries.
        """
        entries = self.parse_headings(strip_frontmatter(content), depth)
        return PageToc(path=path, entries=entries)

    def build_book_toc(
        self,
        project: BookProject,
        preview: bool = False,
        depth: int | None = None,
    ) -> BookToc:
        """Build a complete TOC for the whole book.

        Args:
            project: The book project.
            preview: If True, use the preview page list.
            depth: Override the manifest's tocDepth.

        Returns:
            BookToc with all page TOCs in manifest order.

        Raises:
            FileNotFoundError: If a page is missing.
            UnreadableFileError: If a page is not valid UTF-8.
        """
        manifest = project.manifest
        depth = depth or manifest.toc_depth
        pages: list[PageToc] = []

        for page in manifest.page_list(preview):
            content = self._file_repo.read_file(project.resolve(page))
            pages.append(self.extract_page_toc(page, content, depth))

        toc = BookToc(title=manifest.title, depth=depth, pages=pages)
        logger.debug("Built TOC with %d entries at depth %d", len(toc.flatten()), depth)
        return toc

    def generate_toc_markdown(
        self,
        project: BookProject,
        preview: bool = False,
        depth: int | None = None,
    ) -> str:
        """Generate markdown TOC for the whole book."""
        return self.build_book_toc(project, preview, depth).to_markdown()

    def parse_headings(self, content: str, depth: int) -> list[TocEntry]:
        """Parse headings from content into nested TOC entries.

        Headings inside fenced code blocks are ignored, as are headings
        deeper than depth.
        """
        entries: list[TocEntry] = []
        previous: str | None = None
        previous_num = -1

        for line_num, line in iter_prose_lines(content):
            atx = self.ATX_PATTERN.match(line)
            if atx:
                level = len(atx.group(1))
                if level <= depth:
                    entries.append(self._make_entry(atx.group(2), level))
                previous = None
                continue

            setext = self.SETEXT_PATTERN.match(line)
            if (
                setext
                and previous is not None
                and previous_num == line_num - 1
                and previous.strip()
                and not previous.startswith((" ", "\t"))
            ):
                level = 1 if setext.group(1).startswith("=") else 2
                if level <= depth:
                    entries.append(self._make_entry(previous.strip(), level))
                previous = None
                continue

            previous = line
            previous_num = line_num

        return self._build_hierarchy(entries)

    def _make_entry(self, raw_title: str, level: int) -> TocEntry:
        """Build an entry, honouring an explicit {#id} attribute."""
        title = raw_title.strip()
        anchor = ""

        attrs = self.ATTRIBUTES_PATTERN.search(title)
        if attrs:
            title = title[: attrs.start()].strip()
            for token in attrs.group(1).split():
                if token.startswith("#") and len(token) > 1:
                    anchor = token[1:]
                    break

        return TocEntry(title=title, level=level, anchor=anchor or slugify(title))

    def _build_hierarchy(self, entries: list[TocEntry]) -> list[TocEntry]:
        """Build hierarchical structure from flat entries.

        Nests entries based on their level, with deeper entries
        becoming children of the closest shallower one.
        """
        result: list[TocEntry] = []
        stack: list[TocEntry] = []

        for entry in entries:
            # Find parent at lower level
            while stack and stack[-1].level >= entry.level:
                stack.pop()

            if stack:
                stack[-1].children.append(entry)
            else:
                result.append(entry)

            stack.append(entry)

        return result
