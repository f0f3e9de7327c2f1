"""Content analysis service implementation.

Provides functionality to extract image references and headings from
chapter files, skipping fenced code blocks, using constructor injection
for dependencies.
"""

import re
from pathlib import Path
from typing import Iterator

from ..domain.content import ImageRef
from ..repositories.interfaces import IFileRepository


# Pattern for markdown images: ![alt](path "optional title")
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)")

# Opening or closing code fence: ``` or ~~~ (three or more)
FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")


def iter_prose_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield (line_number, line) for lines outside fenced code blocks.

    A fence closes only on a run of the same character at least as long
    as the one that opened it.
    """
    fence: str | None = None

    for line_num, line in enumerate(content.split("\n"), start=1):
        match = FENCE_PATTERN.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                continue
            yield line_num, line
        elif match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            if not line.strip().strip(fence[0]):
                fence = None


def strip_frontmatter(content: str) -> str:
    """Strip a leading YAML metadata block from content."""
    if not content.startswith("---"):
        return content

    match = re.search(r"\n(---|\.\.\.)\s*\n", content[3:])
    if match:
        return content[3 + match.end() :].lstrip()
    return content


class ContentService:
    """Service for analyzing and extracting content features.

    Implements image extraction and validation using constructor
    injection.
    """

    def __init__(self, file_repo: IFileRepository) -> None:
        """Initialize the content service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
        """
        self._file_repo = file_repo

    def extract_images(
        self,
        content: str,
        page_path: Path,
        root: Path | None = None,
        validate: bool = True,
    ) -> list[ImageRef]:
        """Extract image references from markdown content.

        Finds all ![alt](path) patterns outside code blocks and optionally
        validates that the referenced files exist.

        Args:
            content: The markdown content to analyze.
            page_path: Path to the page file for relative path resolution.
            root: Book root; Pandoc resolves images from its working
                directory, so a path found there also counts.
            validate: If True, check that image files exist.

        Returns:
            List of ImageRef objects with existence status.
        """
        images: list[ImageRef] = []

        for line_num, line in iter_prose_lines(content):
            for match in IMAGE_PATTERN.finditer(line):
                alt_text = match.group(1)
                img_path = match.group(2)

                # Skip external URLs
                if img_path.startswith(("http://", "https://", "//", "data:")):
                    images.append(
                        ImageRef(
                            alt_text=alt_text,
                            path=img_path,
                            line_number=line_num,
                            exists=True,  # Assume external URLs exist
                        )
                    )
                    continue

                exists = True
                if validate:
                    exists = any(
                        self._file_repo.exists(candidate)
                        for candidate in self._candidate_paths(img_path, page_path, root)
                    )

                images.append(
                    ImageRef(
                        alt_text=alt_text,
                        path=img_path,
                        line_number=line_num,
                        exists=exists,
                    )
                )

        return images

    def validate_images(
        self, content: str, page_path: Path, root: Path | None = None
    ) -> list[ImageRef]:
        """Validate that all referenced images exist.

        Returns:
            List of ImageRef objects for missing images only.
        """
        images = self.extract_images(content, page_path, root=root, validate=True)
        return [img for img in images if not img.exists]

    def _candidate_paths(
        self, img_path: str, page_path: Path, root: Path | None
    ) -> list[Path]:
        """Get the locations an image path may resolve to."""
        # Handle paths starting with ./
        if img_path.startswith("./"):
            img_path = img_path[2:]

        candidates = [(page_path.parent / img_path).resolve()]
        if root is not None:
            candidates.append((root / img_path).resolve())
        return candidates
