"""Assemble service implementation.

Concatenates the pages of a book into a single markdown document with a
metadata block, the same input Pandoc sees when given the page list.
"""

import logging
from pathlib import Path

import yaml

from ..domain import BookProject
from ..repositories.interfaces import IFileRepository

logger = logging.getLogger(__name__)


class AssembleService:
    """Service for assembling a book into one markdown document."""

    def __init__(self, file_repo: IFileRepository) -> None:
        """Initialize the assemble service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
        """
        self._file_repo = file_repo

    def metadata_block(self, project: BookProject) -> str:
        """Render the cover metadata as a Pandoc YAML metadata block."""
        manifest = project.manifest
        metadata = {
            "title": manifest.title,
            "author": manifest.author,
        }
        if manifest.date:
            metadata["date"] = manifest.date
        if manifest.cover_color:
            metadata["coverColor"] = manifest.cover_color
        metadata["toc-depth"] = manifest.toc_depth

        body = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
        return f"---\n{body}...\n"

    def assemble(self, project: BookProject, preview: bool = False) -> str:
        """Concatenate the book's pages in manifest order.

        Pages are separated by a blank line so a heading at the start of
        one file never runs into the last paragraph of the previous one.

        Args:
            project: The book project.
            preview: If True, assemble the preview page list.

        Returns:
            The assembled markdown document.

        Raises:
            FileNotFoundError: If a page is missing.
            UnreadableFileError: If a page is not valid UTF-8.
        """
        parts = [self.metadata_block(project)]

        for page in project.manifest.page_list(preview):
            content = self._file_repo.read_file(project.resolve(page))
            parts.append(content.strip("\n") + "\n")

        return "\n".join(parts)

    def write(
        self,
        project: BookProject,
        output: Path,
        preview: bool = False,
    ) -> Path:
        """Assemble the book and write it to a file.

        Returns:
            The path written.
        """
        content = self.assemble(project, preview)
        output = Path(output)
        self._file_repo.write_file(output, content)
        logger.info("Assembled %d page(s) into %s", len(project.manifest.page_list(preview)), output)
        return output
