"""Render service implementation.

Provides markdown to HTML rendering using the markdown library with
pymdown-extensions, producing a single-file HTML edition of the book
without needing Pandoc installed.
"""

import html
import logging
from pathlib import Path

import markdown
from markdown.extensions.codehilite import CodeHiliteExtension
from markdown.extensions.tables import TableExtension
from markdown.extensions.toc import TocExtension

from ..config import BuildConfig
from ..domain import BookProject, slugify
from ..repositories.interfaces import IFileRepository
from .content_service import strip_frontmatter

logger = logging.getLogger(__name__)


# HTML template for the rendered book
HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            color: #333;
        }}
        h1, h2, h3, h4 {{ color: #2c3e50; }}
        pre {{ background: #f5f5f5; padding: 1rem; overflow-x: auto; border-radius: 4px; }}
        code {{ background: #f5f5f5; padding: 0.2em 0.4em; border-radius: 3px; }}
        pre code {{ background: none; padding: 0; }}
        table {{ border-collapse: collapse; width: 100%; margin: 1rem 0; }}
        th, td {{ border: 1px solid #ddd; padding: 0.75rem; text-align: left; }}
        th {{ background: #f5f5f5; }}
        blockquote {{ border-left: 4px solid #ddd; margin: 0; padding-left: 1rem; color: #666; }}
        .task-list {{ list-style: none; padding-left: 0; }}
        .task-list-item input {{ margin-right: 0.5rem; }}
        .footnote {{ font-size: 0.9em; }}
        .cover {{ background: #{cover_color}; color: #fff; padding: 3rem 2rem; margin-bottom: 2rem; border-radius: 4px; }}
        .cover h1 {{ color: #fff; margin: 0 0 1rem 0; }}
        .cover p {{ margin: 0.25rem 0; }}
        .toc {{ background: #f9f9f9; padding: 1rem; border-radius: 4px; margin-bottom: 2rem; }}
        .toc ul {{ margin: 0.5rem 0; padding-left: 1.5rem; }}
        img {{ max-width: 100%; height: auto; }}
    </style>
</head>
<body>
    {cover}
    {toc}
    <article>
        {content}
    </article>
</body>
</html>"""

# Cover color used when the manifest doesn't set one
DEFAULT_COVER_COLOR = "2C3E50"


class RenderService:
    """Service for rendering a book to a single HTML file.

    Uses the markdown library with pymdown-extensions for:
    - Tables
    - Footnotes
    - Task lists
    - Fenced code with Pygments highlighting
    - A table of contents limited to the manifest's tocDepth
    """

    def __init__(self, file_repo: IFileRepository) -> None:
        """Initialize the render service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
        """
        self._file_repo = file_repo

    def _create_markdown_processor(self, toc_depth: int) -> markdown.Markdown:
        """Create configured markdown processor with extensions."""
        extensions = [
            TableExtension(),
            TocExtension(permalink=True, slugify=self._slugify, toc_depth=toc_depth),
            CodeHiliteExtension(css_class="highlight", guess_lang=False),
            "footnotes",
            "attr_list",
            "def_list",
            "pymdownx.tasklist",
            "pymdownx.superfences",
        ]
        extension_configs = {
            "pymdownx.tasklist": {"custom_checkbox": True},
        }

        return markdown.Markdown(
            extensions=extensions,
            extension_configs=extension_configs,
            output_format="html5",
        )

    def _slugify(self, value: str, separator: str = "-") -> str:
        """Match the identifiers Pandoc gives headings."""
        return slugify(value)

    def render_content(self, project: BookProject, preview: bool = False) -> tuple[str, str]:
        """Render the book's pages to HTML.

        Args:
            project: The book project.
            preview: If True, render the preview page list.

        Returns:
            Tuple of (body HTML, TOC HTML).

        Raises:
            FileNotFoundError: If a page is missing.
            UnreadableFileError: If a page is not valid UTF-8.
        """
        parts: list[str] = []
        for page in project.manifest.page_list(preview):
            content = self._file_repo.read_file(project.resolve(page))
            parts.append(strip_frontmatter(content).strip("\n"))

        md = self._create_markdown_processor(project.manifest.toc_depth)
        body = md.convert("\n\n".join(parts) + "\n")
        return body, getattr(md, "toc", "")

    def render_document(self, project: BookProject, preview: bool = False) -> str:
        """Render the book as a complete HTML document."""
        manifest = project.manifest
        body, toc_html = self.render_content(project, preview)

        cover_lines = [f"<h1>{html.escape(manifest.title)}</h1>"]
        cover_lines.append(f"<p>{html.escape(manifest.author)}</p>")
        if manifest.date:
            cover_lines.append(f"<p>{html.escape(manifest.date)}</p>")
        if preview:
            cover_lines.append("<p><em>Preview edition</em></p>")
        cover = '<header class="cover">\n' + "\n".join(cover_lines) + "\n</header>"

        toc = ""
        if toc_html:
            toc = f'<nav class="toc">\n<h2>Contents</h2>\n{toc_html}\n</nav>'

        return HTML_TEMPLATE.format(
            title=html.escape(manifest.title),
            cover_color=manifest.cover_color or DEFAULT_COVER_COLOR,
            cover=cover,
            toc=toc,
            content=body,
        )

    def render_book(
        self,
        project: BookProject,
        output_dir: Path | None = None,
        preview: bool = False,
    ) -> Path:
        """Render the book to <stem>[-preview]-lite.html.

        Args:
            project: The book project.
            output_dir: Directory to write to (default: configured dist).
            preview: If True, render the preview edition.

        Returns:
            Path to the generated HTML file.
        """
        if output_dir is None:
            output_dir = BuildConfig.resolve(project.root, BuildConfig.get_dist_dir())
        self._file_repo.mkdir(Path(output_dir), parents=True, exist_ok=True)

        output_path = Path(output_dir) / f"{project.manifest.output_stem(preview)}-lite.html"
        self._file_repo.write_file(output_path, self.render_document(project, preview))
        logger.info("Rendered HTML preview: %s", output_path)
        return output_path
