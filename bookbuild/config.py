"""
Configuration settings for the book build
"""

import os
from pathlib import Path


class BuildConfig:
    """Configuration class for book build settings."""

    # Book source layout, relative to the book root
    MANIFEST_PATH = Path("src") / "meta" / "metadata.yaml"
    TEMPLATES_DIR = Path("src") / "templates"
    CSS_DIR = Path("src") / "css"
    COVERS_DIR = Path("src") / "covers"
    DIST_DIR = Path("dist")

    # Template and asset file names looked up per target
    TEMPLATES = {
        "pdf": "template.tex",
        "html": "template.html",
        "epub": "template.epub.html",
    }
    STYLESHEETS = {
        "html": "book.css",
        "epub": "epub.css",
    }
    EPUB_COVER = "epub-cover.png"

    # Pandoc settings
    PANDOC_COMMAND = "pandoc"
    PDF_ENGINE = "xelatex"
    HIGHLIGHT_STYLE = "tango"
    PANDOC_TIMEOUT = 600  # seconds

    # Git settings (exercises packaging)
    GIT_COMMAND = "git"
    GIT_TIMEOUT = 300  # seconds

    # Manifest defaults
    DEFAULT_TOC_DEPTH = 2
    MAX_TOC_DEPTH = 6

    @classmethod
    def get_book_root(cls) -> Path:
        """Get the book root directory, checking environment variables."""
        env_root = os.environ.get("BOOK_ROOT")
        if env_root:
            return Path(env_root)
        return Path.cwd()

    @classmethod
    def get_manifest_path(cls) -> Path:
        """Get the manifest path relative to the book root."""
        return Path(os.environ.get("BOOK_MANIFEST", str(cls.MANIFEST_PATH)))

    @classmethod
    def get_dist_dir(cls) -> Path:
        """Get the output directory relative to the book root."""
        return Path(os.environ.get("BOOK_DIST_DIR", str(cls.DIST_DIR)))

    @classmethod
    def get_templates_dir(cls) -> Path:
        return Path(os.environ.get("BOOK_TEMPLATES_DIR", str(cls.TEMPLATES_DIR)))

    @classmethod
    def get_css_dir(cls) -> Path:
        return Path(os.environ.get("BOOK_CSS_DIR", str(cls.CSS_DIR)))

    @classmethod
    def get_covers_dir(cls) -> Path:
        return Path(os.environ.get("BOOK_COVERS_DIR", str(cls.COVERS_DIR)))

    @classmethod
    def get_pandoc_command(cls) -> str:
        return os.environ.get("PANDOC_PATH", cls.PANDOC_COMMAND)

    @classmethod
    def get_pdf_engine(cls) -> str:
        return os.environ.get("PANDOC_PDF_ENGINE", cls.PDF_ENGINE)

    @classmethod
    def get_pandoc_timeout(cls) -> int:
        """Get the Pandoc timeout in seconds, ignoring unparseable values."""
        value = os.environ.get("PANDOC_TIMEOUT")
        if value and value.isdigit():
            return int(value)
        return cls.PANDOC_TIMEOUT

    @classmethod
    def get_git_command(cls) -> str:
        return os.environ.get("GIT_PATH", cls.GIT_COMMAND)

    @classmethod
    def resolve(cls, root: Path, path: Path) -> Path:
        """Resolve a configured path against the book root."""
        if path.is_absolute():
            return path
        return root / path
