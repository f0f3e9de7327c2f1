"""Domain models for the book manifest and project layout."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class ExercisesRepo:
    """Pointer to the companion code repository.

    The repo is cloned and zipped next to the book artifacts; name is the
    directory name of the clone and the top-level folder inside the ZIP.
    """

    repo: str
    name: str


@dataclass
class BookManifest:
    """Book metadata and page ordering read from metadata.yaml.

    Pandoc reads the same file for cover metadata, so the on-disk keys
    stay camelCase (see to_dict).
    """

    title: str
    author: str
    filename_stem: str
    pages: list[str]
    date: str = ""
    cover_color: str = ""
    exercises: Optional[ExercisesRepo] = None
    toc_depth: int = 2
    preview_pages: list[str] = field(default_factory=list)
    source_path: Optional[Path] = None

    def page_list(self, preview: bool = False) -> list[str]:
        """Get the ordered page paths for a full or preview build."""
        return list(self.preview_pages if preview else self.pages)

    def output_stem(self, preview: bool = False) -> str:
        """Get the output file stem for a full or preview build."""
        return f"{self.filename_stem}-preview" if preview else self.filename_stem

    def to_dict(self) -> dict:
        """Convert to the on-disk manifest shape."""
        result: dict = {
            "title": self.title,
            "author": self.author,
            "date": self.date,
            "coverColor": self.cover_color,
            "filenameStem": self.filename_stem,
        }
        if self.exercises:
            result["exercises"] = {
                "repo": self.exercises.repo,
                "name": self.exercises.name,
            }
        result["tocDepth"] = self.toc_depth
        result["pages"] = list(self.pages)
        result["previewPages"] = list(self.preview_pages)
        return result


@dataclass
class BookProject:
    """A book source tree: its root directory and parsed manifest.

    Manifest page paths are relative to the root, which is also the
    working directory Pandoc runs in.
    """

    root: Path
    manifest: BookManifest

    def resolve(self, page: str) -> Path:
        """Resolve a manifest path against the project root."""
        path = Path(page)
        if path.is_absolute():
            return path
        return self.root / path

    @property
    def manifest_path(self) -> Path:
        """Path of the manifest file (default location if not loaded from disk)."""
        if self.manifest.source_path is not None:
            return self.manifest.source_path
        return self.root / "src" / "meta" / "metadata.yaml"
