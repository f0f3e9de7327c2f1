"""Domain layer for book representation."""

from .manifest import BookManifest, BookProject, ExercisesRepo
from .build import BuildResult, BuildTarget
from .content import (
    TocEntry,
    PageToc,
    BookToc,
    ImageRef,
    Severity,
    ValidationIssue,
    ValidationReport,
    slugify,
)

__all__ = [
    "BookManifest",
    "BookProject",
    "ExercisesRepo",
    "BuildResult",
    "BuildTarget",
    "TocEntry",
    "PageToc",
    "BookToc",
    "ImageRef",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "slugify",
]
