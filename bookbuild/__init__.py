"""Book build tools.

Validates a Pandoc book source tree against its manifest and builds
PDF, HTML and ePub editions, a preview edition, and an exercises ZIP.
"""

from .domain import BookManifest, BookProject, BuildTarget
from .errors import (
    BookBuildError,
    ExercisesError,
    ManifestError,
    PandocError,
    ValidationFailedError,
)

__all__ = [
    "BookManifest",
    "BookProject",
    "BuildTarget",
    "BookBuildError",
    "ExercisesError",
    "ManifestError",
    "PandocError",
    "ValidationFailedError",
]
