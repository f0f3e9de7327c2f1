"""Service layer for book operations.

Provides services for loading manifests, validating projects, building
tables of contents, assembling pages, and driving Pandoc and git.
"""

from .manifest_service import ManifestService
from .content_service import ContentService
from .validation_service import ValidationService
from .toc_service import TocService
from .assemble_service import AssembleService
from .pandoc_service import PandocService
from .render_service import RenderService
from .exercises_service import ExercisesService
from .build_service import BuildService

__all__ = [
    "ManifestService",
    "ContentService",
    "ValidationService",
    "TocService",
    "AssembleService",
    "PandocService",
    "RenderService",
    "ExercisesService",
    "BuildService",
]
