"""Build orchestration service.

Validates a book project and then drives the Pandoc and exercises
services, building every edition in one pass.
"""

import logging
from pathlib import Path

from ..domain import BookProject, BuildResult, BuildTarget
from ..errors import ValidationFailedError
from .exercises_service import ExercisesService
from .pandoc_service import PandocService
from .validation_service import ValidationService

logger = logging.getLogger(__name__)


class BuildService:
    """Service for building book artifacts end to end."""

    def __init__(
        self,
        validation_service: ValidationService,
        pandoc_service: PandocService,
        exercises_service: ExercisesService,
    ) -> None:
        """Initialize the build service with required dependencies.

        Args:
            validation_service: Service for checking the project first.
            pandoc_service: Service for running pandoc.
            exercises_service: Service for packaging exercises.
        """
        self._validation_service = validation_service
        self._pandoc_service = pandoc_service
        self._exercises_service = exercises_service

    def build(
        self,
        project: BookProject,
        targets: list[BuildTarget] | None = None,
        preview: bool = False,
        output_dir: Path | None = None,
        skip_validation: bool = False,
    ) -> list[BuildResult]:
        """Validate the project and build each target in order.

        Args:
            project: The book project.
            targets: Formats to build (default: all).
            preview: If True, build the preview edition.
            output_dir: Directory for artifacts (default: configured dist).
            skip_validation: If True, go straight to pandoc.

        Returns:
            One BuildResult per target.

        Raises:
            ValidationFailedError: If validation reports errors.
            PandocError: If a conversion fails.
        """
        if not skip_validation:
            self._ensure_valid(project)

        results: list[BuildResult] = []
        for target in targets or list(BuildTarget):
            results.append(self._pandoc_service.run(project, target, preview, output_dir))
        return results

    def build_all(
        self,
        project: BookProject,
        output_dir: Path | None = None,
        include_exercises: bool = True,
    ) -> tuple[list[BuildResult], Path | None]:
        """Build full and preview editions of every target, then exercises.

        The preview edition is skipped when the manifest lists no
        preview pages, and exercises when it has no exercises section.

        Returns:
            Tuple of (build results, exercises ZIP path or None).
        """
        self._ensure_valid(project)

        results = self.build(project, output_dir=output_dir, skip_validation=True)
        if project.manifest.preview_pages:
            results.extend(
                self.build(project, preview=True, output_dir=output_dir, skip_validation=True)
            )
        else:
            logger.info("No previewPages listed; skipping preview edition")

        archive = None
        if include_exercises and project.manifest.exercises is not None:
            archive = self._exercises_service.package(project, output_dir)

        return results, archive

    def _ensure_valid(self, project: BookProject) -> None:
        report = self._validation_service.validate(project)
        for issue in report.warnings:
            logger.warning(issue.message)
        if not report.ok:
            for issue in report.errors:
                logger.error(issue.message)
            raise ValidationFailedError(report)
