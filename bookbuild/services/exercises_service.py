"""Exercises packaging service.

Clones the companion code repository named in the manifest and zips
it next to the book artifacts, using subprocess calls to git CLI.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from ..config import BuildConfig
from ..domain import BookProject
from ..errors import ExercisesError, ManifestError

logger = logging.getLogger(__name__)


class ExercisesService:
    """Service for packaging the exercises repository as a ZIP."""

    def __init__(self, git: str | None = None, timeout: int | None = None) -> None:
        """Initialize the exercises service.

        Args:
            git: Git executable (default: configured).
            timeout: Seconds to wait for the clone (default: configured).
        """
        self._git = git or BuildConfig.get_git_command()
        self._timeout = timeout or BuildConfig.GIT_TIMEOUT

    def archive_path(self, project: BookProject, output_dir: Path | None = None) -> Path:
        """Get the ZIP path, e.g. dist/essential-play-code.zip."""
        if output_dir is None:
            output_dir = BuildConfig.resolve(project.root, BuildConfig.get_dist_dir())
        return Path(output_dir) / f"{project.manifest.filename_stem}-code.zip"

    def package(self, project: BookProject, output_dir: Path | None = None) -> Path:
        """Clone the exercises repository and zip it.

        The ZIP contains a single top-level folder named after
        exercises.name, without git metadata.

        Args:
            project: The book project.
            output_dir: Directory for the ZIP (default: configured dist).

        Returns:
            Path to the created ZIP file.

        Raises:
            ManifestError: If the manifest has no exercises section.
            ExercisesError: If cloning fails.
        """
        exercises = project.manifest.exercises
        if exercises is None:
            raise ManifestError("no exercises repository configured", key="exercises")

        archive = self.archive_path(project, output_dir)
        archive.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="bookbuild-") as tmp:
            checkout = Path(tmp) / exercises.name
            self._clone(exercises.repo, checkout)
            shutil.rmtree(checkout / ".git", ignore_errors=True)

            logger.info("Packaging %s into %s", exercises.name, archive)
            created = shutil.make_archive(
                str(archive.with_suffix("")),
                "zip",
                root_dir=tmp,
                base_dir=exercises.name,
            )

        return Path(created)

    def _clone(self, repo: str, destination: Path) -> None:
        """Shallow-clone a repository.

        Raises:
            ExercisesError: If git is missing, times out, or fails.
        """
        logger.info("Cloning %s", repo)
        try:
            result = subprocess.run(
                [self._git, "clone", "--depth", "1", "--quiet", repo, str(destination)],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            raise ExercisesError(f"git clone timed out after {self._timeout}s: {repo}")
        except FileNotFoundError:
            raise ExercisesError(f"Required tool not found: {self._git}")

        if result.returncode != 0:
            raise ExercisesError(f"git clone failed for {repo}: {result.stderr.strip()}")
