"""Pandoc service implementation.

Builds Pandoc command lines for each output format and runs them with
subprocess calls to the pandoc CLI.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from ..config import BuildConfig
from ..domain import BookProject, BuildResult, BuildTarget
from ..errors import PandocError
from ..repositories.interfaces import IFileRepository

logger = logging.getLogger(__name__)


class PandocService:
    """Service for converting a book with Pandoc.

    The manifest doubles as the Pandoc metadata file and pages are
    passed in manifest order.
    """

    def __init__(
        self,
        file_repo: IFileRepository,
        pandoc: str | None = None,
        timeout: int | None = None,
    ) -> None:
        """Initialize the pandoc service.

        Args:
            file_repo: Repository for file system operations.
            pandoc: Pandoc executable (default: configured).
            timeout: Seconds to wait for a conversion (default: configured).
        """
        self._file_repo = file_repo
        self._pandoc = pandoc or BuildConfig.get_pandoc_command()
        self._timeout = timeout or BuildConfig.get_pandoc_timeout()

    def is_available(self) -> bool:
        """Check if the pandoc executable is in PATH."""
        return shutil.which(self._pandoc) is not None

    def get_version(self) -> str | None:
        """Get the first line of `pandoc --version`, or None if unavailable."""
        try:
            result = subprocess.run(
                [self._pandoc, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return None
        if result.returncode != 0 or not result.stdout:
            return None
        return result.stdout.splitlines()[0].strip()

    def output_path(
        self,
        project: BookProject,
        target: BuildTarget,
        preview: bool = False,
        output_dir: Path | None = None,
    ) -> Path:
        """Get the artifact path for a target, e.g. dist/essential-play.pdf."""
        if output_dir is None:
            output_dir = BuildConfig.resolve(project.root, BuildConfig.get_dist_dir())
        stem = project.manifest.output_stem(preview)
        return Path(output_dir) / f"{stem}.{target.extension}"

    def build_command(
        self,
        project: BookProject,
        target: BuildTarget,
        preview: bool = False,
        output_dir: Path | None = None,
    ) -> list[str]:
        """Assemble the pandoc argument list for a target.

        Args:
            project: The book project.
            target: Output format.
            preview: If True, build the preview edition.
            output_dir: Directory for the artifact (default: configured dist).

        Returns:
            The command as a list of arguments, to be run from the book root.
        """
        manifest = project.manifest
        output = self.output_path(project, target, preview, output_dir)

        command = [
            self._pandoc,
            "--from=markdown+smart",
            "--standalone",
            "--toc",
            f"--toc-depth={manifest.toc_depth}",
            "--top-level-division=chapter",
            "--number-sections",
            f"--highlight-style={BuildConfig.HIGHLIGHT_STYLE}",
            f"--metadata-file={self._relative(project, project.manifest_path)}",
        ]
        if manifest.cover_color:
            command.append(f"--variable=coverColor:{manifest.cover_color}")

        command.extend(self._target_options(project, target))
        command.append(f"--output={self._relative(project, output)}")
        command.extend(manifest.page_list(preview))
        return command

    def run(
        self,
        project: BookProject,
        target: BuildTarget,
        preview: bool = False,
        output_dir: Path | None = None,
    ) -> BuildResult:
        """Build one artifact with pandoc.

        Returns:
            BuildResult describing the artifact.

        Raises:
            PandocError: If pandoc is missing, times out, or fails.
        """
        if not self.is_available():
            raise PandocError(
                f"Required tool not found: {self._pandoc} "
                "(install pandoc or set PANDOC_PATH)"
            )

        output = self.output_path(project, target, preview, output_dir)
        self._file_repo.mkdir(output.parent, parents=True, exist_ok=True)
        command = self.build_command(project, target, preview, output_dir)

        edition = "preview" if preview else "full"
        logger.info("Building %s %s edition: %s", target.value, edition, output)
        logger.debug("Running %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                cwd=project.root,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            raise PandocError(f"pandoc timed out after {self._timeout}s building {output.name}")
        except FileNotFoundError:
            raise PandocError(f"Required tool not found: {self._pandoc}")

        if result.returncode != 0:
            raise PandocError(
                f"pandoc failed building {output.name} (exit {result.returncode})",
                stderr=result.stderr,
                returncode=result.returncode,
            )
        if result.stderr.strip():
            for line in result.stderr.strip().splitlines():
                logger.warning("pandoc: %s", line)

        return BuildResult(
            target=target,
            preview=preview,
            output_path=output,
            command=command,
        )

    def _target_options(self, project: BookProject, target: BuildTarget) -> list[str]:
        """Get format-specific options, using templates and assets that exist."""
        options: list[str] = []

        template = self._asset(
            project, BuildConfig.get_templates_dir(), BuildConfig.TEMPLATES.get(target.value)
        )
        if template:
            options.append(f"--template={template}")

        stylesheet = self._asset(
            project, BuildConfig.get_css_dir(), BuildConfig.STYLESHEETS.get(target.value)
        )

        if target is BuildTarget.PDF:
            options.append(f"--pdf-engine={BuildConfig.get_pdf_engine()}")
            options.append("--variable=papersize:a4")
        elif target is BuildTarget.HTML:
            options.append("--embed-resources")
            if stylesheet:
                options.append(f"--css={stylesheet}")
        elif target is BuildTarget.EPUB:
            if stylesheet:
                options.append(f"--css={stylesheet}")
            cover = self._asset(project, BuildConfig.get_covers_dir(), BuildConfig.EPUB_COVER)
            if cover:
                options.append(f"--epub-cover-image={cover}")

        return options

    def _asset(self, project: BookProject, directory: Path, name: str | None) -> str | None:
        """Get the root-relative path of an optional asset, if it exists."""
        if not name:
            return None
        path = BuildConfig.resolve(project.root, directory) / name
        if not self._file_repo.is_file(path):
            return None
        return self._relative(project, path)

    def _relative(self, project: BookProject, path: Path) -> str:
        """Express a path relative to the book root where possible."""
        try:
            return Path(path).relative_to(project.root).as_posix()
        except ValueError:
            return str(path)
