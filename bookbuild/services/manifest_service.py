"""Manifest service implementation.

Loads metadata.yaml and maps it onto a BookManifest, enforcing the
field rules the build relies on.
"""

import logging
import re
from pathlib import Path
from typing import Any

from ..config import BuildConfig
from ..domain import BookManifest, BookProject, ExercisesRepo
from ..errors import ManifestError
from ..repositories.interfaces import IConfigRepository

logger = logging.getLogger(__name__)

# 3 or 6 hex digits, optional leading #
COVER_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ManifestService:
    """Service for loading and parsing book manifests."""

    def __init__(self, config_repo: IConfigRepository) -> None:
        """Initialize the manifest service with required dependencies.

        Args:
            config_repo: Repository for YAML file operations.
        """
        self._config_repo = config_repo

    def load(self, path: Path) -> BookManifest:
        """Load a manifest file.

        Args:
            path: Path to metadata.yaml.

        Returns:
            The parsed manifest.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ManifestError: If the YAML is malformed or a field is invalid.
        """
        path = Path(path)
        logger.debug("Loading manifest %s", path)
        data = self._config_repo.load_yaml(path)
        manifest = self.parse(data)
        manifest.source_path = path
        return manifest

    def load_project(self, root: Path, manifest: Path | None = None) -> BookProject:
        """Locate and load the manifest of a book source tree.

        Args:
            root: The book root directory.
            manifest: Manifest path, relative to root or absolute
                (default: configured manifest path).

        Returns:
            A BookProject rooted at root.
        """
        root = Path(root).resolve()
        manifest_path = BuildConfig.resolve(
            root, Path(manifest) if manifest else BuildConfig.get_manifest_path()
        )
        return BookProject(root=root, manifest=self.load(manifest_path))

    def parse(self, data: dict[str, Any]) -> BookManifest:
        """Map a raw manifest mapping onto a BookManifest.

        Unknown keys are ignored since Pandoc reads the same file.

        Raises:
            ManifestError: If a field is missing or invalid.
        """
        pages = self._string_list(data, "pages", required=True)
        if not pages:
            raise ManifestError("must list at least one page", key="pages")

        return BookManifest(
            title=self._required_string(data, "title"),
            author=self._required_string(data, "author"),
            date=self._optional_string(data, "date"),
            cover_color=self._cover_color(data.get("coverColor")),
            filename_stem=self._filename_stem(data.get("filenameStem")),
            exercises=self._exercises(data.get("exercises")),
            toc_depth=self._toc_depth(data.get("tocDepth")),
            pages=pages,
            preview_pages=self._string_list(data, "previewPages", required=False),
        )

    def _required_string(self, data: dict[str, Any], key: str) -> str:
        value = data.get(key)
        if value is None:
            raise ManifestError("is required", key=key)
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ManifestError("must be a string", key=key)
        value = str(value).strip()
        if not value:
            raise ManifestError("must not be empty", key=key)
        return value

    def _optional_string(self, data: dict[str, Any], key: str) -> str:
        value = data.get(key)
        if value is None:
            return ""
        if isinstance(value, (list, dict)):
            raise ManifestError("must be a string", key=key)
        # YAML turns unquoted dates into date objects
        return str(value).strip()

    def _cover_color(self, value: Any) -> str:
        if value is None or value == "":
            return ""
        # An unquoted all-digit color is read as an int
        text = str(value).strip()
        match = COVER_COLOR_PATTERN.match(text)
        if not match:
            raise ManifestError(
                f"'{text}' is not a hex color (expected e.g. A0C556)", key="coverColor"
            )
        return match.group(1).upper()

    def _filename_stem(self, value: Any) -> str:
        return self._plain_name({"filenameStem": value}, "filenameStem")

    def _exercises(self, value: Any) -> ExercisesRepo | None:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ManifestError("must be a mapping with repo and name", key="exercises")
        try:
            return ExercisesRepo(
                repo=self._required_string(value, "repo"),
                name=self._plain_name(value, "name"),
            )
        except ManifestError as e:
            raise ManifestError(str(e), key="exercises") from e

    def _plain_name(self, data: dict[str, Any], key: str) -> str:
        """Get a required string usable as a single path component."""
        name = self._required_string(data, key)
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ManifestError(f"'{name}' must be a plain file name", key=key)
        return name

    def _toc_depth(self, value: Any) -> int:
        if value is None:
            return BuildConfig.DEFAULT_TOC_DEPTH
        if isinstance(value, bool) or not isinstance(value, int):
            if isinstance(value, str) and value.strip().isdigit():
                value = int(value)
            else:
                raise ManifestError("must be an integer", key="tocDepth")
        if not 1 <= value <= BuildConfig.MAX_TOC_DEPTH:
            raise ManifestError(
                f"must be between 1 and {BuildConfig.MAX_TOC_DEPTH}, got {value}",
                key="tocDepth",
            )
        return value

    def _string_list(self, data: dict[str, Any], key: str, required: bool) -> list[str]:
        value = data.get(key)
        if value is None:
            if required:
                raise ManifestError("is required", key=key)
            return []
        if not isinstance(value, list):
            raise ManifestError("must be a list of file paths", key=key)

        result: list[str] = []
        for idx, item in enumerate(value):
            if not isinstance(item, str) or not item.strip():
                raise ManifestError(f"entry {idx} must be a file path", key=key)
            result.append(item.strip())
        return result
