"""YAML configuration repository implementation."""

from pathlib import Path
from typing import Any

import yaml

from ..errors import ManifestError


class ConfigRepository:
    """Loads YAML documents such as metadata.yaml."""

    def load_yaml(self, path: Path) -> dict[str, Any]:
        """Load a YAML mapping from a file.

        Pandoc metadata files may be terminated with "..." and may
        contain a single document only.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ManifestError: If the file is not UTF-8, the YAML is malformed,
                or the document is not a mapping.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Manifest not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise ManifestError(f"{path} is not valid UTF-8 (byte {e.start})")
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML in {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ManifestError(f"Expected a mapping at the top of {path}")
        return data
