"""Domain models for build targets and results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class BuildTarget(Enum):
    """Output formats produced by Pandoc."""

    PDF = "pdf"
    HTML = "html"
    EPUB = "epub"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "BuildTarget":
        """Look up a target by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known target.
        """
        try:
            return cls(value.lower())
        except ValueError:
            names = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown build target '{value}' (expected one of: {names})")


@dataclass
class BuildResult:
    """Outcome of a single artifact build."""

    target: BuildTarget
    preview: bool
    output_path: Path
    command: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "target": self.target.value,
            "preview": self.preview,
            "output_path": str(self.output_path),
            "command": self.command,
        }
