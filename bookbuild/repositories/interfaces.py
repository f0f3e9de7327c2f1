"""Repository interfaces (protocols) for file system access.

Services depend on these protocols rather than on the file system
directly, so they can be tested with mocks.
"""

from pathlib import Path
from typing import Any, Protocol


class IFileRepository(Protocol):
    """File system operations used by services."""

    def exists(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def read_file(self, path: Path) -> str: ...

    def write_file(self, path: Path, content: str) -> None: ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None: ...


class IConfigRepository(Protocol):
    """Structured configuration file operations."""

    def load_yaml(self, path: Path) -> dict[str, Any]: ...
