"""File system repository implementation."""

from pathlib import Path

from ..errors import UnreadableFileError


class FileRepository:
    """Reads and writes UTF-8 text files on the local file system."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_file(self, path: Path) -> str:
        """Read a text file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            UnreadableFileError: If the file is not valid UTF-8.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise UnreadableFileError(path, f"not valid UTF-8 (byte {e.start})")

    def write_file(self, path: Path, content: str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)
