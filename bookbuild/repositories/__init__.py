"""Repository layer for file system access."""

from .interfaces import IConfigRepository, IFileRepository
from .file_repository import FileRepository
from .config_repository import ConfigRepository

__all__ = [
    "IConfigRepository",
    "IFileRepository",
    "FileRepository",
    "ConfigRepository",
]
