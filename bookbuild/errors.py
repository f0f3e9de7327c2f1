"""Exceptions raised by book build operations."""

from typing import Optional


class BookBuildError(Exception):
    """Base class for book build failures."""


class ManifestError(BookBuildError, ValueError):
    """The manifest is malformed or a field is invalid."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        self.key = key
        if key:
            message = f"{key}: {message}"
        super().__init__(message)


class UnreadableFileError(BookBuildError):
    """A source file exists but is not valid UTF-8 text."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class PandocError(BookBuildError, RuntimeError):
    """Pandoc is missing or a conversion failed."""

    def __init__(self, message: str, stderr: str = "", returncode: Optional[int] = None) -> None:
        self.stderr = stderr
        self.returncode = returncode
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class ExercisesError(BookBuildError, RuntimeError):
    """Cloning or packaging the exercises repository failed."""


class ValidationFailedError(BookBuildError):
    """A build was aborted because the project did not validate."""

    def __init__(self, report) -> None:
        self.report = report
        count = len(report.errors)
        super().__init__(f"Book project has {count} validation error(s)")
