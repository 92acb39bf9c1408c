"""Pipeline exception hierarchy.

Every failure is tagged with the stage that raised it (``fetch``, ``geography``,
``population``, ``income``, ``commute``, ``join``, ``serialize``) and, where one
is involved, the file it was working on. Nothing is retried: scripts log the
error and let it abort the run.
"""

from __future__ import annotations

from pathlib import Path


class PipelineError(Exception):
    """Base exception for all pipeline failures."""

    def __init__(self, message: str, *, stage: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.path = None if path is None else Path(path)

    def __str__(self) -> str:
        where = f" ({self.path})" if self.path is not None else ""
        return f"[{self.stage}] {self.message}{where}"


class DownloadError(PipelineError):
    """Raised when the DataPack archive cannot be fetched."""


class ArchiveError(PipelineError):
    """Raised when the archive cannot be extracted or laid out."""


class SourceFileError(PipelineError):
    """Raised for a missing or unreadable source table."""


class SchemaError(PipelineError, ValueError):
    """Raised when a table does not match its column contract."""


class EmptyResultError(PipelineError):
    """Raised when a stage produces zero rows."""


class SerializationError(PipelineError):
    """Raised when the listing file cannot be written or read back."""
