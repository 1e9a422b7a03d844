"""Exceptions raised by the export pipeline.

Every error carries the ``phase`` it was raised in so the CLI can tell the
operator which stage failed.  All of them are terminal for the run.
"""

from __future__ import annotations

from pathlib import Path


class ExportError(Exception):
    """Base class for failures that abort an export run."""

    phase = "export"

    def __init__(self, message: str, *, phase: str | None = None) -> None:
        super().__init__(message)
        if phase is not None:
            self.phase = phase


class MissingDependencyError(ExportError):
    """The external fetch tool could not be found."""

    phase = "fetch"


class FetchFailureError(ExportError):
    """The fetch step (or its preflight probe) did not succeed."""

    phase = "fetch"

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class MissingFetchedRootError(ExportError):
    """The fetched site directory could not be located after the fetch."""

    phase = "fetch"


class FileProcessingError(ExportError):
    """A single file could not be read, decoded or written back."""

    def __init__(self, path: Path, reason: str, *, phase: str) -> None:
        super().__init__(f"{path}: {reason}", phase=phase)
        self.path = path
        self.reason = reason
