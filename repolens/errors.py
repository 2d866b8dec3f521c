"""Exception types raised or reported by repolens components."""

from __future__ import annotations


class RepoLensError(ValueError):
    """Base class for repolens failures."""


class AnalysisInputError(RepoLensError):
    """Raised when repository metadata or the file list is malformed."""


class PersistenceError(RepoLensError):
    """Describes a failed snapshot save, load or clear."""

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation


__all__ = ["AnalysisInputError", "PersistenceError", "RepoLensError"]
