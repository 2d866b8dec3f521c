"""Path and extension matching used by the subsystem rules."""

from __future__ import annotations

from typing import Iterable, Optional


def matches_pattern(path: str, pattern: str) -> bool:
    """Return True when ``pattern`` sits at the root or at any directory boundary of ``path``.

    Matching is case-insensitive prefix/substring matching; no glob or regex
    semantics apply.
    """
    normalized_path = path.lower()
    normalized_pattern = pattern.lower()
    return normalized_path.startswith(normalized_pattern) or f"/{normalized_pattern}" in normalized_path


def matches_extension(path: str, extension: str) -> bool:
    """Case-insensitive suffix check; ``extension`` includes its leading dot."""
    return path.lower().endswith(extension.lower())


def matches_any_pattern(path: str, patterns: Iterable[str]) -> bool:
    return any(matches_pattern(path, pattern) for pattern in patterns)


def matches_any_extension(path: str, extensions: Optional[Iterable[str]]) -> bool:
    if extensions is None:
        return True
    return any(matches_extension(path, extension) for extension in extensions)


__all__ = [
    "matches_any_extension",
    "matches_any_pattern",
    "matches_extension",
    "matches_pattern",
]
