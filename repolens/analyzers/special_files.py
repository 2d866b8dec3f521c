"""Heuristic tagging of entry-point, config, documentation and test files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..models import FileDescriptor

_MAIN_FILES = frozenset(
    {"readme.md", "index.js", "index.ts", "main.py", "app.py", "index.html", "package.json"}
)
_MANIFESTS = frozenset({"package.json", "requirements.txt", "pyproject.toml"})


@dataclass(frozen=True)
class SpecialFiles:
    """Four independent path lists; a path may appear in several."""

    main: Tuple[str, ...] = ()
    config: Tuple[str, ...] = ()
    documentation: Tuple[str, ...] = ()
    test: Tuple[str, ...] = ()


def is_main_file(path: str) -> bool:
    # Compared against the whole path, so only root-level entry points count.
    return path.lower() in _MAIN_FILES


def is_config_file(path: str) -> bool:
    lower = path.lower()
    filename = lower.rsplit("/", 1)[-1]
    return (
        "config" in lower
        or lower.endswith((".config.js", ".config.ts"))
        or filename in _MANIFESTS
        or ".env" in lower
        or "dockerfile" in lower
    )


def is_documentation_file(path: str) -> bool:
    lower = path.lower()
    return lower.endswith(".md") or "docs/" in lower or "documentation/" in lower


def is_test_file(path: str) -> bool:
    # Deliberately broad: "testimonials.ts" and "protest.py" count as tests.
    lower = path.lower()
    return "test" in lower or "spec" in lower or "__tests__/" in lower


def categorize_special_files(files: Sequence[FileDescriptor]) -> SpecialFiles:
    paths = [file.path for file in files]
    return SpecialFiles(
        main=tuple(path for path in paths if is_main_file(path)),
        config=tuple(path for path in paths if is_config_file(path)),
        documentation=tuple(path for path in paths if is_documentation_file(path)),
        test=tuple(path for path in paths if is_test_file(path)),
    )


__all__ = [
    "SpecialFiles",
    "categorize_special_files",
    "is_config_file",
    "is_documentation_file",
    "is_main_file",
    "is_test_file",
]
