"""Language distribution by byte size."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..models import FileDescriptor

_LANGUAGE_BY_EXTENSION = {
    "py": "Python",
    "pyi": "Python",
    "js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "svelte": "Svelte",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "json": "JSON",
    "md": "Markdown",
    "yml": "YAML",
    "yaml": "YAML",
    "toml": "TOML",
    "java": "Java",
    "kt": "Kotlin",
    "kts": "Kotlin",
    "go": "Go",
    "rs": "Rust",
    "rb": "Ruby",
    "php": "PHP",
    "cs": "C#",
    "c": "C",
    "h": "C",
    "cpp": "C++",
    "hpp": "C++",
    "cc": "C++",
    "swift": "Swift",
    "scala": "Scala",
    "sh": "Shell",
    "ps1": "PowerShell",
}


def file_extension(path: str) -> Optional[str]:
    """Lowercase extension of the file name without its dot, or None."""
    filename = path.rsplit("/", 1)[-1]
    if "." not in filename:
        return None
    extension = filename.rsplit(".", 1)[-1].lower()
    return extension or None


def language_for(extension: str) -> str:
    return _LANGUAGE_BY_EXTENSION.get(extension.lower(), extension.upper())


def build_language_histogram(files: Sequence[FileDescriptor]) -> Dict[str, int]:
    """Sum blob sizes per language; entries without size or extension are skipped."""
    languages: Dict[str, int] = {}
    for file in files:
        if not file.is_blob or not file.size:
            continue
        extension = file_extension(file.path)
        if extension is None:
            continue
        language = language_for(extension)
        languages[language] = languages.get(language, 0) + file.size
    return languages


__all__ = ["build_language_histogram", "file_extension", "language_for"]
