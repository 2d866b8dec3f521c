"""Regex-based extraction of exported symbols from file contents."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, List, Sequence, Tuple

from ..models import FileDescriptor, FileInterface
from .language import file_extension

_NAME = r"[A-Za-z_$][A-Za-z0-9_$]*"

_JS_PATTERNS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("function", re.compile(rf"export\s+(?:async\s+)?function\s+(?P<name>{_NAME})\s*\([^)]*\)")),
    ("class", re.compile(rf"export\s+class\s+(?P<name>{_NAME})")),
    ("const", re.compile(rf"export\s+const\s+(?P<name>{_NAME})")),
)
_TS_PATTERNS = _JS_PATTERNS + (
    ("interface", re.compile(rf"export\s+interface\s+(?P<name>{_NAME})")),
    ("type", re.compile(rf"export\s+type\s+(?P<name>{_NAME})")),
)
_PY_PATTERNS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("function", re.compile(r"def\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\(")),
    ("class", re.compile(r"class\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)")),
)
_SVELTE_SCRIPT = re.compile(r"<script[^>]*>[\s\S]*?</script>")

_PATTERNS_BY_EXTENSION: Dict[str, Tuple[Tuple[str, re.Pattern[str]], ...]] = {
    "ts": _TS_PATTERNS,
    "tsx": _TS_PATTERNS,
    "js": _JS_PATTERNS,
    "jsx": _JS_PATTERNS,
    "py": _PY_PATTERNS,
}

DEFAULT_FILE_LIMIT = 20


def extract_key_interfaces(
    files: Sequence[FileDescriptor], limit: int = DEFAULT_FILE_LIMIT
) -> List[FileInterface]:
    """Return exported functions, classes and types found in up to ``limit`` files.

    The limit counts only blobs that carry content, so entries without
    content (trees, or blobs listed without a body) never use up the budget
    ahead of files that can actually be scanned.
    """
    interfaces: List[FileInterface] = []
    scanned = 0
    for file in files:
        if scanned >= limit:
            break
        if not file.is_blob or not file.content:
            continue
        scanned += 1
        extension = file_extension(file.path)
        if extension == "svelte":
            interfaces.extend(_svelte_components(file))
            continue
        patterns = _PATTERNS_BY_EXTENSION.get(extension or "")
        if not patterns:
            continue
        for kind, pattern in patterns:
            for match in pattern.finditer(file.content):
                interfaces.append(
                    FileInterface(
                        file_path=file.path,
                        kind=kind,
                        name=match.group("name"),
                        signature=match.group(0),
                        line_number=_line_of(file.content, match.start()),
                    )
                )
    return interfaces


def _svelte_components(file: FileDescriptor) -> List[FileInterface]:
    content = file.content or ""
    match = _SVELTE_SCRIPT.search(content)
    if match is None:
        return []
    return [
        FileInterface(
            file_path=file.path,
            kind="component",
            name=PurePosixPath(file.path).stem,
            signature=match.group(0).split(">", 1)[0] + ">",
            line_number=_line_of(content, match.start()),
        )
    ]


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


__all__ = ["DEFAULT_FILE_LIMIT", "extract_key_interfaces"]
