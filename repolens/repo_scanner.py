"""Walks a local checkout and produces file descriptors for analysis."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import DEFAULT_MAX_CONTENT_BYTES, ConfigError, load_config
from .logging import get_logger
from .models import BLOB, TREE, FileDescriptor, RepoManifest, RepoMetadata

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".repolens",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .repolens.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _configured_excludes(root: Path) -> List[str]:
    try:
        return list(load_config(root).exclude_paths)
    except ConfigError as exc:
        logger.warning("Ignoring exclude_paths from unreadable config: %s", exc)
        return []


def _load_ignore_rules(root: Path, exclude_paths: Sequence[str]) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_entries(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Tuple[Path, bool]]:
    """Yield ``(path, is_dir)`` pairs in a stable, sorted walk order."""
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in kept_dirs:
            yield current_dir / name, True

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename, False


def _read_text(path: Path, size: int, limit: int) -> Optional[str]:
    if size > limit:
        return None
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        return None
    except OSError as exc:
        logger.debug("Skipping content of %s: %s", path, exc)
        return None


def _default_branch(root: Path) -> str:
    head = root / ".git" / "HEAD"
    try:
        text = head.read_text(encoding="utf-8").strip()
    except OSError:
        return "main"
    prefix = "ref: refs/heads/"
    if text.startswith(prefix) and len(text) > len(prefix):
        return text[len(prefix):]
    return "main"


def _isoformat(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, UTC).isoformat().replace("+00:00", "Z")


class RepoScanner:
    """Walks the repository to produce a flat listing of trees and blobs."""

    def scan(
        self,
        root: str | Path,
        *,
        include_content: bool = False,
        max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES,
        exclude_paths: Optional[Sequence[str]] = None,
    ) -> RepoManifest:
        """Return a manifest for ``root``.

        ``exclude_paths`` defaults to the patterns configured in the
        checkout's ``.repolens.yml``.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        if exclude_paths is None:
            exclude_paths = _configured_excludes(root_path)
        rules = _load_ignore_rules(root_path, exclude_paths)

        files: List[FileDescriptor] = []
        newest_mtime: Optional[float] = None
        for path, is_dir in _iter_entries(root_path, rules):
            rel_path = path.relative_to(root_path).as_posix()
            if is_dir:
                files.append(FileDescriptor(path=rel_path, kind=TREE))
                continue

            stat_result = path.stat()
            size = stat_result.st_size
            if newest_mtime is None or stat_result.st_mtime > newest_mtime:
                newest_mtime = stat_result.st_mtime

            content = _read_text(path, size, max_content_bytes) if include_content else None
            files.append(FileDescriptor(path=rel_path, kind=BLOB, size=size, content=content))

        timestamp = _isoformat(newest_mtime) if newest_mtime is not None else None
        metadata = RepoMetadata(
            full_name=root_path.name,
            default_branch=_default_branch(root_path),
            pushed_at=timestamp,
            updated_at=timestamp,
        )
        logger.debug("Scanned %d entries under %s", len(files), root_path)
        return RepoManifest(root=str(root_path), metadata=metadata, files=files)


__all__ = ["IgnoreRule", "RepoScanner"]
