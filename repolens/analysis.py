"""Assembly of a full repository analysis from a file list and metadata."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from .analyzers import (
    build_language_histogram,
    categorize_special_files,
    classify_subsystems,
    detect_framework,
    extract_key_interfaces,
)
from .errors import AnalysisInputError
from .models import (
    AnalysisResult,
    CitationLink,
    FileDescriptor,
    FileInterface,
    RepoMetadata,
    RepoVersion,
    Subsystem,
)

MetadataInput = Union[RepoMetadata, Mapping[str, Any]]
FileInput = Union[FileDescriptor, Mapping[str, Any]]


def analyze_repo(
    metadata: MetadataInput,
    files: Iterable[FileInput],
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> AnalysisResult:
    """Classify a repository snapshot.

    ``metadata`` and ``files`` may be models or raw mappings as returned by a
    GitHub-style API. Everything is validated up front, so malformed input
    raises :class:`AnalysisInputError` and no partial result is produced.
    No network or disk access happens here.
    """
    repo = _coerce_metadata(metadata)
    descriptors = _coerce_files(files)

    framework = detect_framework(descriptors)
    subsystems = classify_subsystems(descriptors, framework)
    special = categorize_special_files(descriptors)
    languages = build_language_histogram(descriptors)

    key_interfaces: Tuple[FileInterface, ...] = ()
    if any(file.content for file in descriptors):
        key_interfaces = tuple(extract_key_interfaces(descriptors))

    now = (clock or _utcnow)()
    return AnalysisResult(
        metadata=repo,
        file_tree={file.path: file for file in descriptors},
        version=RepoVersion(
            pushed_at=repo.pushed_at,
            updated_at=repo.updated_at,
            default_branch=repo.default_branch,
        ),
        analyzed_at=now.isoformat().replace("+00:00", "Z"),
        file_count=sum(1 for file in descriptors if file.is_blob),
        languages=languages,
        framework=framework,
        subsystems=tuple(subsystems),
        main_files=special.main,
        config_files=special.config,
        documentation_files=special.documentation,
        test_files=special.test,
        key_interfaces=key_interfaces,
    )


def get_subsystem_files(
    subsystem: Subsystem, file_tree: Mapping[str, FileDescriptor]
) -> List[FileDescriptor]:
    """Resolve a subsystem's member paths, skipping paths missing from the tree."""
    return get_files_by_paths(subsystem.member_paths, file_tree)


def get_files_by_paths(
    paths: Iterable[str], file_tree: Mapping[str, FileDescriptor]
) -> List[FileDescriptor]:
    return [file_tree[path] for path in paths if path in file_tree]


def generate_inline_citation(
    file_path: str,
    owner: str,
    repo: str,
    line_number: Optional[int] = None,
    context: Optional[str] = None,
    *,
    branch: str = "main",
) -> CitationLink:
    """Build a link to ``file_path`` on GitHub, anchored to a line when given."""
    url = f"https://github.com/{owner}/{repo}/blob/{branch}/{file_path}"
    if line_number:
        url = f"{url}#L{line_number}"
    return CitationLink(
        kind="line" if line_number else "file",
        url=url,
        display_text=f"{file_path}:{line_number}" if line_number else file_path,
        file_path=file_path,
        line_number=line_number,
        context=context,
    )


def file_list_fingerprint(files: Iterable[FileDescriptor]) -> str:
    """Hash of paths, kinds and sizes; changes whenever the listing changes."""
    digest = hashlib.sha256()
    for file in sorted(files, key=lambda item: item.path):
        digest.update(f"{file.kind}\0{file.path}\0{file.size}\n".encode("utf-8"))
    return digest.hexdigest()


def analysis_cache_key(full_name: str, files: Iterable[FileDescriptor]) -> str:
    return f"{full_name}:{file_list_fingerprint(files)[:16]}"


def _coerce_metadata(metadata: MetadataInput) -> RepoMetadata:
    if isinstance(metadata, RepoMetadata):
        if not metadata.full_name or not metadata.full_name.strip():
            raise AnalysisInputError("Repository metadata is missing full_name")
        return metadata
    if metadata is None:
        raise AnalysisInputError("Repository metadata is required")
    return RepoMetadata.from_dict(metadata)


def _coerce_files(files: Iterable[FileInput]) -> List[FileDescriptor]:
    if not hasattr(files, "__iter__") or isinstance(files, (str, bytes, Mapping)):
        raise AnalysisInputError("File list must be a sequence of file entries")
    descriptors: List[FileDescriptor] = []
    for entry in files:
        if isinstance(entry, FileDescriptor):
            entry.validate()
            descriptors.append(entry)
        else:
            descriptors.append(FileDescriptor.from_dict(entry))
    return descriptors


def _utcnow() -> datetime:
    return datetime.now(UTC)


__all__ = [
    "analysis_cache_key",
    "analyze_repo",
    "file_list_fingerprint",
    "generate_inline_citation",
    "get_files_by_paths",
    "get_subsystem_files",
]
