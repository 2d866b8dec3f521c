"""Core data models shared across repolens components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import AnalysisInputError
from .frameworks import Framework

BLOB = "blob"
TREE = "tree"
_KINDS = (BLOB, TREE)


@dataclass(frozen=True)
class FileDescriptor:
    """One entry from a repository's recursive file listing."""

    path: str
    kind: str = BLOB
    size: Optional[int] = None
    content: Optional[str] = field(default=None, repr=False, compare=False)

    @property
    def is_blob(self) -> bool:
        return self.kind == BLOB

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FileDescriptor":
        """Build a descriptor from a GitHub-style tree entry."""
        if not isinstance(payload, Mapping):
            raise AnalysisInputError(f"File entry must be a mapping, got {type(payload).__name__}")
        path = payload.get("path")
        if not isinstance(path, str) or not path:
            raise AnalysisInputError("File entry is missing a path")
        kind = payload.get("kind", payload.get("type", BLOB))
        size = payload.get("size", payload.get("byteSize"))
        content = payload.get("content")
        descriptor = cls(
            path=path,
            kind=kind,
            size=size,
            content=content if isinstance(content, str) else None,
        )
        descriptor.validate()
        return descriptor

    def validate(self) -> None:
        if not isinstance(self.path, str) or not self.path:
            raise AnalysisInputError("File entry is missing a path")
        if self.kind not in _KINDS:
            raise AnalysisInputError(f"Unknown file kind '{self.kind}' for {self.path}")
        if self.size is not None:
            if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
                raise AnalysisInputError(f"Invalid size {self.size!r} for {self.path}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "kind": self.kind, "size": self.size}
        if self.content is not None:
            data["content"] = self.content
        return data


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


_METADATA_KEYS = {
    "full_name",
    "fullName",
    "default_branch",
    "defaultBranch",
    "pushed_at",
    "pushedAt",
    "updated_at",
    "updatedAt",
    "language",
    "description",
}


@dataclass(frozen=True)
class RepoMetadata:
    """Repository-level facts supplied by the hosting service."""

    full_name: str
    default_branch: str = "main"
    pushed_at: Optional[str] = None
    updated_at: Optional[str] = None
    language: Optional[str] = None
    description: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def owner(self) -> str:
        return self.full_name.split("/", 1)[0] if "/" in self.full_name else ""

    @property
    def name(self) -> str:
        return self.full_name.rsplit("/", 1)[-1]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RepoMetadata":
        """Accept GitHub REST keys (``full_name``) or camelCase (``fullName``)."""
        if not isinstance(payload, Mapping):
            raise AnalysisInputError(
                f"Repository metadata must be a mapping, got {type(payload).__name__}"
            )
        full_name = _pick(payload, "full_name", "fullName")
        if not isinstance(full_name, str) or not full_name.strip():
            raise AnalysisInputError("Repository metadata is missing full_name")
        default_branch = _pick(payload, "default_branch", "defaultBranch")
        return cls(
            full_name=full_name,
            default_branch=default_branch if isinstance(default_branch, str) and default_branch else "main",
            pushed_at=_optional_str(_pick(payload, "pushed_at", "pushedAt")),
            updated_at=_optional_str(_pick(payload, "updated_at", "updatedAt")),
            language=_optional_str(payload.get("language")),
            description=_optional_str(payload.get("description")),
            extra={key: value for key, value in payload.items() if key not in _METADATA_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "full_name": self.full_name,
                "default_branch": self.default_branch,
                "pushed_at": self.pushed_at,
                "updated_at": self.updated_at,
                "language": self.language,
                "description": self.description,
            }
        )
        return data


@dataclass(frozen=True)
class RepoVersion:
    """Version markers used to decide whether an analysis is stale."""

    pushed_at: Optional[str]
    updated_at: Optional[str]
    default_branch: str
    file_tree_sha: str = "current"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pushed_at": self.pushed_at,
            "updated_at": self.updated_at,
            "default_branch": self.default_branch,
            "file_tree_sha": self.file_tree_sha,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RepoVersion":
        return cls(
            pushed_at=_optional_str(payload.get("pushed_at")),
            updated_at=_optional_str(payload.get("updated_at")),
            default_branch=str(payload.get("default_branch") or "main"),
            file_tree_sha=str(payload.get("file_tree_sha") or "current"),
        )


@dataclass(frozen=True)
class Subsystem:
    """Named group of files sharing a structural role."""

    name: str
    description: str
    member_paths: Tuple[str, ...]
    matched_pattern_summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "member_paths": list(self.member_paths),
            "matched_pattern_summary": self.matched_pattern_summary,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Subsystem":
        return cls(
            name=str(payload["name"]),
            description=str(payload.get("description", "")),
            member_paths=tuple(payload.get("member_paths", ())),
            matched_pattern_summary=str(payload.get("matched_pattern_summary", "")),
        )


@dataclass(frozen=True)
class FileInterface:
    """Exported symbol discovered in a file's content."""

    file_path: str
    kind: str
    name: str
    signature: str
    visibility: str = "public"
    line_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "kind": self.kind,
            "name": self.name,
            "signature": self.signature,
            "visibility": self.visibility,
            "line_number": self.line_number,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FileInterface":
        return cls(
            file_path=str(payload["file_path"]),
            kind=str(payload["kind"]),
            name=str(payload["name"]),
            signature=str(payload.get("signature", "")),
            visibility=str(payload.get("visibility", "public")),
            line_number=payload.get("line_number"),
        )


@dataclass(frozen=True)
class CitationLink:
    """Link back to a file (and optionally a line) on the hosting service."""

    kind: str
    url: str
    display_text: str
    file_path: str
    line_number: Optional[int] = None
    context: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable outcome of one classification run."""

    metadata: RepoMetadata
    file_tree: Dict[str, FileDescriptor]
    version: RepoVersion
    analyzed_at: str
    file_count: int
    languages: Dict[str, int]
    framework: Framework
    subsystems: Tuple[Subsystem, ...]
    main_files: Tuple[str, ...]
    config_files: Tuple[str, ...]
    documentation_files: Tuple[str, ...]
    test_files: Tuple[str, ...]
    key_interfaces: Tuple[FileInterface, ...] = ()
    architecture_description: Optional[str] = None

    def with_architecture_description(self, description: str) -> "AnalysisResult":
        """Return a copy carrying ``description``; ``self`` is left untouched."""
        return replace(self, architecture_description=description)

    def subsystem(self, name: str) -> Optional[Subsystem]:
        for subsystem in self.subsystems:
            if subsystem.name == name:
                return subsystem
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "file_tree": {path: meta.to_dict() for path, meta in self.file_tree.items()},
            "version": self.version.to_dict(),
            "analyzed_at": self.analyzed_at,
            "file_count": self.file_count,
            "languages": dict(self.languages),
            "framework": self.framework.value,
            "subsystems": [subsystem.to_dict() for subsystem in self.subsystems],
            "main_files": list(self.main_files),
            "config_files": list(self.config_files),
            "documentation_files": list(self.documentation_files),
            "test_files": list(self.test_files),
            "key_interfaces": [item.to_dict() for item in self.key_interfaces],
            "architecture_description": self.architecture_description,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AnalysisResult":
        file_tree = {
            path: FileDescriptor.from_dict(entry)
            for path, entry in (payload.get("file_tree") or {}).items()
        }
        return cls(
            metadata=RepoMetadata.from_dict(payload["metadata"]),
            file_tree=file_tree,
            version=RepoVersion.from_dict(payload.get("version") or {}),
            analyzed_at=str(payload["analyzed_at"]),
            file_count=int(payload.get("file_count", 0)),
            languages={str(key): int(value) for key, value in (payload.get("languages") or {}).items()},
            framework=Framework(payload.get("framework", Framework.UNKNOWN.value)),
            subsystems=tuple(Subsystem.from_dict(item) for item in payload.get("subsystems") or ()),
            main_files=tuple(payload.get("main_files") or ()),
            config_files=tuple(payload.get("config_files") or ()),
            documentation_files=tuple(payload.get("documentation_files") or ()),
            test_files=tuple(payload.get("test_files") or ()),
            key_interfaces=tuple(
                FileInterface.from_dict(item) for item in payload.get("key_interfaces") or ()
            ),
            architecture_description=_optional_str(payload.get("architecture_description")),
        )


@dataclass
class RepoManifest:
    """A scanned checkout: its root, metadata and flat file listing."""

    root: str
    metadata: RepoMetadata
    files: List[FileDescriptor]
