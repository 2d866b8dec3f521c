"""Repository structure analysis: framework detection, subsystems and caching."""

from .analysis import (
    analysis_cache_key,
    analyze_repo,
    generate_inline_citation,
    get_files_by_paths,
    get_subsystem_files,
)
from .errors import AnalysisInputError, PersistenceError, RepoLensError
from .frameworks import Framework, SubsystemRule, rules_for
from .models import (
    AnalysisResult,
    CitationLink,
    FileDescriptor,
    FileInterface,
    RepoMetadata,
    RepoVersion,
    Subsystem,
)
from .stores import CacheManager, SnapshotStore, TTLHours

__all__ = [
    "AnalysisInputError",
    "AnalysisResult",
    "CacheManager",
    "CitationLink",
    "FileDescriptor",
    "FileInterface",
    "Framework",
    "PersistenceError",
    "RepoLensError",
    "RepoMetadata",
    "RepoVersion",
    "SnapshotStore",
    "Subsystem",
    "SubsystemRule",
    "TTLHours",
    "analysis_cache_key",
    "analyze_repo",
    "generate_inline_citation",
    "get_files_by_paths",
    "get_subsystem_files",
    "rules_for",
]
