"""Partition repository files into framework-specific subsystems."""

from __future__ import annotations

from typing import List, Sequence, Set

from ..frameworks import Framework, SubsystemRule, rules_for
from ..models import FileDescriptor, Subsystem
from .matching import matches_any_extension, matches_any_pattern

OTHER_SUBSYSTEM = "Other"
_OTHER_DESCRIPTION = "Files that don't fit into specific categories"
_OTHER_PATTERN = "Various paths"


def classify_subsystems(
    files: Sequence[FileDescriptor],
    framework: Framework,
    rules: Sequence[SubsystemRule] | None = None,
) -> List[Subsystem]:
    """Assign every blob to exactly one subsystem.

    Rules run in ascending priority and each claims its matches before later
    rules see them (first match wins, not best match). A path whose extension
    a rule does not allow stays unclaimed for later rules. Blobs no rule
    claims are collected into a trailing ``Other`` subsystem.
    """
    table = rules_for(framework) if rules is None else rules
    ordered_rules = sorted(table, key=lambda rule: rule.priority)
    blobs = _unique_blobs(files)

    subsystems: List[Subsystem] = []
    claimed: Set[str] = set()

    for rule in ordered_rules:
        selected = [
            file.path
            for file in blobs
            if file.path not in claimed
            and matches_any_pattern(file.path, rule.path_patterns)
            and matches_any_extension(file.path, rule.allowed_extensions)
        ]
        if not selected:
            continue
        subsystems.append(
            Subsystem(
                name=rule.name,
                description=rule.description,
                member_paths=tuple(selected),
                matched_pattern_summary=", ".join(rule.path_patterns),
            )
        )
        claimed.update(selected)

    leftovers = [file.path for file in blobs if file.path not in claimed]
    if leftovers:
        subsystems.append(
            Subsystem(
                name=OTHER_SUBSYSTEM,
                description=_OTHER_DESCRIPTION,
                member_paths=tuple(leftovers),
                matched_pattern_summary=_OTHER_PATTERN,
            )
        )

    return subsystems


def _unique_blobs(files: Sequence[FileDescriptor]) -> List[FileDescriptor]:
    seen: Set[str] = set()
    blobs: List[FileDescriptor] = []
    for file in files:
        if file.is_blob and file.path not in seen:
            seen.add(file.path)
            blobs.append(file)
    return blobs


__all__ = ["OTHER_SUBSYSTEM", "classify_subsystems"]
