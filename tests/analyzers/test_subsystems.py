"""Tests for repolens.analyzers.subsystems and the framework rule tables."""

from __future__ import annotations

from typing import Dict, List, Tuple

from repolens.analyzers import OTHER_SUBSYSTEM, classify_subsystems
from repolens.frameworks import RULE_TABLES, Framework, SubsystemRule, rules_for
from repolens.models import TREE, FileDescriptor, Subsystem


def _files(*paths: str) -> List[FileDescriptor]:
    return [FileDescriptor(path=path, size=10) for path in paths]


def _by_name(subsystems: List[Subsystem]) -> Dict[str, Tuple[str, ...]]:
    return {subsystem.name: subsystem.member_paths for subsystem in subsystems}


def test_svelte_project_is_partitioned_in_rule_order() -> None:
    files = _files(
        "src/routes/+page.svelte",
        "src/lib/components/Button.svelte",
        "README.md",
        "svelte.config.js",
    )

    subsystems = classify_subsystems(files, Framework.SVELTE)

    assert [subsystem.name for subsystem in subsystems] == [
        "Routes",
        "Components",
        "Documentation",
        OTHER_SUBSYSTEM,
    ]
    members = _by_name(subsystems)
    assert members["Routes"] == ("src/routes/+page.svelte",)
    assert members["Components"] == ("src/lib/components/Button.svelte",)
    assert members["Documentation"] == ("README.md",)
    assert members[OTHER_SUBSYSTEM] == ("svelte.config.js",)


def test_python_library_layout() -> None:
    files = _files(
        "pyproject.toml",
        "src/pkg/__init__.py",
        "src/pkg/core.py",
        "tests/test_core.py",
        "examples/demo.py",
        "docs/index.md",
    )

    members = _by_name(classify_subsystems(files, Framework.PYTHON_LIB))

    assert members == {
        "Source/Library": ("src/pkg/__init__.py", "src/pkg/core.py"),
        "Tests": ("tests/test_core.py",),
        "Examples": ("examples/demo.py",),
        "Documentation": ("docs/index.md",),
        OTHER_SUBSYSTEM: ("pyproject.toml",),
    }


def test_every_blob_lands_in_exactly_one_subsystem() -> None:
    files = [FileDescriptor(path="src", kind=TREE), FileDescriptor(path="src/components", kind=TREE)]
    files += _files(
        "package.json",
        "src/components/Nav.tsx",
        "src/hooks/useAuth.ts",
        "src/utils/format.ts",
        "src/components/styles.css",
        "docs/guide.md",
    )

    subsystems = classify_subsystems(files, Framework.REACT)

    members = [path for subsystem in subsystems for path in subsystem.member_paths]
    assert sorted(members) == sorted(file.path for file in files if file.is_blob)
    assert len(members) == len(set(members))
    assert "src" not in members


def test_extension_mismatch_falls_through_to_later_rule() -> None:
    files = _files("src/components/config/theme.json", "src/components/Nav.tsx")

    members = _by_name(classify_subsystems(files, Framework.REACT))

    assert members["Components"] == ("src/components/Nav.tsx",)
    assert members["Configuration"] == ("src/components/config/theme.json",)


def test_first_match_wins_in_priority_order() -> None:
    rules = (
        SubsystemRule("Late", "declared first, runs second", ("src/",), None, 2),
        SubsystemRule("Early", "declared second, runs first", ("src/",), None, 1),
    )

    members = _by_name(classify_subsystems(_files("src/a.py"), Framework.UNKNOWN, rules))

    assert members == {"Early": ("src/a.py",)}


def test_equal_priorities_keep_declaration_order() -> None:
    rules = (
        SubsystemRule("First", "", ("src/",), None, 1),
        SubsystemRule("Second", "", ("src/",), None, 1),
    )

    members = _by_name(classify_subsystems(_files("src/a.py"), Framework.UNKNOWN, rules))

    assert members == {"First": ("src/a.py",)}


def test_empty_subsystems_are_omitted_and_other_only_when_needed() -> None:
    subsystems = classify_subsystems(_files("src/components/Nav.tsx"), Framework.REACT)

    assert [subsystem.name for subsystem in subsystems] == ["Components"]


def test_unknown_framework_puts_everything_in_other() -> None:
    subsystems = classify_subsystems(_files("a.txt", "b/c.bin"), Framework.UNKNOWN)

    assert len(subsystems) == 1
    other = subsystems[0]
    assert other.name == OTHER_SUBSYSTEM
    assert other.description == "Files that don't fit into specific categories"
    assert other.matched_pattern_summary == "Various paths"
    assert other.member_paths == ("a.txt", "b/c.bin")


def test_pattern_summary_joins_rule_patterns() -> None:
    subsystems = classify_subsystems(_files("src/components/Nav.tsx"), Framework.REACT)

    assert subsystems[0].matched_pattern_summary == "src/components/, components/, src/ui/"


def test_duplicate_paths_are_classified_once() -> None:
    files = _files("src/components/Nav.tsx", "src/components/Nav.tsx")

    subsystems = classify_subsystems(files, Framework.REACT)

    assert subsystems[0].member_paths == ("src/components/Nav.tsx",)


def test_every_framework_declares_a_rule_table() -> None:
    assert set(RULE_TABLES) == set(Framework)
    assert rules_for(Framework.UNKNOWN) == ()
    for framework in Framework:
        if framework is not Framework.UNKNOWN:
            assert rules_for(framework), framework


def test_broader_rule_with_higher_priority_beats_more_specific_rule() -> None:
    rules = (
        SubsystemRule("Specific", "", ("src/components/",), None, 2),
        SubsystemRule("Broad", "", ("src/",), None, 1),
    )

    members = _by_name(classify_subsystems(_files("src/components/Button.tsx"), Framework.UNKNOWN, rules))

    assert members == {"Broad": ("src/components/Button.tsx",)}


def test_two_rules_and_a_leftover_make_three_subsystems() -> None:
    rules = (
        SubsystemRule("Web", "", ("web/",), None, 1),
        SubsystemRule("Api", "", ("api/",), None, 2),
    )
    files = _files("web/a.ts", "web/b.ts", "api/c.py", "api/d.py", "notes.txt")

    subsystems = classify_subsystems(files, Framework.UNKNOWN, rules)

    assert [(subsystem.name, len(subsystem.member_paths)) for subsystem in subsystems] == [
        ("Web", 2),
        ("Api", 2),
        (OTHER_SUBSYSTEM, 1),
    ]


def test_classification_is_deterministic() -> None:
    files = _files("src/components/Nav.tsx", "src/hooks/useAuth.ts", "README.md", "misc.bin")

    assert classify_subsystems(files, Framework.REACT) == classify_subsystems(files, Framework.REACT)
