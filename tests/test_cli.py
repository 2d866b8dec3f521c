"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repolens.cli import _build_parser, main
from repolens.logging import configure_logging
from tests._fixtures.repo_builder import RepoBuilder

LIBRARY_FILES = {
    "pyproject.toml": "[project]\nname = 'pkg'\n",
    "src/pkg/__init__.py": "",
    "src/pkg/core.py": "def compute():\n    return 1\n",
    "tests/test_core.py": "def test_compute():\n    assert True\n",
}


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "analyze"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"


def test_cli_accepts_analyze_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "some/repo", "--json", "--no-cache", "--content"])
    assert args.path == "some/repo"
    assert args.json is True
    assert args.no_cache is True
    assert args.content is True


def test_cli_accepts_cache_subcommands() -> None:
    parser = _build_parser()
    args = parser.parse_args(["cache", "stats", "repo", "-v"])
    assert args.command == "cache"
    assert args.cache_command == "stats"
    assert args.path == "repo"
    assert args.verbose is True


def test_analyze_prints_summary_and_uses_cache(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write(LIBRARY_FILES)
    root = str(repo_builder.path())

    main(["analyze", root])
    first = capsys.readouterr().out
    main(["analyze", root])
    second = capsys.readouterr().out

    assert "Framework: python-lib" in first
    assert "Source/Library (2 files)" in first
    assert "(cached)" not in first
    assert "(cached)" in second
    assert (repo_builder.path() / ".repolens" / "cache.json").exists()


def test_analyze_json_output(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write(LIBRARY_FILES)

    main(["analyze", str(repo_builder.path()), "--json", "--no-cache", "--content"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["framework"] == "python-lib"
    assert payload["metadata"]["full_name"] == "repo"
    assert any(item["name"] == "compute" for item in payload["key_interfaces"])
    assert not (repo_builder.path() / ".repolens").exists()


def test_cache_stats_and_clear(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write(LIBRARY_FILES)
    root = str(repo_builder.path())
    main(["analyze", root])
    capsys.readouterr()

    main(["cache", "stats", root])
    stats = json.loads(capsys.readouterr().out)
    assert stats["analyses"] == 1
    assert stats["repositories"] == 1

    main(["cache", "clear", root])
    assert "Cache cleared" in capsys.readouterr().out
    assert not (repo_builder.path() / ".repolens" / "cache.json").exists()


def test_analyze_missing_path_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_log_file_receives_command_records(
    repo_builder: RepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write(LIBRARY_FILES)
    log_file = tmp_path / "logs" / "repolens.log"

    main(["--log-file", str(log_file), "analyze", str(repo_builder.path()), "--no-cache"])
    capsys.readouterr()
    configure_logging()

    assert "INFO repolens.cli: Analyzed repo as python-lib" in log_file.read_text(encoding="utf-8")
