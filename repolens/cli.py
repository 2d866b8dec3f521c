"""CLI entrypoints for repolens commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Tuple

from .analysis import analysis_cache_key, analyze_repo
from .config import ConfigError, RepoLensConfig, load_config
from .errors import AnalysisInputError
from .logging import configure_logging, get_logger
from .models import AnalysisResult
from .repo_scanner import RepoScanner
from .stores import CacheManager, SnapshotStore

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repolens",
        description="Classify a repository's framework, subsystems and special files.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a local checkout and print its structure.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full analysis as JSON.",
    )
    analyze_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Skip the snapshot cache for this run.",
    )
    analyze_parser.add_argument(
        "--content",
        action="store_true",
        help="Read small text files to extract exported interfaces.",
    )

    cache_parser = subparsers.add_parser("cache", help="Inspect or reset the analysis cache.")
    _add_verbose_option(cache_parser, suppress_default=True)
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command", required=True)
    for name, help_text in (
        ("stats", "Show cache occupancy."),
        ("clear", "Remove every cached entry and the snapshot file."),
    ):
        sub = cache_subparsers.add_parser(name, help=help_text)
        _add_verbose_option(sub, suppress_default=True)
        _add_path_argument(sub)

    return parser


def _open_cache(config: RepoLensConfig) -> CacheManager:
    manager = CacheManager(
        config.cache.max_total_bytes,
        ttl_hours=config.cache.ttl_hours,
        store=SnapshotStore(config.cache.snapshot_path),
    )
    manager.init()
    return manager


def run_analyze(
    path: str,
    *,
    use_cache: bool = True,
    include_content: bool = False,
) -> Tuple[AnalysisResult, bool]:
    """Scan and analyze ``path``; returns the result and whether it was cached."""
    config = load_config(Path(path))
    manifest = RepoScanner().scan(
        path,
        include_content=include_content or config.scanner.include_content,
        max_content_bytes=config.scanner.max_content_bytes,
        exclude_paths=config.exclude_paths,
    )

    if not use_cache:
        return analyze_repo(manifest.metadata, manifest.files), False

    manager = _open_cache(config)
    key = analysis_cache_key(manifest.metadata.full_name, manifest.files)
    cached = manager.get_analysis(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key)
        manager.dispose()
        return cached, True

    result = analyze_repo(manifest.metadata, manifest.files)
    manager.put_repository(manifest.metadata.full_name, manifest.metadata)
    manager.put_analysis(key, result)
    manager.dispose()
    return result, False


def _format_summary(result: AnalysisResult, cached: bool) -> str:
    lines = [
        f"Repository: {result.metadata.full_name}",
        f"Framework: {result.framework}",
        f"Files: {result.file_count}" + (" (cached)" if cached else ""),
        "Subsystems:",
    ]
    for subsystem in result.subsystems:
        lines.append(f"  {subsystem.name} ({len(subsystem.member_paths)} files)")
    if result.languages:
        lines.append("Languages:")
        for language, size in sorted(result.languages.items(), key=lambda item: (-item[1], item[0])):
            lines.append(f"  {language}: {size} bytes")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repolens commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(getattr(args, "verbose", False)), log_file=args.log_file)

    if args.command == "analyze":
        try:
            result, cached = run_analyze(
                args.path,
                use_cache=not args.no_cache,
                include_content=bool(args.content),
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, AnalysisInputError) as exc:
            parser.exit(1, f"repolens analyze failed: {exc}\nRun with --verbose for more details.\n")
        logger.info("Analyzed %s as %s", result.metadata.full_name, result.framework)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        else:
            print(_format_summary(result, cached))
    elif args.command == "cache":
        try:
            config = load_config(Path(args.path))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        manager = _open_cache(config)
        if args.cache_command == "stats":
            print(json.dumps(manager.stats().to_dict(), indent=2))
        else:
            manager.clear()
            print(f"Cache cleared ({config.cache.snapshot_path})")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
