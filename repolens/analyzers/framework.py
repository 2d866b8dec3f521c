"""Framework detection over a repository's file paths."""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Tuple

from ..frameworks import Framework
from ..models import FileDescriptor

_FRONTEND_KEYWORDS = (
    "angular",
    "react",
    "vue",
    "ember",
    "backbone",
    "knockout",
    "polymer",
    "svelte",
    "mithril",
    "riot",
    "aurelia",
)

_NEXT_CONFIGS = ("next.config.js", "next.config.ts", "next.config.mjs", "next.config.cjs")
_SVELTE_CONFIGS = ("svelte.config.js", "svelte.config.ts", "svelte.config.mjs")
_PY_MANIFESTS = ("requirements.txt", "pyproject.toml")
_CLI_MARKERS = ("cli", "command", "main.py", "__main__.py", "bin/")
_PACKAGING_MARKERS = ("poetry.lock", "setup.py", "setup.cfg", "pyproject.toml")


class _Paths:
    """Lowercased view of the file list with the lookups heuristics need."""

    def __init__(self, files: Iterable[FileDescriptor]) -> None:
        self.paths: List[str] = [file.path.lower() for file in files]

    def contains(self, *tokens: str) -> bool:
        return any(token in path for path in self.paths for token in tokens)

    def starts_with(self, *prefixes: str) -> bool:
        return any(path.startswith(prefixes) for path in self.paths)

    def ends_with(self, *suffixes: str) -> bool:
        return any(path.endswith(suffixes) for path in self.paths)


def _is_multi_framework(paths: _Paths) -> bool:
    if not (paths.starts_with("examples/") and paths.contains("package.json") and paths.contains("readme.md")):
        return False
    examples = [path for path in paths.paths if path.startswith("examples/")]
    found = {keyword for keyword in _FRONTEND_KEYWORDS if any(keyword in path for path in examples)}
    return len(found) >= 2


def _is_nextjs(paths: _Paths) -> bool:
    if paths.contains(*_NEXT_CONFIGS):
        return True
    return paths.starts_with("pages/", "app/") and paths.contains("package.json")


def _is_react(paths: _Paths) -> bool:
    return paths.contains("package.json") and paths.ends_with(".jsx", ".tsx")


def _is_svelte(paths: _Paths) -> bool:
    if paths.contains(*_SVELTE_CONFIGS):
        return True
    has_components = paths.ends_with(".svelte")
    if has_components and paths.starts_with("src/routes/"):
        return True
    return has_components


def _is_flask(paths: _Paths) -> bool:
    return (
        paths.contains("app.py", "wsgi.py")
        and paths.contains(*_PY_MANIFESTS)
        and paths.ends_with(".py")
        and paths.contains("app.py", "run.py")
    )


def _is_fastapi(paths: _Paths) -> bool:
    return paths.contains("main.py") and paths.contains(*_PY_MANIFESTS)


def _is_python_cli(paths: _Paths) -> bool:
    return (
        paths.contains("pyproject.toml")
        and paths.ends_with(".py")
        and paths.contains(*_CLI_MARKERS)
        and paths.contains(*_PACKAGING_MARKERS)
    )


def _is_python_lib(paths: _Paths) -> bool:
    has_python = paths.ends_with(".py")
    library_layout = (
        paths.starts_with("src/")
        and paths.contains("tests/")
        and not paths.contains("app.py", "main.py")
    )
    if library_layout and has_python and paths.contains(*_PACKAGING_MARKERS):
        return True
    return (
        paths.contains("setup.py", "pyproject.toml")
        and has_python
        and not paths.contains("app.py", "main.py", "wsgi.py")
    )


# Order matters: heuristics overlap, and the first match wins.
_HEURISTICS: Tuple[Tuple[Framework, Callable[[_Paths], bool]], ...] = (
    (Framework.MULTI_FRAMEWORK, _is_multi_framework),
    (Framework.NEXTJS, _is_nextjs),
    (Framework.REACT, _is_react),
    (Framework.SVELTE, _is_svelte),
    (Framework.FLASK, _is_flask),
    (Framework.FASTAPI, _is_fastapi),
    (Framework.PYTHON_CLI, _is_python_cli),
    (Framework.PYTHON_LIB, _is_python_lib),
)


def detect_framework(files: Sequence[FileDescriptor]) -> Framework:
    """Return the label of the first heuristic that matches, else ``unknown``."""
    paths = _Paths(files)
    for framework, predicate in _HEURISTICS:
        if predicate(paths):
            return framework
    return Framework.UNKNOWN


__all__ = ["detect_framework"]
