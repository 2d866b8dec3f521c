"""Tests for repolens.analyzers.framework."""

from __future__ import annotations

from typing import List

import pytest

from repolens.analyzers import detect_framework
from repolens.frameworks import Framework
from repolens.models import TREE, FileDescriptor


def _files(*paths: str) -> List[FileDescriptor]:
    return [FileDescriptor(path=path, size=10) for path in paths]


@pytest.mark.parametrize(
    ("paths", "expected"),
    [
        (("next.config.js", "package.json", "pages/index.tsx"), Framework.NEXTJS),
        (("app/page.tsx", "package.json"), Framework.NEXTJS),
        (("package.json", "src/App.jsx", "src/index.js"), Framework.REACT),
        (("svelte.config.js", "package.json", "src/routes/+page.svelte"), Framework.SVELTE),
        (("src/lib/Card.svelte",), Framework.SVELTE),
        (("app.py", "requirements.txt", "templates/index.html"), Framework.FLASK),
        (("main.py", "requirements.txt"), Framework.FASTAPI),
        (("app/main.py", "app/routers/items.py", "pyproject.toml"), Framework.FASTAPI),
        (("pyproject.toml", "mytool/cli.py", "mytool/__init__.py"), Framework.PYTHON_CLI),
        (("setup.py", "mylib/__init__.py", "mylib/core.py"), Framework.PYTHON_LIB),
        (("pyproject.toml", "src/pkg/__init__.py", "tests/test_pkg.py"), Framework.PYTHON_LIB),
        (
            ("README.md", "package.json", "examples/react/app.js", "examples/vue/app.js"),
            Framework.MULTI_FRAMEWORK,
        ),
    ],
)
def test_detects_framework(paths: tuple[str, ...], expected: Framework) -> None:
    assert detect_framework(_files(*paths)) is expected


def test_empty_and_unrecognised_lists_are_unknown() -> None:
    assert detect_framework([]) is Framework.UNKNOWN
    assert detect_framework(_files("README.md", "LICENSE")) is Framework.UNKNOWN


def test_flask_requires_app_or_run_module() -> None:
    # wsgi.py plus a manifest is not enough without app.py or run.py.
    assert detect_framework(_files("wsgi.py", "requirements.txt")) is Framework.UNKNOWN
    assert detect_framework(_files("wsgi.py", "run.py", "requirements.txt")) is Framework.FLASK


def test_single_frontend_example_is_not_multi_framework() -> None:
    files = _files("README.md", "package.json", "examples/react/app.js", "examples/react/index.html")
    assert detect_framework(files) is Framework.UNKNOWN


def test_multi_framework_takes_precedence_over_react() -> None:
    files = _files(
        "README.md",
        "package.json",
        "examples/react/App.jsx",
        "examples/vue/main.js",
    )
    assert detect_framework(files) is Framework.MULTI_FRAMEWORK


def test_nextjs_takes_precedence_over_react() -> None:
    files = _files("next.config.mjs", "package.json", "components/Nav.tsx")
    assert detect_framework(files) is Framework.NEXTJS


def test_dunder_main_alone_does_not_imply_fastapi() -> None:
    files = _files("pyproject.toml", "tool/__main__.py", "tool/commands.py")
    assert detect_framework(files) is Framework.PYTHON_CLI


def test_detection_is_case_insensitive() -> None:
    assert detect_framework(_files("Next.Config.JS")) is Framework.NEXTJS


def test_detection_ignores_input_order_and_considers_tree_entries() -> None:
    files = _files("package.json", "src/App.tsx", "README.md")
    assert detect_framework(files) == detect_framework(list(reversed(files)))

    with_tree = [FileDescriptor(path="examples", kind=TREE)] + _files(
        "examples/angular/main.ts", "examples/svelte/App.svelte", "package.json", "readme.md"
    )
    assert detect_framework(with_tree) is Framework.MULTI_FRAMEWORK
