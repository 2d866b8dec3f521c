"""Framework labels and the per-framework subsystem rule tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Framework(str, Enum):
    """Closed set of framework labels assigned by detection."""

    REACT = "react"
    NEXTJS = "nextjs"
    SVELTE = "svelte"
    FLASK = "flask"
    FASTAPI = "fastapi"
    PYTHON_CLI = "python-cli"
    PYTHON_LIB = "python-lib"
    MULTI_FRAMEWORK = "multi-framework"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubsystemRule:
    """Declares which paths a named subsystem claims.

    Rules are evaluated in ascending ``priority``; ties keep declaration order.
    ``allowed_extensions`` of ``None`` accepts every extension.
    """

    name: str
    description: str
    path_patterns: Tuple[str, ...]
    allowed_extensions: Optional[Tuple[str, ...]] = None
    priority: int = 0


_DOCUMENTATION_PATTERNS = ("docs/", "documentation/", "README", "CHANGELOG", "CONTRIBUTING")
_JS = (".jsx", ".tsx", ".js", ".ts")
_CONFIG_EXTENSIONS = (".js", ".ts", ".json", ".yaml", ".yml", ".toml", ".env", ".md")
_PY_CONFIG_EXTENSIONS = (".py", ".json", ".yaml", ".yml", ".toml", ".env", ".cfg", ".ini")


def _docs(priority: int, extensions: Tuple[str, ...]) -> SubsystemRule:
    return SubsystemRule(
        name="Documentation",
        description="Project documentation and guides",
        path_patterns=_DOCUMENTATION_PATTERNS,
        allowed_extensions=extensions,
        priority=priority,
    )


_REACT_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "Components",
        "React components and UI elements",
        ("src/components/", "components/", "src/ui/"),
        _JS,
        1,
    ),
    SubsystemRule(
        "Pages/Routes",
        "Page components and routing logic",
        ("src/pages/", "pages/", "src/routes/", "routes/", "src/views/", "views/"),
        _JS,
        2,
    ),
    SubsystemRule(
        "Hooks",
        "Custom React hooks",
        ("src/hooks/", "hooks/", "src/lib/hooks/"),
        (".js", ".ts", ".jsx", ".tsx"),
        3,
    ),
    SubsystemRule(
        "Services/API",
        "API calls and external services",
        ("src/services/", "services/", "src/api/", "api/", "src/lib/api/"),
        (".js", ".ts"),
        4,
    ),
    SubsystemRule(
        "Utils",
        "Utility functions and helpers",
        ("src/utils/", "utils/", "src/lib/", "lib/", "src/helpers/", "helpers/"),
        (".js", ".ts"),
        5,
    ),
    SubsystemRule(
        "Context/State",
        "State management and context providers",
        ("src/context/", "context/", "src/store/", "store/", "src/state/", "state/"),
        (".js", ".ts", ".jsx", ".tsx"),
        6,
    ),
    SubsystemRule(
        "Configuration",
        "Configuration files and settings",
        ("config/", "src/config/", ".github/", ".vscode/", "public/"),
        _CONFIG_EXTENSIONS,
        7,
    ),
    _docs(8, (".md", ".mdx", ".txt", ".rst")),
)

_NEXTJS_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "Pages/Routes",
        "Next.js pages and app router routes",
        ("pages/", "app/", "src/pages/", "src/app/"),
        _JS,
        1,
    ),
    SubsystemRule(
        "Components",
        "React components and UI elements",
        ("src/components/", "components/", "src/ui/", "ui/"),
        _JS,
        2,
    ),
    SubsystemRule(
        "API Routes",
        "Next.js API routes",
        ("pages/api/", "app/api/", "src/pages/api/", "src/app/api/"),
        (".js", ".ts"),
        3,
    ),
    SubsystemRule(
        "Hooks",
        "Custom React hooks",
        ("src/hooks/", "hooks/", "src/lib/hooks/"),
        (".js", ".ts", ".jsx", ".tsx"),
        4,
    ),
    SubsystemRule(
        "Services/API",
        "API calls and external services",
        ("src/services/", "services/", "src/lib/api/", "lib/api/"),
        (".js", ".ts"),
        5,
    ),
    SubsystemRule(
        "Utils",
        "Utility functions and helpers",
        ("src/utils/", "utils/", "src/lib/", "lib/", "src/helpers/", "helpers/"),
        (".js", ".ts"),
        6,
    ),
    SubsystemRule(
        "Configuration",
        "Configuration files and settings",
        ("config/", "src/config/", ".github/", ".vscode/", "public/"),
        _CONFIG_EXTENSIONS,
        7,
    ),
    _docs(8, (".md", ".mdx", ".txt", ".rst")),
)

_SVELTE_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "Routes",
        "SvelteKit routes and pages",
        ("src/routes/", "routes/"),
        (".svelte", ".js", ".ts", ".server.js", ".server.ts"),
        1,
    ),
    SubsystemRule(
        "Components",
        "Svelte components",
        ("src/lib/components/", "src/components/", "components/"),
        (".svelte",),
        2,
    ),
    SubsystemRule(
        "Stores",
        "Svelte stores for state management",
        ("src/lib/stores/", "src/stores/", "stores/"),
        (".js", ".ts"),
        3,
    ),
    SubsystemRule(
        "Server",
        "Server-side logic and utilities",
        ("src/lib/server/", "src/server/"),
        (".js", ".ts"),
        4,
    ),
    SubsystemRule(
        "Services",
        "External services and integrations",
        ("src/lib/firebase/", "src/lib/services/", "src/services/"),
        (".js", ".ts"),
        5,
    ),
    SubsystemRule(
        "Models",
        "Data models and types",
        ("src/lib/models/", "src/models/"),
        (".js", ".ts"),
        6,
    ),
    SubsystemRule(
        "Utils",
        "Utility functions and helpers",
        ("src/lib/utils/", "src/utils/", "utils/", "src/lib/"),
        (".js", ".ts"),
        7,
    ),
    SubsystemRule(
        "Configuration",
        "Configuration files and settings",
        ("config/", "src/config/", ".github/", ".vscode/", "static/", "public/"),
        _CONFIG_EXTENSIONS,
        8,
    ),
    _docs(9, (".md", ".mdx", ".txt", ".rst")),
)


def _python_web_rules(framework_label: str, config_dirs: Tuple[str, ...]) -> Tuple[SubsystemRule, ...]:
    endpoints = (
        ("app/", "src/", "routes/", "views/", "blueprints/")
        if framework_label == "Flask"
        else ("app/", "src/", "routers/", "routes/", "api/")
    )
    models = ("models/", "app/models/", "src/models/")
    if framework_label == "FastAPI":
        models = models + ("schemas/",)
    return (
        SubsystemRule(
            "Routes/Endpoints",
            f"{framework_label} routes and API endpoints",
            endpoints,
            (".py",),
            1,
        ),
        SubsystemRule(
            "Models",
            "Database models and schemas"
            if framework_label == "Flask"
            else "Pydantic models and database schemas",
            models,
            (".py",),
            2,
        ),
        SubsystemRule(
            "Services",
            "Business logic and services",
            ("services/", "app/services/", "src/services/"),
            (".py",),
            3,
        ),
        SubsystemRule(
            "Utils",
            "Utility functions and helpers",
            ("utils/", "helpers/", "app/utils/", "src/utils/"),
            (".py",),
            4,
        ),
        SubsystemRule(
            "Configuration",
            "Configuration files and settings",
            ("config/", "app/config/", "src/config/", ".github/") + config_dirs,
            _PY_CONFIG_EXTENSIONS,
            5,
        ),
        SubsystemRule(
            "Auth",
            "Authentication and authorization",
            ("auth/", "app/auth/", "src/auth/"),
            (".py",),
            6,
        ),
        _docs(7, (".md", ".rst", ".txt")),
    )


_PYTHON_CLI_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "CLI/Commands",
        "Command-line interface and command implementations",
        ("src/", "cli/", "commands/", "bin/"),
        (".py",),
        1,
    ),
    SubsystemRule(
        "Core/Library",
        "Core library functionality and modules",
        ("src/", "lib/", "core/"),
        (".py",),
        2,
    ),
    SubsystemRule(
        "Configuration",
        "Configuration files and project setup",
        ("config/", "settings/", "."),
        (".toml", ".cfg", ".ini", ".yaml", ".yml", ".json"),
        3,
    ),
    SubsystemRule(
        "Tests",
        "Test files and test utilities",
        ("tests/", "test/", "test_data/"),
        (".py",),
        4,
    ),
    _docs(5, (".md", ".rst", ".txt")),
    SubsystemRule(
        "Assets/Resources",
        "Static assets and resource files",
        ("assets/", "resources/", "static/", "imgs/", "media/"),
        (".png", ".jpg", ".jpeg", ".gif", ".svg", ".css", ".js", ".html"),
        6,
    ),
)

_PYTHON_LIB_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "Source/Library",
        "Main library source code and modules",
        ("src/", "lib/", "package_name/"),
        (".py",),
        1,
    ),
    SubsystemRule(
        "API/Interface",
        "Public API and interface definitions",
        ("src/", "api/", "interface/"),
        (".py",),
        2,
    ),
    SubsystemRule(
        "Tests",
        "Test files and test utilities",
        ("tests/", "test/", "test_data/"),
        (".py",),
        3,
    ),
    SubsystemRule(
        "Examples",
        "Usage examples and sample code",
        ("examples/", "samples/", "demo/"),
        (".py", ".ipynb", ".md"),
        4,
    ),
    SubsystemRule(
        "Configuration",
        "Configuration files and project setup",
        ("config/", "settings/", "."),
        (".toml", ".cfg", ".ini", ".yaml", ".yml", ".json", ".py"),
        5,
    ),
    _docs(6, (".md", ".rst", ".txt")),
)

_MULTI_FRAMEWORK_RULES: Tuple[SubsystemRule, ...] = (
    SubsystemRule(
        "Examples/Implementations",
        "Framework-specific implementations and examples",
        ("examples/", "implementations/", "samples/"),
        (".js", ".jsx", ".ts", ".tsx", ".vue", ".svelte", ".html", ".css"),
        1,
    ),
    SubsystemRule(
        "Shared/Common",
        "Shared resources and common files",
        ("shared/", "common/", "assets/", "css/", "js/"),
        (".js", ".css", ".html", ".json", ".md"),
        2,
    ),
    SubsystemRule(
        "Testing",
        "Testing infrastructure and test files",
        ("tests/", "test/", "cypress/", "e2e/"),
        (".js", ".ts", ".json", ".config.js"),
        3,
    ),
    SubsystemRule(
        "Tooling/Build",
        "Build tools and development utilities",
        ("tools/", "tooling/", "build/", "tasks/", "scripts/"),
        (".js", ".json", ".yml", ".yaml"),
        4,
    ),
    SubsystemRule(
        "Site/Assets",
        "Website assets and static resources",
        ("site-assets/", "static/", "public/", "media/"),
        (".css", ".js", ".html", ".png", ".jpg", ".svg", ".ico"),
        5,
    ),
    _docs(6, (".md", ".html", ".txt")),
    SubsystemRule(
        "Configuration",
        "Configuration files and project setup",
        ("config/", "."),
        (".json", ".js", ".yml", ".yaml", ".toml", ".config.js"),
        7,
    ),
)

RULE_TABLES: Dict[Framework, Tuple[SubsystemRule, ...]] = {
    Framework.REACT: _REACT_RULES,
    Framework.NEXTJS: _NEXTJS_RULES,
    Framework.SVELTE: _SVELTE_RULES,
    Framework.FLASK: _python_web_rules("Flask", ("instance/", "migrations/")),
    Framework.FASTAPI: _python_web_rules("FastAPI", ("docker/", "deployment/")),
    Framework.PYTHON_CLI: _PYTHON_CLI_RULES,
    Framework.PYTHON_LIB: _PYTHON_LIB_RULES,
    Framework.MULTI_FRAMEWORK: _MULTI_FRAMEWORK_RULES,
    Framework.UNKNOWN: (),
}


def _check_rule_tables() -> None:
    missing = [framework.value for framework in Framework if framework not in RULE_TABLES]
    if missing:
        raise RuntimeError(f"No subsystem rule table declared for: {', '.join(missing)}")


_check_rule_tables()


def rules_for(framework: Framework) -> Tuple[SubsystemRule, ...]:
    """Return the declared rules for ``framework`` in declaration order."""
    return RULE_TABLES[Framework(framework)]


__all__ = ["Framework", "RULE_TABLES", "SubsystemRule", "rules_for"]
