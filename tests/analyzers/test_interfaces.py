"""Tests for repolens.analyzers.interfaces."""

from __future__ import annotations

from repolens.analyzers import extract_key_interfaces
from repolens.models import FileDescriptor

TS_SOURCE = """export interface User {
  id: string;
}

export async function loadUser(id: string) {
  return fetch(id);
}

export type UserId = string;
"""


def test_typescript_exports_are_extracted_with_line_numbers() -> None:
    files = [FileDescriptor(path="src/user.ts", size=len(TS_SOURCE), content=TS_SOURCE)]

    found = {(item.kind, item.name, item.line_number) for item in extract_key_interfaces(files)}

    assert found == {
        ("interface", "User", 1),
        ("function", "loadUser", 5),
        ("type", "UserId", 9),
    }


def test_javascript_files_skip_typescript_only_kinds() -> None:
    source = "export interface Nope {}\nexport const answer = 42;\n"
    files = [FileDescriptor(path="lib/a.js", content=source)]

    found = [(item.kind, item.name) for item in extract_key_interfaces(files)]

    assert found == [("const", "answer")]


def test_python_definitions() -> None:
    source = "class Store:\n    def get(self, key):\n        return key\n"
    files = [FileDescriptor(path="pkg/store.py", content=source)]

    interfaces = extract_key_interfaces(files)

    assert [(item.kind, item.name, item.line_number) for item in interfaces] == [
        ("function", "get", 2),
        ("class", "Store", 1),
    ]
    assert all(item.visibility == "public" for item in interfaces)


def test_svelte_component_named_after_file() -> None:
    source = '<script lang="ts">\n  export let label;\n</script>\n<button>{label}</button>\n'
    files = [FileDescriptor(path="src/lib/Button.svelte", content=source)]

    (component,) = extract_key_interfaces(files)

    assert component.kind == "component"
    assert component.name == "Button"
    assert component.signature == '<script lang="ts">'
    assert component.line_number == 1


def test_limit_counts_only_files_with_content() -> None:
    files = [
        FileDescriptor(path="empty.py"),
        FileDescriptor(path="a.py", content="def a():\n    pass\n"),
        FileDescriptor(path="b.py", content="def b():\n    pass\n"),
        FileDescriptor(path="c.py", content="def c():\n    pass\n"),
    ]

    names = [item.name for item in extract_key_interfaces(files, limit=2)]

    assert names == ["a", "b"]
