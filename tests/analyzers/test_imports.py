"""Tests for package location and import binding."""

from __future__ import annotations

from pathlib import Path

from gopuml.analyzers import AnalysisContext, GoSourceParser, ImportBindingResolver, PackageLocator
from gopuml.analyzers.imports import read_module_path
from gopuml.analyzers.syntax import GoFile, ImportSpec
from gopuml.models import ImportBinding


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_read_module_path(tmp_path: Path) -> None:
    _write(tmp_path / "go.mod", "// comment\nmodule github.com/acme/widgets\n\ngo 1.22\n")

    assert read_module_path(tmp_path) == "github.com/acme/widgets"
    assert read_module_path(tmp_path / "missing") is None


def test_locator_prefers_vendor_then_primary(go_tree) -> None:
    locator = go_tree.locator()

    assert locator.package_path_for(go_tree.root / "a" / "a.go") == "example.com/proj/a"
    assert locator.package_path_for(go_tree.root / "main.go") == "example.com/proj"
    vendored = go_tree.root / "vendor" / "github.com" / "lib" / "pq" / "conn.go"
    assert locator.package_path_for(vendored) == "github.com/lib/pq"


def test_locator_uses_module_path_outside_primary_root(tmp_path: Path) -> None:
    root = tmp_path / "widgets"
    locator = PackageLocator(root, module_path="github.com/acme/widgets")

    assert locator.package_path_for(root / "api" / "api.go") == "github.com/acme/widgets/api"
    assert locator.package_path_for(root / "main.go") == "github.com/acme/widgets"
    assert locator.package_path_for(tmp_path / "elsewhere" / "x.go") == ""
    assert list(locator.candidate_dirs("github.com/acme/widgets/api")) == [root / "api"]


def test_find_package_name_skips_tests_and_broken_files(go_tree) -> None:
    go_tree.write(
        {
            "pkg2/a_test.go": "package pkg2_test\n",
            "pkg2/b_broken.go": "type X struct{}\n",
            "pkg2/c.go": "package two\n",
        }
    )

    name = go_tree.locator().find_package_name("example.com/proj/pkg2", GoSourceParser())

    assert name == "two"


def test_bind_uses_explicit_alias_cache_and_directory_lookup(go_tree) -> None:
    go_tree.write({"pkg2/t.go": "package two\n\ntype T struct{}\n"})
    context = go_tree.context()
    resolver = ImportBindingResolver(context)
    go_file = GoFile(
        path=str(go_tree.root / "a" / "a.go"),
        package_name="a",
        imports=[
            ImportSpec(path="net/http"),
            ImportSpec(path="strings", alias="str"),
            ImportSpec(path="example.com/proj/pkg2"),
            ImportSpec(path="example.com/proj/pkg2", alias="."),
        ],
    )

    bindings = resolver.bind(go_file)

    assert bindings == [
        ImportBinding(alias="http", package_path="net/http"),
        ImportBinding(alias="str", package_path="strings"),
        ImportBinding(alias="two", package_path="example.com/proj/pkg2"),
        ImportBinding(alias=".", package_path="example.com/proj/pkg2"),
    ]
    assert bindings[3].is_wildcard
    assert context.cache.get("example.com/proj/pkg2") == "two"
    assert context.diagnostics == []


def test_unknown_package_is_reported_once(tmp_path: Path) -> None:
    context = AnalysisContext(PackageLocator(tmp_path, primary_root=tmp_path))
    resolver = ImportBindingResolver(context)

    assert resolver.package_name("example.com/missing", "a.go") == ""
    assert resolver.package_name("example.com/missing", "b.go") == ""

    assert [diagnostic.kind for diagnostic in context.diagnostics] == ["unknown-package"]
    assert context.diagnostics[0].file_path == "a.go"
    assert "example.com/missing" not in context.cache
