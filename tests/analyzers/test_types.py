"""Tests for type reference resolution and signature rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from gopuml.analyzers import AnalysisContext, FileScope, PackageLocator, TypeReferenceResolver
from gopuml.analyzers.syntax import (
    AnonymousInterface,
    Array,
    Channel,
    Func,
    Map,
    MethodSpec,
    Named,
    Opaque,
    Param,
    Pointer,
    Qualified,
    Variadic,
)
from gopuml.models import (
    ImportBinding,
    InterfaceEntity,
    SourceLocation,
    StructEntity,
    TypeAliasEntity,
)

HERE = "example.com/proj/store"
P1 = "example.com/proj/p1"
P2 = "example.com/proj/p2"


def _resolver(
    tmp_path: Path, bindings: Sequence[ImportBinding] = ()
) -> tuple[TypeReferenceResolver, AnalysisContext]:
    context = AnalysisContext(PackageLocator(tmp_path, primary_root=tmp_path))
    table = context.table
    for package_path, name in [(HERE, "Item"), (P1, "X"), (P2, "X"), (P2, "Y"), (P1, "Shared")]:
        location = SourceLocation(file_path=f"{package_path}/x.go", package_path=package_path)
        table.add(StructEntity(name=name, location=location))
    here = SourceLocation(file_path="store/store.go", package_path=HERE)
    table.add(InterfaceEntity(name="Store", location=here))
    table.add(TypeAliasEntity(name="ID", location=here, target="string"))
    p2 = SourceLocation(file_path="p2/x.go", package_path=P2)
    table.add(TypeAliasEntity(name="Shared", location=p2, target="int"))
    table.add(StructEntity(name="Shared", location=p2))
    table.freeze()
    scope = FileScope(location=here, bindings=list(bindings))
    return TypeReferenceResolver(context, scope), context


def test_current_package_wins_over_dot_imports(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path, [ImportBinding(".", P1)])

    assert resolver.resolve("", "Item") == HERE


def test_first_dot_import_wins_ties(tmp_path: Path) -> None:
    first, _ = _resolver(tmp_path, [ImportBinding(".", P1), ImportBinding(".", P2)])
    swapped, _ = _resolver(tmp_path, [ImportBinding(".", P2), ImportBinding(".", P1)])

    assert first.resolve("", "X") == P1
    assert swapped.resolve("", "X") == P2
    assert first.resolve("", "Y") == P2


def test_type_alias_is_unresolved_by_design(tmp_path: Path) -> None:
    resolver, context = _resolver(tmp_path, [ImportBinding(".", P2)])

    assert resolver.resolve("", "ID") is None
    assert resolver.resolve("", "Shared") is None
    assert context.diagnostics == []


def test_alias_with_single_binding_returns_its_path(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path, [ImportBinding("p1", P1), ImportBinding("sync", "sync")])

    assert resolver.resolve("p1", "Anything") == P1
    assert resolver.resolve("sync", "Mutex") == "sync"


def test_shared_alias_is_tried_in_import_order(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path, [ImportBinding("x", P1), ImportBinding("x", P2)])

    assert resolver.resolve("x", "Y") == P2
    assert resolver.resolve("x", "X") == P1


def test_unmatched_reference_falls_back_to_alias(tmp_path: Path) -> None:
    resolver, context = _resolver(tmp_path, [ImportBinding(".", P1)])

    assert resolver.resolve("", "Missing") == ""
    assert resolver.resolve("nope", "T") == "nope"

    kinds = [diagnostic.kind for diagnostic in context.diagnostics]
    assert kinds == ["unresolved-type", "unresolved-type"]
    assert context.diagnostics[1].file_path == "store/store.go"


@pytest.mark.parametrize(
    ("expr", "many"),
    [
        (Named("Item"), False),
        (Pointer(Named("Item")), False),
        (Array(Named("Item")), True),
        (Array(Pointer(Named("Item")), length="4"), True),
        (Map(Named("string"), Pointer(Named("Item"))), True),
    ],
)
def test_resolve_target_tracks_multiplicity(tmp_path: Path, expr, many: bool) -> None:
    resolver, _ = _resolver(tmp_path)

    target = resolver.resolve_target(expr)

    assert target is not None
    assert target.entity.name == "Item"
    assert target.many is many


def test_resolve_target_ignores_builtins_aliases_and_opaque(tmp_path: Path) -> None:
    resolver, context = _resolver(tmp_path)

    assert resolver.resolve_target(Named("int")) is None
    assert resolver.resolve_target(Named("ID")) is None
    assert resolver.resolve_target(Channel(Named("Item"))) is None
    assert resolver.resolve_target(Opaque("T[int]")) is None
    assert context.diagnostics == []


def test_method_signature_display_and_normalized_forms(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path)
    func = Func(
        params=(Param(("key", "fallback"), Named("string")),),
        results=(Param((), Pointer(Named("Item"))), Param((), Named("error"))),
    )

    signature = resolver.method_signature("Get", func)

    assert signature.display == "Get(key, fallback string) (*Item, error)"
    assert signature.normalized == f"Get(string,string)(*{HERE}.Item,error)"


def test_single_result_is_not_parenthesised(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path, [ImportBinding("p1", P1)])
    func = Func(params=(Param(("xs",), Variadic(Qualified("p1", "X"))),), results=(Param((), Named("bool")),))

    signature = resolver.method_signature("Has", func)

    assert signature.display == "Has(xs ...p1.X) bool"
    assert signature.normalized == f"Has(...{P1}.X)bool"


def test_render_anonymous_types(tmp_path: Path) -> None:
    resolver, _ = _resolver(tmp_path)
    iface = AnonymousInterface(
        methods=(MethodSpec("Close", Func(results=(Param((), Named("error")),))),),
        embeds=(Qualified("io", "Reader"),),
    )

    assert resolver.render(iface) == "interface{Close() error; io.Reader}"
    assert resolver.render(AnonymousInterface()) == "interface{}"
    assert resolver.render(Channel(Named("int"), "chan<-")) == "chan<- int"
    assert resolver.render(Map(Named("string"), Array(Named("byte")))) == "map[string][]byte"
