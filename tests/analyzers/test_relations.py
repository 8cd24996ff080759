"""Tests for dependency and implementation inference."""

from __future__ import annotations

from pathlib import Path

from gopuml.analyzers import AnalysisContext, FileScope, PackageLocator, TypeReferenceResolver
from gopuml.analyzers.relations import field_relations, implementation_relations, implements
from gopuml.analyzers.syntax import Array, FieldDecl, Map, Named, Pointer
from gopuml.models import (
    InterfaceEntity,
    MethodSignature,
    Multiplicity,
    SourceLocation,
    StructEntity,
)

PKG = "example.com/proj/a"
LOCATION = SourceLocation(file_path="a/a.go", package_path=PKG)


def _sig(text: str) -> MethodSignature:
    name = text.split("(", 1)[0]
    return MethodSignature(name=name, display=text, normalized=text)


def test_implements_is_containment_not_equality() -> None:
    interface = InterfaceEntity(name="I", location=LOCATION, methods=[_sig("A()"), _sig("B(int)")])
    superset = StructEntity(
        name="Full", location=LOCATION, methods=[_sig("B(int)"), _sig("A()"), _sig("C()")]
    )
    partial = StructEntity(name="Partial", location=LOCATION, methods=[_sig("A()")])

    assert implements(superset, interface)
    assert not implements(partial, interface)


def test_signature_text_must_match_exactly() -> None:
    interface = InterfaceEntity(
        name="Getter", location=LOCATION, methods=[_sig("Get(string)example.com/proj/a.T")]
    )
    other = StructEntity(
        name="S", location=LOCATION, methods=[_sig("Get(string)example.com/proj/b.T")]
    )

    assert not implements(other, interface)


def test_empty_interface_is_implemented_by_every_struct() -> None:
    assert implements(
        StructEntity(name="S", location=LOCATION), InterfaceEntity(name="E", location=LOCATION)
    )


def test_implementation_relations_follow_declaration_order(tmp_path: Path) -> None:
    context = AnalysisContext(PackageLocator(tmp_path, primary_root=tmp_path))
    table = context.table
    first = table.add(InterfaceEntity(name="Adder", location=LOCATION, methods=[_sig("Add()")]))
    table.add(InterfaceEntity(name="Closer", location=LOCATION, methods=[_sig("Close()error")]))
    table.add(StructEntity(name="SB", location=LOCATION, methods=[_sig("Add()")]))
    table.add(StructEntity(name="SA", location=LOCATION, methods=[_sig("Add()"), _sig("Close()error")]))

    relations = implementation_relations(table)

    assert [(rel.interface.name, rel.struct.name) for rel in relations] == [
        ("Adder", "SB"),
        ("Adder", "SA"),
        ("Closer", "SA"),
    ]
    assert relations[0].interface is first


def test_field_relations_multiplicity_and_embedding(tmp_path: Path) -> None:
    context = AnalysisContext(PackageLocator(tmp_path, primary_root=tmp_path))
    source = context.table.add(StructEntity(name="SA", location=LOCATION))
    context.table.add(StructEntity(name="T", location=LOCATION))
    context.table.add(InterfaceEntity(name="Doer", location=LOCATION))
    context.table.freeze()
    resolver = TypeReferenceResolver(context, FileScope(location=LOCATION))
    fields = [
        FieldDecl(names=("a",), type=Named("int")),
        FieldDecl(names=("plain",), type=Named("T")),
        FieldDecl(names=("ptr",), type=Pointer(Named("T"))),
        FieldDecl(names=("list", "more"), type=Array(Pointer(Named("T")))),
        FieldDecl(names=("index",), type=Map(Named("string"), Named("Doer"))),
        FieldDecl(names=(), type=Pointer(Named("T"))),
    ]

    relations = field_relations(source, fields, resolver)

    summary = [
        (rel.target.name, rel.multiplicity, rel.label, rel.embedded) for rel in relations
    ]
    assert summary == [
        ("T", Multiplicity.ONE, "plain", False),
        ("T", Multiplicity.ONE, "ptr", False),
        ("T", Multiplicity.MANY, "list,more", False),
        ("Doer", Multiplicity.MANY, "index", False),
        ("T", Multiplicity.ONE, None, True),
    ]
    assert all(rel.source is source for rel in relations)
