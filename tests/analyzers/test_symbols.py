"""Tests for the package name cache and the entity table."""

from __future__ import annotations

import pytest

from gopuml.analyzers.symbols import EntityTable, PackageNameCache
from gopuml.models import (
    FunctionEntity,
    InterfaceEntity,
    MethodSignature,
    SourceLocation,
    StructEntity,
    TypeAliasEntity,
)

PKG = "example.com/proj/store"
LOCATION = SourceLocation(file_path="store/store.go", package_path=PKG)
OTHER_LOCATION = SourceLocation(file_path="store/other.go", package_path=PKG)


def _function(name: str) -> FunctionEntity:
    signature = MethodSignature(name=name, display=f"{name}()", normalized=f"{name}()")
    return FunctionEntity(name=name, location=LOCATION, signature=signature)


def test_cache_is_seeded_with_standard_library() -> None:
    cache = PackageNameCache()

    assert cache.get("net/http") == "http"
    assert cache.get("fmt") == "fmt"
    assert "math/rand/v2" in cache
    assert PackageNameCache(seed_stdlib=False).get("fmt") is None


def test_cache_keeps_first_writer() -> None:
    cache = PackageNameCache(seed_stdlib=False)

    assert cache.put(PKG, "store") is True
    assert cache.put(PKG, "other") is False
    assert cache.get(PKG) == "store"
    assert len(cache) == 1


def test_cache_ignores_empty_mappings() -> None:
    cache = PackageNameCache(seed_stdlib=False)

    assert cache.put("", "store") is False
    assert cache.put(PKG, "") is False
    assert PKG not in cache


def test_table_first_declaration_wins() -> None:
    table = EntityTable()
    first = table.add(StructEntity(name="Item", location=LOCATION))
    second = table.add(StructEntity(name="Item", location=OTHER_LOCATION))

    assert second is first
    assert table.get(PKG, "Item").location == LOCATION
    assert len(table) == 1


def test_table_lookups_respect_entity_kind() -> None:
    table = EntityTable()
    table.add(StructEntity(name="Item", location=LOCATION))
    table.add(InterfaceEntity(name="Store", location=LOCATION))
    table.add(TypeAliasEntity(name="ID", location=LOCATION, target="string", is_alias=True))

    assert table.find_struct(PKG, "Item") is not None
    assert table.find_struct(PKG, "Store") is None
    assert table.find_interface(PKG, "Store") is not None
    assert table.find_type(PKG, "ID") is None
    assert table.has_alias(PKG, "ID")
    assert table.has_type(PKG, "Store")
    assert not table.has_type("example.com/proj/other", "Item")


def test_table_preserves_declaration_order_per_kind() -> None:
    table = EntityTable()
    for name in ["B", "A", "C"]:
        table.add(StructEntity(name=name, location=LOCATION))
    table.add(InterfaceEntity(name="I", location=LOCATION))

    assert [entity.name for entity in table.structs] == ["B", "A", "C"]
    assert [entity.name for entity in table.interfaces] == ["I"]
    assert [entity.name for entity in table] == ["B", "A", "C", "I"]


def test_frozen_table_rejects_types_but_accepts_functions() -> None:
    table = EntityTable()
    table.add(StructEntity(name="Item", location=LOCATION))
    table.freeze()

    assert table.frozen
    with pytest.raises(RuntimeError, match="frozen"):
        table.add(StructEntity(name="Late", location=LOCATION))

    table.add(_function("NewItem"))
    assert [entity.name for entity in table.functions] == ["NewItem"]
    assert table.find(FunctionEntity, PKG, "NewItem") is not None
    assert table.get(PKG, "NewItem") is None


def test_functions_do_not_shadow_types_of_the_same_name() -> None:
    table = EntityTable()
    table.add(StructEntity(name="Item", location=LOCATION))
    table.add(_function("Item"))

    assert table.find_struct(PKG, "Item") is not None
    assert len(table) == 2
