"""Parser-independent Go syntax model.

The tree-sitter adapter converts concrete syntax trees into these plain
dataclasses so that resolution and inference never touch parser nodes.
Type expressions are a closed set of variants; everything the resolver does
not understand ends up as :class:`Opaque` and is rendered verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Qualified:
    alias: str
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Array:
    """Slice (`length is None`) or fixed-size array."""

    elem: "TypeExpr"
    length: Optional[str] = None


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Channel:
    elem: "TypeExpr"
    direction: str = "chan"


@dataclass(frozen=True)
class Func:
    params: Tuple["Param", ...] = ()
    results: Tuple["Param", ...] = ()


@dataclass(frozen=True)
class AnonymousInterface:
    methods: Tuple["MethodSpec", ...] = ()
    embeds: Tuple["TypeExpr", ...] = ()


@dataclass(frozen=True)
class AnonymousStruct:
    fields: Tuple["FieldDecl", ...] = ()


@dataclass(frozen=True)
class Variadic:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Parenthesized:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Opaque:
    text: str


TypeExpr = Union[
    Named,
    Qualified,
    Pointer,
    Array,
    Map,
    Channel,
    Func,
    AnonymousInterface,
    AnonymousStruct,
    Variadic,
    Parenthesized,
    Opaque,
]


@dataclass(frozen=True)
class Param:
    """A parameter or result group: `a, b int` has two names and one type."""

    names: Tuple[str, ...]
    type: TypeExpr


@dataclass(frozen=True)
class MethodSpec:
    name: str
    func: Func


@dataclass(frozen=True)
class FieldDecl:
    names: Tuple[str, ...]
    type: TypeExpr

    @property
    def embedded(self) -> bool:
        return not self.names


@dataclass(frozen=True)
class ImportSpec:
    path: str
    alias: Optional[str] = None


@dataclass(frozen=True)
class TypeDecl:
    """A top level `type` spec. `type` is the declared right hand side."""

    name: str
    type: TypeExpr
    is_alias: bool = False


@dataclass(frozen=True)
class FuncDecl:
    """A top level function, or a method when `receiver` is set.

    `receiver` is the receiver's base type name with pointers and type
    parameters stripped, `receiver_alias` is set for the rare qualified
    receiver the grammar accepts.
    """

    name: str
    func: Func
    receiver: Optional[str] = None
    receiver_alias: str = ""


@dataclass
class GoFile:
    path: str
    package_name: str
    imports: List[ImportSpec] = field(default_factory=list)
    types: List[TypeDecl] = field(default_factory=list)
    functions: List[FuncDecl] = field(default_factory=list)


def param_count(params: Tuple[Param, ...]) -> int:
    """Number of declared slots, counting `a, b int` as two."""
    return sum(max(len(param.names), 1) for param in params)


__all__ = [
    "AnonymousInterface",
    "AnonymousStruct",
    "Array",
    "Channel",
    "FieldDecl",
    "Func",
    "FuncDecl",
    "GoFile",
    "ImportSpec",
    "Map",
    "MethodSpec",
    "Named",
    "Opaque",
    "Param",
    "Parenthesized",
    "Pointer",
    "Qualified",
    "TypeDecl",
    "TypeExpr",
    "Variadic",
    "param_count",
]
