"""Core data models shared across gopuml components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration was found: the Go file and its package path."""

    file_path: str
    package_path: str


@dataclass(frozen=True)
class MethodSignature:
    """A method rendered twice: bare names for display, qualified for matching."""

    name: str
    display: str
    normalized: str


@dataclass
class FieldInfo:
    """Rendering-ready struct field."""

    names: List[str]
    type_text: str
    embedded: bool = False

    def render(self) -> str:
        if not self.names:
            return self.type_text
        return f"{','.join(self.names)} {self.type_text}"


@dataclass
class InterfaceEntity:
    name: str
    location: SourceLocation
    methods: List[MethodSignature] = field(default_factory=list)

    kind = "interface"

    @property
    def package_path(self) -> str:
        return self.location.package_path


@dataclass
class StructEntity:
    name: str
    location: SourceLocation
    methods: List[MethodSignature] = field(default_factory=list)
    fields: List[FieldInfo] = field(default_factory=list)

    kind = "struct"

    @property
    def package_path(self) -> str:
        return self.location.package_path


@dataclass
class FunctionEntity:
    name: str
    location: SourceLocation
    signature: MethodSignature

    kind = "function"

    @property
    def package_path(self) -> str:
        return self.location.package_path


@dataclass
class TypeAliasEntity:
    """A `type A B` or `type A = B` declaration that is neither struct nor interface."""

    name: str
    location: SourceLocation
    target: str
    is_alias: bool = False

    kind = "alias"

    @property
    def package_path(self) -> str:
        return self.location.package_path


Entity = Union[InterfaceEntity, StructEntity, FunctionEntity, TypeAliasEntity]


@dataclass(frozen=True)
class ImportBinding:
    """One import of the file being resolved. Alias "." is a dot import."""

    alias: str
    package_path: str

    @property
    def is_wildcard(self) -> bool:
        return self.alias == WILDCARD_ALIAS


WILDCARD_ALIAS = "."


class Multiplicity(str, Enum):
    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class DependencyRelation:
    """A struct field referencing another struct or interface."""

    source: StructEntity
    target: Union[StructEntity, InterfaceEntity]
    multiplicity: Multiplicity = Multiplicity.ONE
    label: Optional[str] = None
    embedded: bool = False


@dataclass(frozen=True)
class ImplementationRelation:
    interface: InterfaceEntity
    struct: StructEntity


@dataclass(frozen=True)
class Diagnostic:
    """Informational record of a degraded resolution or skipped file."""

    kind: str
    message: str
    file_path: Optional[str] = None


__all__ = [
    "DependencyRelation",
    "Diagnostic",
    "Entity",
    "FieldInfo",
    "FunctionEntity",
    "ImplementationRelation",
    "ImportBinding",
    "InterfaceEntity",
    "MethodSignature",
    "Multiplicity",
    "SourceLocation",
    "StructEntity",
    "TypeAliasEntity",
    "WILDCARD_ALIAS",
]
