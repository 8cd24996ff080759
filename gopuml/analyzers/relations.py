"""Field dependency and interface implementation inference."""

from __future__ import annotations

from typing import Iterable, List

from .symbols import EntityTable
from .syntax import FieldDecl
from .types import TypeReferenceResolver
from ..models import (
    DependencyRelation,
    ImplementationRelation,
    InterfaceEntity,
    Multiplicity,
    StructEntity,
)


def field_relations(
    source: StructEntity,
    fields: Iterable[FieldDecl],
    resolver: TypeReferenceResolver,
) -> List[DependencyRelation]:
    """One edge per field whose leaf type is a known struct or interface.

    Embedded fields become "extends" edges; named fields are labelled with
    their comma-joined names and carry MANY when a slice, array or map was
    crossed on the way to the leaf.
    """
    relations: List[DependencyRelation] = []
    for field in fields:
        target = resolver.resolve_target(field.type)
        if target is None:
            continue
        if field.embedded:
            relations.append(
                DependencyRelation(source=source, target=target.entity, embedded=True)
            )
            continue
        relations.append(
            DependencyRelation(
                source=source,
                target=target.entity,
                multiplicity=Multiplicity.MANY if target.many else Multiplicity.ONE,
                label=",".join(field.names),
            )
        )
    return relations


def implements(struct: StructEntity, interface: InterfaceEntity) -> bool:
    """Structural check over normalized signature strings.

    The struct qualifies when its method set contains every signature of the
    interface. This is textual: promoted methods and assignable but
    differently spelled parameter types are not recognised, and two methods
    that print identically always match.
    """
    available = {method.normalized for method in struct.methods}
    return all(method.normalized in available for method in interface.methods)


def implementation_relations(table: EntityTable) -> List[ImplementationRelation]:
    """Every (interface, struct) pair in declaration order where the struct qualifies."""
    relations: List[ImplementationRelation] = []
    structs = table.structs
    for interface in table.interfaces:
        for struct in structs:
            if implements(struct, interface):
                relations.append(ImplementationRelation(interface=interface, struct=struct))
    return relations


__all__ = ["field_relations", "implementation_relations", "implements"]
