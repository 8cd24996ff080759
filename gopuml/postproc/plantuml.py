"""PlantUML rendering of a resolved symbol model."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from ..analyzers.model_builder import SymbolModel
from ..models import (
    DependencyRelation,
    Entity,
    FunctionEntity,
    ImplementationRelation,
    InterfaceEntity,
    Multiplicity,
    StructEntity,
    TypeAliasEntity,
)

FUNCTION_STEREOTYPE = "<< (F,#FF7700) >>"
ALIAS_STEREOTYPE = "(T,#FF7777)"


def package_namespace(package_path: str) -> str:
    """PlantUML namespace identifier for a Go package path."""
    value = package_path.replace("\\", "/").replace("/", "\\\\").replace("-", "_")
    return value.strip("\\")


def qualified_id(entity: Entity) -> str:
    namespace = package_namespace(entity.package_path)
    return f"{namespace}.{entity.name}" if namespace else entity.name


@dataclass
class VisibilityFilter:
    """Render-time visibility predicates; resolution always sees everything.

    `include_types` restricts output to the listed names when non-empty,
    `exclude_types` then removes names even if they were included.
    """

    include_types: List[str] = field(default_factory=list)
    exclude_types: List[str] = field(default_factory=list)
    exclude_implements: List[str] = field(default_factory=list)
    hide_paths: List[str] = field(default_factory=list)

    def shows_name(self, name: str) -> bool:
        if self.include_types and name not in self.include_types:
            return False
        return name not in self.exclude_types

    def shows(self, entity: Entity) -> bool:
        return self.shows_name(entity.name) and not self._hidden(entity.location.file_path)

    def shows_dependency(self, relation: DependencyRelation) -> bool:
        return self.shows(relation.source) and self.shows(relation.target)

    def shows_implementation(self, relation: ImplementationRelation) -> bool:
        if relation.interface.name in self.exclude_implements:
            return False
        return self.shows(relation.interface) and self.shows(relation.struct)

    def _hidden(self, file_path: str) -> bool:
        path = PurePosixPath(file_path.replace("\\", "/"))
        for pattern in self.hide_paths:
            candidate = pattern.replace("\\", "/").rstrip("/")
            if not candidate:
                continue
            if str(path) == candidate or str(path).startswith(f"{candidate}/"):
                return True
            if "/" not in candidate and candidate in {path.name, path.stem}:
                return True
        return False


class PlantUMLRenderer:
    """Serialises entities and relationships into PlantUML class diagram text.

    Entities are grouped into one namespace per package path, sorted by
    path. Dependency edges follow, and implementation edges come last.
    """

    indent = "  "

    def render(self, model: SymbolModel, visibility: Optional[VisibilityFilter] = None) -> str:
        visibility = visibility or VisibilityFilter()
        table = model.table

        groups: Dict[str, List[str]] = defaultdict(list)
        entities: List[Entity] = [*table.structs, *table.interfaces, *table.functions, *table.aliases]
        for entity in entities:
            if visibility.shows(entity):
                groups[entity.package_path].extend(self.entity_lines(entity))

        lines: List[str] = []
        for package_path in sorted(groups):
            namespace = package_namespace(package_path)
            if namespace:
                lines.append(f"namespace {namespace} {{")
                lines.extend(f"{self.indent}{line}" for line in groups[package_path])
                lines.append("}")
            else:
                lines.extend(groups[package_path])

        for relation in model.dependencies:
            if visibility.shows_dependency(relation):
                lines.append(self.dependency_line(relation))

        for implementation in model.implementations:
            if visibility.shows_implementation(implementation):
                lines.append(self.implementation_line(implementation))

        return "\n".join(lines) + "\n" if lines else ""

    def entity_lines(self, entity: Entity) -> List[str]:
        if isinstance(entity, StructEntity):
            members = [item.render() for item in entity.fields]
            members.extend(method.display for method in entity.methods)
            return self._block(f"class {entity.name}", members)
        if isinstance(entity, InterfaceEntity):
            return self._block(
                f"interface {entity.name}", [method.display for method in entity.methods]
            )
        if isinstance(entity, FunctionEntity):
            return self._block(
                f"class {entity.name} {FUNCTION_STEREOTYPE}", [entity.signature.display]
            )
        if isinstance(entity, TypeAliasEntity):
            target = f"= {entity.target}" if entity.is_alias else entity.target
            return [f"class {entity.name} << {ALIAS_STEREOTYPE} {target} >>"]
        raise TypeError(f"Unsupported entity: {entity!r}")

    def dependency_line(self, relation: DependencyRelation) -> str:
        source = qualified_id(relation.source)
        target = qualified_id(relation.target)
        if relation.embedded:
            return f"{source} ---|> {target}"
        if relation.multiplicity is Multiplicity.MANY:
            return f'{source} ---> "*" {target} : {relation.label}'
        return f"{source} ---> {target} : {relation.label}"

    def implementation_line(self, relation: ImplementationRelation) -> str:
        return f"{qualified_id(relation.interface)} <|------ {qualified_id(relation.struct)}"

    def _block(self, header: str, members: List[str]) -> List[str]:
        lines = [f"{header} {{"]
        lines.extend(f"{self.indent}{member}" for member in members)
        lines.append("}")
        return lines


__all__ = [
    "PlantUMLRenderer",
    "VisibilityFilter",
    "package_namespace",
    "qualified_id",
]
