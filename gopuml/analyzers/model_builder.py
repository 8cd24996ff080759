"""Two-stage construction of the symbol model.

Stage one parses every file and records type declarations. The entity table
is then frozen and stage two parses every file again, binds its imports and
resolves fields, methods, functions and field dependencies against the now
complete table. Running stage two before stage one has seen the whole tree
would make forward references across files unresolvable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Set

from .context import AnalysisContext, FileScope
from .imports import ImportBindingResolver
from .relations import field_relations, implementation_relations
from .symbols import EntityTable
from .syntax import AnonymousInterface, AnonymousStruct, GoFile
from .tree_sitter import GoParseError
from .types import TypeReferenceResolver
from ..models import (
    DependencyRelation,
    Diagnostic,
    FunctionEntity,
    ImplementationRelation,
    InterfaceEntity,
    SourceLocation,
    StructEntity,
    TypeAliasEntity,
)

FileSource = Callable[[], Iterable[Path]]


@dataclass
class SymbolModel:
    """Complete, resolved view of one source tree."""

    table: EntityTable
    dependencies: List[DependencyRelation] = field(default_factory=list)
    implementations: List[ImplementationRelation] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class ModelBuilder:
    """Runs both stages over the files produced by `file_source`."""

    def __init__(self, context: AnalysisContext) -> None:
        self.context = context
        self._imports = ImportBindingResolver(context)
        self._locations: Dict[str, SourceLocation] = {}
        self._skipped: Set[str] = set()
        self._dependencies: List[DependencyRelation] = []

    def build(self, file_source: FileSource) -> SymbolModel:
        for path in file_source():
            self.collect_declarations(path)
        self.context.table.freeze()
        self.context.logger.debug(
            "Declaration stage complete: %d types across %d files",
            len(self.context.table),
            len(self._locations),
        )

        for path in file_source():
            self.resolve_file(path)

        return SymbolModel(
            table=self.context.table,
            dependencies=list(self._dependencies),
            implementations=implementation_relations(self.context.table),
            diagnostics=list(self.context.diagnostics),
            files=[key for key in self._locations if key not in self._skipped],
            skipped=sorted(self._skipped),
        )

    # stage one

    def collect_declarations(self, path: Path) -> None:
        self.context.logger.info("analyze %s", path)
        go_file = self._parse(path)
        if go_file is None:
            return
        location = self._location(path)
        self.context.cache.put(location.package_path, go_file.package_name)

        resolver = TypeReferenceResolver(self.context, FileScope(location))
        table = self.context.table
        for decl in go_file.types:
            if isinstance(decl.type, AnonymousInterface):
                table.add(InterfaceEntity(name=decl.name, location=location))
            elif isinstance(decl.type, AnonymousStruct):
                table.add(StructEntity(name=decl.name, location=location))
            else:
                table.add(
                    TypeAliasEntity(
                        name=decl.name,
                        location=location,
                        target=resolver.render(decl.type),
                        is_alias=decl.is_alias,
                    )
                )

    # stage two

    def resolve_file(self, path: Path) -> None:
        key = str(path)
        if key in self._skipped:
            return
        if not self.context.table.frozen:
            raise RuntimeError("Declarations must be collected for every file before resolving")
        self.context.logger.info("resolve %s", path)
        go_file = self._parse(path)
        if go_file is None:
            return

        location = self._location(path)
        scope = FileScope(location=location, bindings=self._imports.bind(go_file))
        resolver = TypeReferenceResolver(self.context, scope)
        self._resolve_types(go_file, resolver)
        self._resolve_functions(go_file, resolver)

    def _resolve_types(self, go_file: GoFile, resolver: TypeReferenceResolver) -> None:
        table = self.context.table
        location = resolver.scope.location
        for decl in go_file.types:
            if isinstance(decl.type, AnonymousInterface):
                interface = table.find_interface(location.package_path, decl.name)
                if interface is None or interface.location != location:
                    continue
                interface.methods = [
                    resolver.method_signature(spec.name, spec.func) for spec in decl.type.methods
                ]
            elif isinstance(decl.type, AnonymousStruct):
                struct = table.find_struct(location.package_path, decl.name)
                if struct is None or struct.location != location:
                    continue
                struct.fields = [resolver.render_field(item) for item in decl.type.fields]
                self._dependencies.extend(field_relations(struct, decl.type.fields, resolver))

    def _resolve_functions(self, go_file: GoFile, resolver: TypeReferenceResolver) -> None:
        table = self.context.table
        location = resolver.scope.location
        for decl in go_file.functions:
            signature = resolver.method_signature(decl.name, decl.func)
            if decl.receiver is None:
                table.add(FunctionEntity(name=decl.name, location=location, signature=signature))
                continue
            if decl.receiver_alias:
                continue
            struct = table.find_struct(location.package_path, decl.receiver)
            if struct is None:
                self.context.logger.debug(
                    "Method %s on non-struct receiver %s ignored", decl.name, decl.receiver
                )
                continue
            struct.methods.append(signature)

    # helpers

    def _parse(self, path: Path) -> GoFile | None:
        try:
            return self.context.parser.parse(path)
        except GoParseError as exc:
            self._skipped.add(str(path))
            self.context.report("parse-error", f"Skipping unparsable file: {exc.reason}", str(path))
            return None

    def _location(self, path: Path) -> SourceLocation:
        key = str(path)
        location = self._locations.get(key)
        if location is not None:
            return location
        package_path = self.context.locator.package_path_for(path)
        if not package_path:
            self.context.report(
                "unknown-package-path", "Unable to determine the package path", key
            )
        location = SourceLocation(file_path=key, package_path=package_path)
        self._locations[key] = location
        return location


__all__ = ["FileSource", "ModelBuilder", "SymbolModel"]
