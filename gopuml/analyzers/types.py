"""Type reference resolution and rendering.

Resolution is syntactic and best-effort: a referenced name is looked up in
the current package, then in dot-imported packages in import order, and the
first package declaring a struct or interface of that name wins. Nothing here
type-checks; ambiguous references may resolve to the wrong package, and
references that cannot be matched fall back to the raw alias.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .context import AnalysisContext, FileScope
from .syntax import (
    AnonymousInterface,
    AnonymousStruct,
    Array,
    Channel,
    FieldDecl,
    Func,
    Map,
    Named,
    Opaque,
    Param,
    Parenthesized,
    Pointer,
    Qualified,
    TypeExpr,
    Variadic,
    param_count,
)
from ..models import FieldInfo, InterfaceEntity, MethodSignature, StructEntity

BUILTIN_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


def is_builtin(name: str) -> bool:
    return name in BUILTIN_TYPES


@dataclass(frozen=True)
class ResolvedTarget:
    """Leaf entity of a field type plus whether a slice or map was crossed."""

    entity: Union[StructEntity, InterfaceEntity]
    many: bool = False


class TypeReferenceResolver:
    """Resolves and renders type expressions for one file."""

    def __init__(self, context: AnalysisContext, scope: FileScope) -> None:
        self._context = context
        self._scope = scope

    @property
    def scope(self) -> FileScope:
        return self._scope

    # resolution

    def resolve(self, alias: str, name: str) -> Optional[str]:
        """Return the package path declaring `alias.name`.

        None means the name is a type alias and is deliberately left out of
        the graph. When nothing matches, `alias` itself is returned.
        """
        scope = self._scope
        table = self._context.table
        if alias == "":
            if table.has_type(scope.package_path, name):
                return scope.package_path
            if table.has_alias(scope.package_path, name):
                return None
            candidates = scope.wildcard_paths()
        else:
            if alias in scope.import_paths:
                return alias
            candidates = scope.paths_for_alias(alias)
            if len(candidates) == 1:
                return candidates[0]

        for package_path in candidates:
            if table.has_type(package_path, name):
                return package_path
            if table.has_alias(package_path, name):
                return None

        self._context.report(
            "unresolved-type",
            f"Cannot find the package for alias={alias!r} type={name}; "
            f"candidates={len(candidates)} imports={self._describe_imports()}",
            scope.file_path,
        )
        return alias

    def resolve_target(self, expr: TypeExpr) -> Optional[ResolvedTarget]:
        """Find the struct or interface a field type points at, if any."""
        many = False
        while True:
            if isinstance(expr, Pointer):
                expr = expr.elem
            elif isinstance(expr, Parenthesized):
                expr = expr.inner
            elif isinstance(expr, Array):
                many = True
                expr = expr.elem
            elif isinstance(expr, Map):
                many = True
                expr = expr.value
            else:
                break

        if isinstance(expr, Named):
            if is_builtin(expr.name):
                return None
            alias, name = "", expr.name
        elif isinstance(expr, Qualified):
            alias, name = expr.alias, expr.name
        else:
            return None

        package_path = self.resolve(alias, name)
        if not package_path:
            return None
        entity = self._context.table.find_type(package_path, name)
        if entity is None:
            return None
        return ResolvedTarget(entity=entity, many=many)

    # rendering

    def render(self, expr: TypeExpr, qualify: bool = False) -> str:
        """Render a type expression, package-qualifying names when asked."""
        if isinstance(expr, Named):
            if not qualify or is_builtin(expr.name):
                return expr.name
            package_path = self.resolve("", expr.name)
            return f"{package_path}.{expr.name}" if package_path else expr.name
        if isinstance(expr, Qualified):
            if not qualify:
                return f"{expr.alias}.{expr.name}"
            package_path = self.resolve(expr.alias, expr.name)
            return f"{package_path if package_path is not None else expr.alias}.{expr.name}"
        if isinstance(expr, Pointer):
            return "*" + self.render(expr.elem, qualify)
        if isinstance(expr, Array):
            return f"[{expr.length or ''}]" + self.render(expr.elem, qualify)
        if isinstance(expr, Map):
            return f"map[{self.render(expr.key, qualify)}]{self.render(expr.value, qualify)}"
        if isinstance(expr, Channel):
            return f"{expr.direction} {self.render(expr.elem, qualify)}"
        if isinstance(expr, Func):
            return "func" + self.signature_text(expr, qualify)
        if isinstance(expr, AnonymousInterface):
            members = [spec.name + self.signature_text(spec.func, qualify) for spec in expr.methods]
            members.extend(self.render(embed, qualify) for embed in expr.embeds)
            return "interface{" + "; ".join(members) + "}" if members else "interface{}"
        if isinstance(expr, AnonymousStruct):
            members = [self.render_field(field, qualify).render() for field in expr.fields]
            return "struct{" + "; ".join(members) + "}" if members else "struct{}"
        if isinstance(expr, Variadic):
            return "..." + self.render(expr.elem, qualify)
        if isinstance(expr, Parenthesized):
            return f"({self.render(expr.inner, qualify)})"
        if isinstance(expr, Opaque):
            return expr.text
        raise TypeError(f"Unsupported type expression: {expr!r}")

    def render_field(self, field: FieldDecl, qualify: bool = False) -> FieldInfo:
        return FieldInfo(
            names=list(field.names),
            type_text=self.render(field.type, qualify),
            embedded=field.embedded,
        )

    def signature_text(self, func: Func, qualify: bool = False) -> str:
        """`(params) results` for display, `(types)(types)` when qualified."""
        params = self._params_text(func.params, qualify)
        if not func.results:
            return f"({params})"
        results = self._params_text(func.results, qualify)
        named = any(result.names for result in func.results)
        if param_count(func.results) >= 2 or (named and not qualify):
            results = f"({results})"
        return f"({params}){results}" if qualify else f"({params}) {results}"

    def method_signature(self, name: str, func: Func) -> MethodSignature:
        return MethodSignature(
            name=name,
            display=name + self.signature_text(func, qualify=False),
            normalized=name + self.signature_text(func, qualify=True),
        )

    def _params_text(self, params: Iterable[Param], qualify: bool) -> str:
        parts: List[str] = []
        for param in params:
            type_text = self.render(param.type, qualify)
            if qualify:
                parts.extend([type_text] * max(len(param.names), 1))
            elif param.names:
                parts.append(f"{', '.join(param.names)} {type_text}")
            else:
                parts.append(type_text)
        return ",".join(parts) if qualify else ", ".join(parts)

    def _describe_imports(self) -> str:
        pairs: List[Tuple[str, str]] = [
            (binding.alias, binding.package_path) for binding in self._scope.bindings
        ]
        return ", ".join(f"{alias or '?'}={path}" for alias, path in pairs) or "none"


__all__ = ["BUILTIN_TYPES", "ResolvedTarget", "TypeReferenceResolver", "is_builtin"]
