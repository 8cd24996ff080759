"""Tree-sitter powered Go source parser."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import tree_sitter_go as ts_go
from tree_sitter import Language, Node, Parser

from .syntax import (
    AnonymousInterface,
    AnonymousStruct,
    Array,
    Channel,
    FieldDecl,
    Func,
    FuncDecl,
    GoFile,
    ImportSpec,
    Map,
    MethodSpec,
    Named,
    Opaque,
    Param,
    Parenthesized,
    Pointer,
    Qualified,
    TypeDecl,
    TypeExpr,
    Variadic,
)
from ..logging import get_logger

GO_LANGUAGE = Language(ts_go.language())

_METHOD_NODES = {"method_elem", "method_spec"}
_PARAM_NODES = {"parameter_declaration", "variadic_parameter_declaration"}

logger = get_logger("parser")


class GoParseError(Exception):
    """Raised when a single Go file cannot be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


class GoSourceParser:
    """Parses Go files into the parser-independent syntax model."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse(self, path: Path | str) -> GoFile:
        """Parse a whole file. Files with syntax errors are rejected."""
        source = self._read(path)
        root = self._parser.parse(source).root_node
        if root.has_error:
            line = _first_error_line(root)
            raise GoParseError(path, f"syntax error near line {line}")

        converter = _TreeConverter(source)
        package_name = converter.package_name(root)
        if not package_name:
            raise GoParseError(path, "missing package clause")

        go_file = GoFile(path=str(path), package_name=package_name)
        for child in root.named_children:
            if child.type == "import_declaration":
                go_file.imports.extend(converter.imports(child))
            elif child.type == "type_declaration":
                go_file.types.extend(converter.type_decls(child))
            elif child.type in {"function_declaration", "method_declaration"}:
                decl = converter.func_decl(child)
                if decl is not None:
                    go_file.functions.append(decl)
        logger.debug(
            "Parsed %s: package=%s imports=%d types=%d funcs=%d",
            path,
            package_name,
            len(go_file.imports),
            len(go_file.types),
            len(go_file.functions),
        )
        return go_file

    def parse_package_name(self, path: Path | str) -> str:
        """Read just the package clause, tolerating errors further down the file."""
        source = self._read(path)
        root = self._parser.parse(source).root_node
        name = _TreeConverter(source).package_name(root)
        if not name:
            raise GoParseError(path, "missing package clause")
        return name

    @staticmethod
    def _read(path: Path | str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise GoParseError(path, f"unable to read file ({exc})") from exc


def _first_error_line(node: Node) -> int:
    for candidate in _walk(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate.start_point[0] + 1
    return node.start_point[0] + 1


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


class _TreeConverter:
    """Converts tree-sitter nodes of one file into syntax dataclasses."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def package_name(self, root: Node) -> str:
        for child in root.named_children:
            if child.type != "package_clause":
                continue
            for part in child.named_children:
                if part.type == "package_identifier":
                    return self.text(part)
        return ""

    # imports

    def imports(self, decl: Node) -> Iterable[ImportSpec]:
        for child in decl.named_children:
            if child.type == "import_spec":
                yield self._import_spec(child)
            elif child.type == "import_spec_list":
                for spec in child.named_children:
                    if spec.type == "import_spec":
                        yield self._import_spec(spec)

    def _import_spec(self, node: Node) -> ImportSpec:
        path = _unquote(self.text(node.child_by_field_name("path")))
        name_node = node.child_by_field_name("name")
        alias = self.text(name_node) if name_node is not None else None
        return ImportSpec(path=path, alias=alias)

    # declarations

    def type_decls(self, decl: Node) -> Iterable[TypeDecl]:
        for spec in decl.named_children:
            if spec.type not in {"type_spec", "type_alias"}:
                continue
            name = self.text(spec.child_by_field_name("name"))
            type_node = spec.child_by_field_name("type")
            if not name or type_node is None:
                continue
            yield TypeDecl(name=name, type=self.type(type_node), is_alias=spec.type == "type_alias")

    def func_decl(self, node: Node) -> Optional[FuncDecl]:
        name = self.text(node.child_by_field_name("name"))
        if not name:
            return None
        func = self.signature(node)
        if node.type != "method_declaration":
            return FuncDecl(name=name, func=func)
        alias, receiver = self._receiver(node.child_by_field_name("receiver"))
        return FuncDecl(name=name, func=func, receiver=receiver or None, receiver_alias=alias)

    def _receiver(self, params: Optional[Node]) -> Tuple[str, str]:
        if params is None:
            return "", ""
        for child in params.named_children:
            if child.type in _PARAM_NODES:
                return _base_type_name(self.type(child.child_by_field_name("type")))
        return "", ""

    # signatures

    def signature(self, node: Node) -> Func:
        params = self.params(node.child_by_field_name("parameters"))
        result = node.child_by_field_name("result")
        if result is None:
            results: Tuple[Param, ...] = ()
        elif result.type == "parameter_list":
            results = self.params(result)
        else:
            results = (Param(names=(), type=self.type(result)),)
        return Func(params=params, results=results)

    def params(self, node: Optional[Node]) -> Tuple[Param, ...]:
        if node is None:
            return ()
        params: List[Param] = []
        for child in node.named_children:
            if child.type not in _PARAM_NODES:
                continue
            names = tuple(self.text(name) for name in child.children_by_field_name("name"))
            param_type = self.type(child.child_by_field_name("type"))
            if child.type == "variadic_parameter_declaration":
                param_type = Variadic(param_type)
            params.append(Param(names=names, type=param_type))
        return tuple(params)

    # type expressions

    def type(self, node: Optional[Node]) -> TypeExpr:
        if node is None:
            return Opaque("")
        kind = node.type
        if kind in {"type_identifier", "identifier"}:
            return Named(self.text(node))
        if kind == "qualified_type":
            return Qualified(
                alias=self.text(node.child_by_field_name("package")),
                name=self.text(node.child_by_field_name("name")),
            )
        if kind == "pointer_type":
            return Pointer(self.type(_first_named(node)))
        if kind == "slice_type":
            return Array(elem=self.type(node.child_by_field_name("element")))
        if kind == "array_type":
            return Array(
                elem=self.type(node.child_by_field_name("element")),
                length=self.text(node.child_by_field_name("length")),
            )
        if kind == "implicit_length_array_type":
            return Array(elem=self.type(node.child_by_field_name("element")), length="...")
        if kind == "map_type":
            return Map(
                key=self.type(node.child_by_field_name("key")),
                value=self.type(node.child_by_field_name("value")),
            )
        if kind == "channel_type":
            direction = "".join(child.type for child in node.children if not child.is_named)
            return Channel(elem=self.type(node.child_by_field_name("value")), direction=direction or "chan")
        if kind == "function_type":
            return self.signature(node)
        if kind == "interface_type":
            return self.interface_body(node)
        if kind == "struct_type":
            return AnonymousStruct(fields=self.struct_fields(node))
        if kind == "parenthesized_type":
            return Parenthesized(self.type(_first_named(node)))
        return Opaque(self.text(node))

    def interface_body(self, node: Node) -> AnonymousInterface:
        methods: List[MethodSpec] = []
        embeds: List[TypeExpr] = []
        for child in _interface_elements(node):
            if child.type in _METHOD_NODES:
                name = self.text(child.child_by_field_name("name"))
                methods.append(MethodSpec(name=name, func=self.signature(child)))
            elif child.type in {"type_elem", "constraint_elem"}:
                embeds.extend(self.type(part) for part in child.named_children if part.type != "comment")
            elif child.type == "interface_type_name":
                embeds.append(self.type(_first_named(child)))
            elif child.type != "comment":
                embeds.append(self.type(child))
        return AnonymousInterface(methods=tuple(methods), embeds=tuple(embeds))

    def struct_fields(self, node: Node) -> Tuple[FieldDecl, ...]:
        fields: List[FieldDecl] = []
        for body in node.named_children:
            if body.type != "field_declaration_list":
                continue
            for child in body.named_children:
                if child.type != "field_declaration":
                    continue
                names = tuple(self.text(name) for name in child.children_by_field_name("name"))
                field_type = self.type(child.child_by_field_name("type"))
                if not names and any(token.type == "*" for token in child.children):
                    field_type = Pointer(field_type)
                fields.append(FieldDecl(names=names, type=field_type))
        return tuple(fields)


def _interface_elements(node: Node) -> Iterator[Node]:
    for child in node.named_children:
        if child.type == "method_spec_list":
            yield from child.named_children
        else:
            yield child


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _base_type_name(expr: TypeExpr) -> Tuple[str, str]:
    """Strip pointers, parentheses and type arguments off a receiver type."""
    while isinstance(expr, (Pointer, Parenthesized)):
        expr = expr.elem if isinstance(expr, Pointer) else expr.inner
    if isinstance(expr, Named):
        return "", expr.name
    if isinstance(expr, Qualified):
        return expr.alias, expr.name
    if isinstance(expr, Opaque) and "[" in expr.text:
        return "", expr.text.split("[", 1)[0].strip()
    return "", ""


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "`"}:
        return value[1:-1]
    return value


__all__ = ["GO_LANGUAGE", "GoParseError", "GoSourceParser"]
