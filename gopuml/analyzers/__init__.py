"""Go source analysis: parsing, symbol tables, resolution and inference."""

from __future__ import annotations

from .context import AnalysisContext, FileScope
from .imports import ImportBindingResolver, PackageLocator, read_module_path
from .model_builder import ModelBuilder, SymbolModel
from .symbols import EntityTable, PackageNameCache
from .tree_sitter import GoParseError, GoSourceParser
from .types import TypeReferenceResolver

__all__ = [
    "AnalysisContext",
    "EntityTable",
    "FileScope",
    "GoParseError",
    "GoSourceParser",
    "ImportBindingResolver",
    "ModelBuilder",
    "PackageLocator",
    "PackageNameCache",
    "SymbolModel",
    "TypeReferenceResolver",
    "read_module_path",
]
