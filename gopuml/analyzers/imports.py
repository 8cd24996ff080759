"""Package path mapping and per-file import binding."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Set

from .syntax import GoFile
from .tree_sitter import GoParseError, GoSourceParser
from ..logging import get_logger
from ..models import ImportBinding

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .context import AnalysisContext

_MODULE_LINE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)

logger = get_logger("imports")


def read_module_path(root: Path) -> Optional[str]:
    """Return the module path declared by `root/go.mod`, if any."""
    go_mod = root / "go.mod"
    try:
        text = go_mod.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    match = _MODULE_LINE.search(text)
    if not match:
        return None
    return match.group(1).strip('"')


class PackageLocator:
    """Maps files to canonical package paths and package paths back to directories.

    Lookup order is vendor root, then primary root (the GOPATH `src`
    equivalent), then the module declared by `go.mod` at the source root.
    """

    def __init__(
        self,
        source_root: Path,
        *,
        primary_root: Optional[Path] = None,
        vendor_root: Optional[Path] = None,
        module_path: Optional[str] = None,
    ) -> None:
        self.source_root = source_root
        self.primary_root = primary_root
        self.vendor_root = vendor_root
        self.module_path = module_path

    def package_path_for(self, file_path: Path | str) -> str:
        directory = Path(file_path).parent
        if self.vendor_root is not None and directory.is_relative_to(self.vendor_root):
            return _relative(directory, self.vendor_root)
        if self.primary_root is not None and directory.is_relative_to(self.primary_root):
            return _relative(directory, self.primary_root)
        if self.module_path and directory.is_relative_to(self.source_root):
            rel = _relative(directory, self.source_root)
            return f"{self.module_path}/{rel}" if rel else self.module_path
        return ""

    def candidate_dirs(self, package_path: str) -> Iterator[Path]:
        if self.vendor_root is not None:
            yield self.vendor_root / package_path
        if self.primary_root is not None:
            yield self.primary_root / package_path
        if self.module_path:
            if package_path == self.module_path:
                yield self.source_root
            elif package_path.startswith(f"{self.module_path}/"):
                yield self.source_root / package_path[len(self.module_path) + 1 :]

    def find_package_name(self, package_path: str, parser: GoSourceParser) -> str:
        """Look in the package's directory and read one file's package clause."""
        for directory in self.candidate_dirs(package_path):
            if not directory.is_dir():
                continue
            for candidate in sorted(directory.glob("*.go")):
                if candidate.name.endswith("_test.go"):
                    continue
                try:
                    return parser.parse_package_name(candidate)
                except GoParseError as exc:
                    logger.debug("Package name lookup skipped %s: %s", candidate, exc.reason)
        return ""


def _relative(directory: Path, root: Path) -> str:
    rel = directory.relative_to(root).as_posix()
    return "" if rel == "." else rel


class ImportBindingResolver:
    """Builds the alias to package path table for one file."""

    def __init__(self, context: "AnalysisContext") -> None:
        self._context = context
        self._missing: Set[str] = set()

    def bind(self, go_file: GoFile) -> List[ImportBinding]:
        bindings: List[ImportBinding] = []
        for spec in go_file.imports:
            if spec.alias is not None:
                alias = spec.alias
            else:
                alias = self.package_name(spec.path, go_file.path)
            logger.debug("file=%s import=%s alias=%s", go_file.path, spec.path, alias)
            bindings.append(ImportBinding(alias=alias, package_path=spec.path))
        return bindings

    def package_name(self, package_path: str, file_path: Optional[str] = None) -> str:
        """Return the package identifier for an import path, probing on a cache miss."""
        context = self._context
        cached = context.cache.get(package_path)
        if cached is not None:
            return cached
        if package_path in self._missing:
            return ""
        name = context.locator.find_package_name(package_path, context.parser)
        if not name:
            self._missing.add(package_path)
            context.report(
                "unknown-package",
                f"Cannot determine package name for import {package_path}",
                file_path,
            )
            return ""
        context.cache.put(package_path, name)
        return name


__all__ = ["ImportBindingResolver", "PackageLocator", "read_module_path"]
