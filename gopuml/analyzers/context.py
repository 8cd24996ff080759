"""State owned by a single analysis run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .imports import PackageLocator
from .symbols import EntityTable, PackageNameCache
from .tree_sitter import GoSourceParser
from ..logging import get_logger
from ..models import Diagnostic, ImportBinding, SourceLocation


class AnalysisContext:
    """Explicit replacement for process-wide caches.

    One context is created per run; the entity table and package cache it
    owns only ever grow, and diagnostics accumulate for the run summary.
    """

    def __init__(
        self,
        locator: PackageLocator,
        *,
        parser: Optional[GoSourceParser] = None,
        cache: Optional[PackageNameCache] = None,
        table: Optional[EntityTable] = None,
    ) -> None:
        self.locator = locator
        self.parser = parser or GoSourceParser()
        self.cache = cache or PackageNameCache()
        self.table = table or EntityTable()
        self.diagnostics: List[Diagnostic] = []
        self.logger = get_logger("analysis")

    def report(
        self,
        kind: str,
        message: str,
        file_path: Optional[str] = None,
        *,
        level: int = logging.WARNING,
    ) -> None:
        """Log a degraded result and keep it for the run summary."""
        self.diagnostics.append(Diagnostic(kind=kind, message=message, file_path=file_path))
        if file_path:
            self.logger.log(level, "%s (file=%s)", message, file_path)
        else:
            self.logger.log(level, "%s", message)


@dataclass
class FileScope:
    """Per-file resolution state, rebuilt for every file in stage two."""

    location: SourceLocation
    bindings: List[ImportBinding] = field(default_factory=list)

    @property
    def package_path(self) -> str:
        return self.location.package_path

    @property
    def file_path(self) -> str:
        return self.location.file_path

    @property
    def import_paths(self) -> Set[str]:
        return {binding.package_path for binding in self.bindings}

    def wildcard_paths(self) -> List[str]:
        return [binding.package_path for binding in self.bindings if binding.is_wildcard]

    def paths_for_alias(self, alias: str) -> List[str]:
        return [binding.package_path for binding in self.bindings if binding.alias == alias]


__all__ = ["AnalysisContext", "FileScope"]
