"""Go source file enumeration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import AnalysisConfig
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "node_modules",
    "testdata",
}

_SOURCE_SUFFIX = ".go"
_TEST_SUFFIX = "_test.go"

logger = get_logger("scanner")


def _matches_any_prefix(path: str, prefixes: Sequence[str]) -> bool:
    for prefix in prefixes:
        if path == prefix or path.startswith(f"{prefix}/"):
            return True
    return False


def _matches_any_filename(path: str, names: Sequence[str]) -> bool:
    """Suffix match on the path, with or without the `.go` extension."""
    for name in names:
        if path.endswith(name + _SOURCE_SUFFIX) or path.endswith(name):
            return True
    return False


class GoFileScanner:
    """Walks a source root and yields analysable Go files in a stable order.

    Each call to :meth:`iter_files` starts a fresh walk, so the same scanner
    can feed both analysis stages.
    """

    def __init__(
        self,
        root: Path,
        *,
        exclude_dirs: Sequence[Path] = (),
        include_files: Sequence[str] = (),
        exclude_files: Sequence[str] = (),
    ) -> None:
        self.root = root
        self._exclude_dirs: List[str] = [path.as_posix().rstrip("/") for path in exclude_dirs]
        self._include_files = list(include_files)
        self._exclude_files = list(exclude_files)

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> "GoFileScanner":
        return cls(
            config.source_root,
            exclude_dirs=config.exclude_dirs,
            include_files=config.files.include,
            exclude_files=config.files.exclude,
        )

    def iter_files(self) -> Iterator[Path]:
        if not self.root.is_dir():
            raise NotADirectoryError(f"Source root is not a directory: {self.root}")

        for dirpath, dirnames, filenames in os.walk(self.root):
            current_dir = Path(dirpath)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _EXCLUDED_DIRS
                and not name.startswith(".")
                and not _matches_any_prefix((current_dir / name).as_posix(), self._exclude_dirs)
            )
            for filename in sorted(filenames):
                path = current_dir / filename
                if self.is_candidate(path):
                    yield path

    def is_candidate(self, path: Path) -> bool:
        """Apply suffix, directory and filename rules to a single path."""
        name = path.name
        if not name.endswith(_SOURCE_SUFFIX) or name.endswith(_TEST_SUFFIX):
            return False
        posix = path.as_posix()
        if _matches_any_prefix(posix, self._exclude_dirs):
            return False
        if self._exclude_files and _matches_any_filename(posix, self._exclude_files):
            logger.debug("Excluded by filename rule: %s", posix)
            return False
        if self._include_files and not _matches_any_filename(posix, self._include_files):
            return False
        return True


__all__ = ["GoFileScanner"]
