"""Configuration loading for gopuml (.gopuml.yml)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".gopuml.yml"
DEFAULT_OUTPUT = "puml.txt"


class ConfigError(RuntimeError):
    """Raised when the configuration is missing, unreadable or inconsistent."""


@dataclass
class FileFilterConfig:
    """Filename allow/deny lists; entries match with or without the `.go` suffix."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)


@dataclass
class TypeFilterConfig:
    """Render-time type name allow/deny lists."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)


@dataclass
class RenderConfig:
    """External renderer invoked on the written document."""

    command: List[str] = field(default_factory=list)


@dataclass
class AnalysisConfig:
    """Settings for one analysis run."""

    source_root: Path
    primary_root: Optional[Path] = None
    vendor_root: Optional[Path] = None
    exclude_dirs: List[Path] = field(default_factory=list)
    files: FileFilterConfig = field(default_factory=FileFilterConfig)
    types: TypeFilterConfig = field(default_factory=TypeFilterConfig)
    exclude_implements: List[str] = field(default_factory=list)
    hide_paths: List[str] = field(default_factory=list)
    output: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT))
    tag: Optional[str] = None
    render: RenderConfig = field(default_factory=RenderConfig)

    @property
    def effective_vendor_root(self) -> Path:
        return self.vendor_root if self.vendor_root is not None else self.source_root / "vendor"

    def validate(self) -> "AnalysisConfig":
        """Check paths before any traversal starts. Raises ConfigError."""
        if not self.source_root.exists():
            raise ConfigError(f"Code directory not found: {self.source_root}")
        if not self.source_root.is_dir():
            raise ConfigError(f"Code directory is not a directory: {self.source_root}")

        if self.primary_root is not None:
            if not self.primary_root.is_dir():
                raise ConfigError(f"Primary source root not found: {self.primary_root}")
            has_module = (self.source_root / "go.mod").exists()
            if not has_module and not self.source_root.is_relative_to(self.primary_root):
                raise ConfigError(
                    f"Code directory {self.source_root} must be inside the primary "
                    f"source root {self.primary_root}"
                )

        for directory in self.exclude_dirs:
            if not directory.is_relative_to(self.source_root):
                raise ConfigError(
                    f"Excluded directory {directory} must be inside the code directory "
                    f"{self.source_root}"
                )

        if self.tag is not None and ("\n" in self.tag or "\r" in self.tag):
            raise ConfigError("Output tag must be a single line")
        return self


def load_config(config_path: Path) -> AnalysisConfig:
    """Load configuration from disk; defaults apply when the file is missing."""
    config_file = _resolve_config_path(config_path)
    base = config_file.parent.resolve()

    if not config_file.exists():
        return AnalysisConfig(source_root=base)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_root = _as_path(data.get("source_root"), base) or base
    files_data = _as_dict(data.get("files"))
    types_data = _as_dict(data.get("types"))
    render_data = _as_dict(data.get("render"))

    return AnalysisConfig(
        source_root=source_root,
        primary_root=_as_path(data.get("primary_root"), base),
        vendor_root=_as_path(data.get("vendor_root"), base),
        exclude_dirs=[
            resolve_path(item, source_root) for item in _as_str_list(data.get("exclude_dirs"))
        ],
        files=FileFilterConfig(
            include=_as_str_list(files_data.get("include")),
            exclude=_as_str_list(files_data.get("exclude")),
        ),
        types=TypeFilterConfig(
            include=_as_str_list(types_data.get("include")),
            exclude=_as_str_list(types_data.get("exclude")),
        ),
        exclude_implements=_as_str_list(data.get("exclude_implements")),
        hide_paths=[
            resolve_hide_path(item, source_root) for item in _as_str_list(data.get("hide_paths"))
        ],
        output=_as_path(data.get("output"), base) or base / DEFAULT_OUTPUT,
        tag=_as_str(data.get("tag")),
        render=RenderConfig(command=_as_command(render_data.get("command"))),
    )


def resolve_path(value: str | Path, base: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def resolve_hide_path(value: str, base: Path) -> str:
    """Normalise a hide-path entry for `VisibilityFilter`.

    Entries naming a path, or an existing directory below `base`, become
    absolute directory prefixes. Anything else stays a bare file name.
    """
    resolved = resolve_path(value, base)
    if "/" in value or resolved.is_dir():
        return str(resolved)
    return value


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(value: Any, base: Path) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return resolve_path(text, base)


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_command(value: Any) -> List[str]:
    if isinstance(value, str):
        return shlex.split(value)
    return _as_str_list(value)


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_OUTPUT",
    "FileFilterConfig",
    "RenderConfig",
    "TypeFilterConfig",
    "load_config",
    "resolve_hide_path",
    "resolve_path",
]
