"""Diagram rendering and document update helpers."""

from .markers import TaggedRegionUpdater, UpdateResult
from .plantuml import PlantUMLRenderer, VisibilityFilter
from .render import RenderCommand, RenderResult

__all__ = [
    "PlantUMLRenderer",
    "RenderCommand",
    "RenderResult",
    "TaggedRegionUpdater",
    "UpdateResult",
    "VisibilityFilter",
]
