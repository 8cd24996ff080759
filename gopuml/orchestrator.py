"""Pipeline orchestration: scan, analyse in two stages, render, update, run renderer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .analyzers import AnalysisContext, GoSourceParser, ModelBuilder, PackageLocator, SymbolModel
from .analyzers.imports import read_module_path
from .config import AnalysisConfig
from .logging import get_logger
from .models import Diagnostic
from .postproc.markers import TaggedRegionUpdater, UpdateResult
from .postproc.plantuml import PlantUMLRenderer, VisibilityFilter
from .postproc.render import RenderCommand, RenderResult, Runner
from .repo_scanner import GoFileScanner


@dataclass
class RunOutcome:
    """Result of a full gopuml run."""

    model: SymbolModel
    document: UpdateResult
    render: Optional[RenderResult] = None

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.model.diagnostics

    @property
    def path(self) -> Path:
        return self.document.path


def build_locator(config: AnalysisConfig) -> PackageLocator:
    """Package locator for the configured roots.

    Without a primary root or a `go.mod`, package paths are taken relative to
    the parent of the source root, so the source directory's own name becomes
    the first path element.
    """
    module_path = read_module_path(config.source_root)
    primary_root = config.primary_root
    if primary_root is None and module_path is None:
        primary_root = config.source_root.parent
    return PackageLocator(
        config.source_root,
        primary_root=primary_root,
        vendor_root=config.effective_vendor_root,
        module_path=module_path,
    )


def visibility_for(config: AnalysisConfig) -> VisibilityFilter:
    return VisibilityFilter(
        include_types=list(config.types.include),
        exclude_types=list(config.types.exclude),
        exclude_implements=list(config.exclude_implements),
        hide_paths=list(config.hide_paths),
    )


class Orchestrator:
    """Coordinates the analysis and output stages for one configuration."""

    def __init__(
        self,
        parser: GoSourceParser | None = None,
        renderer: PlantUMLRenderer | None = None,
        updater: TaggedRegionUpdater | None = None,
        render_runner: Runner | None = None,
    ) -> None:
        self.parser = parser or GoSourceParser()
        self.renderer = renderer or PlantUMLRenderer()
        self.updater = updater or TaggedRegionUpdater()
        self._render_runner = render_runner
        self.logger = get_logger("orchestrator")

    def analyze(self, config: AnalysisConfig) -> SymbolModel:
        """Validate the configuration and build the resolved symbol model."""
        config.validate()
        self.logger.info("Analysing Go sources under %s", config.source_root)
        context = AnalysisContext(build_locator(config), parser=self.parser)
        scanner = GoFileScanner.from_config(config)
        model = ModelBuilder(context).build(scanner.iter_files)
        self.logger.info(
            "Resolved %d entities, %d dependencies, %d implementations from %d files",
            len(model.table),
            len(model.dependencies),
            len(model.implementations),
            len(model.files),
        )
        if model.skipped:
            self.logger.warning("Skipped %d unparsable files", len(model.skipped))
        return model

    def render(self, model: SymbolModel, config: AnalysisConfig) -> str:
        return self.renderer.render(model, visibility_for(config))

    def run(self, config: AnalysisConfig) -> RunOutcome:
        """Analyse, write the document and invoke the external renderer if configured."""
        model = self.analyze(config)
        body = self.render(model, config)
        document = self.updater.write(config.output, body, config.tag)

        render_result = None
        if config.render.command:
            command = RenderCommand(config.render.command, runner=self._render_runner)
            render_result = command.run(document.path)
            if not render_result.ok:
                self.logger.warning(
                    "Renderer exited with status %s: %s",
                    render_result.returncode,
                    render_result.error.strip(),
                )
        return RunOutcome(model=model, document=document, render=render_result)


__all__ = ["Orchestrator", "RunOutcome", "build_locator", "visibility_for"]
