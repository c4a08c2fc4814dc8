"""
Public API for dependency resolution.

Facade tying the declaration file, the import graph, validation, the
transitive fetch and vendoring together.
"""

from pathlib import Path
from typing import Callable, Optional, Tuple

from gopack.exceptions import ValidationFailed
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.resolution.config import Config
from gopack.resolution.graph import ImportGraph
from gopack.resolution.model import Dependencies
from gopack.resolution.orchestrator import BackendResolver, FetchOrchestrator
from gopack.resolution.validation import validate
from gopack.resolution.vendor import vendor_dependencies
from gopack.schemas import FetchReport, ProjectStats
from gopack.scm import resolve_backend
from gopack.tracing import trace
from gopack.user_config import UserConfig


class Resolver:
    """
    One resolution run over a project root.

    Holds the shared import graph and hands out orchestrators bound to it.
    """

    def __init__(
        self,
        paths: GopackPaths,
        backend_resolver: BackendResolver = resolve_backend,
        user_config: Optional[UserConfig] = None,
    ):
        self.paths = paths
        self.backend_resolver = backend_resolver
        self.user_config = user_config or UserConfig(paths.project_root)
        self.import_graph = ImportGraph()
        self.config: Optional[Config] = None
        self.dependencies: Optional[Dependencies] = None

    def orchestrator(self, import_graph: Optional[ImportGraph] = None) -> FetchOrchestrator:
        orchestrator = FetchOrchestrator(
            self.paths,
            import_graph or self.import_graph,
            backend_resolver=self.backend_resolver,
            max_workers=self.user_config.max_workers,
        )
        if self.config is not None and self.config.repository:
            orchestrator.mark_resolved(self.config.repository)
        return orchestrator

    def load_configuration(self) -> Tuple[Config, Optional[Dependencies]]:
        """Parse the declaration file and build the top-level resolution set."""
        self.config = Config.from_dir(self.paths.project_root, paths=self.paths)
        self.config.init_repo(self.import_graph)
        self.dependencies = self.config.load_dependency_model(self.import_graph)
        return self.config, self.dependencies

    @trace
    def load_dependencies(
        self,
        project: ProjectStats,
        on_resolve: Optional[Callable[[], None]] = None,
    ) -> Tuple[Config, Optional[Dependencies]]:
        """
        Load, validate and fetch.

        Vendored projects skip validation and the network entirely.
        ``on_resolve`` runs once it is clear that resolution will happen.
        """
        config, dependencies = self.load_configuration()
        if dependencies is None or config.vendor:
            if config.vendor:
                logger.debug("Dependencies are vendored, skipping network resolution")
            return config, dependencies

        if on_resolve is not None:
            on_resolve()
        errors = validate(dependencies, project)
        if errors:
            raise ValidationFailed(errors)

        self.install(dependencies)
        config.write_checksum()
        return config, dependencies

    def install(self, dependencies: Dependencies) -> FetchReport:
        report = self.orchestrator().fetch(dependencies)
        logger.info(
            f"{len(report.fetched)} fetched, {len(report.pinned)} pinned, "
            f"{len(report.pin_failures)} pin failures"
        )
        return report

    def vendor(self) -> Path:
        if self.config is None:
            self.load_configuration()
        if self.dependencies is None:
            self.dependencies = Dependencies(self.import_graph)
        return vendor_dependencies(self.config, self.dependencies, self.orchestrator)
