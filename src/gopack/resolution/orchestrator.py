"""
Transitive fetch: bring every dependency's checkout up to date, pin it, and
recurse into the declaration files the fetched code ships.
"""

import shutil
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Optional, Set

from gopack.exceptions import ScmError
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.resolution.config import Config
from gopack.resolution.graph import ImportGraph, canonical_root
from gopack.resolution.model import Dep, Dependencies
from gopack.scanner import analyze_source_tree
from gopack.schemas import FetchReport, ProjectStats
from gopack.scm import ScmBackend, resolve_backend
from gopack.tracing import trace

BackendResolver = Callable[[Dep, GopackPaths], ScmBackend]
SourceAnalyzer = Callable[[Path], ProjectStats]


class FetchOrchestrator:
    """
    Walks resolution sets and fetches each dependency.

    Each dependency is one unit of work on a per-level thread pool; a level
    returns only after all of its units (and their nested levels) finish.
    Nested sets are loaded into the same import graph.

    A repository root is expanded at most once per orchestrator, which also
    stops two repositories that declare each other from recursing forever.
    """

    def __init__(
        self,
        paths: GopackPaths,
        import_graph: ImportGraph,
        backend_resolver: BackendResolver = resolve_backend,
        max_workers: Optional[int] = None,
        analyzer: SourceAnalyzer = analyze_source_tree,
    ):
        self.paths = paths
        self.import_graph = import_graph
        self.backend_resolver = backend_resolver
        self.max_workers = max_workers
        self.analyzer = analyzer
        self.report = FetchReport()
        self._expanded: Set[str] = set()
        self._lock = threading.Lock()

    def mark_resolved(self, import_path: str) -> None:
        """Never expand this root (the project itself, for instance)."""
        with self._lock:
            self._expanded.add(canonical_root(import_path))

    @trace
    def fetch(self, dependencies: Iterable[Dep], clean: bool = False) -> FetchReport:
        """
        Fetch, pin and recurse over ``dependencies``.

        In clean mode each dependency is downloaded afresh and vendored
        sources it no longer imports are removed.
        """
        self._fetch_level(list(dependencies), clean)
        return self.report

    def _fetch_level(self, deps: list, clean: bool) -> None:
        if not deps:
            return
        workers = len(deps)
        if self.max_workers:
            workers = min(workers, self.max_workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gopack-fetch") as executor:
            futures = [executor.submit(self._visit, dep, clean) for dep in deps]

        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            raise errors[0]

    def _claim(self, dep: Dep) -> bool:
        with self._lock:
            if dep.root in self._expanded:
                return False
            self._expanded.add(dep.root)
            return True

    def _record(self, bucket: str, import_path: str) -> None:
        with self._lock:
            getattr(self.report, bucket).append(import_path)

    def _visit(self, dep: Dep, clean: bool) -> None:
        if not self._claim(dep):
            logger.debug(f"{dep.root} already resolved in this run, skipping {dep.import_path}")
            self._record("skipped", dep.import_path)
            return

        logger.info(f"updating {dep.import_path}")
        src = dep.src(self.paths)

        previous_usage: Set[str] = set()
        if clean:
            previous_usage = self._remote_usage(dep, src)
            self._clean_src(dep, src)

        fetched = False
        if dep.needs_fetch or not src.exists():
            self._download(dep, src)
            fetched = True
            self._record("fetched", dep.import_path)

        if dep.pinned:
            self._pin(dep, src)

        if clean:
            self._remove_stale(dep, previous_usage - self._remote_usage(dep, src))

        if fetched:
            nested = self._load_nested(dep, src)
            if nested is not None:
                self._fetch_level(list(nested), clean)

    def _download(self, dep: Dep, src: Path) -> None:
        backend = self.backend_resolver(dep, self.paths)
        if backend.is_checkout(src):
            logger.debug(f"fetching updates for {dep.import_path} with {backend.name}")
            backend.fetch_updates(src)
        else:
            logger.info(f"downloading {dep.resolved_source}")
            backend.clone(dep.resolved_source, src)

    def _pin(self, dep: Dep, src: Path) -> None:
        logger.info(f"pointing {dep.import_path} at {dep.checkout_type} {dep.checkout_spec}")
        try:
            backend = self.backend_resolver(dep, self.paths)
            backend.checkout(src, dep.checkout_kind, dep.checkout_spec)
        except ScmError as e:
            logger.warning(f"error checking out {dep.checkout_spec} on {dep.import_path}: {e}")
            self._record("pin_failures", dep.import_path)
            return
        self._record("pinned", dep.import_path)

    def _load_nested(self, dep: Dep, src: Path) -> Optional[Dependencies]:
        config_path = src / GopackPaths.CONFIG_NAME
        if not config_path.is_file():
            logger.debug(f"{GopackPaths.CONFIG_NAME} missing for {dep.import_path}")
            return None
        config = Config.from_file(config_path, paths=self.paths)
        return config.load_dependency_model(self.import_graph, modified=True)

    def _remote_usage(self, dep: Dep, src: Path) -> Set[str]:
        if not src.is_dir():
            return set()
        stats = self.analyzer(src)
        return {s.path for s in stats.remote_imports() if not s.test}

    def _clean_src(self, dep: Dep, src: Path) -> None:
        if not src.exists():
            return
        try:
            shutil.rmtree(src)
        except OSError as e:
            logger.warning(f"Unable to clean {dep.import_path} at {src}: {e}")

    def _remove_stale(self, dep: Dep, stale: Set[str]) -> None:
        """Best-effort removal of vendored imports the dep stopped using."""
        for import_path in sorted(stale):
            root = canonical_root(import_path)
            if root == dep.root or import_path == dep.import_path or import_path.startswith(dep.import_path + "/"):
                continue
            if self.import_graph.search(import_path) is not None:
                continue
            target = self.paths.dependency_dir(root)
            if not target.exists():
                continue
            try:
                shutil.rmtree(target)
            except OSError as e:
                logger.warning(f"Unable to clean dependency path {target}: {e}")
                continue
            logger.debug(f"removed stale vendored import {import_path}")
            self._record("removed", root)
