"""
Vendoring: freeze the resolved tree, and on later runs re-fetch only what
changed since the lock snapshot.
"""

import os
import shutil
from pathlib import Path
from typing import Callable, List

from gopack.exceptions import VendorError
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.resolution.config import Config
from gopack.resolution.graph import ImportGraph
from gopack.resolution.model import Dep, Dependencies
from gopack.resolution.orchestrator import FetchOrchestrator
from gopack.schemas import FetchReport
from gopack.scm import ScmBackend, scm_in_path
from gopack.tracing import trace

OrchestratorFactory = Callable[[ImportGraph], FetchOrchestrator]


def load_lock(paths: GopackPaths) -> Dependencies:
    """Load the lock snapshot into its own, isolated graph."""
    if not paths.lock_file.is_file():
        raise VendorError(
            f"Lock file {paths.lock_file} is missing; the project is marked vendored but was never vendored here."
        )
    lock_config = Config.from_file(paths.lock_file, paths=paths)
    lock_deps = lock_config.load_dependency_model(ImportGraph(), modified=False)
    if lock_deps is None:
        lock_deps = Dependencies(ImportGraph())
    return lock_deps


def diff_against_lock(dependencies: Dependencies, lock_deps: Dependencies) -> List[Dep]:
    """
    Live deps that are new or pinned differently compared with the lock.

    Returned deps are marked for fetching; the rest are left untouched.
    """
    changed: List[Dep] = []
    for dep in dependencies:
        node = lock_deps.import_graph.search(dep.import_path)
        if node is None or dep.differs_from(node.dependency):
            dep.needs_fetch = True
            changed.append(dep)
    return changed


@trace
def update_vendored_dependencies(
    config: Config,
    dependencies: Dependencies,
    orchestrator_factory: OrchestratorFactory,
) -> FetchReport:
    lock_deps = load_lock(config.paths)
    changed = diff_against_lock(dependencies, lock_deps)
    if not changed:
        logger.info("Vendored dependencies already match the lock")
        return FetchReport()

    logger.info(f"Re-vendoring {len(changed)} changed dependencies: {', '.join(d.import_path for d in changed)}")
    orchestrator = orchestrator_factory(dependencies.import_graph)
    return orchestrator.fetch(changed, clean=True)


def clean_scms(paths: GopackPaths) -> List[Path]:
    """
    Strip scm metadata and build output from the vendored sources: ``bin``
    directories and anything whose name starts with ``.`` or ``_``.
    """
    removed: List[Path] = []
    src_dir = paths.vendor_src_dir
    if not src_dir.is_dir():
        return removed

    for root, dirs, files in os.walk(src_dir):
        root_path = Path(root)
        for name in list(dirs):
            if name == "bin" or name[0] in "._":
                target = root_path / name
                dirs.remove(name)
                if target.is_symlink():
                    continue
                try:
                    shutil.rmtree(target)
                except OSError as e:
                    raise VendorError(f"Unable to clean dependency path: {target}") from e
                removed.append(target)
        for name in files:
            if name == "bin" or name[0] in "._":
                target = root_path / name
                try:
                    target.unlink()
                except OSError as e:
                    raise VendorError(f"Unable to clean dependency path: {target}") from e
                removed.append(target)

    return removed


def project_backend(paths: GopackPaths) -> ScmBackend:
    backend = scm_in_path(paths.project_root, paths)
    if backend is None:
        raise VendorError(f"Unknown scm at {paths.project_root}")
    return backend


@trace
def vendor_dependencies(
    config: Config,
    dependencies: Dependencies,
    orchestrator_factory: OrchestratorFactory,
) -> Path:
    """
    Freeze the resolved tree into the workspace.

    Returns the lock file path.
    """
    pristine = not config.vendor
    if config.vendor:
        update_vendored_dependencies(config, dependencies, orchestrator_factory)

    backend = project_backend(config.paths)

    removed = clean_scms(config.paths)
    logger.debug(f"Removed {len(removed)} scm/build entries from vendored sources")

    if pristine:
        backend.write_ignore_patterns(config.paths.project_root)

    return config.write_vendor()
