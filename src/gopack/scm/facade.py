"""
Backend selection for a dependency.

Order: explicit override, then the marker directory found on disk (walking
up from the checkout), then the backend implied by the import's host, and
finally ``go get``.
"""

from pathlib import Path
from typing import Dict, Optional, Type

from gopack.logging_config import logger
from gopack.paths import GopackPaths
from .base import ScmBackend
from .backends import BzrBackend, GitBackend, GoGetBackend, HgBackend, SvnBackend

BACKENDS: Dict[str, Type[ScmBackend]] = {
    GitBackend.name: GitBackend,
    HgBackend.name: HgBackend,
    SvnBackend.name: SvnBackend,
    BzrBackend.name: BzrBackend,
}


def scm_in_path(path: Path, paths: Optional[GopackPaths] = None) -> Optional[ScmBackend]:
    """Backend whose marker directory sits directly in ``path``."""
    paths = paths or GopackPaths(path)
    for backend_cls in BACKENDS.values():
        if (Path(path) / backend_cls.marker).is_dir():
            return backend_cls(paths)
    return None


def scm_in_source(dep, paths: GopackPaths) -> Optional[ScmBackend]:
    """
    Walk up from the dep's checkout, one level per root segment, until a
    marker directory is found or the base of the import is reached.
    """
    current = dep.src(paths)
    for _ in dep.root.split("/"):
        backend = scm_in_path(current, paths)
        if backend is not None:
            return backend
        current = current.parent
    return None


def resolve_backend(dep, paths: GopackPaths) -> ScmBackend:
    if dep.scm in BACKENDS:
        return BACKENDS[dep.scm](paths)

    detected = scm_in_source(dep, paths)
    if dep.scm == "go":
        return GoGetBackend(paths, dep.import_path, detected)
    if detected is not None:
        return detected

    default = dep.default_scm
    if default in BACKENDS:
        logger.debug(f"No checkout found for {dep.import_path}, using {default} from its host")
        return BACKENDS[default](paths)

    return GoGetBackend(paths, dep.import_path)
