"""
Repository backends (git, hg, svn, bzr, go get) behind one interface.
"""

from .base import ScmBackend, child_env, run_command
from .backends import BzrBackend, GitBackend, GoGetBackend, HgBackend, SvnBackend
from .facade import BACKENDS, resolve_backend, scm_in_path, scm_in_source

__all__ = [
    "ScmBackend",
    "child_env",
    "run_command",
    "GitBackend",
    "HgBackend",
    "SvnBackend",
    "BzrBackend",
    "GoGetBackend",
    "BACKENDS",
    "resolve_backend",
    "scm_in_path",
    "scm_in_source",
]
