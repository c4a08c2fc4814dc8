"""
gopack - Go dependency resolution and vendoring

Reads gopack.config, resolves the transitive dependency tree into
.gopack/vendor and optionally freezes it into the repository.
"""

__version__ = "0.20.dev"

# Core exports
from gopack.resolution import Config, Dep, Dependencies, ImportGraph, Resolver
from gopack.scanner import analyze_source_tree
from gopack.schemas import ProjectError, ProjectStats

__all__ = [
    "__version__",
    "Config",
    "Dep",
    "Dependencies",
    "ImportGraph",
    "Resolver",
    "analyze_source_tree",
    "ProjectError",
    "ProjectStats",
]
