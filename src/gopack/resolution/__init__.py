"""
Dependency resolution: import graph, dependency model, checksum gate,
transitive fetch and vendoring.
"""

from .graph import ImportGraph, Node, canonical_root
from .model import Dep, Dependencies
from .config import Config
from .orchestrator import FetchOrchestrator
from .validation import validate
from .vendor import clean_scms, diff_against_lock, vendor_dependencies
from .facade import Resolver

__all__ = [
    "ImportGraph",
    "Node",
    "canonical_root",
    "Dep",
    "Dependencies",
    "Config",
    "FetchOrchestrator",
    "validate",
    "clean_scms",
    "diff_against_lock",
    "vendor_dependencies",
    "Resolver",
]
