"""
Import graph: a prefix tree over the segments of canonical repository roots.

Each repository root ends in exactly one leaf holding its dependency, so any
sub-package import of that repository resolves to the same pinned entry.
"""

import re
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from gopack.logging_config import logger


@dataclass(frozen=True)
class HostPattern:
    """A known repository-hosting URL shape and the backend it implies."""

    name: str
    regex: "re.Pattern[str]"
    vcs: Optional[str] = None


# Same shapes the go tool uses to find a repository root.
HOST_PATTERNS: List[HostPattern] = [
    HostPattern(
        "googlecode",
        re.compile(r"^(?P<root>code\.google\.com/p/(?P<project>[a-z0-9\-]+)(\.(?P<subrepo>[a-z0-9\-]+))?)(/[A-Za-z0-9_.\-]+)*$"),
    ),
    HostPattern(
        "github",
        re.compile(r"^(?P<root>github\.com/[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+)(/[A-Za-z0-9_.\-]+)*$"),
        vcs="git",
    ),
    HostPattern(
        "bitbucket",
        re.compile(r"^(?P<root>bitbucket\.org/(?P<bitname>[A-Za-z0-9_.\-]+/[A-Za-z0-9_.\-]+))(/[A-Za-z0-9_.\-]+)*$"),
    ),
    HostPattern(
        "launchpad",
        re.compile(
            r"^(?P<root>launchpad\.net/((?P<project>[A-Za-z0-9_.\-]+)(?P<series>/[A-Za-z0-9_.\-]+)?"
            r"|~[A-Za-z0-9_.\-]+/(\+junk|[A-Za-z0-9_.\-]+)/[A-Za-z0-9_.\-]+))(/[A-Za-z0-9_.\-]+)*$"
        ),
        vcs="bzr",
    ),
    HostPattern(
        "generic",
        re.compile(
            r"^(?P<root>(?P<repo>([a-z0-9.\-]+\.)+[a-z0-9.\-]+(:[0-9]+)?/[A-Za-z0-9_.\-/]*?)"
            r"\.(?P<vcs>bzr|git|hg|svn))(/[A-Za-z0-9_.\-]+)*$"
        ),
    ),
]


def match_host(import_path: str) -> Optional[Tuple[HostPattern, "re.Match[str]"]]:
    for pattern in HOST_PATTERNS:
        match = pattern.regex.match(import_path)
        if match is not None:
            return pattern, match
    return None


def canonical_root(import_path: str) -> str:
    """
    Strip sub-package suffixes from an import path.

    ``github.com/d2fn/gopack/graph`` -> ``github.com/d2fn/gopack``.
    Unrecognized hosts are returned as-is.
    """
    found = match_host(import_path)
    if found is None:
        return import_path
    return found[1].group("root")


def default_vcs(import_path: str) -> Optional[str]:
    """Backend implied by the hosting shape, or None when the host doesn't tell."""
    found = match_host(import_path)
    if found is None:
        return None
    pattern, match = found
    if pattern.name == "generic":
        return match.group("vcs")
    return pattern.vcs


def import_parts(import_path: str) -> List[str]:
    return canonical_root(import_path).split("/")


@dataclass
class Node:
    key: str
    dependency: Optional[object] = None
    leaf: bool = False
    nodes: Dict[str, "Node"] = field(default_factory=dict)

    def pre_order_visit(self, fn: Callable[["Node", int], None], depth: int) -> None:
        for key in sorted(self.nodes):
            node = self.nodes[key]
            fn(node, depth)
            if not node.leaf:
                node.pre_order_visit(fn, depth + 1)


class ImportGraph:
    """
    Shared resolution view for one run.

    ``insert`` and ``insert_if_valid`` are serialized by a lock. ``search``
    and ``valid`` read without locking: callers must not search a subtree
    while inserts into that same subtree are still in flight.
    """

    def __init__(self):
        self.nodes: Dict[str, Node] = {}
        self._lock = threading.Lock()

    def insert(self, dependency) -> None:
        with self._lock:
            self._insert(dependency)

    def insert_if_valid(self, dependency) -> Tuple[Optional[Node], bool]:
        """
        Check and insert in one step.

        An absent root is inserted; a compatible existing entry is kept as
        is; an incompatible one is returned untouched with ``False``.
        """
        with self._lock:
            node, ok = self.valid(dependency)
            if node is None:
                self._insert(dependency)
            return node, ok

    def _insert(self, dependency) -> None:
        nodes = self.nodes
        node = None
        for key in import_parts(dependency.import_path):
            node = nodes.get(key)
            if node is None:
                node = Node(key=key)
                nodes[key] = node
            nodes = node.nodes
        if node.leaf and node.dependency is not dependency:
            logger.debug(f"Replacing {node.dependency} with {dependency} in import graph")
        node.dependency = dependency
        node.leaf = True

    def search(self, import_path: str) -> Optional[Node]:
        nodes = self.nodes
        for key in import_path.split("/"):
            node = nodes.get(key)
            if node is None:
                return None
            if node.leaf:
                return node
            nodes = node.nodes
        return None

    def valid(self, dependency) -> Tuple[Optional[Node], bool]:
        """
        Check a candidate against what is already resolved for its root.

        Returns the existing node (if any) and whether the candidate is
        compatible with it.
        """
        node = self.search(canonical_root(dependency.import_path))
        if node is None:
            return None, True
        return node, node.dependency.satisfies(dependency)

    def pre_order_visit(self, fn: Callable[[Node, int], None]) -> None:
        for key in sorted(self.nodes):
            node = self.nodes[key]
            fn(node, 0)
            if not node.leaf:
                node.pre_order_visit(fn, 1)

    def dependencies(self) -> List[object]:
        found: List[object] = []

        def collect(node: Node, depth: int) -> None:
            if node.leaf:
                found.append(node.dependency)

        self.pre_order_visit(collect)
        return found
