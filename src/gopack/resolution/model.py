"""
Dependency model: single declared dependencies and the ordered resolution
set built from one declaration file.
"""

from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from gopack.exceptions import AmbiguousCheckoutError, DeclarationError, DependencyConflictError
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.resolution.graph import ImportGraph, Node, canonical_root, default_vcs
from gopack.resolution.versions import tags_compatible
from gopack.schemas import CheckoutKind

IMPORT_PROP = "import"
SOURCE_PROP = "source"
SCM_PROP = "scm"

KNOWN_SCMS = ("git", "hg", "svn", "bzr", "go")

CHECKOUT_PROPS = (CheckoutKind.BRANCH, CheckoutKind.COMMIT, CheckoutKind.TAG)


class Dep(BaseModel):
    """
    A declared dependency: import path plus an optional checkout selector.
    """
    import_path: str
    checkout_kind: CheckoutKind = CheckoutKind.NONE
    checkout_spec: str = ""
    source: Optional[str] = None
    scm: Optional[str] = None
    key: Optional[str] = None
    needs_fetch: bool = False

    @classmethod
    def from_declaration(cls, key: str, table: Mapping[str, Any]) -> "Dep":
        """Build a Dep from one ``[deps.<key>]`` table."""
        if not isinstance(table, Mapping):
            raise DeclarationError(key, "expected a table")

        import_path = table.get(IMPORT_PROP)
        if not isinstance(import_path, str) or not import_path:
            raise DeclarationError(key, f"`{IMPORT_PROP}` is required and must be a string")

        kinds = [kind for kind in CHECKOUT_PROPS if table.get(kind.value) is not None]
        if len(kinds) > 1:
            raise AmbiguousCheckoutError(key, import_path, [kind.value for kind in kinds])

        checkout_kind = CheckoutKind.NONE
        checkout_spec = ""
        if kinds:
            checkout_kind = kinds[0]
            checkout_spec = table[checkout_kind.value]
            if not isinstance(checkout_spec, str) or not checkout_spec:
                raise DeclarationError(key, f"`{checkout_kind.value}` must be a non-empty string")

        source = table.get(SOURCE_PROP)
        if source is not None and not isinstance(source, str):
            raise DeclarationError(key, f"`{SOURCE_PROP}` must be a string")

        scm = table.get(SCM_PROP)
        if scm is not None and scm not in KNOWN_SCMS:
            raise DeclarationError(key, f"unknown scm {scm!r}, expected one of {', '.join(KNOWN_SCMS)}")

        return cls(
            import_path=import_path,
            checkout_kind=checkout_kind,
            checkout_spec=checkout_spec,
            source=source,
            scm=scm,
            key=key,
        )

    @property
    def checkout_type(self) -> str:
        return self.checkout_kind.value

    @property
    def pinned(self) -> bool:
        return self.checkout_kind is not CheckoutKind.NONE

    @property
    def root(self) -> str:
        return canonical_root(self.import_path)

    @property
    def resolved_source(self) -> str:
        """Explicit source URL, or one derived from the repository root."""
        if self.source:
            return self.source
        return f"https://{self.root}"

    @property
    def default_scm(self) -> Optional[str]:
        return default_vcs(self.import_path)

    def src(self, paths: GopackPaths) -> Path:
        """Checkout location: the repository root, shared by its sub-packages."""
        return paths.dependency_dir(self.root)

    def satisfies(self, other: "Dep") -> bool:
        """Whether this (already resolved) dep can stand in for ``other``."""
        if self.checkout_kind is CheckoutKind.TAG and other.checkout_kind is CheckoutKind.TAG:
            return tags_compatible(self.checkout_spec, other.checkout_spec)
        return self.checkout_kind is other.checkout_kind and self.checkout_spec == other.checkout_spec

    def differs_from(self, other: "Dep") -> bool:
        return self.checkout_kind is not other.checkout_kind or self.checkout_spec != other.checkout_spec

    def mark_fetch(self, modified: bool) -> bool:
        """
        Decide whether this dep must hit the network.

        Commit and tag pins are immutable, so an unchanged declaration file
        only refreshes branch-pinned and unpinned deps.
        """
        self.needs_fetch = modified or self.checkout_kind in (CheckoutKind.NONE, CheckoutKind.BRANCH)
        return self.needs_fetch

    def __str__(self) -> str:
        if self.pinned:
            return f"import = {self.import_path}, {self.checkout_type} = {self.checkout_spec}"
        return f"import = {self.import_path}"


class Dependencies:
    """Ordered resolution set for one declaration file, bound to a shared graph."""

    def __init__(self, import_graph: ImportGraph):
        self.import_graph = import_graph
        self.keys: List[str] = []
        self.dep_list: List[Dep] = []

    @classmethod
    def load(cls, deps_table: Mapping[str, Any], import_graph: ImportGraph, modified: bool) -> "Dependencies":
        """
        Build the set from a ``deps`` table.

        Every dep is checked against the graph before it is inserted; the
        first conflict aborts the load.
        """
        deps = cls(import_graph)
        for key, table in deps_table.items():
            dep = Dep.from_declaration(key, table)
            existing, ok = import_graph.insert_if_valid(dep)
            if not ok:
                raise DependencyConflictError(existing.dependency, dep, key=key)
            dep.mark_fetch(modified)
            deps.save(key, dep)
            if existing is not None:
                logger.debug(f"{dep.import_path} already resolved as {existing.dependency}")
        return deps

    def save(self, key: str, dep: Dep) -> None:
        self.keys.append(key)
        self.dep_list.append(dep)

    @property
    def imports(self) -> List[str]:
        return [dep.import_path for dep in self.dep_list]

    def items(self) -> Iterator[Tuple[str, Dep]]:
        return iter(zip(self.keys, self.dep_list))

    def includes_dependency(self, import_path: str) -> Optional[Node]:
        return self.import_graph.search(import_path)

    def all_need_fetching(self) -> bool:
        return all(dep.needs_fetch for dep in self.dep_list)

    def any_need_fetching(self) -> bool:
        return any(dep.needs_fetch for dep in self.dep_list)

    def needing_fetch(self) -> List[Dep]:
        return [dep for dep in self.dep_list if dep.needs_fetch]

    def __iter__(self) -> Iterator[Dep]:
        return iter(self.dep_list)

    def __len__(self) -> int:
        return len(self.dep_list)

    def __str__(self) -> str:
        return f"imports = {self.imports}, keys = {self.keys}"
