"""
Declaration file handling: parsing, the checksum gate, repository
bootstrapping, and the vendor marker rewrite.
"""

import hashlib
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from gopack.exceptions import ChecksumError, ConfigError, VendorError
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.resolution.graph import ImportGraph
from gopack.resolution.model import Dep, Dependencies

VENDOR_MARKER = "vendor = true"
VENDOR_MARKER_LINE = f"{VENDOR_MARKER}  # Dependencies vendored. Do not remove this option.\n"

VENDOR_KEY_RE = re.compile(rb"^[ \t]*vendor[ \t]*=")
TABLE_HEADER_RE = re.compile(rb"^[ \t]*\[")


class Config:
    """
    One parsed declaration file.

    Attributes:
        path: Location of the declaration file.
        repository: This project's own import path ("repo"), if declared.
        deps_tree: The raw ``deps`` table.
        vendor: Whether the dependencies are vendored.
    """

    def __init__(self, path: Path, paths: Optional[GopackPaths] = None):
        self.path = Path(path)
        self.paths = paths or GopackPaths(self.path.parent)
        self.repository: str = ""
        self.deps_tree: Optional[Dict[str, Any]] = None
        self.vendor: bool = False
        self._checksum: Optional[str] = None
        self._load()

    @classmethod
    def from_dir(cls, directory: Path, paths: Optional[GopackPaths] = None) -> "Config":
        return cls(Path(directory) / GopackPaths.CONFIG_NAME, paths=paths or GopackPaths(directory))

    @classmethod
    def from_file(cls, path: Path, paths: Optional[GopackPaths] = None) -> "Config":
        return cls(path, paths=paths)

    def _load(self) -> None:
        try:
            with open(self.path, "rb") as f:
                tree = tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"{self.path} not found") from e
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Could not read {self.path}: {e}") from e

        deps = tree.get("deps")
        if deps is not None and not isinstance(deps, dict):
            raise ConfigError(f"{self.path}: `deps` must be a table")
        self.deps_tree = deps

        repo = tree.get("repo")
        if repo is not None and not isinstance(repo, str):
            raise ConfigError(f"{self.path}: `repo` must be a string")
        self.repository = repo or ""

        vendor = tree.get("vendor")
        if vendor is not None and not isinstance(vendor, bool):
            raise ConfigError(f"{self.path}: `vendor` must be a boolean")
        self.vendor = bool(vendor)

    # ------------------------------------------------------------------
    # Checksum gate
    # ------------------------------------------------------------------

    @property
    def checksum_path(self) -> Path:
        return self.paths.checksum_file

    def checksum(self) -> str:
        """Hex digest of the declaration file as it is on disk (cached)."""
        if self._checksum is None:
            try:
                data = self.path.read_bytes()
            except OSError as e:
                raise ChecksumError(f"Could not read {self.path}: {e}") from e
            self._checksum = hashlib.md5(data).hexdigest()
        return self._checksum

    def reset_checksum(self) -> None:
        self._checksum = None

    def modified_checksum(self) -> bool:
        """True when no checksum was recorded or it differs from the file's digest."""
        try:
            recorded = self.checksum_path.read_bytes()
        except FileNotFoundError:
            return True
        except OSError as e:
            raise ChecksumError(f"Could not read checksum {self.checksum_path}: {e}") from e
        return recorded != self.checksum().encode("ascii")

    def write_checksum(self) -> None:
        try:
            self.checksum_path.parent.mkdir(parents=True, exist_ok=True)
            self.checksum_path.write_bytes(self.checksum().encode("ascii"))
        except OSError as e:
            raise ChecksumError(f"Could not write checksum {self.checksum_path}: {e}") from e
        logger.debug(f"Recorded checksum {self.checksum()} in {self.checksum_path}")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def init_repo(self, import_graph: ImportGraph) -> None:
        """
        Link the project into the vendor tree under its own import path and
        register it, so the project's own packages resolve.
        """
        if not self.repository:
            return

        link = self.paths.dependency_dir(self.repository)
        try:
            link.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(self.paths.project_root.resolve(), link, target_is_directory=True)
        except FileExistsError:
            pass
        except OSError as e:
            raise ConfigError(f"Could not link {self.repository} into {link}: {e}") from e

        import_graph.insert(Dep(import_path=self.repository))

    def load_dependency_model(self, import_graph: ImportGraph, modified: Optional[bool] = None) -> Optional[Dependencies]:
        """
        Build the resolution set for this file.

        ``modified`` defaults to the checksum gate's answer.
        """
        if self.deps_tree is None:
            return None
        if modified is None:
            modified = self.modified_checksum()
        return Dependencies.load(self.deps_tree, import_graph, modified)

    # ------------------------------------------------------------------
    # Vendoring
    # ------------------------------------------------------------------

    def write_vendor(self) -> Path:
        """
        Move the declaration file to the lock location and rewrite it with a
        leading vendor marker followed by the original content.
        """
        lock = self.paths.lock_file
        try:
            content = self.path.read_bytes()
            lock.parent.mkdir(parents=True, exist_ok=True)
            os.replace(self.path, lock)
            self.path.write_bytes(VENDOR_MARKER_LINE.encode("utf-8") + _strip_vendor_keys(content))
        except OSError as e:
            raise VendorError(f"Could not write vendored config {self.path}: {e}") from e

        self.vendor = True
        self.reset_checksum()
        logger.debug(f"Moved {self.path} to {lock}")
        return lock


def _strip_vendor_keys(content: bytes) -> bytes:
    """
    Drop top-level ``vendor = ...`` lines so the marker is the only one.

    Everything else, line endings included, is kept as is.
    """
    kept = []
    top_level = True
    for line in content.splitlines(keepends=True):
        if TABLE_HEADER_RE.match(line):
            top_level = False
        elif top_level and VENDOR_KEY_RE.match(line):
            continue
        kept.append(line)
    return b"".join(kept)
