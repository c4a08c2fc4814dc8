"""
gopack Path Configuration

Centralized path management for the gopack workspace.
All paths are relative to the project root.

Directory Structure:
gopack.config            # Declaration file
.gopack/
├── checksum             # Digest of the last resolved declaration file
├── config.json          # Local tool configuration
├── logs/                # Log files
└── vendor/              # GOPATH for child processes
    ├── gopack.lock      # Vendor lock snapshot
    └── src/             # Dependency checkouts, one per import path
"""

import os
from pathlib import Path
from typing import Optional


class GopackPaths:
    """
    Centralized path configuration for gopack.

    Default project_root is GOPACK_APP_CONFIG when set, otherwise the
    current working directory.
    """

    GOPACK_DIR = ".gopack"
    GLOBAL_DIR = Path.home() / ".gopack"

    CONFIG_NAME = "gopack.config"
    CHECKSUM_NAME = "checksum"
    LOCK_NAME = "gopack.lock"
    USER_CONFIG_NAME = "config.json"

    VENDOR_DIR = "vendor"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = Path(project_root) if project_root is not None else None

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is not None:
            return self._project_root
        override = os.getenv("GOPACK_APP_CONFIG")
        if override:
            return Path(override)
        return Path.cwd()

    @property
    def gopack_dir(self) -> Path:
        return self.project_root / self.GOPACK_DIR

    @property
    def config_file(self) -> Path:
        """Get the declaration file path."""
        return self.project_root / self.CONFIG_NAME

    @property
    def checksum_file(self) -> Path:
        return self.gopack_dir / self.CHECKSUM_NAME

    @property
    def user_config_file(self) -> Path:
        return self.gopack_dir / self.USER_CONFIG_NAME

    @property
    def vendor_dir(self) -> Path:
        """Get the vendor area (exported as GOPATH to child processes)."""
        return self.gopack_dir / self.VENDOR_DIR

    @property
    def vendor_src_dir(self) -> Path:
        return self.vendor_dir / "src"

    @property
    def lock_file(self) -> Path:
        return self.vendor_dir / self.LOCK_NAME

    @property
    def logs_dir(self) -> Path:
        return self.gopack_dir / self.LOGS_DIR

    def dependency_dir(self, import_path: str) -> Path:
        """Get the local checkout directory for an import path."""
        return self.vendor_src_dir / import_path

    def relative_to_root(self, path: Path) -> str:
        """Render a workspace path relative to the project root."""
        try:
            return str(Path(path).relative_to(self.project_root))
        except ValueError:
            return str(path)


# Global instance for convenience
_default_paths: Optional[GopackPaths] = None


def get_paths(project_root: Optional[Path] = None) -> GopackPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        GopackPaths instance
    """
    global _default_paths
    if project_root is not None:
        return GopackPaths(project_root)
    if _default_paths is None:
        _default_paths = GopackPaths()
    return _default_paths


def reset_paths() -> None:
    """Reset the global paths instance (useful for testing)."""
    global _default_paths
    _default_paths = None
