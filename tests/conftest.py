"""
Pytest configuration for the gopack test suite.

This conftest.py provides:
- Quiet logging (suppresses console output)
- Isolated project roots with gopack.config and Go sources
- A fake scm backend so no test touches the network
"""

import os
from pathlib import Path
from typing import Dict, Optional, Set

import pytest

from gopack.cli.config import CLIConfig
from gopack.exceptions import CheckoutError, ScmError
from gopack.logging_config import setup_logging
from gopack.paths import GopackPaths, reset_paths
from gopack.scm import ScmBackend


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("GOPACK_SKIP_COLORS", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the user's own config and env out of every test."""
    monkeypatch.delenv("GOPACK_APP_CONFIG", raising=False)
    monkeypatch.setattr(GopackPaths, "GLOBAL_DIR", tmp_path / "home-gopack")
    reset_paths()
    CLIConfig.set_show_colors(None)
    yield
    reset_paths()
    CLIConfig.set_show_colors(None)


# ============================================================================
# PROJECT FIXTURES
# ============================================================================

def write_file(root: Path, relative: str, content: str) -> Path:
    path = Path(root) / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def go_file(*imports: str, package: str = "main") -> str:
    lines = [f"package {package}", "", "import ("]
    lines.extend(f'\t"{imp}"' for imp in imports)
    lines.append(")")
    lines.append("")
    return "\n".join(lines)


@pytest.fixture
def project_dir(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def paths(project_dir) -> GopackPaths:
    return GopackPaths(project_dir)


# ============================================================================
# FAKE SCM
# ============================================================================

class FakeBackend(ScmBackend):
    """
    Records every call instead of running commands.

    ``files`` maps an import path to the files a clone of it produces,
    ``fail_clone`` and ``fail_checkout`` hold import paths / references that
    should fail.
    """

    name = "fake"
    marker = ".fake"

    def __init__(self, paths: GopackPaths, files: Optional[Dict[str, Dict[str, str]]] = None):
        super().__init__(paths)
        self.files = files or {}
        self.fail_clone: Set[str] = set()
        self.fail_checkout: Set[str] = set()
        self.calls = []

    def _import_path(self, destination: Path) -> str:
        return Path(destination).relative_to(self.paths.vendor_src_dir).as_posix()

    def clone_command(self, source, destination):
        return ["fake", "clone", source, str(destination)]

    def clone(self, source, destination):
        import_path = self._import_path(destination)
        self.calls.append(("clone", import_path))
        if import_path in self.fail_clone:
            raise ScmError(f"clone of {source} failed", argv=self.clone_command(source, destination))
        destination = Path(destination)
        (destination / self.marker).mkdir(parents=True, exist_ok=True)
        for relative, content in self.files.get(import_path, {}).items():
            write_file(destination, relative, content)

    def fetch_updates(self, destination):
        self.calls.append(("fetch", self._import_path(destination)))

    def checkout(self, destination, kind, reference):
        self.calls.append(("checkout", self._import_path(destination), kind.value, reference))
        if reference in self.fail_checkout:
            raise CheckoutError(f"unknown revision {reference}")

    def write_ignore_patterns(self, workspace_root):
        self.calls.append(("ignore", str(workspace_root)))


@pytest.fixture
def fake_backend(paths) -> FakeBackend:
    return FakeBackend(paths)


@pytest.fixture
def backend_resolver(fake_backend):
    return lambda dep, paths: fake_backend
