"""
Backend contract shared by every scm variant, plus the subprocess helper.

Every command gets an explicit working directory and environment; nothing
here changes the process-wide cwd or os.environ.
"""

import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from gopack.exceptions import ScmError
from gopack.logging_config import logger
from gopack.paths import GopackPaths
from gopack.schemas import CheckoutKind


def child_env(paths: GopackPaths) -> Dict[str, str]:
    """Environment for child processes: GOPATH points at the vendor area."""
    env = dict(os.environ)
    env["GOPATH"] = str(paths.vendor_dir)
    env.setdefault("GO111MODULE", "off")
    return env


def run_command(
    argv: List[str],
    cwd: Optional[Path] = None,
    env: Optional[Dict[str, str]] = None,
    error_cls=ScmError,
) -> str:
    """
    Run an external command to completion and return its stdout.

    No timeout is applied. A non-zero exit raises ``error_cls``.
    """
    logger.debug(f"Running {' '.join(argv)} (cwd={cwd})")
    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as e:
        raise error_cls(f"Could not run {argv[0]}: {e}", argv=argv, cwd=str(cwd) if cwd else None) from e
    if completed.returncode != 0:
        raise error_cls(
            f"{argv[0]} exited with status {completed.returncode}",
            argv=argv,
            cwd=str(cwd) if cwd else None,
            stderr=completed.stderr.strip(),
        )
    return completed.stdout.strip()


class ScmBackend(ABC):
    """
    One repository backend (git, hg, svn, bzr).

    ``marker`` is the hidden directory that identifies a checkout of this
    backend on disk.
    """

    name: str = ""
    marker: str = ""

    def __init__(self, paths: GopackPaths):
        self.paths = paths

    @property
    def env(self) -> Dict[str, str]:
        return child_env(self.paths)

    def run(self, argv: List[str], cwd: Optional[Path] = None, error_cls=ScmError) -> str:
        return run_command(argv, cwd=cwd, env=self.env, error_cls=error_cls)

    def is_checkout(self, path: Path) -> bool:
        return (Path(path) / self.marker).is_dir()

    @abstractmethod
    def clone_command(self, source: str, destination: Path) -> List[str]:
        ...

    def clone(self, source: str, destination: Path) -> None:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        self.run(self.clone_command(source, destination), cwd=destination.parent)

    @abstractmethod
    def fetch_updates(self, destination: Path) -> None:
        ...

    @abstractmethod
    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        ...

    @abstractmethod
    def write_ignore_patterns(self, workspace_root: Path) -> None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
