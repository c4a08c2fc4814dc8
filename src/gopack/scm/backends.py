from pathlib import Path
from typing import List, Optional

from gopack.exceptions import CheckoutError, ScmError
from gopack.paths import GopackPaths
from gopack.schemas import CheckoutKind
from .base import ScmBackend


def _vendor_ignores() -> List[str]:
    vendor = Path(GopackPaths.GOPACK_DIR) / GopackPaths.VENDOR_DIR
    return [(vendor / "bin").as_posix(), (vendor / "pkg").as_posix()]


class GitBackend(ScmBackend):
    name = "git"
    marker = ".git"

    def clone_command(self, source: str, destination: Path) -> List[str]:
        return ["git", "clone", source, str(destination)]

    def fetch_updates(self, destination: Path) -> None:
        self.run(["git", "fetch"], cwd=destination)

    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        self.run(["git", "checkout", reference], cwd=destination, error_cls=CheckoutError)

    def write_ignore_patterns(self, workspace_root: Path) -> None:
        gitignore = GopackPaths(workspace_root).vendor_dir / ".gitignore"
        gitignore.parent.mkdir(parents=True, exist_ok=True)
        gitignore.write_text("-/bin\n-/pkg\n")


class HgBackend(ScmBackend):
    name = "hg"
    marker = ".hg"

    def clone_command(self, source: str, destination: Path) -> List[str]:
        return ["hg", "clone", source, str(destination)]

    def fetch_updates(self, destination: Path) -> None:
        self.run(["hg", "pull"], cwd=destination)

    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        if kind is CheckoutKind.COMMIT:
            argv = ["hg", "update", "-c", reference]
        else:
            argv = ["hg", "checkout", reference]
        self.run(argv, cwd=destination, error_cls=CheckoutError)

    def write_ignore_patterns(self, workspace_root: Path) -> None:
        bin_dir, pkg_dir = _vendor_ignores()
        with open(Path(workspace_root) / ".hgignore", "a") as f:
            f.write(f"\nsyntax: glob\n{bin_dir}\n{pkg_dir}\n")


class SvnBackend(ScmBackend):
    name = "svn"
    marker = ".svn"

    def clone_command(self, source: str, destination: Path) -> List[str]:
        return ["svn", "checkout", source, str(destination)]

    def fetch_updates(self, destination: Path) -> None:
        self.run(["svn", "update"], cwd=destination)

    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        if kind is CheckoutKind.COMMIT:
            argv = ["svn", "up", "-r", reference]
        elif kind is CheckoutKind.BRANCH:
            argv = ["svn", "switch", f"^/branches/{reference}"]
        elif kind is CheckoutKind.TAG:
            argv = ["svn", "switch", f"^/tags/{reference}"]
        else:
            return
        self.run(argv, cwd=destination, error_cls=CheckoutError)

    def write_ignore_patterns(self, workspace_root: Path) -> None:
        # svn:ignore holds one pattern per line; a second propset would replace the first
        self.run(
            ["svn", "propset", "svn:ignore", "\n".join(_vendor_ignores()), "."],
            cwd=workspace_root,
        )


class BzrBackend(ScmBackend):
    name = "bzr"
    marker = ".bzr"

    def clone_command(self, source: str, destination: Path) -> List[str]:
        return ["bzr", "branch", source, str(destination)]

    def fetch_updates(self, destination: Path) -> None:
        self.run(["bzr", "pull"], cwd=destination)

    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        if kind is CheckoutKind.COMMIT:
            revision = reference
        elif kind is CheckoutKind.BRANCH:
            revision = f"branch:{reference}"
        elif kind is CheckoutKind.TAG:
            revision = f"tag:{reference}"
        else:
            return
        self.run(["bzr", "update", "-r", revision], cwd=destination, error_cls=CheckoutError)

    def write_ignore_patterns(self, workspace_root: Path) -> None:
        self.run(["bzr", "ignore", *_vendor_ignores()], cwd=workspace_root)


class GoGetBackend(ScmBackend):
    """
    Fallback for deps without a declared backend: ``go get`` downloads the
    code, and whatever backend it left on disk handles the rest.
    """

    name = "go"
    marker = ""

    def __init__(self, paths: GopackPaths, import_path: str, inner: Optional[ScmBackend] = None):
        super().__init__(paths)
        self.import_path = import_path
        self.inner = inner

    def is_checkout(self, path: Path) -> bool:
        return self.inner is not None and self.inner.is_checkout(path)

    def clone_command(self, source: str, destination: Path) -> List[str]:
        return ["go", "get", "-d", "-u", self.import_path]

    def clone(self, source: str, destination: Path) -> None:
        self.paths.vendor_src_dir.mkdir(parents=True, exist_ok=True)
        self.run(self.clone_command(source, destination), cwd=self.paths.project_root)

    def _require_inner(self, destination: Path) -> ScmBackend:
        if self.inner is None:
            raise ScmError(f"unknown scm for {self.import_path}", cwd=str(destination))
        return self.inner

    def fetch_updates(self, destination: Path) -> None:
        # go get -u refreshes the whole checkout, whatever backend it uses
        self.clone("", destination)

    def checkout(self, destination: Path, kind: CheckoutKind, reference: str) -> None:
        if self.inner is None:
            raise CheckoutError(f"unknown scm for {self.import_path}", cwd=str(destination))
        self.inner.checkout(destination, kind, reference)

    def write_ignore_patterns(self, workspace_root: Path) -> None:
        self._require_inner(Path(workspace_root)).write_ignore_patterns(workspace_root)

    def __repr__(self) -> str:
        return f"GoGetBackend(inner={self.inner!r})"
