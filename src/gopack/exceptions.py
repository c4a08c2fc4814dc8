# Custom exceptions for gopack

from typing import List, Optional, Sequence


class GopackError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ConfigError(GopackError):
    """Raised when the declaration file cannot be read or has the wrong shape."""
    pass


class DeclarationError(GopackError):
    """Raised for a malformed entry in the deps table."""
    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"deps.{key}: {message}")


class AmbiguousCheckoutError(DeclarationError):
    """Raised when a declaration sets more than one of branch/commit/tag."""
    def __init__(self, key: str, import_path: str, kinds: Sequence[str]):
        self.import_path = import_path
        self.kinds = list(kinds)
        super().__init__(
            key,
            f"{import_path} - only one of branch/commit/tag may be specified (got {', '.join(self.kinds)})",
        )


class DependencyConflictError(GopackError):
    """
    Raised when two declarations pin the same repository root to
    incompatible references.

    Both sides are kept so the report can name them.
    """
    def __init__(self, existing, candidate, key: Optional[str] = None):
        self.existing = existing
        self.candidate = candidate
        self.key = key
        where = f" (deps.{key})" if key else ""
        super().__init__(
            f"Dependency conflict for {candidate.import_path}{where}:\n"
            f"  - already resolved: {existing}\n"
            f"  - requested:        {candidate}"
        )


class ChecksumError(GopackError):
    """Raised when the checksum record cannot be read or written."""
    pass


class ScmError(GopackError):
    """Raised when an external scm command fails."""
    def __init__(self, message: str, argv: Optional[Sequence[str]] = None, cwd: Optional[str] = None, stderr: str = ""):
        self.argv = list(argv or [])
        self.cwd = cwd
        self.stderr = stderr
        details = [message]
        if self.argv:
            details.append(f"  command: {' '.join(self.argv)}")
        if cwd:
            details.append(f"  cwd: {cwd}")
        if stderr:
            details.append(f"  stderr: {stderr}")
        super().__init__("\n".join(details))


class CheckoutError(ScmError):
    """Raised when pinning a checkout to a branch/commit/tag fails."""
    pass


class VendorError(GopackError):
    """Raised when the vendored snapshot cannot be produced."""
    pass


class ValidationFailed(GopackError):
    """Raised when the source tree and the declared dependencies disagree."""

    def __init__(self, errors: List):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} validation error(s)")
