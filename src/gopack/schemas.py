from enum import Enum
from pydantic import BaseModel, Field
from typing import Dict, List


class SourceLocation(BaseModel):
    """
    A place in the source tree where an import is used.
    """
    file_path: str
    line: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}"


class ImportStats(BaseModel):
    """
    Usage of one import path across a source tree.
    """
    path: str
    remote: bool = False
    test: bool = True  # Only used from _test.go files
    locations: List[SourceLocation] = Field(default_factory=list)

    def add_location(self, file_path: str, line: int, test_file: bool) -> None:
        self.locations.append(SourceLocation(file_path=file_path, line=line))
        self.test = self.test and test_file


class ProjectStats(BaseModel):
    """
    Import usage report for a project root.
    """
    root: str
    files_scanned: int = 0
    test_files_scanned: int = 0
    imports_by_path: Dict[str, ImportStats] = Field(default_factory=dict)

    def is_import_used(self, import_path: str) -> bool:
        prefix = import_path.rstrip("/") + "/"
        return any(path == import_path or path.startswith(prefix) for path in self.imports_by_path)

    def remote_imports(self) -> List[ImportStats]:
        return [s for s in self.imports_by_path.values() if s.remote]

    def local_imports(self) -> List[ImportStats]:
        return [s for s in self.imports_by_path.values() if not s.remote]


class ProjectErrorKind(str, Enum):
    UNMANAGED_IMPORT = "unmanaged_import"
    UNUSED_DEPENDENCY = "unused_dependency"


class ProjectError(BaseModel):
    """
    One validation finding. Findings are collected and reported together.
    """
    kind: ProjectErrorKind
    import_path: str
    locations: List[SourceLocation] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.kind is ProjectErrorKind.UNMANAGED_IMPORT:
            lines = [f"unmanaged import {self.import_path} is used in:"]
            lines.extend(f"  {location}" for location in self.locations)
            return "\n".join(lines)
        return f"dependency {self.import_path} is declared but never imported"


class ImportReference(BaseModel):
    """
    Represents an import declaration in a Go file.
    """
    module: str
    file_path: str
    line: int


class CheckoutKind(str, Enum):
    """Which kind of reference a dependency is pinned to."""
    NONE = ""
    BRANCH = "branch"
    COMMIT = "commit"
    TAG = "tag"


class FetchReport(BaseModel):
    """
    What a transitive fetch did, by import path.
    """
    fetched: List[str] = Field(default_factory=list)
    pinned: List[str] = Field(default_factory=list)
    pin_failures: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
