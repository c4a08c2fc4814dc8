import pytest

pytestmark = pytest.mark.fast

from gopack.resolution.graph import ImportGraph
from gopack.resolution.model import Dep, Dependencies
from gopack.resolution.validation import validate
from gopack.schemas import ImportStats, ProjectErrorKind, ProjectStats


def _project(*imports, test=False) -> ProjectStats:
    stats = ProjectStats(root=".")
    for line, path in enumerate(imports, start=1):
        entry = ImportStats(path=path, remote="." in path.split("/")[0])
        entry.add_location("main.go", line, test)
        stats.imports_by_path[path] = entry
    return stats


def _deps(*imports) -> Dependencies:
    table = {f"dep{i}": {"import": path} for i, path in enumerate(imports)}
    return Dependencies.load(table, ImportGraph(), modified=True)


def test_clean_project_has_no_errors():
    deps = _deps("github.com/a/foo")
    assert validate(deps, _project("fmt", "github.com/a/foo/sub")) == []


def test_unmanaged_import():
    deps = _deps("github.com/a/foo")
    errors = validate(deps, _project("github.com/a/foo", "github.com/b/bar"))

    assert len(errors) == 1
    assert errors[0].kind is ProjectErrorKind.UNMANAGED_IMPORT
    assert errors[0].import_path == "github.com/b/bar"
    assert "main.go:2" in str(errors[0])


def test_unused_dependency():
    deps = _deps("github.com/a/foo", "github.com/a/unused")
    errors = validate(deps, _project("github.com/a/foo"))

    assert [(e.kind, e.import_path) for e in errors] == [
        (ProjectErrorKind.UNUSED_DEPENDENCY, "github.com/a/unused"),
    ]
    assert "never imported" in str(errors[0])


def test_all_errors_reported_together():
    deps = _deps("github.com/a/unused")
    errors = validate(deps, _project("github.com/x/one", "github.com/x/two"))
    assert len(errors) == 3


def test_project_repository_counts_as_managed():
    graph = ImportGraph()
    graph.insert(Dep(import_path="github.com/me/project"))
    deps = Dependencies.load({"foo": {"import": "github.com/a/foo"}}, graph, modified=True)

    assert validate(deps, _project("github.com/me/project/util", "github.com/a/foo")) == []


def test_test_only_imports_are_still_checked():
    deps = _deps("github.com/a/foo")
    errors = validate(deps, _project("github.com/a/foo", "github.com/stretchr/testify", test=True))
    assert [e.import_path for e in errors] == ["github.com/stretchr/testify"]
