"""Tests for Go import extraction and the source tree scan."""

from pathlib import Path

import pytest

from gopack.parser import extract_imports, is_remote_import
from gopack.scanner import analyze_source_tree

from conftest import write_file

GROUPED = '''package main

import (
\t"fmt"
\t// "github.com/commented/out"
\tlog "github.com/sirupsen/logrus"
\t. "github.com/onsi/gomega"
\t_ "github.com/lib/pq"
)

import "strings"
'''


@pytest.mark.fast
def test_extract_grouped_and_single_imports():
    refs = extract_imports(Path("main.go"), GROUPED)
    assert [(r.module, r.line) for r in refs] == [
        ("fmt", 4),
        ("github.com/sirupsen/logrus", 6),
        ("github.com/onsi/gomega", 7),
        ("github.com/lib/pq", 8),
        ("strings", 11),
    ]
    assert all(r.file_path == "main.go" for r in refs)


@pytest.mark.fast
def test_extract_ignores_files_without_imports():
    assert extract_imports(Path("doc.go"), "// Package doc\npackage doc\n") == []


@pytest.mark.fast
@pytest.mark.parametrize(
    "path, remote",
    [
        ("github.com/a/b", True),
        ("gopkg.in/yaml.v2", True),
        ("fmt", False),
        ("net/http", False),
        ("mycompany/internal", False),
    ],
)
def test_is_remote_import(path, remote):
    assert is_remote_import(path) is remote


def test_analyze_source_tree(project_dir):
    write_file(project_dir, "main.go", GROUPED)
    write_file(project_dir, "util/util.go", 'package util\n\nimport "github.com/a/shared"\n')
    write_file(project_dir, "util/util_test.go", 'package util\n\nimport (\n\t"testing"\n\t"github.com/stretchr/testify/assert"\n\t"github.com/a/shared"\n)\n')
    write_file(project_dir, "README.md", 'import "github.com/not/go"\n')

    stats = analyze_source_tree(project_dir)

    assert stats.files_scanned == 3
    assert stats.test_files_scanned == 1
    assert stats.imports_by_path["github.com/stretchr/testify/assert"].test
    assert not stats.imports_by_path["github.com/a/shared"].test
    assert len(stats.imports_by_path["github.com/a/shared"].locations) == 2
    assert stats.imports_by_path["github.com/a/shared"].remote
    assert not stats.imports_by_path["fmt"].remote
    assert "github.com/not/go" not in stats.imports_by_path
    assert str(stats.imports_by_path["strings"].locations[0]) == "main.go:11"


def test_analyze_skips_vendor_and_ignored_dirs(project_dir):
    write_file(project_dir, "main.go", 'package main\n\nimport "github.com/a/used"\n')
    write_file(project_dir, ".gopack/vendor/src/github.com/x/y/y.go", 'package y\n\nimport "github.com/x/hidden"\n')
    write_file(project_dir, "testdata/fixture.go", 'package fixture\n\nimport "github.com/x/fixture"\n')
    write_file(project_dir, "_examples/demo.go", 'package main\n\nimport "github.com/x/demo"\n')
    write_file(project_dir, "generated/gen.go", 'package gen\n\nimport "github.com/x/generated"\n')
    write_file(project_dir, ".gitignore", "generated/\n")

    stats = analyze_source_tree(project_dir)

    assert sorted(stats.imports_by_path) == ["github.com/a/used"]
    assert sorted(analyze_source_tree(project_dir, respect_gitignore=False).imports_by_path) == [
        "github.com/a/used",
        "github.com/x/generated",
    ]


def test_analyze_missing_directory(tmp_path):
    stats = analyze_source_tree(tmp_path / "nope")
    assert stats.files_scanned == 0
    assert stats.imports_by_path == {}


def test_project_stats_helpers(project_dir):
    write_file(project_dir, "main.go", GROUPED)
    stats = analyze_source_tree(project_dir)

    assert stats.is_import_used("github.com/sirupsen")
    assert stats.is_import_used("github.com/lib/pq")
    assert not stats.is_import_used("github.com/lib/p")
    assert {s.path for s in stats.local_imports()} == {"fmt", "strings"}
