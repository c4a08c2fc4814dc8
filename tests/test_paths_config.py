"""Tests for workspace paths and the hierarchical user config."""

import json
from pathlib import Path

from gopack.paths import GopackPaths, get_paths
from gopack.user_config import UserConfig


def test_project_root_defaults_to_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert GopackPaths().project_root == Path.cwd()


def test_project_root_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GOPACK_APP_CONFIG", str(tmp_path))
    assert get_paths().project_root == tmp_path


def test_layout(paths, project_dir):
    assert paths.config_file == project_dir / "gopack.config"
    assert paths.checksum_file == project_dir / ".gopack" / "checksum"
    assert paths.lock_file == project_dir / ".gopack" / "vendor" / "gopack.lock"
    assert paths.relative_to_root(paths.vendor_src_dir) == ".gopack/vendor/src"


def test_user_config_defaults(project_dir):
    config = UserConfig(project_dir)
    assert config.max_workers is None
    assert config.colors is True
    assert config.get("missing.key", "fallback") == "fallback"


def test_local_config_overrides_global(project_dir, tmp_path):
    global_path = tmp_path / "global.json"
    global_path.write_text(json.dumps({"fetch": {"max_workers": 8}, "output": {"colors": False}}))
    local = project_dir / ".gopack" / "config.json"
    local.parent.mkdir(parents=True)
    local.write_text(json.dumps({"fetch": {"max_workers": 2}}))

    config = UserConfig(project_dir, global_config_path=global_path)

    assert config.max_workers == 2
    assert config.colors is False


def test_invalid_config_is_ignored(project_dir):
    local = project_dir / ".gopack" / "config.json"
    local.parent.mkdir(parents=True)
    local.write_text("{not json")

    assert UserConfig(project_dir).max_workers is None


def test_non_positive_workers_mean_unbounded(project_dir):
    local = project_dir / ".gopack" / "config.json"
    local.parent.mkdir(parents=True)
    local.write_text(json.dumps({"fetch": {"max_workers": 0}}))

    assert UserConfig(project_dir).max_workers is None
