import json
import subprocess

import pytest
from typer.testing import CliRunner

from gopack import __version__
from gopack.main import app, run
from gopack.paths import GopackPaths

from conftest import go_file, write_file

pytestmark = pytest.mark.integration

runner = CliRunner()

REPO_ONLY = 'repo = "github.com/me/project"\n'


class Completed:
    def __init__(self, returncode=0):
        self.returncode = returncode
        self.stdout = ""
        self.stderr = ""


@pytest.fixture
def cli_project(project_dir, monkeypatch):
    monkeypatch.setenv("GOPACK_APP_CONFIG", str(project_dir))
    return project_dir


@pytest.fixture
def recorded(monkeypatch):
    calls = []

    def fake_run(argv, **kwargs):
        calls.append((list(argv), kwargs))
        return Completed()

    monkeypatch.setattr(subprocess, "run", fake_run)
    return calls


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"gopack version {__version__}"


def test_dependencytree(cli_project):
    write_file(cli_project, GopackPaths.CONFIG_NAME, REPO_ONLY)
    write_file(cli_project, "main.go", go_file("fmt"))

    result = runner.invoke(app, ["dependencytree"])

    assert result.exit_code == 0
    assert "github.com" in result.stdout
    assert "project" in result.stdout


def test_stats_json(cli_project):
    write_file(cli_project, GopackPaths.CONFIG_NAME, REPO_ONLY)
    write_file(cli_project, "main.go", go_file("fmt", "github.com/me/project/util"))

    result = runner.invoke(app, ["stats", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["files_scanned"] == 1
    assert payload["imports_by_path"]["github.com/me/project/util"]["remote"] is True


def test_stats_table(cli_project):
    write_file(cli_project, GopackPaths.CONFIG_NAME, REPO_ONLY)
    write_file(cli_project, "main.go", go_file("fmt"))

    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "fmt" in result.stdout


def test_missing_config_exits_with_one(cli_project):
    result = runner.invoke(app, ["dependencytree"])
    assert result.exit_code == 1


def test_validation_failure_exits_with_error_count(cli_project):
    write_file(cli_project, GopackPaths.CONFIG_NAME, '[deps.foo]\nimport = "github.com/a/foo"\n')
    write_file(cli_project, "main.go", go_file("github.com/x/unmanaged"))

    result = runner.invoke(app, ["installdeps"])

    # one unmanaged import plus one unused dependency
    assert result.exit_code == 2
    assert not (cli_project / ".gopack" / "checksum").exists()


def test_installdeps_on_vendored_project(cli_project, recorded):
    write_file(
        cli_project,
        GopackPaths.CONFIG_NAME,
        'vendor = true\n[deps.foo]\nimport = "github.com/a/foo"\n',
    )
    write_file(cli_project, "main.go", go_file("github.com/a/foo"))

    result = runner.invoke(app, ["installdeps"])

    assert result.exit_code == 0
    argv, kwargs = recorded[0]
    assert argv == ["go", "install", "github.com/a/foo"]
    assert kwargs["env"]["GOPATH"] == str(cli_project / ".gopack" / "vendor")


def test_unknown_commands_go_to_the_go_tool(cli_project, recorded):
    write_file(cli_project, GopackPaths.CONFIG_NAME, REPO_ONLY)

    with pytest.raises(SystemExit) as excinfo:
        run(["build", "./..."])

    assert excinfo.value.code == 0
    argv, kwargs = recorded[0]
    assert argv == ["go", "build", "./..."]
    assert kwargs["cwd"] == str(cli_project)
    assert kwargs["env"]["GOPATH"] == str(cli_project / ".gopack" / "vendor")
