import subprocess
import sys
from contextlib import contextmanager
from typing import List, Optional, Tuple

import typer

from gopack import __version__
from gopack.cli.config import CLIConfig
from gopack.cli.output import (
    announce,
    build_dependency_tree,
    build_summary_table,
    get_console,
    print_error,
    print_json,
    print_project_errors,
    print_status,
)
from gopack.exceptions import GopackError, ScmError, ValidationFailed
from gopack.logging_config import logger
from gopack.paths import get_paths
from gopack.resolution import Resolver
from gopack.resolution.model import Dependencies
from gopack.scanner import analyze_source_tree
from gopack.schemas import ProjectStats
from gopack.scm import child_env, run_command

app = typer.Typer(add_completion=False)

COMMANDS = ("dependencytree", "stats", "installdeps", "vendor", "version")


@contextmanager
def _handle_errors():
    """Turn gopack failures into colored messages and exit codes."""
    try:
        yield
    except ValidationFailed as e:
        print_project_errors(e.errors)
        raise typer.Exit(code=len(e.errors))
    except GopackError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _bootstrap() -> Tuple[Resolver, ProjectStats]:
    """
    Scan the project and bring its dependencies up to date.

    Every command except ``version`` runs this first.
    """
    paths = get_paths()
    project = analyze_source_tree(paths.project_root)
    resolver = Resolver(paths)
    resolver.load_dependencies(project, on_resolve=announce)
    return resolver, project


@app.callback()
def global_options(
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable colored output (also via GOPACK_SKIP_COLORS=1)"
    ),
):
    """
    gopack: resolve, fetch and vendor Go dependencies declared in gopack.config.

    Any command not listed here is passed to the go tool with GOPATH set to
    the vendor area.
    """
    if no_color:
        CLIConfig.set_show_colors(False)


@app.command()
def version():
    """
    Prints the current version of gopack.
    """
    typer.echo(f"gopack version {__version__}")


@app.command()
def dependencytree():
    """
    Prints the resolved import graph.
    """
    with _handle_errors():
        resolver, _ = _bootstrap()
        get_console().print(build_dependency_tree(resolver.import_graph))


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Displays import usage for the project source tree.
    """
    with _handle_errors():
        _, project = _bootstrap()

    if json_output:
        print_json(project.model_dump())
        return

    console = get_console()
    console.print(build_summary_table(project))
    console.print(
        f"Scanned [bold blue]{project.files_scanned}[/bold blue] files "
        f"([bold yellow]{project.test_files_scanned}[/bold yellow] tests), "
        f"[bold green]{len(project.remote_imports())}[/bold green] remote imports."
    )


@app.command()
def installdeps():
    """
    Resolves dependencies and runs go install on each declared import.
    """
    with _handle_errors():
        resolver, _ = _bootstrap()
        dependencies = resolver.dependencies or Dependencies(resolver.import_graph)
        for dep in dependencies:
            print_status(f"installing {dep.import_path}")
            run_command(
                ["go", "install", dep.import_path],
                cwd=resolver.paths.project_root,
                env=child_env(resolver.paths),
            )


@app.command()
def vendor():
    """
    Freezes the resolved dependencies into the repository.
    """
    with _handle_errors():
        resolver, _ = _bootstrap()
        lock_file = resolver.vendor()
        logger.debug(f"Lock written to {lock_file}")
    print_status("Vendor dependencies ready")


def run_go(args: List[str]) -> int:
    """Resolve dependencies, then hand the arguments to the go tool."""
    with _handle_errors():
        resolver, _ = _bootstrap()
        argv = ["go", *args]
        logger.debug(f"Running {' '.join(argv)}")
        try:
            completed = subprocess.run(
                argv,
                cwd=str(resolver.paths.project_root),
                env=child_env(resolver.paths),
            )
        except OSError as e:
            raise ScmError(f"Could not run go: {e}", argv=argv) from e
        return completed.returncode


def run(argv: Optional[List[str]] = None):
    """Console entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and not args[0].startswith("-") and args[0] not in COMMANDS:
        try:
            code = run_go(args)
        except typer.Exit as e:
            code = e.exit_code
        sys.exit(code)
    app(args=args)


if __name__ == "__main__":
    run()
