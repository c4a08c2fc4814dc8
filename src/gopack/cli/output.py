"""
CLI Output Utilities

Color-aware console output shared by all commands.
"""

import json
from typing import Any, Iterable, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from gopack.cli.config import CLIConfig
from gopack.resolution.graph import ImportGraph, Node
from gopack.schemas import ProjectError, ProjectStats


def get_console(stderr: bool = False) -> Console:
    """
    Build a console honouring the color settings.

    Built per call so GOPACK_SKIP_COLORS changes (tests, nested runs) apply.
    """
    no_color = not CLIConfig.show_colors()
    return Console(stderr=stderr, no_color=no_color, highlight=False, soft_wrap=True)


def announce() -> None:
    get_console(stderr=True).print("[bold white on blue]/// g o p a c k ///[/bold white on blue]")


def print_status(message: str) -> None:
    """Gray progress line."""
    get_console().print(f"[bright_black]{message}[/bright_black]")


def print_error(message: str) -> None:
    get_console(stderr=True).print(f"[red]{message}[/red]")


def print_project_errors(errors: Iterable[ProjectError]) -> None:
    console = get_console(stderr=True)
    for error in errors:
        console.print(f"[red]{error}[/red]")


def print_json(data: Any, minified: Optional[bool] = False) -> None:
    if minified:
        typer.echo(json.dumps(data, separators=(',', ':')))
    else:
        typer.echo(json.dumps(data, indent=2))


def build_dependency_tree(import_graph: ImportGraph, title: str = "dependencies") -> Tree:
    """
    Render the import graph as a rich Tree.

    Interior segments are plain; leaves show the resolved dependency.
    """
    tree = Tree(f"[bold]{title}[/bold]")
    parents = {-1: tree}

    def visit(node: Node, depth: int) -> None:
        parent = parents[depth - 1]
        if node.leaf:
            label = f"[green]{node.key}[/green]"
            dep = node.dependency
            if getattr(dep, "pinned", False):
                label += f" [bright_black]({dep.checkout_type} {dep.checkout_spec})[/bright_black]"
        else:
            label = f"[blue]{node.key}[/blue]"
        parents[depth] = parent.add(label)

    import_graph.pre_order_visit(visit)
    return tree


def build_summary_table(project: ProjectStats) -> Table:
    table = Table(title=f"Import usage for '{project.root}'")
    table.add_column("Import", style="cyan", no_wrap=True)
    table.add_column("Remote", style="magenta")
    table.add_column("Test only", style="yellow")
    table.add_column("Uses", justify="right", style="green")

    for path in sorted(project.imports_by_path):
        stats = project.imports_by_path[path]
        table.add_row(
            path,
            "yes" if stats.remote else "no",
            "yes" if stats.test else "no",
            str(len(stats.locations)),
        )
    return table
