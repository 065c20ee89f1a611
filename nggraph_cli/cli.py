"""Typer-based CLI for nggraph dependency graphs."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__, config
from .analyzer import ProjectAnalyzer
from .config_manager import AnalysisSettings, load_config, load_settings, save_config
from .graph_export import EXPORT_FORMATS, GraphFormatError, export_graph, load_graph
from .graph_filter import filter_graph, observed_facets, parse_rule_options
from .models import Graph

console = Console()

app = typer.Typer(
    help="🕸️  nggraph: semantic dependency graphs for TypeScript and Angular projects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration: show or initialise analysis settings.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"nggraph v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log analysis progress."),
):
    """nggraph: classify declarations and build filterable dependency graphs."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


HIDE_HELP = "Hide nodes whose attribute equals a value, as KEY=VALUE (repeatable)."
SHOW_HELP = "Keep only nodes that carry KEY, as KEY=VALUE (repeatable)."


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise typer.BadParameter(f"Format must be one of: {', '.join(EXPORT_FORMATS)}")
    return fmt


def _apply_rules(graph: Graph, hide: List[str], show: List[str]) -> Graph:
    if not hide and not show:
        return graph
    try:
        rules = parse_rule_options(hide, show)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    return filter_graph(graph, rules)


def _load(graph_file: Path) -> Graph:
    try:
        return load_graph(graph_file)
    except GraphFormatError as exc:
        raise typer.BadParameter(str(exc))


def _write(graph: Graph, output: Optional[Path], fmt: str, default_stem: str) -> Path:
    if output is None:
        output = Path.cwd() / f"{default_stem}.{fmt}"
    export_graph(graph, output, fmt)
    return output


@app.command("analyze")
def analyze(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to the TypeScript project."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Export format: json, html or dot."),
    hide: List[str] = typer.Option([], "--hide", help=HIDE_HELP),
    show: List[str] = typer.Option([], "--show", help=SHOW_HELP),
):
    """Parse a project and write its dependency graph."""
    settings = load_settings()
    fmt = _check_format(fmt or settings.export_format)

    analyzer = ProjectAnalyzer(project_path, settings)
    graph = _apply_rules(analyzer.analyze(), hide, show)
    written = _write(graph, output, fmt, f"{project_path.resolve().name}_graph")

    typer.echo(f"Analyzed '{analyzer.project_root}'.")
    typer.echo(f"Nodes: {len(graph.nodes)} | Edges: {len(graph.links)}")

    skipped = Counter(d.message for d in analyzer.context.diagnostics)
    if skipped:
        table = Table(title="Skipped declarations")
        table.add_column("Reason")
        table.add_column("Count", justify="right")
        for message, count in skipped.most_common():
            table.add_row(escape(message), str(count))
        console.print(table)

    typer.echo(f"Wrote graph to {written}")


@app.command("filter")
def filter_command(
    graph_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Graph JSON produced by 'analyze'."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    fmt: str = typer.Option("json", "--format", "-f", help="Export format: json, html or dot."),
    hide: List[str] = typer.Option([], "--hide", help=HIDE_HELP),
    show: List[str] = typer.Option([], "--show", help=SHOW_HELP),
):
    """Apply attribute rules to a saved graph."""
    fmt = _check_format(fmt)
    graph = _load(graph_file)
    filtered = _apply_rules(graph, hide, show)
    written = _write(filtered, output, fmt, f"{graph_file.stem}_filtered")

    typer.echo(f"Kept {len(filtered.nodes)}/{len(graph.nodes)} nodes and {len(filtered.links)}/{len(graph.links)} edges.")
    typer.echo(f"Wrote graph to {written}")


@app.command("facets")
def facets(
    graph_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Graph JSON produced by 'analyze'."),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Only list values of this attribute."),
):
    """List attribute values that filter rules can toggle."""
    observed = observed_facets(_load(graph_file))
    if key is not None:
        if key not in observed:
            typer.echo(f"❌ No node carries attribute '{key}'.", err=True)
            raise typer.Exit(code=1)
        observed = {key: observed[key]}

    table = Table(title=f"Attributes in {graph_file.name}")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Nodes", justify="right")
    for facet_key, values in observed.items():
        if facet_key in ("Name", "File Path") and key is None:
            table.add_row(facet_key, f"[dim]{len(values)} distinct values[/dim]", str(sum(values.values())))
            continue
        for value, count in values.items():
            table.add_row(escape(facet_key), escape(value), str(count))
    console.print(table)


@app.command("export")
def export(
    graph_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Graph JSON produced by 'analyze'."),
    fmt: str = typer.Option("html", "--format", "-f", help="Export format: json, html or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
):
    """Convert a saved graph to HTML or Graphviz DOT."""
    fmt = _check_format(fmt)
    written = _write(_load(graph_file), output, fmt, graph_file.stem)
    typer.echo(f"Exported graph to {written}")


@config_app.command("show")
def config_show():
    """Show effective analysis settings."""
    table = Table(title="Analysis settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for name, value in load_config().items():
        shown = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(name, escape(shown))
    console.print(table)


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing analysis settings."),
):
    """Write default analysis settings to the config file."""
    if config.CONFIG_FILE.exists() and not force:
        typer.echo(f"Config already exists at {config.CONFIG_FILE} (use --force to overwrite).")
        raise typer.Exit(code=0)
    written = save_config(AnalysisSettings())
    typer.echo(f"Wrote default settings to {written}")


if __name__ == "__main__":
    app()
