import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from .config import OUTPUT_FORMATS, load_config
from .core import Recommender
from .decorators import handle_recommender_errors
from .distances import available_distances, get_distance
from .request import load_request

# Initialize Rich Traceback for better error messages
install(show_locals=True)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

app = typer.Typer()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file to use"),
):
    """
    tico - content-based ranking of items against a target item.
    """
    config = load_config(config_path)
    ctx.obj = config

    if verbose or config.cli.verbose:
        logging.getLogger("tico").setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


@app.command()
def about():
    """Display information about tico."""
    console.print("[bold cyan]tico - Tiny Content-Based Recommender[/bold cyan]")
    console.print("")
    console.print("Ranks candidate items against a target item using:")
    console.print("  • Multivariate feature vectors")
    console.print("  • Built-in and custom distance functions")
    console.print("  • Selective min-max normalization")
    console.print("  • Weight factors")
    console.print("")
    console.print("[bold]Commands:[/bold]")
    console.print("  tico rank <request>          Rank items from a YAML/JSON request")
    console.print("  tico distances               List available distances")


@app.command()
def distances():
    """List registered distance functions."""
    table = Table(title="Distances", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Class", style="green")
    table.add_column("Normalized", justify="center", style="yellow")

    for name in available_distances():
        distance = get_distance(name)
        table.add_row(name, distance.__class__.__name__, "yes" if distance.normalized else "no")

    console.print(table)


@app.command()
@handle_recommender_errors
def rank(
    ctx: typer.Context,
    request_path: Path = typer.Argument(..., help="YAML or JSON request file"),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Number of results to show"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format (table, json)"),
    show_distances: bool = typer.Option(False, "--show-distances", help="Show distance vectors"),
):
    """
    Rank the items of a request against its target.

    Examples:
        # Rank all items
        tico rank request.yaml

        # Top 3 as JSON
        tico rank request.yaml --top-k 3 --format json
    """
    config = ctx.obj
    output_format = output_format or config.cli.output_format
    top_k = top_k if top_k is not None else config.cli.top_k

    if top_k is not None and top_k < 0:
        raise ValueError(f"--top-k must be non-negative, got {top_k}")

    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown format {output_format!r}, expected one of {OUTPUT_FORMATS}")

    request = load_request(request_path)
    results = Recommender(config.scoring).recommend(request.target, request.items, request.schema)

    if top_k is not None:
        results = results[:top_k]

    if output_format == "json":
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2, default=str))
        return

    if not results:
        console.print("[yellow]No items to rank[/yellow]")
        return

    table = Table(title=f"Ranking for {request.target.label}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Label", style="cyan")
    table.add_column("Score", justify="right", style="magenta")
    if show_distances:
        for entry in request.schema:
            table.add_column(entry.name, justify="right", style="blue")

    for position, result in enumerate(results, 1):
        row = [str(position), str(result.label), f"{result.score:.4f}"]
        if show_distances:
            row.extend(f"{d:.3f}" for d in result.distance_vector)
        table.add_row(*row)

    console.print(table)


if __name__ == "__main__":
    app()
