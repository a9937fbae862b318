"""Command-line interface for kdindex.

This module provides the main CLI entry point for querying point sets
stored as ``.npy`` arrays and for inspecting the environment.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True)],
)

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(
    name="kdindex",
    help="Static kd-tree index for exact nearest-neighbor search",
    add_completion=False,
)


def _parse_point(text: str) -> tuple[float, ...]:
    try:
        return tuple(float(value) for value in text.split(","))
    except ValueError as e:
        raise typer.BadParameter(f"Expected comma-separated numbers, got {text!r}") from e


@app.command()
def query(
    points_path: Path = typer.Option(
        ...,
        "--points", "-p",
        help="Path to an (n, dim) .npy array of points",
    ),
    point: str = typer.Option(
        ...,
        "--point", "-q",
        help="Query point as comma-separated coordinates, e.g. 0.5,1.2",
    ),
    k: int = typer.Option(
        1,
        "--k",
        help="Number of neighbors to return",
    ),
    metric: str = typer.Option(
        "sqeuclidean",
        "--metric", "-m",
        help="Distance metric (sqeuclidean, manhattan, chebyshev)",
    ),
    iterative: bool = typer.Option(
        False,
        "--iterative",
        help="Use best-first search (single nearest only)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Build a kd-tree over a point file and print the nearest rows."""
    import numpy as np

    from kdindex.core.exceptions import KDIndexError
    from kdindex.neighbors.kdtree import KDTree
    from kdindex.tracking.reproducibility import hash_points

    if verbose:
        logging.getLogger("kdindex").setLevel(logging.DEBUG)

    query_point = _parse_point(point)

    try:
        points = np.load(points_path)
        if points.ndim != 2:
            raise ValueError(f"expected a 2-D array, got shape {points.shape}")

        console.print(f"[bold blue]kdindex query[/bold blue]")
        console.print(f"Points: {points_path} {points.shape} (hash {hash_points(points)})")

        tree = KDTree(metric=metric, dim=points.shape[1])
        tree.add_many(points)
        tree.build()

        if iterative and k == 1:
            match = tree.nearest_neighbor(query_point, iterative=True)
            matches = [match] if match is not None else []
        else:
            if iterative:
                logger.warning("--iterative applies to k=1 only; using k-nearest search")
            matches = tree.knearest_neighbors(query_point, k)

    except (OSError, ValueError, KDIndexError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{len(matches)} nearest ({tree.metric})")
    table.add_column("rank", justify="right")
    table.add_column("row", justify="right")
    table.add_column("point")
    table.add_column("distance", justify="right")
    for rank, match in enumerate(matches, start=1):
        coords = ", ".join(f"{value:g}" for value in match.point)
        table.add_row(str(rank), str(match.payload), coords, f"{match.distance:.6g}")
    console.print(table)


@app.command()
def info() -> None:
    """Show kdindex version and environment info."""
    from kdindex import __version__
    from kdindex.metrics.distance import list_metrics
    from kdindex.tracking.reproducibility import get_package_versions

    console.print(f"[bold]kdindex v{__version__}[/bold]")
    console.print(f"Metrics: {', '.join(list_metrics())}")
    console.print("\n[cyan]Package versions:[/cyan]")

    versions = get_package_versions()
    for pkg, version in versions.items():
        console.print(f"  {pkg}: {version}")


if __name__ == "__main__":
    app()
