"""Coordinate access and distance metrics."""

from kdindex.metrics.distance import (
    Chebyshev,
    Manhattan,
    SquaredEuclidean,
    comparable_distance,
    difference,
    get_metric,
    list_metrics,
)

__all__ = [
    "difference",
    "comparable_distance",
    "SquaredEuclidean",
    "Manhattan",
    "Chebyshev",
    "get_metric",
    "list_metrics",
]
