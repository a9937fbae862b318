"""Utility functions for nearest-neighbor queries.

This module provides batch helpers over a built index and an exhaustive
reference search used to verify exactness.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from kdindex.core.types import Neighbor, Payload, Point
from kdindex.metrics.distance import get_metric

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kdindex.neighbors.index import SpatialIndex


def batch_knearest(
    index: SpatialIndex,
    queries: Sequence[Point] | NDArray[np.float64],
    k: int,
) -> list[list[Payload]]:
    """Query k nearest neighbors for multiple points.

    Args:
        index: Built spatial index.
        queries: Query points, e.g. an (n_queries, dim) array.
        k: Number of neighbors per query.

    Returns:
        One payload list per query, nearest first.
    """
    return [index.knearest(query, k) for query in queries]


def batch_nearest(
    index: SpatialIndex,
    queries: Sequence[Point] | NDArray[np.float64],
    iterative: bool = False,
) -> list[Payload | None]:
    """Query the single nearest neighbor for multiple points."""
    search = index.nearest_iterative if iterative else index.nearest
    return [search(query) for query in queries]


def brute_force_knearest(
    points: Sequence[Point] | NDArray[np.float64],
    payloads: Sequence[Payload] | None,
    query: Point,
    k: int,
    metric: str = "sqeuclidean",
) -> list[Neighbor]:
    """Exhaustive k-nearest search over every point.

    Ties are broken by position in ``points``.

    Args:
        points: All candidate points.
        payloads: One payload per point. Defaults to positions.
        query: Query point.
        k: Number of neighbors to return.
        metric: Name of a registered distance metric.

    Returns:
        Up to ``k`` neighbors in ascending distance order.
    """
    if k < 1 or len(points) == 0:
        return []
    if payloads is None:
        payloads = range(len(points))

    distance = get_metric(metric)
    distances = np.array([distance.comparable(query, point) for point in points])
    order = np.argsort(distances, kind="stable")[:k]
    return [Neighbor(payloads[i], points[i], float(distances[i])) for i in order]


def compute_recall(
    found: Sequence[Payload],
    expected: Sequence[Payload],
) -> float:
    """Fraction of expected payloads present in the found set.

    Args:
        found: Payloads returned by an index.
        expected: Reference payloads (e.g. from brute force).

    Returns:
        Recall in [0, 1]; 1.0 when nothing is expected.
    """
    if len(expected) == 0:
        return 1.0
    found_set = set(found)
    hits = sum(1 for payload in expected if payload in found_set)
    return hits / len(expected)
