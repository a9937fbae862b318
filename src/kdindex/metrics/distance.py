"""Coordinate access and comparable distances.

Points are any indexable sequence of coordinates, so a single axis is read
with ``point[axis]`` for a runtime ``axis``. Distances are "comparable"
rather than true distances: they preserve ordering, which is all the
kd-tree search needs, and avoid square roots on the hot path.

Each metric also supplies ``axis_bound``: given the signed offset ``dx``
between a query and a splitting plane, the smallest comparable distance any
point on the far side of that plane can have.
"""

from __future__ import annotations

import numpy as np

from kdindex.core.exceptions import ConfigurationError
from kdindex.core.registry import MetricRegistry, register_metric
from kdindex.core.types import DistanceMetric, Point


def difference(p1: Point, p2: Point, axis: int) -> float:
    """Signed difference of two points along one axis.

    Args:
        p1: First point.
        p2: Second point.
        axis: Coordinate index in [0, dim).

    Returns:
        ``p1[axis] - p2[axis]``.
    """
    return float(p1[axis]) - float(p2[axis])


def comparable_distance(p1: Point, p2: Point) -> float:
    """Squared Euclidean distance between two points (no square root)."""
    delta = np.subtract(p1, p2, dtype=np.float64)
    return float(np.dot(delta, delta))


@register_metric("sqeuclidean")
class SquaredEuclidean:
    """Squared L2 distance. Orders points exactly like Euclidean distance."""

    name = "sqeuclidean"

    def comparable(self, p1: Point, p2: Point) -> float:
        return comparable_distance(p1, p2)

    def axis_bound(self, dx: float) -> float:
        return dx * dx


@register_metric("manhattan")
class Manhattan:
    """L1 (city block) distance."""

    name = "manhattan"

    def comparable(self, p1: Point, p2: Point) -> float:
        return float(np.sum(np.abs(np.subtract(p1, p2, dtype=np.float64))))

    def axis_bound(self, dx: float) -> float:
        return abs(dx)


@register_metric("chebyshev")
class Chebyshev:
    """L-infinity distance: largest per-axis difference."""

    name = "chebyshev"

    def comparable(self, p1: Point, p2: Point) -> float:
        return float(np.max(np.abs(np.subtract(p1, p2, dtype=np.float64))))

    def axis_bound(self, dx: float) -> float:
        return abs(dx)


def get_metric(name: str) -> DistanceMetric:
    """Instantiate a registered distance metric by name.

    Args:
        name: Metric identifier (case-insensitive).

    Returns:
        Metric instance.

    Raises:
        ConfigurationError: If no metric is registered under ``name``.
    """
    try:
        metric_cls = MetricRegistry.get(name.lower())
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown metric '{name}'. Supported: {MetricRegistry.list_registered()}"
        ) from e
    return metric_cls()


def list_metrics() -> list[str]:
    """Names of all registered metrics."""
    return MetricRegistry.list_registered()
