"""Core type definitions for kdindex.

This module defines the data structures shared across the package: point
and payload aliases, query results, index configuration and the distance
metric protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, Union, runtime_checkable

import numpy as np
from numpy.typing import NDArray


# Type aliases
Point = Union[Sequence[float], NDArray[np.float64]]
Payload = Any
PointMatrix = NDArray[np.float64]


@dataclass(frozen=True, slots=True)
class Neighbor:
    """A single query result.

    Attributes:
        payload: Caller-supplied payload, returned by reference.
        point: Caller-supplied point the payload was added with.
        distance: Comparable distance to the query (squared for the
            default metric).
    """

    payload: Payload
    point: Point
    distance: float

    def __repr__(self) -> str:
        return f"Neighbor(payload={self.payload!r}, distance={self.distance:.6g})"


@dataclass(slots=True)
class IndexConfig:
    """Configuration for a spatial index.

    Attributes:
        metric: Name of a registered distance metric.
        dim: Fixed number of coordinates per point. None lets the first
            added point decide.
    """

    metric: str = "sqeuclidean"
    dim: int | None = None


@dataclass(slots=True)
class TreeStats:
    """Shape summary of a built tree."""

    n_points: int
    depth: int
    dim: int
    metric: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "n_points": self.n_points,
            "depth": self.depth,
            "dim": self.dim,
            "metric": self.metric,
        }


# Protocol definitions for extensibility


@runtime_checkable
class DistanceMetric(Protocol):
    """Protocol for distance metrics usable by the kd-tree."""

    @property
    def name(self) -> str:
        """Unique metric identifier."""
        ...

    def comparable(self, p1: Point, p2: Point) -> float:
        """Order-preserving distance between two points."""
        ...

    def axis_bound(self, dx: float) -> float:
        """Lower bound on comparable distance across a splitting plane."""
        ...
