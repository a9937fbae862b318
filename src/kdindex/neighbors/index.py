"""Abstract base class for spatial index implementations.

This module defines the interface that spatial indexes follow: a batch of
points is added, the index is built once, then queried any number of times.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kdindex.core.types import Payload, Point


class SpatialIndex(ABC):
    """Abstract base class for static nearest-neighbor indexes.

    All index implementations must support:
    - Registering (point, payload) pairs before a build
    - Building, and clearing back to the empty state
    - Exact nearest and k-nearest queries returning payloads
    - Configuration hashing for reproducibility
    """

    @abstractmethod
    def add(self, point: Point, payload: Payload) -> None:
        """Register one point and its payload for the next build.

        Args:
            point: Point coordinates, stored by reference.
            payload: Caller data returned by queries, stored by reference.
        """
        pass

    @abstractmethod
    def build(self) -> None:
        """Build the index from all registered points, replacing any prior build."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Discard the built index and all registered points."""
        pass

    @abstractmethod
    def nearest(self, query: Point) -> Payload | None:
        """Payload of the point nearest to ``query``, or None when empty."""
        pass

    @abstractmethod
    def nearest_iterative(self, query: Point) -> Payload | None:
        """Same result as ``nearest`` using best-first traversal."""
        pass

    @abstractmethod
    def knearest(self, query: Point, k: int) -> list[Payload]:
        """Payloads of up to ``k`` nearest points, nearest first.

        Args:
            query: Query point.
            k: Number of neighbors to return. ``k < 1`` gives an empty list.

        Returns:
            ``min(k, n_points)`` payloads in ascending distance order.
        """
        pass

    @property
    @abstractmethod
    def config_hash(self) -> str:
        """Hash of index configuration for reproducibility tracking.

        Returns:
            Hexadecimal hash string of the index configuration.
        """
        pass

    @property
    @abstractmethod
    def n_points(self) -> int:
        """Number of points registered since the last clear."""
        pass

    @property
    @abstractmethod
    def dim(self) -> int:
        """Dimensionality of points in the index (0 before the first add)."""
        pass

    @property
    @abstractmethod
    def is_built(self) -> bool:
        """Whether the index holds a built tree."""
        pass
