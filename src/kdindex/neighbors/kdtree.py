"""Static kd-tree for exact nearest-neighbor search.

The tree is built once from a batch of (point, payload) pairs by repeated
median splits, cycling the split axis with depth. After ``build`` it is
immutable and can serve any number of queries, including concurrent
read-only queries from several threads.

Points and payloads are held by reference: queries hand back the very
objects that were passed to ``add``.

Example:
    >>> tree = KDTree()
    >>> for point, name in [((0, 0), "A"), ((5, 5), "B"), ((1, 1), "C")]:
    ...     tree.add(point, name)
    >>> tree.build()
    >>> tree.nearest((0.9, 0.9))
    'C'
    >>> tree.knearest((0, 0), 2)
    ['A', 'C']
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

import numpy as np

from kdindex.core.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    IndexBuildError,
    IndexQueryError,
)
from kdindex.core.types import IndexConfig, Neighbor, Payload, Point, TreeStats
from kdindex.metrics.distance import difference, get_metric
from kdindex.neighbors.heap import PriorityQueue
from kdindex.neighbors.index import SpatialIndex

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KDNode:
    """One vertex of a built tree.

    Attributes:
        point: The median point chosen when this node was built.
        payload: Payload registered with ``point``.
        axis: Coordinate axis this node splits on.
        left: Subtree of points at or below ``point[axis]``.
        right: Subtree of points at or above ``point[axis]``.
    """

    point: Point
    payload: Payload
    axis: int
    left: KDNode | None = None
    right: KDNode | None = None

    @property
    def split_value(self) -> float:
        """Coordinate of ``point`` along the split axis."""
        return float(self.point[self.axis])


@dataclass(slots=True)
class _BestMatch:
    node: KDNode
    distance: float


class KDTree(SpatialIndex):
    """Balanced kd-tree with recursive and best-first exact search.

    The lifecycle is ``add`` (any number of times), ``build``, then queries.
    ``add`` after ``build`` only affects the next ``build``; ``clear``
    returns the tree to its initial empty state.
    """

    def __init__(
        self,
        config: IndexConfig | None = None,
        *,
        metric: str | None = None,
        dim: int | None = None,
    ) -> None:
        """Initialize an empty tree.

        Args:
            config: Index configuration. Defaults to ``IndexConfig()``.
            metric: Overrides ``config.metric``.
            dim: Overrides ``config.dim``.

        Raises:
            ConfigurationError: If the metric is unknown or ``dim`` is not
                positive.
        """
        config = config or IndexConfig()
        self.config = IndexConfig(
            metric=metric if metric is not None else config.metric,
            dim=dim if dim is not None else config.dim,
        )
        if self.config.dim is not None and self.config.dim < 1:
            raise ConfigurationError(f"dim must be positive, got {self.config.dim}")

        self._metric = get_metric(self.config.metric)
        self._dim = self.config.dim or 0
        self._pending: list[tuple[Point, Payload]] = []
        self._root: KDNode | None = None
        self._built = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add(self, point: Point, payload: Payload) -> None:
        """Register one point and its payload for the next build.

        Raises:
            DimensionMismatchError: If ``point`` has the wrong number of
                coordinates.
        """
        n_coords = len(point)
        if self._dim == 0:
            if n_coords == 0:
                raise IndexBuildError("kdtree", "points need at least one coordinate")
            self._dim = n_coords
        elif n_coords != self._dim:
            raise DimensionMismatchError(self._dim, n_coords)
        self._pending.append((point, payload))

    def add_many(
        self,
        points: Sequence[Point] | np.ndarray,
        payloads: Sequence[Payload] | None = None,
    ) -> None:
        """Register several points at once.

        Args:
            points: Points, e.g. the rows of an (n, dim) array. Rows are
                stored as views, not copies.
            payloads: One payload per point. Defaults to the row positions.
        """
        if payloads is None:
            payloads = range(len(points))
        elif len(payloads) != len(points):
            raise IndexBuildError(
                "kdtree", f"got {len(points)} points but {len(payloads)} payloads"
            )
        for point, payload in zip(points, payloads):
            self.add(point, payload)

    def build(self) -> None:
        """Build the tree from every registered point.

        The registered points are reordered in place. Any previous tree is
        replaced; with nothing registered the tree is empty.

        Raises:
            IndexBuildError: If point coordinates are not numeric.
        """
        try:
            self._root = self._build(0, len(self._pending), 0)
        except (TypeError, ValueError) as e:
            raise IndexBuildError("kdtree", str(e)) from e
        self._built = True
        logger.debug(
            f"Built kd-tree over {len(self._pending)} points "
            f"(dim={self._dim}, metric={self._metric.name})"
        )

    def _build(self, lo: int, hi: int, depth: int) -> KDNode | None:
        if lo >= hi:
            return None

        nodes = self._pending
        axis = depth % self._dim
        median = (hi - lo) // 2

        if hi - lo > 1:
            coords = np.fromiter(
                (point[axis] for point, _ in nodes[lo:hi]),
                dtype=np.float64,
                count=hi - lo,
            )
            order = np.argpartition(coords, median)
            nodes[lo:hi] = [nodes[lo + i] for i in order]

        point, payload = nodes[lo + median]
        return KDNode(
            point=point,
            payload=payload,
            axis=axis,
            left=self._build(lo, lo + median, depth + 1),
            right=self._build(lo + median + 1, hi, depth + 1),
        )

    def clear(self) -> None:
        """Discard the tree and every registered point."""
        self._root = None
        self._pending.clear()
        self._dim = self.config.dim or 0
        self._built = False
        logger.debug("Cleared kd-tree")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _check_query(self, query: Point) -> None:
        try:
            n_coords = len(query)
        except TypeError as e:
            raise IndexQueryError(f"query must be a sequence of coordinates: {e}") from e
        if n_coords != self._dim:
            raise DimensionMismatchError(self._dim, n_coords)

    def nearest(self, query: Point) -> Payload | None:
        """Payload nearest to ``query`` using recursive branch and bound."""
        match = self.nearest_neighbor(query)
        return match.payload if match is not None else None

    def nearest_iterative(self, query: Point) -> Payload | None:
        """Payload nearest to ``query`` using best-first traversal."""
        match = self.nearest_neighbor(query, iterative=True)
        return match.payload if match is not None else None

    def nearest_neighbor(self, query: Point, iterative: bool = False) -> Neighbor | None:
        """Nearest point with its payload and comparable distance.

        Args:
            query: Query point.
            iterative: Use the best-first search instead of the recursive one.

        Returns:
            The nearest neighbor, or None if the tree is empty.
        """
        if self._root is None:
            return None
        self._check_query(query)

        best = _BestMatch(self._root, math.inf)
        if iterative:
            self._nearest_best_first(query, best)
        else:
            self._nearest(query, self._root, best)
        return Neighbor(best.node.payload, best.node.point, best.distance)

    def _nearest(self, query: Point, node: KDNode | None, best: _BestMatch) -> None:
        if node is None:
            return

        d = self._metric.comparable(query, node.point)
        dx = difference(query, node.point, node.axis)

        if d < best.distance:
            best.node = node
            best.distance = d

        near, far = (node.left, node.right) if dx <= 0 else (node.right, node.left)

        self._nearest(query, near, best)

        if self._metric.axis_bound(dx) >= best.distance:
            return

        self._nearest(query, far, best)

    def _nearest_best_first(self, query: Point, best: _BestMatch) -> None:
        # Entries are (lower bound on distance, subtree root).
        queue: PriorityQueue[KDNode] = PriorityQueue()
        queue.push(0.0, best.node)

        while queue:
            bound, node = queue.peek()
            if bound >= best.distance:
                return
            queue.pop()

            d = self._metric.comparable(query, node.point)
            dx = difference(query, node.point, node.axis)

            if d < best.distance:
                best.node = node
                best.distance = d

            near, far = (node.left, node.right) if dx <= 0 else (node.right, node.left)

            if far is not None:
                queue.push(self._metric.axis_bound(dx), far)
            if near is not None:
                queue.push(0.0, near)

    def knearest(self, query: Point, k: int) -> list[Payload]:
        """Payloads of up to ``k`` nearest points, nearest first."""
        return [match.payload for match in self.knearest_neighbors(query, k)]

    def knearest_neighbors(self, query: Point, k: int) -> list[Neighbor]:
        """Up to ``k`` nearest neighbors with distances, nearest first.

        Args:
            query: Query point.
            k: Number of neighbors. ``k < 1`` gives an empty list.

        Returns:
            ``min(k, n)`` neighbors in ascending distance order, where ``n``
            is the number of points in the built tree.
        """
        if self._root is None or k < 1:
            return []
        self._check_query(query)

        queue: PriorityQueue[KDNode] = PriorityQueue(largest_on_top=True, capacity=k)
        self._knearest(query, self._root, k, queue)

        # Queue drains worst first.
        matches = [Neighbor(node.payload, node.point, d) for d, node in queue.drain()]
        matches.reverse()
        return matches

    def _knearest(
        self,
        query: Point,
        node: KDNode | None,
        k: int,
        queue: PriorityQueue[KDNode],
    ) -> None:
        if node is None:
            return

        d = self._metric.comparable(query, node.point)
        dx = difference(query, node.point, node.axis)

        if len(queue) < k or d <= queue.top_priority():
            queue.push(d, node)

        near, far = (node.left, node.right) if dx <= 0 else (node.right, node.left)

        self._knearest(query, near, k, queue)

        # Until k candidates are held, any point could still qualify.
        if queue.is_full() and self._metric.axis_bound(dx) >= queue.top_priority():
            return

        self._knearest(query, far, k, queue)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def root(self) -> KDNode | None:
        """Root of the built tree, or None."""
        return self._root

    def nodes(self) -> Iterator[KDNode]:
        """Yield every node of the built tree in pre-order."""
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def stats(self) -> TreeStats:
        """Size and depth of the built tree."""
        n_nodes = 0
        depth = 0
        stack = [(self._root, 1)] if self._root is not None else []
        while stack:
            node, level = stack.pop()
            n_nodes += 1
            depth = max(depth, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return TreeStats(
            n_points=n_nodes,
            depth=depth,
            dim=self._dim,
            metric=self._metric.name,
        )

    @property
    def metric(self) -> str:
        """Name of the distance metric."""
        return self._metric.name

    @property
    def config_hash(self) -> str:
        """Hash of index configuration for reproducibility."""
        config = {
            "type": "kdtree",
            "metric": self._metric.name,
            "dim": self._dim,
        }
        config_str = json.dumps(config, sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def n_points(self) -> int:
        """Number of points registered since the last clear."""
        return len(self._pending)

    @property
    def dim(self) -> int:
        """Dimensionality of points in the index."""
        return self._dim

    @property
    def is_built(self) -> bool:
        """Whether ``build`` has run since construction or the last clear."""
        return self._built

    def __len__(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return (
            f"KDTree(n_points={self.n_points}, dim={self._dim}, "
            f"metric={self._metric.name!r}, built={self._built})"
        )


def build_kdtree(
    points: Sequence[Point] | np.ndarray,
    payloads: Sequence[Payload] | None = None,
    metric: str = "sqeuclidean",
) -> KDTree:
    """Convenience function to build a kd-tree in one call.

    Args:
        points: Points to index, e.g. an (n, dim) array.
        payloads: One payload per point. Defaults to row positions.
        metric: Name of a registered distance metric.

    Returns:
        Built KDTree ready for queries.
    """
    tree = KDTree(metric=metric)
    tree.add_many(points, payloads)
    tree.build()
    return tree
