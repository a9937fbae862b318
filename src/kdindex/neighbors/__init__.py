"""Spatial index implementations for nearest-neighbor search."""

from kdindex.neighbors.index import SpatialIndex
from kdindex.neighbors.heap import PriorityQueue
from kdindex.neighbors.kdtree import KDNode, KDTree, build_kdtree
from kdindex.neighbors.query import (
    batch_knearest,
    batch_nearest,
    brute_force_knearest,
    compute_recall,
)

__all__ = [
    "SpatialIndex",
    "PriorityQueue",
    "KDNode",
    "KDTree",
    "build_kdtree",
    "batch_knearest",
    "batch_nearest",
    "brute_force_knearest",
    "compute_recall",
]
