"""
kdindex: static kd-tree spatial index for exact nearest-neighbor search.

Build once from a batch of fixed-dimension points, then answer any number of
nearest and k-nearest queries against the immutable tree.
"""

from kdindex.version import __version__
from kdindex.core.types import IndexConfig, Neighbor
from kdindex.neighbors.kdtree import KDTree, build_kdtree

__all__ = [
    "__version__",
    "IndexConfig",
    "Neighbor",
    "KDTree",
    "build_kdtree",
]
