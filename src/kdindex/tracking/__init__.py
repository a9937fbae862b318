"""Reproducibility infrastructure."""

from kdindex.tracking.reproducibility import (
    get_package_versions,
    hash_points,
    set_all_seeds,
)

__all__ = [
    "get_package_versions",
    "hash_points",
    "set_all_seeds",
]
