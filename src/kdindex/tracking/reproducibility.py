"""Reproducibility helpers for kdindex benchmarks.

This module provides utilities for repeatable runs:
- Random seed management
- Point set hashing
- Package version capture
"""

from __future__ import annotations

import hashlib
import importlib
import random

import numpy as np


def hash_points(points: np.ndarray) -> str:
    """Compute stable hash of a point matrix."""
    points = np.ascontiguousarray(points, dtype=np.float64)
    hasher = hashlib.sha256()
    hasher.update(str(points.shape).encode())
    hasher.update(points.tobytes())
    return hasher.hexdigest()[:16]


def get_package_versions() -> dict[str, str]:
    """Get versions of key packages."""
    packages = ["numpy", "typer", "rich", "hydra", "omegaconf", "tqdm"]
    versions = {}
    for pkg in packages:
        try:
            mod = importlib.import_module(pkg)
            versions[pkg] = getattr(mod, "__version__", "unknown")
        except ImportError:
            versions[pkg] = "not installed"
    return versions


def set_all_seeds(seed: int) -> None:
    """Set all random seeds for reproducibility.

    Args:
        seed: Random seed to use.
    """
    random.seed(seed)
    np.random.seed(seed)
