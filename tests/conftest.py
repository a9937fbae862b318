"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from kdindex.neighbors.kdtree import KDTree


# Seed for reproducibility
RANDOM_SEED = 42


@pytest.fixture(scope="session")
def random_state() -> np.random.Generator:
    """Seeded random generator for reproducible tests."""
    return np.random.default_rng(RANDOM_SEED)


@pytest.fixture
def sample_points(random_state: np.random.Generator) -> np.ndarray:
    """Uniform 2-D points of shape (500, 2) with distinct coordinates."""
    return random_state.uniform(-10.0, 10.0, size=(500, 2))


@pytest.fixture
def sample_points_3d(random_state: np.random.Generator) -> np.ndarray:
    """Smaller 3-D point set for fast unit tests."""
    return random_state.standard_normal((200, 3))


@pytest.fixture
def clustered_points(random_state: np.random.Generator) -> np.ndarray:
    """Points with heavy coordinate ties.

    Creates a mix of:
    - Exact duplicates of a single point
    - Points sharing one coordinate on a line
    - Integer lattice points
    """
    duplicates = np.tile([1.0, 1.0], (20, 1))
    line = np.column_stack([np.full(20, 3.0), random_state.uniform(0, 5, 20)])
    lattice = random_state.integers(0, 4, size=(60, 2)).astype(np.float64)
    return np.vstack([duplicates, line, lattice])


@pytest.fixture
def scenario_tree() -> KDTree:
    """Four labelled 2-D points, built."""
    tree = KDTree()
    for point, name in [((0, 0), "A"), ((5, 5), "B"), ((1, 1), "C"), ((9, 1), "D")]:
        tree.add(point, name)
    tree.build()
    return tree


# Markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "property: marks property-based tests")
