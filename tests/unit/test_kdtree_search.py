"""Unit tests for nearest and k-nearest search."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from kdindex.core.exceptions import DimensionMismatchError, IndexQueryError
from kdindex.neighbors.kdtree import KDTree, build_kdtree
from kdindex.neighbors.query import (
    batch_knearest,
    batch_nearest,
    brute_force_knearest,
    compute_recall,
)

METRICS = ["sqeuclidean", "manhattan", "chebyshev"]


class TestScenario:
    """Hand-checked queries on four labelled points."""

    def test_nearest(self, scenario_tree: KDTree) -> None:
        """C at ~0.14 beats A at ~1.27."""
        assert scenario_tree.nearest((0.9, 0.9)) == "C"
        assert scenario_tree.nearest_iterative((0.9, 0.9)) == "C"

    def test_knearest_two(self, scenario_tree: KDTree) -> None:
        assert scenario_tree.knearest((0, 0), 2) == ["A", "C"]

    def test_knearest_more_than_size(self, scenario_tree: KDTree) -> None:
        """Asking for more than N returns N, sorted, without padding."""
        assert scenario_tree.knearest((0, 0), 100) == ["A", "C", "B", "D"]

    def test_distances_are_comparable(self, scenario_tree: KDTree) -> None:
        matches = scenario_tree.knearest_neighbors((0, 0), 2)
        assert [m.distance for m in matches] == [0.0, 2.0]
        assert matches[1].point == (1, 1)

    def test_nearest_neighbor(self, scenario_tree: KDTree) -> None:
        match = scenario_tree.nearest_neighbor((8.0, 2.0))
        assert match.payload == "D"
        assert match.distance == pytest.approx(2.0)


class TestDegenerateQueries:
    """Empty trees and out-of-range k are results, not errors."""

    def test_empty_tree(self) -> None:
        tree = KDTree()
        tree.build()
        assert tree.nearest((1.0, 2.0)) is None
        assert tree.nearest_iterative((1.0, 2.0)) is None
        assert tree.knearest((1.0, 2.0), 3) == []
        assert tree.nearest_neighbor((1.0, 2.0)) is None

    def test_unbuilt_tree(self) -> None:
        tree = KDTree()
        tree.add((0.0, 0.0), "pending")
        assert tree.nearest((0.0, 0.0)) is None
        assert tree.knearest((0.0, 0.0), 1) == []

    @pytest.mark.parametrize("k", [0, -1])
    def test_k_below_one(self, scenario_tree: KDTree, k: int) -> None:
        assert scenario_tree.knearest((0, 0), k) == []

    def test_single_point(self) -> None:
        tree = build_kdtree([(3.0,)], ["only"])
        assert tree.nearest((100.0,)) == "only"
        assert tree.knearest((-5.0,), 5) == ["only"]

    def test_query_dimension_mismatch(self, scenario_tree: KDTree) -> None:
        with pytest.raises(DimensionMismatchError):
            scenario_tree.nearest((0.0, 0.0, 0.0))
        with pytest.raises(DimensionMismatchError):
            scenario_tree.knearest((0.0,), 2)

    def test_query_not_a_sequence(self, scenario_tree: KDTree) -> None:
        with pytest.raises(IndexQueryError):
            scenario_tree.nearest(1.0)


class TestExactness:
    """Tree answers match exhaustive search."""

    @pytest.mark.parametrize("metric", METRICS)
    def test_nearest_matches_brute_force(
        self, sample_points: np.ndarray, random_state: np.random.Generator, metric: str
    ) -> None:
        tree = build_kdtree(sample_points, metric=metric)
        for query in random_state.uniform(-12.0, 12.0, size=(50, 2)):
            expected = brute_force_knearest(sample_points, None, query, 1, metric=metric)[0]
            recursive = tree.nearest_neighbor(query)
            best_first = tree.nearest_neighbor(query, iterative=True)
            assert recursive.distance == pytest.approx(expected.distance)
            assert best_first.distance == pytest.approx(expected.distance)

    @pytest.mark.parametrize("metric", METRICS)
    @pytest.mark.parametrize("k", [1, 5, 32])
    def test_knearest_matches_brute_force(
        self,
        sample_points_3d: np.ndarray,
        random_state: np.random.Generator,
        metric: str,
        k: int,
    ) -> None:
        tree = build_kdtree(sample_points_3d, metric=metric)
        for query in random_state.standard_normal((20, 3)):
            found = tree.knearest_neighbors(query, k)
            expected = brute_force_knearest(sample_points_3d, None, query, k, metric=metric)
            assert len(found) == k
            assert_allclose([m.distance for m in found], [m.distance for m in expected])
            assert compute_recall([m.payload for m in found], [m.payload for m in expected]) == 1.0

    @pytest.mark.parametrize("dtype", [np.uint8, np.int8, np.int64])
    @pytest.mark.parametrize("metric", METRICS)
    def test_integer_points(self, dtype: type, metric: str) -> None:
        """Integer arrays are searched without wraparound in the plane offset."""
        points = np.array([[10, 0], [0, 0], [20, 0], [100, 0], [30, 0]], dtype=dtype)
        tree = build_kdtree(points, metric=metric)
        for query in np.array([[1, 0], [0, 1], [99, 0], [24, 0]], dtype=dtype):
            expected = brute_force_knearest(points, None, query, 3, metric=metric)
            assert tree.nearest_neighbor(query).payload == expected[0].payload
            assert tree.nearest_neighbor(query, iterative=True).payload == expected[0].payload
            assert tree.knearest(query, 3) == [m.payload for m in expected]

    def test_knearest_sorted_ascending(self, sample_points: np.ndarray) -> None:
        tree = build_kdtree(sample_points)
        distances = [m.distance for m in tree.knearest_neighbors((0.0, 0.0), 50)]
        assert distances == sorted(distances)

    def test_query_on_indexed_point(self, sample_points: np.ndarray) -> None:
        """Querying an indexed point finds that point at distance zero."""
        tree = build_kdtree(sample_points)
        for row in (0, 17, 499):
            match = tree.nearest_neighbor(sample_points[row])
            assert match.distance == 0.0
            assert match.payload == row


class TestTies:
    """Equidistant points are resolved consistently."""

    def test_nearest_agrees_with_knearest_one(
        self, clustered_points: np.ndarray, random_state: np.random.Generator
    ) -> None:
        tree = build_kdtree(clustered_points)
        queries = np.vstack([
            clustered_points[::7],
            random_state.integers(0, 4, size=(30, 2)) + 0.5,
        ])
        for query in queries:
            assert tree.nearest(query) == tree.knearest(query, 1)[0]

    def test_duplicates_all_returned(self, clustered_points: np.ndarray) -> None:
        """Twenty copies of (1, 1) fill a k=20 query at distance zero."""
        tree = build_kdtree(clustered_points)
        matches = tree.knearest_neighbors((1.0, 1.0), 20)
        assert all(m.distance == 0.0 for m in matches)
        assert len({m.payload for m in matches}) == 20

    def test_iterative_distance_on_ties(self, clustered_points: np.ndarray) -> None:
        tree = build_kdtree(clustered_points)
        for query in [(2.0, 2.0), (0.5, 0.5), (3.0, 1.5)]:
            assert (
                tree.nearest_neighbor(query, iterative=True).distance
                == tree.nearest_neighbor(query).distance
            )


class TestBatchHelpers:
    """Tests for batch query utilities."""

    def test_batch_knearest(self, scenario_tree: KDTree) -> None:
        results = batch_knearest(scenario_tree, [(0, 0), (9, 0)], k=2)
        assert results == [["A", "C"], ["D", "B"]]

    def test_batch_nearest(self, scenario_tree: KDTree) -> None:
        queries = np.array([[0.9, 0.9], [6.0, 6.0]])
        assert batch_nearest(scenario_tree, queries) == ["C", "B"]
        assert batch_nearest(scenario_tree, queries, iterative=True) == ["C", "B"]

    def test_brute_force_ties_by_position(self) -> None:
        points = [(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0)]
        matches = brute_force_knearest(points, ["r", "u", "l"], (0.0, 0.0), 2)
        assert [m.payload for m in matches] == ["r", "u"]

    def test_brute_force_degenerate(self) -> None:
        assert brute_force_knearest([], None, (0.0,), 3) == []
        assert brute_force_knearest([(0.0,)], None, (0.0,), 0) == []

    def test_compute_recall(self) -> None:
        assert compute_recall([1, 2, 3], [1, 2, 4, 5]) == 0.5
        assert compute_recall([], []) == 1.0
