"""KD-Tree Benchmark Experiment.

This script builds a kd-tree over random points, times construction and
queries, and checks every answer against an exhaustive search.

Usage:
    python experiments/run_benchmark.py
    python experiments/run_benchmark.py data.n_points=100000 data.dim=3 query.k=10
    python experiments/run_benchmark.py index.metric=manhattan
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import hydra
import numpy as np
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_benchmark(cfg: DictConfig) -> dict:
    """Build, query and verify a kd-tree as described by ``cfg``.

    Args:
        cfg: Config with ``seed``, ``data``, ``index`` and ``query`` groups.

    Returns:
        Summary dictionary with timings and exactness counts.
    """
    from kdindex.core.exceptions import ConfigurationError
    from kdindex.neighbors.kdtree import KDTree
    from kdindex.neighbors.query import brute_force_knearest, compute_recall
    from kdindex.tracking.reproducibility import hash_points, set_all_seeds

    if cfg.data.n_points < 1 or cfg.query.n_queries < 1:
        raise ConfigurationError(
            "benchmark needs data.n_points >= 1 and query.n_queries >= 1"
        )

    set_all_seeds(cfg.seed)
    rng = np.random.default_rng(cfg.seed)

    points = rng.uniform(cfg.data.low, cfg.data.high, size=(cfg.data.n_points, cfg.data.dim))
    queries = rng.uniform(cfg.data.low, cfg.data.high, size=(cfg.query.n_queries, cfg.data.dim))
    logger.info(f"Points: {points.shape} (hash {hash_points(points)})")

    tree = KDTree(metric=cfg.index.metric, dim=cfg.data.dim)
    tree.add_many(points)

    start = time.perf_counter()
    tree.build()
    build_seconds = time.perf_counter() - start

    stats = tree.stats()
    logger.info(f"Built tree in {build_seconds:.3f}s: depth {stats.depth}, {stats.n_points} nodes")

    k = cfg.query.k
    timings = {"nearest": 0.0, "nearest_iterative": 0.0, "knearest": 0.0}
    n_exact = {"nearest": 0, "nearest_iterative": 0, "knearest": 0}
    recalls = []

    for query in tqdm(queries, desc="Querying", disable=not cfg.query.progress):
        start = time.perf_counter()
        recursive = tree.nearest_neighbor(query)
        timings["nearest"] += time.perf_counter() - start

        start = time.perf_counter()
        best_first = tree.nearest_neighbor(query, iterative=True)
        timings["nearest_iterative"] += time.perf_counter() - start

        start = time.perf_counter()
        found = tree.knearest_neighbors(query, k)
        timings["knearest"] += time.perf_counter() - start

        if not cfg.query.verify:
            continue

        expected = brute_force_knearest(points, None, query, k, metric=cfg.index.metric)
        best_distance = expected[0].distance
        n_exact["nearest"] += int(np.isclose(recursive.distance, best_distance))
        n_exact["nearest_iterative"] += int(np.isclose(best_first.distance, best_distance))
        n_exact["knearest"] += int(
            np.allclose([m.distance for m in found], [m.distance for m in expected])
        )
        recalls.append(
            compute_recall([m.payload for m in found], [m.payload for m in expected])
        )

    summary = {
        "config_hash": tree.config_hash,
        "tree": stats.to_dict(),
        "build_seconds": build_seconds,
        "mean_query_seconds": {
            name: total / len(queries) for name, total in timings.items()
        },
    }
    if cfg.query.verify:
        summary["n_exact"] = n_exact
        summary["mean_recall"] = float(np.mean(recalls)) if recalls else 1.0
        summary["n_queries"] = len(queries)

    return summary


@hydra.main(version_base=None, config_path="../configs", config_name="config")
def main(cfg: DictConfig) -> None:
    """Run kd-tree benchmark experiment."""
    logger.info("Starting kd-tree benchmark")
    logger.info(f"Config:\n{OmegaConf.to_yaml(cfg)}")

    summary = run_benchmark(cfg)

    if cfg.query.verify:
        for name, count in summary["n_exact"].items():
            logger.info(f"{name}: {count} / {summary['n_queries']} exact")
        logger.info(f"Mean k-nearest recall: {summary['mean_recall']:.4f}")

    output_dir = Path(cfg.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    with open(output_dir / "benchmark_summary.json", "w") as f:
        json.dump(summary, f, indent=2)

    logger.info(f"Results saved to {output_dir}")


if __name__ == "__main__":
    main()
