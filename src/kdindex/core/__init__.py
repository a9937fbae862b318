"""Core abstractions and types for kdindex."""

from kdindex.core.types import (
    DistanceMetric,
    IndexConfig,
    Neighbor,
    Payload,
    Point,
    TreeStats,
)
from kdindex.core.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    IndexBuildError,
    IndexQueryError,
    KDIndexError,
)
from kdindex.core.registry import MetricRegistry, register_metric

__all__ = [
    # Types
    "Point",
    "Payload",
    "Neighbor",
    "IndexConfig",
    "TreeStats",
    "DistanceMetric",
    # Exceptions
    "KDIndexError",
    "IndexBuildError",
    "IndexQueryError",
    "DimensionMismatchError",
    "ConfigurationError",
    # Registry
    "MetricRegistry",
    "register_metric",
]
