"""Custom exceptions for kdindex.

All kdindex-specific exceptions inherit from KDIndexError for easy catching.
"""

from __future__ import annotations


class KDIndexError(Exception):
    """Base exception for all kdindex errors."""

    pass


class IndexBuildError(KDIndexError):
    """Error during spatial index construction."""

    def __init__(self, index_type: str, message: str) -> None:
        self.index_type = index_type
        super().__init__(f"Failed to build {index_type} index: {message}")


class IndexQueryError(KDIndexError):
    """Error during spatial index query."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Index query failed: {message}")


class DimensionMismatchError(KDIndexError):
    """Point dimensionality does not match the index."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Point has {actual} coordinates, index expects {expected}"
        )


class ConfigurationError(KDIndexError):
    """Invalid configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Configuration error: {message}")
