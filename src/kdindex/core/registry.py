"""Registry pattern for distance metrics.

This module provides a registry that allows dynamic registration of
pluggable components, currently the distance metrics a kd-tree can use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar, Generic, Callable

if TYPE_CHECKING:
    from kdindex.core.types import DistanceMetric

T = TypeVar("T")


class Registry(Generic[T]):
    """Generic registry for components.

    Example usage:
        >>> metric_registry = Registry[DistanceMetric]("metrics")
        >>> @metric_registry.register("my_metric")
        ... class MyMetric:
        ...     pass
        >>> metric_registry.get("my_metric")
        <class 'MyMetric'>
    """

    def __init__(self, name: str) -> None:
        """Initialize registry.

        Args:
            name: Human-readable name for error messages.
        """
        self._name = name
        self._registry: dict[str, type[T]] = {}

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        """Decorator to register a component.

        Args:
            name: Unique identifier for the component.

        Returns:
            Decorator function.
        """

        def decorator(cls: type[T]) -> type[T]:
            if name in self._registry:
                raise ValueError(
                    f"Component '{name}' already registered in {self._name} registry"
                )
            self._registry[name] = cls
            return cls

        return decorator

    def get(self, name: str) -> type[T]:
        """Get a registered component by name.

        Args:
            name: Component identifier.

        Returns:
            The registered component class.

        Raises:
            KeyError: If component is not registered.
        """
        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise KeyError(
                f"Component '{name}' not found in {self._name} registry. "
                f"Available: {available}"
            )
        return self._registry[name]

    def list_registered(self) -> list[str]:
        """List all registered component names."""
        return sorted(self._registry.keys())


MetricRegistry = Registry["DistanceMetric"]("metrics")


def register_metric(name: str) -> Callable[[type], type]:
    """Convenience decorator to register a distance metric.

    Example:
        >>> @register_metric("sqeuclidean")
        ... class SquaredEuclidean:
        ...     name = "sqeuclidean"
        ...     def comparable(self, p1, p2):
        ...         ...
        ...     def axis_bound(self, dx):
        ...         return dx * dx
    """
    return MetricRegistry.register(name)
