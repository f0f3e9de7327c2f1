"""Minimal dependency injection container.

Services are registered as factories keyed by type and created lazily
as singletons on first resolve.
"""

from typing import Any, Callable, TypeVar

T = TypeVar("T")


class ServiceContainer:
    """Registry of service factories keyed by type."""

    def __init__(self) -> None:
        self._factories: dict[type, Callable[["ServiceContainer"], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register(self, key: type, factory: Callable[["ServiceContainer"], Any]) -> None:
        """Register a factory that builds the service for key."""
        self._factories[key] = factory
        self._instances.pop(key, None)

    def register_instance(self, key: type, instance: Any) -> None:
        """Register an already-built service."""
        self._instances[key] = instance

    def resolve(self, key: type[T]) -> T:
        """Get the service registered for key, building it if needed.

        Raises:
            KeyError: If nothing is registered for key.
        """
        if key in self._instances:
            return self._instances[key]
        if key not in self._factories:
            raise KeyError(f"No service registered for {key.__name__}")
        instance = self._factories[key](self)
        self._instances[key] = instance
        return instance
