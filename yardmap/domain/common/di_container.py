# yardmap/domain/common/di_container.py

"""
Simple dependency injection container for the map viewer.

Interfaces are registered with either a ready instance or a factory; the
application module wires the concrete services once at startup.
"""
from typing import Type, TypeVar, Callable


T = TypeVar('T')
TBase = TypeVar('TBase')


class DIContainer:
    """
    Simple dependency injection container.

    Manages service registrations and handles dependency resolution.
    """

    def __init__(self):
        self._instance_registrations = {}
        self._factory_registrations = {}
        self._resolving = set()

    def register_instance(self, base_type: Type[TBase], instance: TBase) -> None:
        """Register an instance to be returned whenever base_type is requested."""
        self._instance_registrations[base_type] = instance

    def register_factory(self, base_type: Type[TBase], factory: Callable[[], TBase],
                         singleton: bool = True) -> None:
        """
        Register a factory that creates the service on first resolution.

        Args:
            base_type: The type to register (typically an interface)
            factory: A function that creates and returns an instance
            singleton: Cache the first created instance and return it afterwards
        """
        self._factory_registrations[base_type] = (factory, singleton)

    def resolve(self, base_type: Type[T]) -> T:
        """
        Resolve a type to its registered instance or create a new instance.

        Raises:
            ValueError: If the type is not registered or there's a circular dependency
        """
        if base_type in self._resolving:
            raise ValueError(f"Circular dependency detected while resolving {base_type.__name__}")

        if base_type in self._instance_registrations:
            return self._instance_registrations[base_type]

        if base_type in self._factory_registrations:
            factory, singleton = self._factory_registrations[base_type]
            self._resolving.add(base_type)
            try:
                instance = factory()
            finally:
                self._resolving.remove(base_type)
            if singleton:
                self._instance_registrations[base_type] = instance
            return instance

        raise ValueError(f"No registration found for {base_type.__name__}")
