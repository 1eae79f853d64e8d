"""Registry-backed factory base class.

Configuration sources are looked up by a short type name ("yaml", "dict",
or anything registered at runtime). Subclasses pick the protocol they build,
the default type name, and lazily register the built-in implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

T = TypeVar("T")


class PluginFactory(ABC, Generic[T]):
    """Create instances from a class-level registry of implementation types.

    Subclasses define:
        - _registry: mapping of type names to implementation classes
        - _default_type: type name used when ``create`` gets no name
        - _entity_name: label used in error messages
        - _ensure_defaults_registered(): registers the built-in implementations

    Example subclass:
        class ConfigurationSourceFactory(PluginFactory[ConfigurationSourceProtocol]):
            _registry: ClassVar[dict[str, type[ConfigurationSourceProtocol]]] = {}
            _default_type: ClassVar[str] = "yaml"
            _entity_name: ClassVar[str] = "configuration source"
    """

    _registry: ClassVar[dict[str, type[Any]]]
    _default_type: ClassVar[str]
    _entity_name: ClassVar[str]

    @classmethod
    @abstractmethod
    def _ensure_defaults_registered(cls) -> None:
        """Register the built-in implementations if they are missing."""
        ...

    @classmethod
    def register(cls, name: str, impl_class: type[T]) -> None:
        """Register (or replace) an implementation under ``name``."""
        cls._registry[name] = impl_class

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove ``name`` from the registry. Unknown names are ignored."""
        cls._registry.pop(name, None)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        cls._ensure_defaults_registered()
        return name in cls._registry

    @classmethod
    def create(cls, name: str | None = None, **kwargs: Any) -> T:
        """Instantiate the implementation registered under ``name``.

        Args:
            name: Registered type name. Falls back to the default type.
            **kwargs: Forwarded to the implementation's constructor.

        Returns:
            New instance of the requested implementation.

        Raises:
            ValueError: If nothing is registered under the name.
        """
        cls._ensure_defaults_registered()

        type_name = name if name is not None else cls._default_type
        impl_class = cls._registry.get(type_name)
        if impl_class is None:
            available = ", ".join(sorted(cls._registry))
            raise ValueError(
                f"Unknown {cls._entity_name} type: {type_name}. Available types: {available}"
            )
        return impl_class(**kwargs)  # type: ignore[no-any-return]

    @classmethod
    def available_types(cls) -> list[str]:
        cls._ensure_defaults_registered()
        return sorted(cls._registry)

    @classmethod
    def clear_registry(cls) -> None:
        """Drop every registration, built-ins included (used by tests)."""
        cls._registry.clear()
