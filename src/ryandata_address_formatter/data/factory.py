from __future__ import annotations

from typing import Any, ClassVar

from ryandata_address_formatter.core.factory import PluginFactory
from ryandata_address_formatter.protocols import ConfigurationSourceProtocol


class ConfigurationSourceFactory(PluginFactory[ConfigurationSourceProtocol]):
    """Factory for creating rule corpus sources.

    Example:
        >>> source = ConfigurationSourceFactory.create()
        >>> source = ConfigurationSourceFactory.create("yaml", conf_dir="/etc/addresses")
        >>> source = ConfigurationSourceFactory.create("dict", worldwide={...})

        # Register a custom source
        >>> ConfigurationSourceFactory.register("sqlite", SQLiteConfigurationSource)
    """

    _registry: ClassVar[dict[str, type[ConfigurationSourceProtocol]]] = {}
    _default_type: ClassVar[str] = "yaml"
    _entity_name: ClassVar[str] = "configuration source"

    @classmethod
    def _ensure_defaults_registered(cls) -> None:
        """Ensure the built-in sources are registered."""
        if "yaml" not in cls._registry:
            from ryandata_address_formatter.data.yaml_source import YAMLConfigurationSource

            cls._registry["yaml"] = YAMLConfigurationSource
        if "dict" not in cls._registry:
            from ryandata_address_formatter.data.dict_source import DictConfigurationSource

            cls._registry["dict"] = DictConfigurationSource

    @classmethod
    def create(  # type: ignore[override]
        cls,
        source_type: str | None = None,
        **kwargs: Any,
    ) -> ConfigurationSourceProtocol:
        """Create a configuration source.

        Args:
            source_type: Registered source name. Defaults to "yaml".
            **kwargs: Arguments for the source constructor.

        Raises:
            ValueError: If the source type is not registered.
        """
        return super().create(source_type, **kwargs)
