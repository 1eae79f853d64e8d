from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigurationSourceProtocol(Protocol):
    """Protocol for rule corpus sources.

    Implementations return the raw, already-deserialized corpus documents;
    turning them into a rule store is done by ``data.store.build_rule_store``.
    Supports different backends (bundled YAML, a directory, in-memory dicts).
    """

    @property
    def name(self) -> str:
        """Name of this source for logging and error reporting."""
        ...

    def load_components(self) -> list[dict[str, Any]]:
        """Load the component alias documents.

        Returns:
            One ``{"name": ..., "aliases": [...]}`` mapping per component.
        """
        ...

    def load_worldwide(self) -> dict[str, Any]:
        """Load the per-country template table.

        Returns:
            Mapping of ``"default"`` and country codes to their entries.
        """
        ...

    def load_state_codes(self) -> dict[str, Any]:
        """Load the state code reference table.

        Returns:
            Mapping of country code to ``{state_code: state_name}``.
        """
        ...

    def load_county_codes(self) -> dict[str, Any]:
        """Load the county code reference table.

        Returns:
            Mapping of country code to ``{county_code: county_name}``.
        """
        ...
