from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ryandata_address_formatter.models.errors import ConfigurationError


class BaseConfigurationSource(ABC):
    """Abstract base class for rule corpus sources.

    Subclasses only fetch raw documents; this class checks that every
    document has the expected top-level shape so the store builder can
    rely on it.
    """

    name: str = "base"

    @abstractmethod
    def _load_components_impl(self) -> Any:
        """Return the component alias documents."""
        ...

    @abstractmethod
    def _load_worldwide_impl(self) -> Any:
        """Return the per-country template table."""
        ...

    @abstractmethod
    def _load_state_codes_impl(self) -> Any:
        """Return the state code table, None if the source has none."""
        ...

    @abstractmethod
    def _load_county_codes_impl(self) -> Any:
        """Return the county code table, None if the source has none."""
        ...

    def load_components(self) -> list[dict[str, Any]]:
        documents = self._load_components_impl()
        if documents is None:
            return []
        if not isinstance(documents, list) or not all(isinstance(d, dict) for d in documents):
            raise ConfigurationError(
                "Component documents must be a list of mappings", {"source": self.name}
            )
        return documents

    def load_worldwide(self) -> dict[str, Any]:
        return self._expect_mapping(self._load_worldwide_impl(), "worldwide", required=True)

    def load_state_codes(self) -> dict[str, Any]:
        return self._expect_mapping(self._load_state_codes_impl(), "state_codes")

    def load_county_codes(self) -> dict[str, Any]:
        return self._expect_mapping(self._load_county_codes_impl(), "county_codes")

    def _expect_mapping(self, document: Any, label: str, required: bool = False) -> dict[str, Any]:
        if document is None and not required:
            return {}
        if not isinstance(document, dict):
            raise ConfigurationError(
                f"The {label} document must be a mapping, got {type(document).__name__}",
                {"source": self.name, "document": label},
            )
        return document

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
