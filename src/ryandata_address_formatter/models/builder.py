"""Address builder for programmatic address construction.

This module provides a fluent builder interface for constructing
Address objects field by field.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from ryandata_address_formatter.models.enums import Component
from ryandata_address_formatter.models.errors import PACKAGE_NAME, AddressFormatterError

if TYPE_CHECKING:
    from ryandata_address_formatter.models.address import Address


class AddressBuilder:
    """Builder for programmatic Address construction.

    Example:
        >>> address = (
        ...     AddressBuilder()
        ...     .with_house_number("17")
        ...     .with_road("Rue du Médecin-Colonel Calbairac")
        ...     .with_postcode("31000")
        ...     .with_city("Toulouse")
        ...     .with_country_code("FR")
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._data: dict[Component, str | None] = {}

    def with_attention(self, attention: str) -> Self:
        """Set the attention line (organisation, POI name, ...)."""
        self._data[Component.ATTENTION] = attention
        return self

    def with_house_number(self, number: str) -> Self:
        """Set the house number."""
        self._data[Component.HOUSE_NUMBER] = number
        return self

    def with_house(self, house: str) -> Self:
        """Set the building or house name."""
        self._data[Component.HOUSE] = house
        return self

    def with_road(self, road: str) -> Self:
        """Set the street name."""
        self._data[Component.ROAD] = road
        return self

    def with_city(self, city: str) -> Self:
        self._data[Component.CITY] = city
        return self

    def with_postcode(self, postcode: str) -> Self:
        self._data[Component.POSTCODE] = postcode
        return self

    def with_county(self, county: str) -> Self:
        self._data[Component.COUNTY] = county
        return self

    def with_state(self, state: str) -> Self:
        self._data[Component.STATE] = state
        return self

    def with_country(self, country: str) -> Self:
        """Set the country name."""
        self._data[Component.COUNTRY] = country
        return self

    def with_country_code(self, country_code: str) -> Self:
        """Set the country code (normalized only when formatting)."""
        self._data[Component.COUNTRY_CODE] = country_code
        return self

    def with_component(self, component: Component | str, value: str | None) -> Self:
        """Set an arbitrary component by name or enum."""
        resolved = component if isinstance(component, Component) else Component.from_name(component)
        if resolved is None:
            raise AddressFormatterError(
                "address_builder",
                f"Unknown address component: {component}",
                {"package": PACKAGE_NAME, "component": str(component)},
            )
        self._data[resolved] = value
        return self

    def build(self) -> Address:
        """Build the Address object."""
        from ryandata_address_formatter.models.address import Address

        return Address.from_mapping(self._data)

    def reset(self) -> Self:
        """Reset the builder to empty state."""
        self._data = {}
        return self
