"""Address model.

This module contains the Address Pydantic model: a total mapping from every
:class:`Component` to an optional string value.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Self

from pydantic import ConfigDict, Field

from ryandata_address_formatter.models.base import TrackedModel
from ryandata_address_formatter.models.enums import Component


def _as_component(key: Component | str) -> Component:
    if isinstance(key, Component):
        return key
    component = Component.from_name(key)
    if component is None:
        raise KeyError(key)
    return component


class Address(TrackedModel):
    """Structured postal address, one optional string per component.

    ``None`` means "no opinion"; an empty string is a distinct, deliberate
    blank. Field declaration order matches :class:`Component` order.

    Values can be read and written by attribute or by component:

        >>> addr = Address(city="Toulouse")
        >>> addr[Component.CITY]
        'Toulouse'
        >>> addr["postcode"] = "31000"
    """

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    attention: str | None = Field(
        default=None,
        description="Leftover data: POI or organisation name, unmatched input keys",
    )
    house_number: str | None = Field(default=None, description="House number")
    house: str | None = Field(default=None, description="Building or house name")
    road: str | None = Field(default=None, description="Street name")
    village: str | None = Field(default=None, description="Village")
    suburb: str | None = Field(default=None, description="Suburb")
    city: str | None = Field(default=None, description="City")
    county: str | None = Field(default=None, description="County, department, province")
    county_code: str | None = Field(default=None, description="Abbreviated county")
    postcode: str | None = Field(default=None, description="Postal code")
    state_district: str | None = Field(default=None, description="State district")
    state: str | None = Field(default=None, description="State or region name")
    state_code: str | None = Field(default=None, description="Abbreviated state")
    region: str | None = Field(default=None, description="Region")
    island: str | None = Field(default=None, description="Island")
    neighbourhood: str | None = Field(default=None, description="Neighbourhood")
    country: str | None = Field(default=None, description="Country name")
    country_code: str | None = Field(
        default=None, description="ISO 3166-1 alpha-2 country code as supplied"
    )
    continent: str | None = Field(default=None, description="Continent")
    town: str | None = Field(default=None, description="Town")
    city_district: str | None = Field(default=None, description="City district")

    def __getitem__(self, key: Component | str) -> str | None:
        return getattr(self, _as_component(key).value)

    def __setitem__(self, key: Component | str, value: str | None) -> None:
        setattr(self, _as_component(key).value, value)

    def items(self) -> Iterator[tuple[Component, str | None]]:
        """Iterate over (component, value) pairs in component order."""
        for component in Component:
            yield component, getattr(self, component.value)

    @classmethod
    def from_mapping(cls, data: Mapping[Component | str, str | None]) -> Self:
        """Build an address from a mapping keyed by Component or component name.

        Raises:
            KeyError: If a key is not a known component.
        """
        address = cls()
        for key, value in data.items():
            address[key] = value
        return address

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Component | str, str | None]]) -> Self:
        """Build an address from (component, value) pairs; later pairs win."""
        address = cls()
        for key, value in pairs:
            address[key] = value
        return address

    def to_dict(self, *, exclude_none: bool = False) -> dict[str, str | None]:
        """Convert address to a dictionary keyed by component name."""
        return {
            component.value: value
            for component, value in self.items()
            if not (exclude_none and value is None)
        }

    def is_empty(self) -> bool:
        """True if no component holds a value."""
        return all(value is None for _, value in self.items())

    def copy_fields(self) -> Self:
        """Return a new address with the same values and an empty process log."""
        return type(self).from_pairs(self.items())
