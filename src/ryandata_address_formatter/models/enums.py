"""Address component enumeration and constants."""

from __future__ import annotations

from enum import Enum


class Component(str, Enum):
    """Enumeration of all address components.

    Declaration order is significant: every pass that walks all components
    (replace rules, URL scrubbing, serialization) follows it.
    """

    ATTENTION = "attention"
    HOUSE_NUMBER = "house_number"
    HOUSE = "house"
    ROAD = "road"
    VILLAGE = "village"
    SUBURB = "suburb"
    CITY = "city"
    COUNTY = "county"
    COUNTY_CODE = "county_code"
    POSTCODE = "postcode"
    STATE_DISTRICT = "state_district"
    STATE = "state"
    STATE_CODE = "state_code"
    REGION = "region"
    ISLAND = "island"
    NEIGHBOURHOOD = "neighbourhood"
    COUNTRY = "country"
    COUNTRY_CODE = "country_code"
    CONTINENT = "continent"
    TOWN = "town"
    CITY_DISTRICT = "city_district"

    @classmethod
    def from_name(cls, name: str) -> Component | None:
        """Look up a component by its snake_case name, None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None

