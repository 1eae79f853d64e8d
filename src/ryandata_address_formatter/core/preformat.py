"""Pre-render transformations applied to an address."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ryandata_address_formatter.models.country import CountryCode
from ryandata_address_formatter.models.enums import Component

if TYPE_CHECKING:
    from ryandata_address_formatter.data.store import RuleStore
    from ryandata_address_formatter.models.address import Address
    from ryandata_address_formatter.models.rules import Rules

OPERATION_TYPE = "preformat"


def preformat(
    address: Address,
    rules: Rules,
    store: RuleStore,
    country_code: CountryCode | None,
) -> Address:
    """Apply a country's rules to the address in place.

    Order matters: replace rules, then the injected component, then the
    country overrides, then the state/county code lookups.

    Args:
        address: Address to transform.
        rules: Rules of the resolved country, or the store's fallback rules.
        store: Rule store holding the state and county code tables.
        country_code: The resolved country, None if unknown.

    Returns:
        The same Address instance.
    """
    for rule in rules.replace:
        rule.apply(address)

    if rules.add_component is not None:
        _force(address, rules.add_component.component, rules.add_component.value)
    if rules.change_country is not None:
        _force(address, Component.COUNTRY, rules.change_country)
    if rules.change_country_code is not None:
        _force(address, Component.COUNTRY_CODE, rules.change_country_code)

    # Countries that borrow another country's rules look codes up in the parent's tables
    lookup_country = CountryCode.try_parse(rules.change_country_code) or country_code
    if lookup_country is not None:
        _derive_code(
            address, store.state_codes, lookup_country, Component.STATE, Component.STATE_CODE
        )
        _derive_code(
            address, store.county_codes, lookup_country, Component.COUNTY, Component.COUNTY_CODE
        )

    return address


def _force(address: Address, component: Component, value: str) -> None:
    previous = address[component]
    address[component] = value
    if previous != value:
        address.add_cleaning_process(
            component.value, previous, value, "Forced by country rules", OPERATION_TYPE
        )


def _derive_code(
    address: Address,
    table: Mapping[tuple[CountryCode, str], str],
    country_code: CountryCode,
    name_component: Component,
    code_component: Component,
) -> None:
    if address[code_component]:
        return
    name = address[name_component]
    if not name:
        return
    code = table.get((country_code, name))
    if code is not None:
        address[code_component] = code
        address.add_cleaning_process(
            code_component.value,
            None,
            code,
            f"Derived from {name_component.value} {name!r}",
            OPERATION_TYPE,
        )
