"""Country detection for a single address."""

from __future__ import annotations

import logging

from ryandata_address_formatter.models.address import Address
from ryandata_address_formatter.models.country import CountryCode
from ryandata_address_formatter.models.enums import Component
from ryandata_address_formatter.models.errors import InvalidCountryCodeError

logger = logging.getLogger(__name__)

NETHERLANDS = CountryCode("NL")

# Dutch constituent countries that geocoders report as states of NL.
# Curaçao is compared case-sensitively, the others case-insensitively.
CURACAO = ("Curaçao", CountryCode("CW"), "Curaçao")
NL_TERRITORIES_BY_LOWER_STATE: dict[str, tuple[CountryCode, str]] = {
    "sint maarten": (CountryCode("SX"), "Sint Maarten"),
    "aruba": (CountryCode("AW"), "Aruba"),
}


def resolve_country(address: Address, override: str | None = None) -> CountryCode | None:
    """Determine the effective country of an address.

    The caller override wins over the address's own ``country_code``. A value
    that does not parse is logged and treated as "no country". Dutch
    territories reported as NL states are redirected to their own code, and
    the address's country name is updated accordingly.

    Args:
        address: Address to inspect; its country may be rewritten.
        override: Country code supplied by the caller, if any.

    Returns:
        The resolved CountryCode, or None when the country is unknown.
    """
    raw = override if override is not None else address.country_code
    if raw is None:
        return None

    try:
        country_code = CountryCode.parse(raw)
    except InvalidCountryCodeError as e:
        logger.info("impossible to find a country: %s", e)
        address.add_error(Component.COUNTRY_CODE.value, str(e), raw)
        return None

    if country_code == NETHERLANDS and address.state is not None:
        country_code = _resolve_dutch_territory(address, address.state, country_code)

    return country_code


def _resolve_dutch_territory(
    address: Address, state: str, country_code: CountryCode
) -> CountryCode:
    state_name, curacao_code, curacao_country = CURACAO
    if state == state_name:
        country_code = curacao_code
        _set_country(address, curacao_country)

    territory = NL_TERRITORIES_BY_LOWER_STATE.get(state.lower())
    if territory is not None:
        country_code, country = territory
        _set_country(address, country)

    return country_code


def _set_country(address: Address, country: str) -> None:
    if address.country != country:
        address.add_cleaning_process(
            Component.COUNTRY.value,
            address.country,
            country,
            "Dutch territory reported as a state of NL",
            operation_type="country_resolution",
        )
    address.country = country
