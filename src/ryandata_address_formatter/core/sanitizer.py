"""Data-hygiene pass run on every address before formatting logic.

Drops postcodes that are really coordinate pairs, ranges or free text,
trims "12345,67890" postcode lists to their first entry, and clears any
component that contains a URL.
"""

from __future__ import annotations

import logging
import re

from ryandata_address_formatter.models.address import Address
from ryandata_address_formatter.models.enums import Component

logger = logging.getLogger(__name__)

MAX_POSTCODE_LENGTH = 20

POSTCODE_RANGE_RE = re.compile(r"\d+;\d+")
POSTCODE_LIST_RE = re.compile(r"^(\d{5}),\d{5}")
URL_RE = re.compile(r"https?://")


def sanitize_address(address: Address) -> Address:
    """Clean the address in place and return it.

    Args:
        address: Address to clean.

    Returns:
        The same Address instance.
    """
    _clean_postcode(address)
    _clear_urls(address)
    return address


def _clean_postcode(address: Address) -> None:
    postcode = address.postcode
    if postcode is None:
        return

    if len(postcode) > MAX_POSTCODE_LENGTH or POSTCODE_RANGE_RE.search(postcode):
        logger.debug("dropping invalid postcode %r", postcode)
        address.postcode = None
        address.add_cleaning_process(
            Component.POSTCODE.value, postcode, None, "Postcode is too long or a range"
        )
        return

    match = POSTCODE_LIST_RE.match(postcode)
    if match:
        address.postcode = match.group(1)
        address.add_cleaning_process(
            Component.POSTCODE.value,
            postcode,
            address.postcode,
            "Kept the first postcode of a list",
        )


def _clear_urls(address: Address) -> None:
    for component, value in address.items():
        if value is not None and URL_RE.search(value):
            logger.debug("clearing %s, it contains a URL", component.value)
            address[component] = None
            address.add_cleaning_process(component.value, value, None, "Value contains a URL")
