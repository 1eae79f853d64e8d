"""Template selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ryandata_address_formatter.models.results import TemplateKind

if TYPE_CHECKING:
    from ryandata_address_formatter.core.template import Template
    from ryandata_address_formatter.data.store import RuleStore
    from ryandata_address_formatter.models.address import Address
    from ryandata_address_formatter.models.country import CountryCode

logger = logging.getLogger(__name__)


def has_minimum_components(address: Address) -> bool:
    """An address without both road and postcode is not detailed enough."""
    return address.road is not None or address.postcode is not None


def select_template(
    store: RuleStore,
    address: Address,
    country_code: CountryCode | None,
) -> tuple[Template, TemplateKind]:
    """Choose the template that renders the address.

    - No country: the default template.
    - Not enough detail: the country's fallback template, else the global one.
    - Otherwise: the country's template, else the default template.

    Returns:
        The template and which kind of template it is.
    """
    if country_code is None:
        selected = (store.default_template, TemplateKind.DEFAULT)
    elif not has_minimum_components(address):
        fallback = store.fallback_templates_by_country.get(country_code)
        if fallback is not None:
            selected = (fallback, TemplateKind.COUNTRY_FALLBACK)
        else:
            selected = (store.fallback_template, TemplateKind.FALLBACK)
    else:
        template = store.templates_by_country.get(country_code)
        if template is not None:
            selected = (template, TemplateKind.COUNTRY)
        else:
            selected = (store.default_template, TemplateKind.DEFAULT)

    logger.debug("country %s uses the %s template", country_code, selected[1].value)
    return selected
