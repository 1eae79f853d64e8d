"""Address models package.

This package contains the address model, the country code value type,
per-country rule records, builders and result types.
"""

from __future__ import annotations

# Import from submodules - order matters for avoiding circular imports
from ryandata_address_formatter.models.errors import (
    PACKAGE_NAME,
    AddressFormatterError,
    ConfigurationError,
    InvalidCountryCodeError,
)
from ryandata_address_formatter.models.enums import Component
from ryandata_address_formatter.models.country import CountryCode
from ryandata_address_formatter.models.address import Address
from ryandata_address_formatter.models.builder import AddressBuilder
from ryandata_address_formatter.models.config import Configuration
from ryandata_address_formatter.models.rules import (
    NewComponent,
    ReplaceRule,
    Replacement,
    Rules,
)
from ryandata_address_formatter.models.results import FormatResult, TemplateKind

__all__ = [
    # Errors
    "PACKAGE_NAME",
    "AddressFormatterError",
    "ConfigurationError",
    "InvalidCountryCodeError",
    # Enums and constants
    "Component",
    # Value types and models
    "CountryCode",
    "Address",
    "AddressBuilder",
    "Configuration",
    # Rules
    "NewComponent",
    "ReplaceRule",
    "Replacement",
    "Rules",
    # Results
    "FormatResult",
    "TemplateKind",
]
