"""ryandata-address-formatter: format postal addresses the way each country writes them.

This package turns structured address components into display text using a
corpus of per-country templates and rules:
- Country detection with overrides and territory redirection
- Per-country templates with fallbacks for incomplete addresses
- Pre-render replace rules and country inheritance
- Text cleanup and deduplication of the rendered output
- Pandas integration and a command-line interface

Quick Start:
    >>> from ryandata_address_formatter import Address, AddressFormatter
    >>> formatter = AddressFormatter()
    >>> address = Address(road="Downing Street", house_number="10", country_code="GB")
    >>> print(formatter.format(address), end="")
    10 Downing Street

    # Override the country
    >>> formatter.format_with_configuration(address, {"country_code": "FR"})

    # Build addresses from loose keys
    >>> address = formatter.build_address([("street", "Downing Street"), ("zip", "SW1A 2AA")])

    # Build addresses programmatically
    >>> from ryandata_address_formatter import AddressBuilder
    >>> address = (
    ...     AddressBuilder()
    ...     .with_house_number("10")
    ...     .with_road("Downing Street")
    ...     .with_city("London")
    ...     .with_country_code("GB")
    ...     .build()
    ... )
"""

from __future__ import annotations  # noqa: I001

# Import order is intentional to avoid circular imports - do not auto-fix
from abstract_validation_base import ProcessEntry, ProcessLog

from ryandata_address_formatter.models import (
    PACKAGE_NAME,
    Address,
    AddressBuilder,
    AddressFormatterError,
    Component,
    Configuration,
    ConfigurationError,
    CountryCode,
    FormatResult,
    InvalidCountryCodeError,
    Rules,
    TemplateKind,
)
from ryandata_address_formatter.data import (
    ConfigurationSourceFactory,
    DictConfigurationSource,
    RuleStore,
    YAMLConfigurationSource,
)
from ryandata_address_formatter.protocols import ConfigurationSourceProtocol
from ryandata_address_formatter.service import (
    AddressFormatter,
    build_address,
    format_address,
    get_default_formatter,
)
from ryandata_address_formatter.pandas_ext import format_dataframe, register_accessor

__version__ = "0.1.0"
__package_name__ = "ryandata-address-formatter"

__all__ = [
    # Version
    "__version__",
    # Primary interface
    "AddressFormatter",
    "get_default_formatter",
    "format_address",
    "build_address",
    # Models
    "Address",
    "AddressBuilder",
    "Component",
    "CountryCode",
    "Configuration",
    "FormatResult",
    "TemplateKind",
    "Rules",
    # Process logging
    "ProcessEntry",
    "ProcessLog",
    # Errors
    "PACKAGE_NAME",
    "AddressFormatterError",
    "ConfigurationError",
    "InvalidCountryCodeError",
    # Configuration sources
    "ConfigurationSourceProtocol",
    "ConfigurationSourceFactory",
    "DictConfigurationSource",
    "YAMLConfigurationSource",
    "RuleStore",
    # Pandas integration
    "format_dataframe",
    "register_accessor",
]
