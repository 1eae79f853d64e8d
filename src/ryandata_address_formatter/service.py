from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Union

from ryandata_address_formatter.core.postprocess import postprocess
from ryandata_address_formatter.core.preformat import preformat
from ryandata_address_formatter.core.resolver import resolve_country
from ryandata_address_formatter.core.sanitizer import sanitize_address
from ryandata_address_formatter.core.selector import select_template
from ryandata_address_formatter.data import ConfigurationSourceFactory, RuleStore
from ryandata_address_formatter.models import (
    AddressFormatterError,
    Address,
    Component,
    Configuration,
    FormatResult,
)
from ryandata_address_formatter.protocols import ConfigurationSourceProtocol

logger = logging.getLogger(__name__)

RawValue = Union[str, int, None]
ConfigurationLike = Union[Configuration, Mapping[str, Any], None]

# Upstream data sometimes puts a numeric id in country and the country name in state
_NUMERIC_RE = re.compile(r"\+?[0-9]+")


class AddressFormatter:
    """Formats structured addresses following per-country conventions.

    The rule store is loaded once, in the constructor, and never mutated
    afterwards, so a single formatter can be shared between threads.

    Example:
        >>> formatter = AddressFormatter()
        >>> address = Address(
        ...     house_number="17",
        ...     road="Rue du Médecin-Colonel Calbairac",
        ...     postcode="31000",
        ...     city="Toulouse",
        ...     country="France",
        ...     country_code="FR",
        ... )
        >>> print(formatter.format(address), end="")
        17 Rue du Médecin-Colonel Calbairac
        31000 Toulouse
        France

        # Custom corpus
        >>> from ryandata_address_formatter.data import YAMLConfigurationSource
        >>> formatter = AddressFormatter(source=YAMLConfigurationSource("/path/to/conf"))
    """

    def __init__(
        self,
        source: ConfigurationSourceProtocol | None = None,
        rule_store: RuleStore | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            source: Where to load the rule corpus from. Defaults to the
                bundled YAML corpus.
            rule_store: Already-built rule store; takes precedence over
                ``source``.

        Raises:
            ConfigurationError: If the corpus is malformed.
        """
        if rule_store is None:
            rule_store = RuleStore.from_source(source or ConfigurationSourceFactory.create())
        self._rule_store = rule_store

    @property
    def rule_store(self) -> RuleStore:
        """Get the rule store instance."""
        return self._rule_store

    def format(self, address: Address) -> str:
        """Format an address using its own country_code.

        Args:
            address: Address to format. It is not modified.

        Returns:
            The formatted address, ending with exactly one newline.

        Raises:
            AddressFormatterError: If the template fails to render.
        """
        return self.format_result(address).text

    def format_with_configuration(
        self, address: Address, configuration: ConfigurationLike = None
    ) -> str:
        """Format an address, honoring per-call options.

        Args:
            address: Address to format. It is not modified.
            configuration: Configuration (or a mapping of its fields). An
                explicit ``country_code`` wins over the address's own.

        Returns:
            The formatted address, ending with exactly one newline.
        """
        return self.format_result(address, configuration).text

    def format_result(
        self, address: Address, configuration: ConfigurationLike = None
    ) -> FormatResult:
        """Format an address and report how it was formatted.

        The pipeline runs on a copy of the address: country resolution,
        sanitizing, template selection, pre-render rules, rendering and
        text cleanup. The copy, with its process log, is part of the result.

        Returns:
            FormatResult with the text, the processed copy, the country the
            rules were taken from and the kind of template used.

        Raises:
            AddressFormatterError: If the template fails to render.
        """
        config = _as_configuration(configuration)
        working = address.copy_fields()

        country_code = resolve_country(working, config.country_code)
        sanitize_address(working)
        template, template_kind = select_template(self._rule_store, working, country_code)

        rules = self._rule_store.rules_for(country_code)
        if country_code is not None and country_code in self._rule_store.rules_by_country:
            logger.debug("applying %s rules", country_code)
        else:
            logger.debug("no rules for country %s, using fallback rules", country_code)
        preformat(working, rules, self._rule_store, country_code)

        try:
            raw = template.render(working)
        except Exception as e:
            raise AddressFormatterError.from_exception(
                "template_render_error",
                e,
                {
                    "country_code": str(country_code) if country_code is not None else None,
                    "template": template.name,
                },
            ) from e

        text = postprocess(raw, rules.postformat_replace)
        return FormatResult(
            text=text,
            address=working,
            country_code=country_code,
            template_kind=template_kind,
        )

    def build_address(
        self, values: Iterable[tuple[str, RawValue]] | Mapping[str, RawValue]
    ) -> Address:
        """Build an Address from loosely named key/value pairs.

        Keys that are component names are used directly. Other keys are
        looked up in the component alias table; the first alias found for a
        component wins, and only if the component is still unset. Values
        left over are joined with ", " into ``attention``.

        Args:
            values: ``(key, value)`` pairs or a mapping. None values are
                skipped and integers are converted to strings.

        Returns:
            The built Address.
        """
        pairs = values.items() if isinstance(values, Mapping) else values

        address = Address()
        unknown: dict[str, str] = {}
        for key, value in pairs:
            if value is None:
                continue
            component = Component.from_name(key)
            if component is not None:
                address[component] = str(value)
            else:
                unknown[key] = str(value)

        if unknown:
            for component, aliases in self._rule_store.component_aliases.items():
                for alias in aliases:
                    if alias not in unknown:
                        continue
                    alias_value = unknown.pop(alias)
                    if address[component] is None:
                        address[component] = alias_value

        if unknown:
            address.attention = ", ".join(unknown.values())

        if (
            address.state is not None
            and address.country is not None
            and _NUMERIC_RE.fullmatch(address.country)
        ):
            address.add_cleaning_process(
                Component.COUNTRY.value,
                address.country,
                address.state,
                "Numeric country with a state set: state holds the country name",
                operation_type="build",
            )
            address.country = address.state
            address.state = None

        return address


def _as_configuration(configuration: ConfigurationLike) -> Configuration:
    if configuration is None:
        return Configuration()
    if isinstance(configuration, Configuration):
        return configuration
    return Configuration.model_validate(dict(configuration))


# Module-level convenience functions
_default_formatter: AddressFormatter | None = None
_default_formatter_lock = threading.Lock()


def get_default_formatter() -> AddressFormatter:
    """Get the default AddressFormatter singleton.

    The bundled corpus is loaded on first use; concurrent first calls
    build it exactly once.

    Returns:
        Shared AddressFormatter instance with the default configuration source.
    """
    global _default_formatter
    if _default_formatter is None:
        with _default_formatter_lock:
            if _default_formatter is None:
                _default_formatter = AddressFormatter()
    return _default_formatter


def format_address(address: Address, configuration: ConfigurationLike = None) -> str:
    """Format an address using the default formatter.

    Args:
        address: Address to format.
        configuration: Optional per-call options.

    Returns:
        The formatted address.
    """
    return get_default_formatter().format_with_configuration(address, configuration)


def build_address(
    values: Iterable[tuple[str, RawValue]] | Mapping[str, RawValue],
) -> Address:
    """Build an Address from loose key/value pairs using the default formatter."""
    return get_default_formatter().build_address(values)
