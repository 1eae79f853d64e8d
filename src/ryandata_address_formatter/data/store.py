"""Immutable rule store built from a configuration source.

The store is built once, validated eagerly and shared read-only by every
formatting call. Any problem in the corpus surfaces here as a
ConfigurationError rather than at request time.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ryandata_address_formatter.core.template import Template
from ryandata_address_formatter.models.country import CountryCode
from ryandata_address_formatter.models.enums import Component
from ryandata_address_formatter.models.errors import (
    ConfigurationError,
    InvalidCountryCodeError,
)
from ryandata_address_formatter.models.rules import (
    NewComponent,
    Replacement,
    ReplaceRule,
    Rules,
)
from ryandata_address_formatter.protocols import ConfigurationSourceProtocol

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"
ADDRESS_TEMPLATE_KEY = "address_template"
FALLBACK_TEMPLATE_KEY = "fallback_template"
USE_COUNTRY_KEY = "use_country"

# Components an inheriting country may inject with ``add_component``
ADDABLE_COMPONENTS = frozenset({Component.STATE})

# ``$1`` / ``${1}`` group references used by the corpus
_GROUP_REF_RE = re.compile(r"\$(?:\{(\d+)\}|(\d+))")


def _empty_mapping() -> Mapping[Any, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RuleStore:
    """Templates, per-country rules and code tables.

    Attributes:
        default_template: Template used when no country-specific one applies.
        fallback_template: Template for addresses lacking road and postcode.
        templates_by_country: Country templates, inheriting countries included.
        fallback_templates_by_country: Country-specific fallback templates.
        rules_by_country: Rules per country, inheriting countries included.
        fallback_rules: Rules used when a country has none (empty by default).
        state_codes: ``(country, state name)`` to state code.
        county_codes: ``(country, county name)`` to county code.
        component_aliases: Alternative names accepted by ``build_address``.
        parent_countries: Inheriting country to the country it borrows from.
    """

    default_template: Template
    fallback_template: Template
    templates_by_country: Mapping[CountryCode, Template] = field(default_factory=_empty_mapping)
    fallback_templates_by_country: Mapping[CountryCode, Template] = field(
        default_factory=_empty_mapping
    )
    rules_by_country: Mapping[CountryCode, Rules] = field(default_factory=_empty_mapping)
    fallback_rules: Rules = field(default_factory=Rules)
    state_codes: Mapping[tuple[CountryCode, str], str] = field(default_factory=_empty_mapping)
    county_codes: Mapping[tuple[CountryCode, str], str] = field(default_factory=_empty_mapping)
    component_aliases: Mapping[Component, tuple[str, ...]] = field(
        default_factory=_empty_mapping
    )
    parent_countries: Mapping[CountryCode, CountryCode] = field(default_factory=_empty_mapping)

    @classmethod
    def from_source(cls, source: ConfigurationSourceProtocol) -> RuleStore:
        return build_rule_store(source)

    def rules_for(self, country_code: CountryCode | None) -> Rules:
        """Rules of a country, or the fallback rules when it has none."""
        if country_code is None:
            return self.fallback_rules
        return self.rules_by_country.get(country_code, self.fallback_rules)

    @property
    def countries(self) -> list[CountryCode]:
        """Every country with a template or rules, sorted."""
        return sorted(set(self.templates_by_country) | set(self.rules_by_country))


def build_rule_store(source: ConfigurationSourceProtocol) -> RuleStore:
    """Load and validate a corpus into a RuleStore.

    Countries with ``use_country`` get a copy of the parent's template (and
    fallback template unless they declare their own) and rules that force
    ``country_code`` to the parent, plus the optional ``change_country``
    and ``add_component`` overrides. Inheritance is one level deep.

    Args:
        source: Where to read the corpus from.

    Returns:
        The built store.

    Raises:
        ConfigurationError: If anything in the corpus is malformed.
    """
    component_aliases = _read_component_aliases(source.load_components())
    worldwide = source.load_worldwide()

    default_entry = worldwide.get(DEFAULT_KEY)
    if not isinstance(default_entry, dict):
        raise ConfigurationError(
            "The corpus has no 'default' entry", {"source": source.name}
        )
    default_template = _read_template(default_entry, ADDRESS_TEMPLATE_KEY, DEFAULT_KEY)
    fallback_template = _read_template(default_entry, FALLBACK_TEMPLATE_KEY, DEFAULT_KEY)

    templates: dict[CountryCode, Template] = {}
    fallback_templates: dict[CountryCode, Template] = {}
    rules: dict[CountryCode, Rules] = {}
    inheritors: dict[CountryCode, tuple[CountryCode, dict[str, Any]]] = {}

    for key, entry in worldwide.items():
        if not isinstance(key, str):
            raise ConfigurationError(
                f"Corpus key {key!r} is not a string; quote it in YAML",
                {"source": source.name},
            )
        if key == DEFAULT_KEY or len(key) != 2:
            # Longer keys are shared template definitions referenced through anchors
            continue
        country_code = _parse_corpus_code(key, "worldwide")
        if not isinstance(entry, dict):
            raise ConfigurationError(
                f"Entry for {key} must be a mapping", {"country_code": key}
            )

        if FALLBACK_TEMPLATE_KEY in entry:
            fallback_templates[country_code] = _read_template(entry, FALLBACK_TEMPLATE_KEY, key)

        parent = entry.get(USE_COUNTRY_KEY)
        if parent is not None:
            inheritors[country_code] = (_parse_corpus_code(parent, f"{key}.use_country"), entry)
            continue

        templates[country_code] = _read_template(entry, ADDRESS_TEMPLATE_KEY, key)
        rules[country_code] = Rules(
            replace=_read_replace_rules(entry.get("replace"), key),
            postformat_replace=_read_postformat_rules(entry.get("postformat_replace"), key),
        )

    parents = _resolve_inheritance(inheritors, templates, fallback_templates, rules)

    store = RuleStore(
        default_template=default_template,
        fallback_template=fallback_template,
        templates_by_country=MappingProxyType(templates),
        fallback_templates_by_country=MappingProxyType(fallback_templates),
        rules_by_country=MappingProxyType(rules),
        state_codes=MappingProxyType(
            _read_code_table(source.load_state_codes(), "state_codes")
        ),
        county_codes=MappingProxyType(
            _read_code_table(source.load_county_codes(), "county_codes")
        ),
        component_aliases=MappingProxyType(component_aliases),
        parent_countries=MappingProxyType(parents),
    )
    logger.info(
        "Loaded address rules from %s: %d countries (%d inheriting), "
        "%d state codes, %d county codes",
        source.name,
        len(templates),
        len(parents),
        len(store.state_codes),
        len(store.county_codes),
    )
    return store


def _parse_corpus_code(raw: Any, where: str) -> CountryCode:
    try:
        return CountryCode.parse(raw)
    except InvalidCountryCodeError as e:
        raise ConfigurationError(f"{where}: {e}", {"value": raw}) from e


def _read_template(entry: dict[str, Any], key: str, owner: str) -> Template:
    if key not in entry:
        raise ConfigurationError(f"{owner} has no {key}", {"entry": owner})
    return Template(entry[key], name=f"{owner}.{key}")


def _resolve_inheritance(
    inheritors: dict[CountryCode, tuple[CountryCode, dict[str, Any]]],
    templates: dict[CountryCode, Template],
    fallback_templates: dict[CountryCode, Template],
    rules: dict[CountryCode, Rules],
) -> dict[CountryCode, CountryCode]:
    parents: dict[CountryCode, CountryCode] = {}
    for country_code, (parent, entry) in inheritors.items():
        if parent in inheritors:
            raise ConfigurationError(
                f"{country_code} uses {parent}, which itself uses another country",
                {"country_code": str(country_code), "use_country": str(parent)},
            )
        parent_template = templates.get(parent)
        if parent_template is None:
            raise ConfigurationError(
                f"{country_code} uses {parent}, which has no template",
                {"country_code": str(country_code), "use_country": str(parent)},
            )

        templates[country_code] = parent_template.clone(name=f"{country_code}.address_template")
        if country_code not in fallback_templates and parent in fallback_templates:
            fallback_templates[country_code] = fallback_templates[parent].clone(
                name=f"{country_code}.fallback_template"
            )

        change_country = entry.get("change_country")
        if change_country is not None and not isinstance(change_country, str):
            raise ConfigurationError(
                f"{country_code}.change_country must be a string",
                {"country_code": str(country_code)},
            )
        rules[country_code] = Rules(
            change_country=change_country,
            change_country_code=str(parent),
            add_component=_read_add_component(entry.get("add_component"), str(country_code)),
        )
        parents[country_code] = parent
    return parents


def _read_add_component(raw: Any, owner: str) -> NewComponent | None:
    if raw is None:
        return None
    name, sep, value = raw.partition("=") if isinstance(raw, str) else ("", "", "")
    if not sep or not name or "=" in value:
        raise ConfigurationError(
            f"{owner}.add_component must look like 'component=value', got {raw!r}",
            {"country_code": owner},
        )
    component = Component.from_name(name)
    if component not in ADDABLE_COMPONENTS:
        raise ConfigurationError(
            f"{owner}.add_component cannot set {name!r}",
            {"country_code": owner, "component": name},
        )
    return NewComponent(component, value)


def _read_rule_pairs(raw: Any, owner: str, key: str) -> list[tuple[str, str]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigurationError(f"{owner}.{key} must be a list", {"country_code": owner})
    pairs = []
    for i, item in enumerate(raw):
        if (
            not isinstance(item, list)
            or len(item) != 2
            or not all(isinstance(part, str) for part in item)
        ):
            raise ConfigurationError(
                f"{owner}.{key}[{i}] must be a [pattern, replacement] pair of strings",
                {"country_code": owner, "rule": item},
            )
        pairs.append((item[0], item[1]))
    return pairs


def _read_replace_rules(raw: Any, owner: str) -> tuple[ReplaceRule, ...]:
    rules = []
    for pattern, value in _read_rule_pairs(raw, owner, "replace"):
        component = None
        if "=" in pattern:
            name, _, pattern = pattern.partition("=")
            component = Component.from_name(name)
            if component is None:
                raise ConfigurationError(
                    f"{owner}.replace scopes an unknown component {name!r}",
                    {"country_code": owner, "component": name},
                )
        rules.append(ReplaceRule(_compile_replacement(pattern, value, owner), component))
    return tuple(rules)


def _read_postformat_rules(raw: Any, owner: str) -> tuple[Replacement, ...]:
    replacements = []
    for pattern, value in _read_rule_pairs(raw, owner, "postformat_replace"):
        if "=" in pattern and Component.from_name(pattern.partition("=")[0]) is not None:
            raise ConfigurationError(
                f"{owner}.postformat_replace rules cannot be scoped to a component",
                {"country_code": owner, "pattern": pattern},
            )
        replacements.append(_compile_replacement(pattern, value, owner, re.MULTILINE))
    return tuple(replacements)


def translate_replacement(value: str) -> str:
    """Turn ``$1`` / ``${1}`` references into :func:`re.sub` syntax.

    Example:
        >>> translate_replacement("Bezirk $1")
        'Bezirk \\\\g<1>'
    """
    escaped = value.replace("\\", "\\\\")
    return _GROUP_REF_RE.sub(lambda m: f"\\g<{m.group(1) or m.group(2)}>", escaped)


def _compile_replacement(pattern: str, value: str, owner: str, flags: int = 0) -> Replacement:
    try:
        compiled = re.compile(pattern, flags)
    except re.error as e:
        raise ConfigurationError(
            f"{owner}: invalid pattern {pattern!r}: {e}",
            {"country_code": owner, "pattern": pattern},
        ) from e

    for match in _GROUP_REF_RE.finditer(value):
        group = int(match.group(1) or match.group(2))
        if group > compiled.groups:
            raise ConfigurationError(
                f"{owner}: replacement {value!r} references group {group} "
                f"but {pattern!r} has {compiled.groups}",
                {"country_code": owner, "pattern": pattern},
            )
    return Replacement(compiled, translate_replacement(value))


def _read_code_table(raw: Mapping[str, Any], table_name: str) -> dict[tuple[CountryCode, str], str]:
    table: dict[tuple[CountryCode, str], str] = {}
    for country, codes in raw.items():
        country_code = _parse_corpus_code(country, table_name)
        if not isinstance(codes, dict):
            raise ConfigurationError(
                f"{table_name}.{country} must be a mapping", {"country_code": str(country)}
            )
        for code, names in codes.items():
            for name in _code_names(names, f"{table_name}.{country}.{code}"):
                table[(country_code, name)] = str(code)
    return table


def _code_names(names: Any, where: str) -> list[str]:
    # A code maps to a single name or to a mapping of names per language
    if isinstance(names, str):
        return [names]
    if isinstance(names, dict) and all(isinstance(n, str) for n in names.values()):
        return list(names.values())
    raise ConfigurationError(f"{where} must be a name or a mapping of names", {"entry": where})


def _read_component_aliases(documents: list[dict[str, Any]]) -> dict[Component, tuple[str, ...]]:
    aliases: dict[Component, tuple[str, ...]] = {}
    for document in documents:
        name = document.get("name")
        names = document.get("aliases")
        if not names:
            # Entries without aliases only document a component name
            continue
        component = Component.from_name(name) if isinstance(name, str) else None
        if component is None:
            raise ConfigurationError(
                f"Unknown component {name!r} in component aliases", {"component": name}
            )
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ConfigurationError(
                f"Aliases of {name} must be a list of strings", {"component": name}
            )
        aliases[component] = tuple(names)
    return aliases
