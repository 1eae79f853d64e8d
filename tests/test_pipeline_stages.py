from __future__ import annotations

import logging
import re

import pytest

from ryandata_address_formatter.core.preformat import preformat
from ryandata_address_formatter.core.resolver import resolve_country
from ryandata_address_formatter.core.sanitizer import sanitize_address
from ryandata_address_formatter.core.selector import has_minimum_components, select_template
from ryandata_address_formatter.data import RuleStore
from ryandata_address_formatter.models import (
    Address,
    Component,
    CountryCode,
    NewComponent,
    Replacement,
    ReplaceRule,
    Rules,
    TemplateKind,
)


def _rule(pattern: str, value: str, component: Component | None = None) -> ReplaceRule:
    return ReplaceRule(Replacement(re.compile(pattern), value), component)


class TestResolveCountry:
    def test_uses_address_code(self) -> None:
        assert resolve_country(Address(country_code="fr")) == CountryCode("FR")

    def test_override_wins(self) -> None:
        address = Address(country_code="US")
        assert resolve_country(address, "FR") == CountryCode("FR")
        assert address.country_code == "US"

    def test_no_code(self) -> None:
        assert resolve_country(Address()) is None

    def test_uk_alias(self) -> None:
        assert resolve_country(Address(country_code="UK")) == CountryCode("GB")

    def test_invalid_code_is_soft_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        address = Address(country_code="XYZ")
        with caplog.at_level(logging.INFO, logger="ryandata_address_formatter.core.resolver"):
            assert resolve_country(address) is None
        assert "impossible to find a country" in caplog.text
        assert len(address.process_log.errors) == 1
        assert address.process_log.errors[0].field == "country_code"

    def test_invalid_override_means_no_country(self) -> None:
        assert resolve_country(Address(country_code="FR"), "France") is None

    def test_curacao(self) -> None:
        address = Address(state="Curaçao", country="Nederland", country_code="NL")
        assert resolve_country(address) == CountryCode("CW")
        assert address.country == "Curaçao"

    def test_curacao_is_case_sensitive(self) -> None:
        address = Address(state="curaçao", country_code="NL")
        assert resolve_country(address) == CountryCode("NL")
        assert address.country is None

    @pytest.mark.parametrize(
        ("state", "code", "country"),
        [
            ("Sint Maarten", "SX", "Sint Maarten"),
            ("SINT MAARTEN", "SX", "Sint Maarten"),
            ("aruba", "AW", "Aruba"),
        ],
    )
    def test_other_territories_ignore_case(self, state: str, code: str, country: str) -> None:
        address = Address(state=state, country_code="nl")
        assert resolve_country(address) == CountryCode(code)
        assert address.country == country
        assert address.process_log.cleaning[0].field == "country"

    def test_territory_names_only_apply_to_nl(self) -> None:
        address = Address(state="Aruba", country_code="BE")
        assert resolve_country(address) == CountryCode("BE")
        assert address.country is None


class TestSanitizer:
    def test_keeps_valid_postcode(self) -> None:
        address = sanitize_address(Address(postcode="SW1A 2AA"))
        assert address.postcode == "SW1A 2AA"
        assert address.process_log.cleaning == []

    def test_drops_long_postcode(self) -> None:
        assert sanitize_address(Address(postcode="x" * 21)).postcode is None
        assert sanitize_address(Address(postcode="x" * 20)).postcode == "x" * 20

    def test_drops_postcode_range(self) -> None:
        address = sanitize_address(Address(postcode="12345;67890"))
        assert address.postcode is None
        assert address.process_log.cleaning[0].original_value == "12345;67890"

    def test_keeps_first_of_postcode_list(self) -> None:
        assert sanitize_address(Address(postcode="75001,75002")).postcode == "75001"
        assert sanitize_address(Address(postcode="75001,7500")).postcode == "75001,7500"

    def test_clears_urls(self) -> None:
        address = sanitize_address(
            Address(
                attention="https://example.org/poi/1",
                road="Downing Street",
                city="see http://example.org",
            )
        )
        assert address.attention is None
        assert address.city is None
        assert address.road == "Downing Street"
        assert [entry.field for entry in address.process_log.cleaning] == ["attention", "city"]

    def test_keeps_bare_domains(self) -> None:
        assert sanitize_address(Address(house="www.example.org")).house == "www.example.org"


class TestSelectTemplate:
    def test_minimum_components(self) -> None:
        assert has_minimum_components(Address(road="Downing Street"))
        assert has_minimum_components(Address(postcode="SW1A 2AA"))
        assert has_minimum_components(Address(road=""))
        assert not has_minimum_components(Address(city="London", house_number="10"))

    def test_no_country_uses_default(self, mini_store: RuleStore) -> None:
        template, kind = select_template(mini_store, Address(city="London"), None)
        assert template is mini_store.default_template
        assert kind is TemplateKind.DEFAULT

    def test_country_template(self, mini_store: RuleStore) -> None:
        gb = CountryCode("GB")
        template, kind = select_template(mini_store, Address(road="Downing Street"), gb)
        assert template is mini_store.templates_by_country[gb]
        assert kind is TemplateKind.COUNTRY

    def test_unknown_country_uses_default(self, mini_store: RuleStore) -> None:
        template, kind = select_template(mini_store, Address(road="x"), CountryCode("ZZ"))
        assert template is mini_store.default_template
        assert kind is TemplateKind.DEFAULT

    def test_country_fallback(self, mini_store: RuleStore) -> None:
        gb = CountryCode("GB")
        template, kind = select_template(mini_store, Address(city="London"), gb)
        assert template is mini_store.fallback_templates_by_country[gb]
        assert kind is TemplateKind.COUNTRY_FALLBACK

    def test_global_fallback(self, mini_store: RuleStore) -> None:
        template, kind = select_template(mini_store, Address(city="Berlin"), CountryCode("DE"))
        assert template is mini_store.fallback_template
        assert kind is TemplateKind.FALLBACK


class TestPreformat:
    def test_replace_first_match_only(self, mini_store: RuleStore) -> None:
        address = Address(road="banana")
        preformat(address, Rules(replace=(_rule("a", "o"),)), mini_store, None)
        assert address.road == "bonana"

    def test_replace_all_components_in_order(self, mini_store: RuleStore) -> None:
        address = Address(road="Borough of Camden", suburb="Borough of Westminster")
        preformat(address, Rules(replace=(_rule("^Borough of ", ""),)), mini_store, None)
        assert address.road == "Camden"
        assert address.suburb == "Westminster"
        assert [e.field for e in address.process_log.cleaning] == ["road", "suburb"]

    def test_scoped_replace(self, mini_store: RuleStore) -> None:
        address = Address(road="Landkreis Weg", county="Landkreis München")
        rule = _rule("^Landkreis ", "", Component.COUNTY)
        preformat(address, Rules(replace=(rule,)), mini_store, None)
        assert address.county == "München"
        assert address.road == "Landkreis Weg"

    def test_replace_skips_empty_values(self, mini_store: RuleStore) -> None:
        address = Address(road="", city=None)
        preformat(address, Rules(replace=(_rule("^$", "filled"),)), mini_store, None)
        assert address.road == ""
        assert address.city is None

    def test_rules_apply_in_declared_order(self, mini_store: RuleStore) -> None:
        address = Address(road="a")
        rules = Rules(replace=(_rule("a", "b"), _rule("b", "c")))
        preformat(address, rules, mini_store, None)
        assert address.road == "c"

    def test_forced_components(self, mini_store: RuleStore) -> None:
        address = Address(state="Îles du Vent", country="France", country_code="pf")
        rules = Rules(
            change_country="Polynésie française",
            change_country_code="FR",
            add_component=NewComponent(Component.STATE, "Polynésie française"),
        )
        preformat(address, rules, mini_store, CountryCode("PF"))
        assert address.state == "Polynésie française"
        assert address.country == "Polynésie française"
        assert address.country_code == "FR"

    def test_injected_component_runs_after_replace(self, mini_store: RuleStore) -> None:
        address = Address(state="x")
        rules = Rules(
            replace=(_rule("PR", "Puerto Rico"),),
            add_component=NewComponent(Component.STATE, "PR"),
        )
        preformat(address, rules, mini_store, None)
        assert address.state == "PR"

    def test_derives_state_code(self, mini_store: RuleStore) -> None:
        address = Address(state="New York")
        preformat(address, Rules(), mini_store, CountryCode("US"))
        assert address.state_code == "NY"
        assert address.state == "New York"

    def test_derives_state_code_from_alternative_name(self, mini_store: RuleStore) -> None:
        address = Address(state="California (estado)")
        preformat(address, Rules(), mini_store, CountryCode("US"))
        assert address.state_code == "CA"

    def test_keeps_existing_state_code(self, mini_store: RuleStore) -> None:
        address = Address(state="New York", state_code="N.Y.")
        preformat(address, Rules(), mini_store, CountryCode("US"))
        assert address.state_code == "N.Y."

    def test_derives_county_code(self, mini_store: RuleStore) -> None:
        address = Address(county="München")
        preformat(address, Rules(), mini_store, CountryCode("DE"))
        assert address.county_code == "M"

    def test_no_lookup_without_country(self, mini_store: RuleStore) -> None:
        address = Address(state="New York")
        preformat(address, Rules(), mini_store, None)
        assert address.state_code is None

    def test_lookup_uses_parent_country(self, mini_store: RuleStore) -> None:
        address = Address(state="New York")
        preformat(address, Rules(change_country_code="US"), mini_store, CountryCode("PR"))
        assert address.state_code == "NY"
