"""Property-based tests using Hypothesis for the formatting pipeline.

This module contains property tests that verify invariants of text
cleanup, country resolution and end-to-end formatting.
"""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from ryandata_address_formatter import Address, AddressFormatter, CountryCode
from ryandata_address_formatter.core.postprocess import apply_cleanup_cascade, postprocess
from ryandata_address_formatter.core.resolver import resolve_country
from ryandata_address_formatter.core.template import first_non_empty
from tests.strategies import (
    address_strategy,
    country_code_strategy,
    invalid_country_code_strategy,
    raw_text_strategy,
    sparse_address_strategy,
)

# Shared by every @given test in this module
FORMATTER = AddressFormatter()

# =============================================================================
# Postprocessing Property Tests
# =============================================================================


class TestPostprocessProperties:
    @given(raw_text_strategy())
    @settings(max_examples=300)
    def test_cascade_idempotent(self, text: str) -> None:
        once = apply_cleanup_cascade(text)
        assert apply_cleanup_cascade(once) == once

    @given(raw_text_strategy())
    @settings(max_examples=300)
    def test_postprocess_idempotent(self, text: str) -> None:
        once = postprocess(text)
        assert postprocess(once) == once

    @given(raw_text_strategy())
    @settings(max_examples=300)
    def test_single_trailing_newline(self, text: str) -> None:
        result = postprocess(text)
        assert result.endswith("\n")
        assert not result.endswith("\n\n")
        assert result == "\n" or not result[0].isspace()

    @given(raw_text_strategy())
    @settings(max_examples=300)
    def test_no_adjacent_duplicates(self, text: str) -> None:
        lines = postprocess(text).rstrip("\n").split("\n")
        for line in lines:
            tokens = [token.strip() for token in line.split(", ")]
            assert all(a != b for a, b in zip(tokens, tokens[1:]))
        assert all(a != b for a, b in zip(lines, lines[1:]))

    @given(st.lists(st.text(alphabet="ab \t", max_size=6), max_size=5))
    def test_first_non_empty(self, fragments: list[str]) -> None:
        result = first_non_empty("||".join(fragments))
        candidates = [f.strip() for f in fragments if f.strip()]
        assert result == (candidates[0] if candidates else "")


# =============================================================================
# Country Resolution Property Tests
# =============================================================================


class TestResolverProperties:
    @given(st.sampled_from(["FR", "GB", "US", "DE"]), country_code_strategy())
    def test_override_wins(self, override: str, own: str) -> None:
        address = Address(country_code=own)
        assert resolve_country(address, override) == CountryCode.parse(override)

    @given(invalid_country_code_strategy())
    def test_invalid_codes_mean_no_country(self, raw: str) -> None:
        address = Address(country_code=raw)
        assert resolve_country(address) is None
        assert len(address.process_log.errors) == 1


# =============================================================================
# Formatter Property Tests
# =============================================================================


class TestFormatterProperties:
    @given(address_strategy())
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_deterministic(self, address: Address) -> None:
        assert FORMATTER.format(address) == FORMATTER.format(address)

    @given(sparse_address_strategy())
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_output_shape(self, address: Address) -> None:
        text = FORMATTER.format(address)
        assert text.endswith("\n")
        assert "\n\n" not in text
        assert all(line == line.strip() for line in text.splitlines())

    @given(address_strategy(), st.sampled_from(["FR", "GB", "US", "DE", "IT"]))
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_override_equals_own_code(self, address: Address, code: str) -> None:
        with_own_code = Address.from_mapping({**address.to_dict(), "country_code": code})
        assert FORMATTER.format_with_configuration(
            address, {"country_code": code}
        ) == FORMATTER.format(with_own_code)

    @given(address_strategy())
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_input_never_mutated(self, address: Address) -> None:
        before = address.to_dict()
        FORMATTER.format(address)
        assert address.to_dict() == before
