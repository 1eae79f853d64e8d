"""Shared pytest fixtures and Hypothesis configuration.

This module provides pytest fixtures and configures Hypothesis profiles
for the test suite.
"""

from __future__ import annotations

import pytest
from hypothesis import Verbosity, settings

from ryandata_address_formatter import AddressFormatter, RuleStore
from tests.mini_corpus import make_mini_source

# Configure Hypothesis settings for the test suite
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, deadline=None, verbosity=Verbosity.verbose)


@pytest.fixture(scope="session")
def formatter() -> AddressFormatter:
    """Formatter over the bundled corpus, loaded once per session."""
    return AddressFormatter()


@pytest.fixture(scope="session")
def mini_store() -> RuleStore:
    """Rule store built from the in-memory mini corpus."""
    return RuleStore.from_source(make_mini_source())


@pytest.fixture(scope="session")
def mini_formatter(mini_store: RuleStore) -> AddressFormatter:
    """Formatter over the in-memory mini corpus."""
    return AddressFormatter(rule_store=mini_store)
