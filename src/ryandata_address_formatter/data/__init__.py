"""Rule corpus sources and the rule store built from them."""

from __future__ import annotations

from ryandata_address_formatter.data.base import BaseConfigurationSource
from ryandata_address_formatter.data.dict_source import DictConfigurationSource
from ryandata_address_formatter.data.factory import ConfigurationSourceFactory
from ryandata_address_formatter.data.store import RuleStore, build_rule_store
from ryandata_address_formatter.data.yaml_source import (
    CONF_DIR_ENV_VAR,
    YAMLConfigurationSource,
)

__all__ = [
    "BaseConfigurationSource",
    "CONF_DIR_ENV_VAR",
    "ConfigurationSourceFactory",
    "DictConfigurationSource",
    "RuleStore",
    "YAMLConfigurationSource",
    "build_rule_store",
]
