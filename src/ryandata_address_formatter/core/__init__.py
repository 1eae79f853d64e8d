"""Formatting pipeline stages.

Each stage works on an Address in place: country resolution, sanitizing,
template selection, pre-render rules, rendering and text cleanup.
"""

from __future__ import annotations

from ryandata_address_formatter.core.factory import PluginFactory
from ryandata_address_formatter.core.postprocess import (
    apply_cleanup_cascade,
    dedup_text,
    postprocess,
)
from ryandata_address_formatter.core.preformat import preformat
from ryandata_address_formatter.core.resolver import resolve_country
from ryandata_address_formatter.core.sanitizer import sanitize_address
from ryandata_address_formatter.core.selector import has_minimum_components, select_template
from ryandata_address_formatter.core.template import Template, first_non_empty

__all__ = [
    "PluginFactory",
    "Template",
    "apply_cleanup_cascade",
    "dedup_text",
    "first_non_empty",
    "has_minimum_components",
    "postprocess",
    "preformat",
    "resolve_country",
    "sanitize_address",
    "select_template",
]
