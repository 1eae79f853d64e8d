from __future__ import annotations

import copy
from typing import Any

from ryandata_address_formatter.data.base import BaseConfigurationSource


class DictConfigurationSource(BaseConfigurationSource):
    """Configuration source backed by in-memory documents.

    Useful for tests and for callers that assemble their corpus themselves.
    The documents are deep-copied so later mutation by the caller has no
    effect on a store built from this source.

    Example:
        >>> source = DictConfigurationSource(
        ...     worldwide={
        ...         "default": {
        ...             "address_template": "{{{road}}}\\n{{{country}}}",
        ...             "fallback_template": "{{{country}}}",
        ...         }
        ...     }
        ... )
    """

    name = "dict"

    def __init__(
        self,
        worldwide: dict[str, Any],
        components: list[dict[str, Any]] | None = None,
        state_codes: dict[str, Any] | None = None,
        county_codes: dict[str, Any] | None = None,
    ) -> None:
        self._worldwide = copy.deepcopy(worldwide)
        self._components = copy.deepcopy(components)
        self._state_codes = copy.deepcopy(state_codes)
        self._county_codes = copy.deepcopy(county_codes)

    def _load_components_impl(self) -> Any:
        return self._components

    def _load_worldwide_impl(self) -> Any:
        return self._worldwide

    def _load_state_codes_impl(self) -> Any:
        return self._state_codes

    def _load_county_codes_impl(self) -> Any:
        return self._county_codes
