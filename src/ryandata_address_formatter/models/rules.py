"""Per-country formatting rules.

Rules are built once when the rule store is loaded and never mutated
afterwards, so every type in this module is a frozen dataclass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ryandata_address_formatter.models.address import Address
from ryandata_address_formatter.models.enums import Component


@dataclass(frozen=True)
class Replacement:
    """A compiled pattern and the text that replaces its matches.

    ``value`` is already in :func:`re.sub` syntax (``\\g<1>`` group refs).
    """

    pattern: re.Pattern[str]
    value: str

    def replace_first(self, text: str) -> str:
        """Replace the first match only."""
        return self.pattern.sub(self.value, text, count=1)

    def replace_all(self, text: str) -> str:
        """Replace every match."""
        return self.pattern.sub(self.value, text)


@dataclass(frozen=True)
class ReplaceRule:
    """A pre-render replacement, on every component or on a single one.

    Attributes:
        replacement: Pattern and replacement text.
        component: Component the rule is scoped to, None for all components.
    """

    replacement: Replacement
    component: Component | None = None

    def apply(self, address: Address) -> None:
        """Apply the rule in place, first match only, on non-empty values."""
        targets = list(Component) if self.component is None else [self.component]
        for component in targets:
            value = address[component]
            if not value:
                continue
            new_value = self.replacement.replace_first(value)
            if new_value != value:
                address[component] = new_value
                address.add_cleaning_process(
                    component.value,
                    value,
                    new_value,
                    f"Replace rule {self.replacement.pattern.pattern!r}",
                    operation_type="preformat",
                )


@dataclass(frozen=True)
class NewComponent:
    """A component forced to a literal value before rendering."""

    component: Component
    value: str


@dataclass(frozen=True)
class Rules:
    """Pre-render and post-render transformations for one country.

    Attributes:
        replace: Ordered pre-render rules.
        postformat_replace: Ordered whole-text replacements applied after rendering.
        change_country: Literal value forced into the country component.
        change_country_code: Literal value forced into the country_code component.
        add_component: Single component forced to a literal value.
    """

    replace: tuple[ReplaceRule, ...] = field(default_factory=tuple)
    postformat_replace: tuple[Replacement, ...] = field(default_factory=tuple)
    change_country: str | None = None
    change_country_code: str | None = None
    add_component: NewComponent | None = None
