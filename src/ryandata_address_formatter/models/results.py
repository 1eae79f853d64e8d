"""Result classes for formatting operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ryandata_address_formatter.models.address import Address
    from ryandata_address_formatter.models.country import CountryCode


class TemplateKind(str, Enum):
    """Which template of the rule store rendered an address."""

    DEFAULT = "default"
    FALLBACK = "fallback"
    COUNTRY = "country"
    COUNTRY_FALLBACK = "country_fallback"


@dataclass
class FormatResult:
    """Outcome of formatting one address.

    Attributes:
        text: The formatted address, always ending with a single newline.
        address: The processed copy of the input, as it was rendered.
        country_code: The country the rules were taken from, None if unknown.
        template_kind: Which template was used.
    """

    text: str
    address: Address
    country_code: CountryCode | None
    template_kind: TemplateKind

    @property
    def lines(self) -> list[str]:
        """The formatted address split into lines."""
        return self.text.splitlines()

    def audit_log(self) -> list[dict[str, Any]]:
        """Every change the pipeline applied to the address."""
        return self.address.audit_log(source="address")
