"""Per-call formatting options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Configuration(BaseModel):
    """Options accepted by ``AddressFormatter.format_with_configuration``.

    Example:
        >>> Configuration(country_code="GB")
        Configuration(country_code='GB', abbreviate=None)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    country_code: str | None = Field(
        default=None,
        description="Country code that takes precedence over the address's own country_code",
    )
    abbreviate: bool | None = Field(
        default=None,
        description="Request abbreviated output. Accepted but not applied yet.",
    )
