"""Country code value type."""

from __future__ import annotations

from dataclasses import dataclass

from ryandata_address_formatter.models.errors import InvalidCountryCodeError

# Codes that are commonly used but are not the ISO 3166-1 code of the country
COUNTRY_CODE_ALIASES: dict[str, str] = {
    "UK": "GB",
}


@dataclass(frozen=True, order=True)
class CountryCode:
    """A normalized, upper-case ISO 3166-1 alpha-2 country code.

    Build instances with :meth:`parse`; equality and hashing operate on the
    normalized value, so ``CountryCode.parse("uk") == CountryCode.parse("GB")``.

    Example:
        >>> CountryCode.parse("fr")
        CountryCode(value='FR')
        >>> str(CountryCode.parse("UK"))
        'GB'
    """

    value: str

    @classmethod
    def parse(cls, raw: str) -> CountryCode:
        """Normalize and validate a two-character country code.

        Args:
            raw: Country code as found in an address, a caller override
                or the rule corpus.

        Returns:
            The normalized CountryCode.

        Raises:
            InvalidCountryCodeError: If ``raw`` is not exactly two characters.
        """
        if not isinstance(raw, str) or len(raw) != 2:
            raise InvalidCountryCodeError(raw)
        code = raw.upper()
        return cls(COUNTRY_CODE_ALIASES.get(code, code))

    @classmethod
    def try_parse(cls, raw: str | None) -> CountryCode | None:
        """Parse ``raw``, returning None instead of raising."""
        if raw is None:
            return None
        try:
            return cls.parse(raw)
        except InvalidCountryCodeError:
            return None

    def __str__(self) -> str:
        return self.value
