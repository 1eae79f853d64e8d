"""Address-formatter error classes.

These classes provide package-specific error handling for rule loading
and address formatting operations.
"""

from __future__ import annotations

from typing import Any

from pydantic_core import PydanticCustomError

# Package identifier for error context
PACKAGE_NAME = "ryandata_address_formatter"


class AddressFormatterError(PydanticCustomError):
    """Custom exception for ryandata_address_formatter that wraps Pydantic errors.

    Inherits from PydanticCustomError to stay compatible with Pydantic's
    error handling while providing package identification. Raised at
    request time, most notably when a template fails to render.
    """

    @classmethod
    def from_exception(
        cls,
        error_type: str,
        error: Exception,
        context: dict[str, Any] | None = None,
    ) -> AddressFormatterError:
        """Wrap an arbitrary exception with package context.

        Args:
            error_type: Category of the error (e.g. "template_render_error").
            error: The underlying exception.
            context: Additional context to include in the error.

        Returns:
            AddressFormatterError carrying the original message and cause.
        """
        ctx = {
            "package": PACKAGE_NAME,
            "cause": type(error).__name__,
            **(context or {}),
        }
        return cls(error_type, f"{error_type}: {error}", ctx)


class ConfigurationError(Exception):
    """Raised when the rule corpus cannot be turned into a rule store.

    Covers malformed entries, invalid regular expressions, invalid country
    codes, template compile failures and broken ``use_country`` chains.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.context = {"package": PACKAGE_NAME, **(context or {})}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ConfigurationError({str(self)!r}, context={self.context})"


class InvalidCountryCodeError(ValueError):
    """Raised when a string cannot be parsed into a CountryCode."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"{value!r} is not a valid ISO 3166-1 alpha-2 country code")
