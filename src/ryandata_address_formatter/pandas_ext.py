from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ryandata_address_formatter.models import (
    Address,
    AddressFormatterError,
    Component,
    Configuration,
)

if TYPE_CHECKING:
    import pandas as pd

    from ryandata_address_formatter.service import AddressFormatter

ERROR_MODES = ("raise", "coerce")


def _row_to_address(row: Mapping[Any, Any], column_map: Mapping[str, str]) -> Address:
    import pandas as pd

    address = Address()
    for column, value in row.items():
        component = Component.from_name(column_map.get(str(column), str(column)))
        if component is None or value is None or pd.isna(value):
            continue
        address[component] = str(value)
    return address


def _format_rows(
    df: pd.DataFrame,
    *,
    column_map: Mapping[str, str] | None,
    country_code: str | None,
    errors: str,
    formatter: AddressFormatter | None,
) -> list[str | None]:
    if errors not in ERROR_MODES:
        raise ValueError(f"errors must be one of {ERROR_MODES}, got {errors!r}")

    if formatter is None:
        from ryandata_address_formatter.service import get_default_formatter

        formatter = get_default_formatter()

    configuration = Configuration(country_code=country_code)
    rename = dict(column_map or {})

    formatted: list[str | None] = []
    for row in df.to_dict(orient="records"):
        address = _row_to_address(row, rename)
        try:
            formatted.append(formatter.format_with_configuration(address, configuration))
        except AddressFormatterError:
            if errors == "raise":
                raise
            formatted.append(None)
    return formatted


def format_dataframe(
    df: pd.DataFrame,
    *,
    output_column: str = "formatted_address",
    column_map: Mapping[str, str] | None = None,
    country_code: str | None = None,
    errors: str = "raise",
    formatter: AddressFormatter | None = None,
) -> pd.DataFrame:
    """Format every row of a DataFrame into a new column.

    Columns named after address components (``road``, ``postcode``, ...)
    are used as-is; other columns are ignored unless ``column_map``
    renames them. Missing values (None, NaN) count as absent.

    Args:
        df: Input DataFrame, one address per row. It is not modified.
        output_column: Name of the column receiving the formatted text.
        column_map: Mapping of DataFrame column to component name.
        country_code: Country code applied to every row, overriding the
            ``country_code`` column.
        errors: How to handle rendering errors:
            - "raise": Propagate the AddressFormatterError
            - "coerce": Store None for that row
        formatter: Optional AddressFormatter to use.

    Returns:
        A copy of ``df`` with the output column added.

    Example:
        >>> df = pd.DataFrame({"street": ["Downing Street"], "house_number": ["10"]})
        >>> format_dataframe(df, column_map={"street": "road"}, country_code="GB")
    """
    result = df.copy()
    result[output_column] = _format_rows(
        df,
        column_map=column_map,
        country_code=country_code,
        errors=errors,
        formatter=formatter,
    )
    return result


class AddressFormatterAccessor:
    """Pandas DataFrame accessor for address formatting.

    Usage:
        >>> from ryandata_address_formatter.pandas_ext import register_accessor
        >>> register_accessor()
        >>> df = pd.DataFrame({"road": ["Downing Street"], "country_code": ["GB"]})
        >>> df.addrfmt.format()
    """

    def __init__(self, pandas_obj: pd.DataFrame) -> None:
        self._obj = pandas_obj

    def format(
        self,
        *,
        column_map: Mapping[str, str] | None = None,
        country_code: str | None = None,
        errors: str = "raise",
        formatter: AddressFormatter | None = None,
        name: str = "formatted_address",
    ) -> pd.Series:
        """Format each row, returning a Series aligned on the DataFrame index.

        Args:
            column_map: Mapping of DataFrame column to component name.
            country_code: Country code applied to every row.
            errors: "raise" or "coerce" (None for rows that fail).
            formatter: Optional AddressFormatter to use.
            name: Name of the returned Series.
        """
        import pandas as pd

        values = _format_rows(
            self._obj,
            column_map=column_map,
            country_code=country_code,
            errors=errors,
            formatter=formatter,
        )
        return pd.Series(values, index=self._obj.index, name=name, dtype=object)


def register_accessor(name: str = "addrfmt") -> None:
    """Register the formatting accessor on pandas DataFrames.

    After calling this, you can use:
        >>> df.addrfmt.format()

    Args:
        name: Name for the accessor (default: "addrfmt").
    """
    import pandas as pd

    if not hasattr(pd.DataFrame, name):
        pd.api.extensions.register_dataframe_accessor(name)(AddressFormatterAccessor)
