from __future__ import annotations

import pytest

pytest.importorskip("pandas")

import pandas as pd  # noqa: E402

from ryandata_address_formatter import (  # noqa: E402
    AddressFormatter,
    AddressFormatterError,
    RuleStore,
    format_dataframe,
    register_accessor,
)
from ryandata_address_formatter.core.template import Template  # noqa: E402


class ExplodingTemplate(Template):
    def render(self, address):  # type: ignore[no-untyped-def]
        raise RuntimeError("boom")


@pytest.fixture
def addresses() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "house_number": ["10", "17", None],
            "road": ["Downing Street", "Rue de Metz", None],
            "postcode": ["SW1A 2AA", "31000", None],
            "city": ["London", "Toulouse", "Berlin"],
            "country_code": ["GB", "FR", "DE"],
            "customer_id": [1, 2, 3],
        }
    )


class TestFormatDataframe:
    def test_formats_each_row(self, addresses: pd.DataFrame, formatter: AddressFormatter) -> None:
        result = format_dataframe(addresses, formatter=formatter)
        assert list(result["formatted_address"]) == [
            "10 Downing Street\nLondon\nSW1A 2AA\n",
            "17 Rue de Metz\n31000 Toulouse\n",
            "Berlin\n",
        ]

    def test_does_not_modify_input(self, addresses: pd.DataFrame, formatter: AddressFormatter) -> None:
        format_dataframe(addresses, formatter=formatter)
        assert "formatted_address" not in addresses.columns

    def test_nan_is_absent(self, formatter: AddressFormatter) -> None:
        df = pd.DataFrame({"road": ["Downing Street", float("nan")], "city": ["London", "London"]})
        result = format_dataframe(df, country_code="GB", formatter=formatter)
        assert list(result["formatted_address"]) == [
            "Downing Street\nLondon\n",
            "London\n",
        ]

    def test_column_map_and_output_column(self, formatter: AddressFormatter) -> None:
        df = pd.DataFrame({"street": ["Downing Street"], "number": [10], "town_name": ["London"]})
        result = format_dataframe(
            df,
            column_map={"street": "road", "number": "house_number", "town_name": "city"},
            country_code="GB",
            output_column="label",
            formatter=formatter,
        )
        assert result.loc[0, "label"] == "10 Downing Street\nLondon\n"

    def test_empty_dataframe(self, formatter: AddressFormatter) -> None:
        result = format_dataframe(pd.DataFrame({"road": []}), formatter=formatter)
        assert "formatted_address" in result.columns
        assert len(result) == 0

    def test_errors(self) -> None:
        store = RuleStore(
            default_template=ExplodingTemplate(""), fallback_template=ExplodingTemplate("")
        )
        exploding = AddressFormatter(rule_store=store)
        df = pd.DataFrame({"road": ["Downing Street"]})

        with pytest.raises(AddressFormatterError):
            format_dataframe(df, formatter=exploding)
        result = format_dataframe(df, errors="coerce", formatter=exploding)
        assert result.loc[0, "formatted_address"] is None

    def test_invalid_error_mode(self, addresses: pd.DataFrame) -> None:
        with pytest.raises(ValueError, match="errors"):
            format_dataframe(addresses, errors="ignore")


class TestAccessor:
    def test_register_and_format(self, addresses: pd.DataFrame, formatter: AddressFormatter) -> None:
        register_accessor()
        register_accessor()  # registering twice is a no-op
        series = addresses.addrfmt.format(formatter=formatter)
        assert isinstance(series, pd.Series)
        assert series.name == "formatted_address"
        assert list(series.index) == list(addresses.index)
        assert series.iloc[1] == "17 Rue de Metz\n31000 Toulouse\n"

    def test_country_override(self, formatter: AddressFormatter) -> None:
        register_accessor()
        df = pd.DataFrame({"road": ["Rue de Metz"], "house_number": ["17"], "country_code": ["US"]})
        series = df.addrfmt.format(country_code="FR", formatter=formatter)
        assert series.iloc[0] == "17 Rue de Metz\n"
