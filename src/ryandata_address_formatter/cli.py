from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer

from ryandata_address_formatter.data import YAMLConfigurationSource
from ryandata_address_formatter.models import (
    Address,
    AddressFormatterError,
    Component,
    Configuration,
    ConfigurationError,
)
from ryandata_address_formatter.service import AddressFormatter, get_default_formatter

app = typer.Typer(help="Format postal addresses following each country's conventions.")


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _load_formatter(conf_dir: Optional[Path]) -> AddressFormatter:
    try:
        if conf_dir is None:
            return get_default_formatter()
        return AddressFormatter(source=YAMLConfigurationSource(conf_dir))
    except ConfigurationError as e:
        _fail(f"Cannot load address rules: {e}")


def _split_fields(fields: list[str]) -> list[tuple[str, str]]:
    pairs = []
    for field in fields:
        key, sep, value = field.partition("=")
        if not sep or not key:
            _fail(f"Expected KEY=VALUE, got {field!r}")
        pairs.append((key.strip(), value))
    return pairs


@app.command("format")
def format_command(
    fields: list[str] = typer.Argument(  # noqa: B008
        ...,
        help="Address fields as KEY=VALUE, e.g. road='Downing Street' country_code=GB.",
    ),
    country: Optional[str] = typer.Option(  # noqa: B008
        None,
        "--country",
        "-c",
        help="Country code overriding the address's own country_code.",
    ),
    loose: bool = typer.Option(  # noqa: B008
        False,
        "--loose",
        help="Accept alias keys (zip, street, ...); unknown keys go to attention.",
    ),
    conf_dir: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--conf-dir",
        help="Directory holding an alternative YAML rule corpus.",
    ),
) -> None:
    """Format one address given as KEY=VALUE pairs."""
    pairs = _split_fields(fields)
    formatter = _load_formatter(conf_dir)

    if loose:
        address = formatter.build_address(pairs)
    else:
        unknown = [key for key, _ in pairs if Component.from_name(key) is None]
        if unknown:
            _fail(f"Unknown address fields: {', '.join(unknown)} (use --loose to accept aliases)")
        address = Address.from_pairs(pairs)

    try:
        text = formatter.format_with_configuration(address, Configuration(country_code=country))
    except AddressFormatterError as e:
        _fail(f"Formatting failed: {e}")
    typer.echo(text, nl=False)


@app.command("countries")
def countries_command(
    conf_dir: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--conf-dir",
        help="Directory holding an alternative YAML rule corpus.",
    ),
) -> None:
    """List the countries known to the rule corpus."""
    store = _load_formatter(conf_dir).rule_store
    for country_code in store.countries:
        parent = store.parent_countries.get(country_code)
        if parent is not None:
            typer.echo(f"{country_code} (uses {parent})")
        else:
            typer.echo(str(country_code))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
