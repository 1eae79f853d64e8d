"""Mustache templates with the ``first`` helper.

Templates are compiled with pystache when the rule store is loaded; any
syntax error surfaces as a ConfigurationError at that point. Rendering
exposes every non-None address component under its snake_case name plus
the ``first`` section helper::

    {{#first}} {{{city}}} || {{{town}}} || {{{village}}} {{/first}}

renders the block, splits it on ``||`` and keeps the first fragment that
is not blank.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pystache
from pystache.parser import ParsingError

from ryandata_address_formatter.models.errors import ConfigurationError

if TYPE_CHECKING:
    from ryandata_address_formatter.models.address import Address


FIRST_HELPER_NAME = "first"
FIRST_SEPARATOR = "||"
# Context keys holding the fragments chosen by `first`; not a component name
FIRST_RESULT_PREFIX = "_first_result_"


def first_non_empty(rendered: str, separator: str = FIRST_SEPARATOR) -> str:
    """Return the first non-blank fragment of a separator-joined string.

    Args:
        rendered: Already-rendered text such as ``" || Toulouse || Paris "``.
        separator: Fragment delimiter.

    Returns:
        The first fragment that is non-empty after trimming, or "".
    """
    for fragment in rendered.split(separator):
        candidate = fragment.strip()
        if candidate:
            return candidate
    return ""


def _make_first_helper(
    renderer: pystache.Renderer, context: dict[str, Any]
) -> Callable[[str], str]:
    # pystache renders whatever a section lambda returns as template text, so
    # the chosen fragment is stored in the context and only a tag pointing at
    # it is returned. Address values are never parsed as mustache.
    counter = itertools.count()

    def _first(section_text: str) -> str:
        key = f"{FIRST_RESULT_PREFIX}{next(counter)}"
        context[key] = first_non_empty(renderer.render(section_text, context))
        return "{{{%s}}}" % key

    return _first


class Template:
    """A compiled address template bound to one template string.

    Compilation happens in the constructor. :meth:`clone` recompiles from
    the source text instead of sharing parsed state.
    """

    def __init__(self, text: str, name: str = "template") -> None:
        if not isinstance(text, str):
            raise ConfigurationError(
                f"Template {name!r} must be a string, got {type(text).__name__}",
                {"template": name},
            )
        self.text = text
        self.name = name
        try:
            self._parsed = pystache.parse(text)
        except ParsingError as e:
            raise ConfigurationError(
                f"Template {name!r} does not compile: {e}", {"template": name}
            ) from e

    def clone(self, name: str | None = None) -> Template:
        """Return a freshly compiled copy of this template."""
        return Template(self.text, name or self.name)

    def render(self, address: Address) -> str:
        """Render the address into raw (not yet cleaned) text.

        Raises:
            Exception: Whatever the template engine raises; the formatter
                wraps it into an AddressFormatterError.
        """
        renderer = pystache.Renderer(missing_tags="ignore")
        context: dict[str, Any] = {
            component.value: value for component, value in address.items() if value is not None
        }
        context[FIRST_HELPER_NAME] = _make_first_helper(renderer, context)
        return renderer.render(self._parsed, context)

    def __repr__(self) -> str:
        return f"Template(name={self.name!r})"
