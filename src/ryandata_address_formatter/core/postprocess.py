"""Cleanup of rendered address text.

Templates render every line whether or not its components are set, so the
raw output is full of blank lines, dangling commas and doubled spaces. The
cascade below removes them, then country post-format replacements run, then
repeated tokens and lines are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from itertools import groupby
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ryandata_address_formatter.models.rules import Replacement

# Horizontal whitespace: any whitespace except line breaks
_H = r"[^\S\r\n]"

CLEANUP_CASCADE: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[},\s]+$", re.MULTILINE), ""),
    (re.compile(r"^ - ", re.MULTILINE), ""),  # dash left by a missing leading field
    (re.compile(r"^[,\s]+", re.MULTILINE), ""),
    (re.compile(r",\s*,"), ", "),
    (re.compile(rf"{_H}+,{_H}+"), ", "),
    (re.compile(rf"{_H}{{2,}}"), " "),
    (re.compile(rf"{_H}+\n"), "\n"),
    (re.compile(r"\n,"), "\n"),
    (re.compile(r",,+"), ","),
    (re.compile(r",\n"), "\n"),
    (re.compile(rf"\n{_H}+"), "\n"),
    (re.compile(r"\n\n+"), "\n"),
)

TOKEN_SEPARATOR = ", "


def apply_cleanup_cascade(text: str) -> str:
    """Run the cleanup cascade until the text stops changing.

    One pass is enough for template output; repeating covers inputs where a
    late step (e.g. whitespace collapsing) exposes a pattern an earlier step
    handles.
    """
    while True:
        cleaned = text
        for pattern, replacement in CLEANUP_CASCADE:
            cleaned = pattern.sub(replacement, cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def _dedup(items: Iterable[str]) -> list[str]:
    """Drop consecutive duplicates, keeping the first of each run."""
    return [key for key, _ in groupby(items)]


def dedup_text(text: str) -> str:
    """Remove repeated adjacent comma tokens in each line, then repeated adjacent lines."""
    lines = (
        TOKEN_SEPARATOR.join(_dedup(token.strip() for token in line.split(TOKEN_SEPARATOR)))
        for line in text.split("\n")
    )
    return "\n".join(_dedup(lines))


def postprocess(text: str, postformat_replace: Iterable[Replacement] = ()) -> str:
    """Turn raw rendered text into the final formatted address.

    Args:
        text: Raw template output.
        postformat_replace: Country whole-text replacements, every match replaced.

    Returns:
        The cleaned address, ending with exactly one newline.
    """
    text = apply_cleanup_cascade(text)
    for replacement in postformat_replace:
        text = replacement.replace_all(text)
    text = dedup_text(text)
    return f"{text.strip()}\n"
