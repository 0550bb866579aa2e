"""Parsing of listing responses (``list``, ``banlist``, ``whitelist list``)."""

from __future__ import annotations

import re

PLAYER_SEPARATOR = re.compile(r",\s+")
WHITELIST_SEPARATOR = re.compile(r",?\s+")


def parse_listing(response: str, separator: re.Pattern[str] = PLAYER_SEPARATOR) -> list[str]:
    """Extract the names that follow the first colon of a listing response.

    ``"There are 2/20 players online: Alice, Bob"`` yields
    ``["Alice", "Bob"]``. A response without a colon, such as
    ``"There are no banned players"``, carries no names and yields an
    empty list, as does a colon followed only by whitespace.
    """
    _, colon, names = response.partition(":")
    if not colon:
        return []
    names = names.strip()
    if not names:
        return []
    return separator.split(names)
