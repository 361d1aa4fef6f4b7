"""Name matching helpers used by the build parser.

All helpers try candidates longest first so that a specific name wins over
a shorter one embedded at the same position (alias "XS" before "X").
Ties keep catalog order.
"""

import logging
from typing import Iterable

from beymeta.models import Bit

logger = logging.getLogger(__name__)


def longest_first(names: Iterable[str]) -> list[str]:
    """Non-empty names ordered by length, longest first (stable)."""
    return sorted((n for n in names if n), key=len, reverse=True)


def match_suffix(text: str, names: Iterable[str]) -> str | None:
    for name in longest_first(names):
        if text.endswith(name):
            return name
    return None


def match_prefix(text: str, names: Iterable[str]) -> str | None:
    for name in longest_first(names):
        if text.startswith(name):
            return name
    return None


def match_exact(text: str, names: Iterable[str]) -> str | None:
    for name in names:
        if name and text == name:
            return name
    return None


def match_bit(text: str, bits: Iterable[Bit]) -> tuple[str, str] | None:
    """Match a bit at the end of text.

    Aliases are tried before full names. Returns (reported_name,
    matched_text): the bit is reported by its alias when it has one, and
    matched_text is the suffix to cut from text.
    """
    bits = list(bits)

    by_alias = {}
    for bit in bits:
        if bit.alias:
            by_alias.setdefault(bit.alias, bit)
    alias = match_suffix(text, by_alias)
    if alias is not None:
        logger.debug("Bit matched by alias %r", alias)
        return by_alias[alias].display_name, alias

    by_name = {}
    for bit in bits:
        by_name.setdefault(bit.name, bit)
    name = match_suffix(text, by_name)
    if name is not None:
        logger.debug("Bit matched by full name %r -> %r", name, by_name[name].display_name)
        return by_name[name].display_name, name

    return None
