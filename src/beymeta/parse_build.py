"""Build-name parser.

Decomposes a player-entered build string such as ``"DranSword3-60F"`` into
its parts by matching against the catalog. Standard lines are tried in a
fixed order before the composite (Custom) decomposition; the first that
succeeds wins. A string no decomposition accepts yields the unrecognized
build, never an exception.
"""

import logging

from beymeta.catalog import Catalog
from beymeta.matching import match_bit, match_exact, match_prefix, match_suffix
from beymeta.models import (
    ASSIST_BLADE,
    BASIC,
    BIT,
    BLADE,
    CUSTOM,
    LOCKCHIP,
    MAIN_BLADE,
    RATCHET,
    UNIQUE,
    X_OVER,
    ParsedBuild,
)

logger = logging.getLogger(__name__)

LINE_ORDER = (BASIC, UNIQUE, X_OVER)
CUSTOM_LINE = CUSTOM


def _cut_suffix(text: str, suffix: str) -> str:
    return text[: len(text) - len(suffix)].strip()


def _try_standard(name: str, line: str, catalog: Catalog) -> ParsedBuild | None:
    logger.debug("[%s] trying %r", line, name)

    bit = match_bit(name, catalog.bits)
    if bit is None:
        logger.debug("[%s] no bit suffix in %r", line, name)
        return None
    bit_name, matched = bit
    rest = _cut_suffix(name, matched)

    ratchet = match_suffix(rest, (r.name for r in catalog.ratchets))
    if ratchet is None:
        logger.debug("[%s] no ratchet suffix in %r", line, rest)
        return None
    rest = _cut_suffix(rest, ratchet)

    blade = match_exact(rest, (b.name for b in catalog.blades_for_line(line)))
    if blade is None:
        logger.debug("[%s] no %s blade named %r", line, line, rest)
        return None

    return ParsedBuild(
        is_composite=False,
        parts={BLADE: blade, RATCHET: ratchet, BIT: bit_name},
        line=line,
    )


def _try_composite(name: str, catalog: Catalog) -> ParsedBuild | None:
    logger.debug("[%s] trying %r", CUSTOM_LINE, name)

    lockchip = match_prefix(name, (lc.name for lc in catalog.lockchips))
    if lockchip is None:
        logger.debug("[%s] no lockchip prefix in %r", CUSTOM_LINE, name)
        return None
    rest = name[len(lockchip):]

    bit = match_bit(rest, catalog.bits)
    if bit is None:
        logger.debug("[%s] no bit suffix in %r", CUSTOM_LINE, rest)
        return None
    bit_name, matched = bit
    rest = _cut_suffix(rest, matched)

    ratchet = match_suffix(rest, (r.name for r in catalog.ratchets))
    if ratchet is None:
        logger.debug("[%s] no ratchet suffix in %r", CUSTOM_LINE, rest)
        return None
    rest = _cut_suffix(rest, ratchet)

    assist = match_suffix(rest, (a.name for a in catalog.assist_blades))
    if assist is None:
        logger.debug("[%s] no assist blade suffix in %r", CUSTOM_LINE, rest)
        return None
    rest = _cut_suffix(rest, assist)

    main_blade = match_exact(rest, (b.name for b in catalog.blades_for_line(CUSTOM_LINE)))
    if main_blade is None:
        logger.debug("[%s] no Custom main blade named %r", CUSTOM_LINE, rest)
        return None

    return ParsedBuild(
        is_composite=True,
        parts={
            LOCKCHIP: lockchip,
            MAIN_BLADE: main_blade,
            ASSIST_BLADE: assist,
            RATCHET: ratchet,
            BIT: bit_name,
        },
        line=CUSTOM_LINE,
    )


def parse_build(
    build_name: str | None,
    line_hint: str | None,
    catalog: Catalog,
) -> ParsedBuild:
    """Parse a build string into its parts.

    ``line_hint`` is the line declared at registration. It is accepted but
    every line is still tried in order; the hint only shows up in the trace.
    """
    name = (build_name or "").strip()
    if not name:
        logger.debug("Empty build name")
        return ParsedBuild()

    logger.debug("Parsing %r (declared line %r)", name, line_hint or "")

    for line in LINE_ORDER:
        result = _try_standard(name, line, catalog)
        if result is not None:
            logger.debug("Parsed %r as %s: %s", name, line, result.parts)
            return result

    result = _try_composite(name, catalog)
    if result is not None:
        logger.debug("Parsed %r as %s: %s", name, CUSTOM_LINE, result.parts)
        return result

    logger.debug("Unrecognized build %r", name)
    return ParsedBuild()
