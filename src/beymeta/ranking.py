"""Sorted and filtered views of an analysis pass."""

import logging
from collections import defaultdict
from dataclasses import fields

from beymeta.aggregate import MetaAnalysis, PartTable
from beymeta.models import (
    ASSIST_BLADE,
    BIT,
    BLADE,
    LOCKCHIP,
    MAIN_BLADE,
    RATCHET,
    BuildStat,
    MatchOutcome,
    PartStat,
)
from beymeta.scoring import wilson_lower_bound, win_rate

logger = logging.getLogger(__name__)

DEFAULT_SORT_KEY = "wilson_score"

SLOT_LABELS = {
    BLADE: "Blades",
    RATCHET: "Ratchets",
    BIT: "Bits",
    LOCKCHIP: "Lockchips",
    MAIN_BLADE: "Main Blades",
    ASSIST_BLADE: "Assist Blades",
}

_PART_FIELDS = {f.name for f in fields(PartStat)}
_BUILD_FIELDS = {f.name for f in fields(BuildStat)} | {"usage"}


def _sorted(items: list, sort_key: str, descending: bool, tie_break) -> list:
    # Two stable sorts: tie-break ascending, then the requested key.
    items = sorted(items, key=tie_break)
    return sorted(items, key=lambda s: getattr(s, sort_key), reverse=descending)


def rank_parts(
    source: MetaAnalysis | PartTable,
    slot: str,
    sort_key: str = DEFAULT_SORT_KEY,
    descending: bool = True,
    used_only: bool = True,
) -> list[PartStat]:
    """Parts in one slot, best first by default."""
    if sort_key not in _PART_FIELDS:
        raise ValueError(f"Unknown part sort key: {sort_key!r}")
    table = source.part_stats if isinstance(source, MetaAnalysis) else source
    stats = list(table.get(slot, {}).values())
    if used_only:
        stats = [s for s in stats if s.usage > 0]
    return _sorted(stats, sort_key, descending, lambda s: s.name)


def rank_builds(
    analysis: MetaAnalysis,
    sort_key: str = DEFAULT_SORT_KEY,
    descending: bool = True,
) -> list[BuildStat]:
    if sort_key not in _BUILD_FIELDS:
        raise ValueError(f"Unknown build sort key: {sort_key!r}")
    stats = list(analysis.build_stats.values())
    return _sorted(stats, sort_key, descending, lambda s: (s.build, s.player))


def builds_for_part(analysis: MetaAnalysis, slot: str, part_name: str) -> list[BuildStat]:
    """Builds that used the given part, per player, best first."""
    counts: dict[tuple[str, str], list[int]] = defaultdict(lambda: [0, 0])
    for side in analysis.outcomes:
        if side.parsed.get(slot) != part_name or not side.build:
            continue
        counts[(side.build, side.player)][0 if side.is_win else 1] += 1

    builds = []
    for (build, player), (wins, losses) in counts.items():
        total = wins + losses
        builds.append(BuildStat(
            build=build,
            player=player,
            wins=wins,
            losses=losses,
            win_rate=win_rate(wins, total),
            wilson_score=wilson_lower_bound(wins, total),
        ))
    logger.debug("%d builds use %s %r", len(builds), slot, part_name)
    return _sorted(builds, DEFAULT_SORT_KEY, True, lambda s: (s.build, s.player))


def matches_for_build(analysis: MetaAnalysis, build: str, player: str) -> list[MatchOutcome]:
    """Match outcomes behind one player's build, in encounter order."""
    return [o for o in analysis.outcomes if o.build == build and o.player == player]
