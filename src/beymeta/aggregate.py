"""Fold match records into per-part and per-build statistics."""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from beymeta.catalog import Catalog
from beymeta.models import (
    SLOTS,
    BuildStat,
    MatchOutcome,
    MatchRecord,
    ParsedBuild,
    PartStat,
)
from beymeta.parse_build import parse_build
from beymeta.scoring import wilson_lower_bound, win_rate
from beymeta.util import clean_name

logger = logging.getLogger(__name__)

PartTable = Mapping[str, Mapping[str, PartStat]]
BuildTable = Mapping[tuple[str, str], BuildStat]


def _empty_part_table() -> PartTable:
    return MappingProxyType({s: MappingProxyType({}) for s in SLOTS})


@dataclass(frozen=True)
class MetaAnalysis:
    part_stats: PartTable = field(default_factory=_empty_part_table)
    build_stats: BuildTable = field(default_factory=lambda: MappingProxyType({}))
    outcomes: tuple[MatchOutcome, ...] = ()
    # build -> sides
    unparsed: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    matches_counted: int = 0
    matches_skipped: int = 0


def _is_complete(record: MatchRecord) -> bool:
    return bool(
        clean_name(record.winner_name)
        and clean_name(record.player1_name)
        and clean_name(record.player2_name)
    )


def _sides(record: MatchRecord, catalog: Catalog) -> tuple[MatchOutcome, MatchOutcome]:
    """Both sides of a match, player 1 first, each with its own parse."""
    p1_parsed = parse_build(record.player1_build, record.player1_line, catalog)
    p2_parsed = parse_build(record.player2_build, record.player2_line, catalog)
    outcome = record.outcome or "Unknown"
    p1, p2 = clean_name(record.player1_name), clean_name(record.player2_name)
    winner = clean_name(record.winner_name)
    return (
        MatchOutcome(
            player=p1,
            opponent=p2,
            build=record.player1_build or "",
            opponent_build=record.player2_build or "",
            is_win=winner == p1,
            outcome=outcome,
            parsed=p1_parsed,
        ),
        MatchOutcome(
            player=p2,
            opponent=p1,
            build=record.player2_build or "",
            opponent_build=record.player1_build or "",
            is_win=winner == p2,
            outcome=outcome,
            parsed=p2_parsed,
        ),
    )


def _part_stat(slot: str, name: str, wins: int, losses: int) -> PartStat:
    total = wins + losses
    return PartStat(
        slot=slot,
        name=name,
        usage=total,
        wins=wins,
        losses=losses,
        win_rate=win_rate(wins, total),
        wilson_score=wilson_lower_bound(wins, total),
    )


def _build_stat(build: str, player: str, wins: int, losses: int) -> BuildStat:
    total = wins + losses
    return BuildStat(
        build=build,
        player=player,
        wins=wins,
        losses=losses,
        win_rate=win_rate(wins, total),
        wilson_score=wilson_lower_bound(wins, total),
    )


def analyze_matches(records: Iterable[MatchRecord], catalog: Catalog) -> MetaAnalysis:
    """Run one full analysis pass over the given match records."""
    # [wins, losses] per key; local to this pass
    part_counts: dict[tuple[str, str], list[int]] = defaultdict(lambda: [0, 0])
    build_counts: dict[tuple[str, str], list[int]] = defaultdict(lambda: [0, 0])
    unparsed: Counter = Counter()
    outcomes: list[MatchOutcome] = []
    counted = 0
    skipped = 0

    for record in records:
        if not _is_complete(record):
            skipped += 1
            logger.debug(
                "Skipping incomplete match %r vs %r (winner %r)",
                record.player1_name, record.player2_name, record.winner_name,
            )
            continue
        counted += 1

        for side in _sides(record, catalog):
            outcomes.append(side)
            idx = 0 if side.is_win else 1

            if side.build:
                build_counts[(side.build, side.player)][idx] += 1

            if not side.parsed.recognized:
                if side.build:
                    unparsed[side.build] += 1
                continue

            for slot, part in side.parsed.parts.items():
                part_counts[(slot, part)][idx] += 1

    parts: dict[str, dict[str, PartStat]] = {slot: {} for slot in SLOTS}
    for (slot, name), (wins, losses) in part_counts.items():
        parts[slot][name] = _part_stat(slot, name, wins, losses)

    # Read-only views over this pass's tables
    part_stats: PartTable = MappingProxyType(
        {slot: MappingProxyType(table) for slot, table in parts.items()}
    )
    build_stats: BuildTable = MappingProxyType({
        key: _build_stat(key[0], key[1], wins, losses)
        for key, (wins, losses) in build_counts.items()
    })

    logger.info(
        "Analyzed %d matches (%d skipped): %d outcomes, %d builds, %d unparsed, %s",
        counted, skipped, len(outcomes), len(build_stats), sum(unparsed.values()),
        ", ".join(f"{s}={len(part_stats[s])}" for s in SLOTS),
    )

    return MetaAnalysis(
        part_stats=part_stats,
        build_stats=build_stats,
        outcomes=tuple(outcomes),
        unparsed=MappingProxyType(dict(unparsed)),
        matches_counted=counted,
        matches_skipped=skipped,
    )


def aggregate(
    records: Iterable[MatchRecord],
    catalog: Catalog,
) -> tuple[PartTable, BuildTable]:
    """Per-part and per-build statistics for the given match records."""
    analysis = analyze_matches(records, catalog)
    return analysis.part_stats, analysis.build_stats


def parsed_builds(analysis: MetaAnalysis) -> dict[str, ParsedBuild]:
    """Parsed form of every distinct build string seen in the pass."""
    out: dict[str, ParsedBuild] = {}
    for side in analysis.outcomes:
        if side.build and side.build not in out:
            out[side.build] = side.parsed
    return out
