"""JSON report of an analysis pass for the presentation layer."""

import json
import logging
from dataclasses import asdict
from pathlib import Path

from beymeta.aggregate import MetaAnalysis
from beymeta.models import SLOTS
from beymeta.players import PlayerSummary, ordered_finishes
from beymeta.ranking import SLOT_LABELS, rank_builds, rank_parts

logger = logging.getLogger(__name__)


def _player_entry(p: PlayerSummary) -> dict:
    mvb, reason = p.most_valuable_build()
    return {
        "name": p.name,
        "wins": p.wins,
        "losses": p.losses,
        "points": p.points,
        "win_rate": round(p.win_rate, 4),
        "points_per_match": round(p.points_per_match, 2),
        "builds": list(p.builds),
        "top_win_finish": p.top_win_finish,
        "top_loss_finish": p.top_loss_finish,
        "most_valuable_build": mvb,
        "most_valuable_build_reason": reason,
        "win_finishes": ordered_finishes(p.win_finishes),
        "loss_finishes": ordered_finishes(p.loss_finishes),
    }


def build_report(
    analysis: MetaAnalysis,
    players: dict[str, PlayerSummary] | None = None,
) -> dict:
    parts = {
        slot: {
            "label": SLOT_LABELS[slot],
            "ranking": [asdict(s) for s in rank_parts(analysis, slot)],
        }
        for slot in SLOTS
    }
    builds = [dict(asdict(s), usage=s.usage) for s in rank_builds(analysis)]
    unparsed = [
        {"build": b, "sides": n}
        for b, n in sorted(analysis.unparsed.items(), key=lambda x: (-x[1], x[0]))
    ]
    ranked_players = sorted(
        (players or {}).values(), key=lambda p: (-p.points, -p.wins, p.name),
    )
    return {
        "summary": {
            "matches_counted": analysis.matches_counted,
            "matches_skipped": analysis.matches_skipped,
            "outcomes": len(analysis.outcomes),
            "builds": len(analysis.build_stats),
            "unparsed_sides": sum(analysis.unparsed.values()),
        },
        "parts": parts,
        "builds": builds,
        "unparsed": unparsed,
        "players": [_player_entry(p) for p in ranked_players],
    }


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("Wrote %s (%s bytes)", path, f"{path.stat().st_size:,}")
