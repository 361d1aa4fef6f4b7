"""Per-player results, finishes and points."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from beymeta.models import MatchRecord
from beymeta.util import clean_name

logger = logging.getLogger(__name__)

FINISH_TYPES = ["Spin Finish", "Burst Finish", "Over Finish", "Extreme Finish"]
FINISH_POINTS = {
    "Spin Finish": 1,
    "Burst Finish": 2,
    "Over Finish": 2,
    "Extreme Finish": 3,
}


def finish_type(outcome: str | None) -> str:
    """Finish label without its trailing detail: "Burst Finish (2 pts)" -> "Burst Finish"."""
    label = (outcome or "").split(" (")[0].strip()
    return label or "Unknown"


def ordered_finishes(counts: dict[str, int]) -> dict[str, int]:
    """Finish counts in FINISH_TYPES order; other labels follow alphabetically."""
    known = [f for f in FINISH_TYPES if counts.get(f)]
    other = sorted(f for f in counts if f not in FINISH_TYPES and counts[f])
    return {f: counts[f] for f in known + other}


def _top(counts: dict[str, int]) -> str:
    best, best_count = "", -1
    for finish, count in counts.items():
        if count > best_count:
            best, best_count = finish, count
    return best or "N/A"


@dataclass
class BuildRecord:
    wins: int = 0
    losses: int = 0
    points: int = 0
    finishes: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    loss_finishes: dict[str, int] = field(default_factory=lambda: defaultdict(int))


@dataclass
class PlayerResult:
    result: str  # "win" / "loss"
    build: str
    outcome: str  # finish type
    opponent: str
    opponent_build: str


@dataclass
class PlayerSummary:
    name: str
    builds: list[str] = field(default_factory=list)  # first-seen order
    matches: list[PlayerResult] = field(default_factory=list)
    win_finishes: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    loss_finishes: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    build_records: dict[str, BuildRecord] = field(default_factory=dict)
    wins: int = 0
    losses: int = 0
    points: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.total if self.total else 0.0

    @property
    def points_per_match(self) -> float:
        return self.points / self.total if self.total else 0.0

    @property
    def top_win_finish(self) -> str:
        return _top(self.win_finishes)

    @property
    def top_loss_finish(self) -> str:
        return _top(self.loss_finishes)

    def most_valuable_build(self) -> tuple[str, str]:
        """(build, reason) for the build that earned the most points."""
        best, best_points = "", -1
        for build in self.builds:
            rec = self.build_records.get(build)
            points = rec.points if rec else 0
            if points > best_points:
                best, best_points = build, points
        rec = self.build_records.get(best)
        if not rec:
            return best or "N/A", "No matches"
        return best, f"{rec.wins} wins, {rec.points} pts"


def summarize_players(records: Iterable[MatchRecord]) -> dict[str, PlayerSummary]:
    """Build one summary per player from the given match records."""
    players: dict[str, PlayerSummary] = {}

    def get(name: str) -> PlayerSummary:
        if name not in players:
            players[name] = PlayerSummary(name=name)
        return players[name]

    for r in records:
        p1, p2 = clean_name(r.player1_name), clean_name(r.player2_name)
        b1, b2 = r.player1_build, r.player2_build
        for name, build in ((p1, b1), (p2, b2)):
            if not name:
                continue
            summary = get(name)
            if build and build not in summary.builds:
                summary.builds.append(build)

        winner = clean_name(r.winner_name)
        if not winner or not p1 or not p2 or winner not in (p1, p2):
            continue

        finish = finish_type(r.outcome)
        pts = r.points_awarded or FINISH_POINTS.get(finish, 0)
        loser = p2 if winner == p1 else p1
        win_build = b1 if winner == p1 else b2
        lose_build = b2 if winner == p1 else b1

        w, l = players[winner], players[loser]
        w.wins += 1
        w.points += pts
        w.win_finishes[finish] += 1
        w.matches.append(PlayerResult("win", win_build, finish, loser, lose_build))
        l.losses += 1
        l.loss_finishes[finish] += 1
        l.matches.append(PlayerResult("loss", lose_build, finish, winner, win_build))

        if not win_build or not lose_build:
            continue
        wrec = w.build_records.setdefault(win_build, BuildRecord())
        wrec.wins += 1
        wrec.points += pts
        wrec.finishes[finish] += 1
        lrec = l.build_records.setdefault(lose_build, BuildRecord())
        lrec.losses += 1
        lrec.loss_finishes[finish] += 1

    logger.info("Summarized %d players", len(players))
    return players
