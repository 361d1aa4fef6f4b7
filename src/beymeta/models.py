"""Data models."""

from dataclasses import dataclass, field
from typing import ClassVar, Union

# Catalog categories
BLADE = "blade"
RATCHET = "ratchet"
BIT = "bit"
LOCKCHIP = "lockchip"
ASSIST_BLADE = "assist_blade"

CATEGORIES = (BLADE, RATCHET, BIT, LOCKCHIP, ASSIST_BLADE)

# Build slots: catalog categories plus the Custom-line main blade
MAIN_BLADE = "main_blade"

STANDARD_SLOTS = (BLADE, RATCHET, BIT)
COMPOSITE_SLOTS = (LOCKCHIP, MAIN_BLADE, ASSIST_BLADE, RATCHET, BIT)
SLOTS = (BLADE, RATCHET, BIT, LOCKCHIP, MAIN_BLADE, ASSIST_BLADE)

# Blade lines
BASIC = "Basic"
UNIQUE = "Unique"
X_OVER = "X-Over"
CUSTOM = "Custom"

LINES = (BASIC, UNIQUE, X_OVER, CUSTOM)


@dataclass(frozen=True)
class Blade:
    category: ClassVar[str] = BLADE
    name: str
    line: str = ""  # Basic / Unique / X-Over / Custom / ""


@dataclass(frozen=True)
class Ratchet:
    category: ClassVar[str] = RATCHET
    name: str


@dataclass(frozen=True)
class Bit:
    category: ClassVar[str] = BIT
    name: str
    alias: str = ""  # short form, e.g. "R" for "Rush"

    @property
    def display_name(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class Lockchip:
    category: ClassVar[str] = LOCKCHIP
    name: str


@dataclass(frozen=True)
class AssistBlade:
    category: ClassVar[str] = ASSIST_BLADE
    name: str


PartEntry = Union[Blade, Ratchet, Bit, Lockchip, AssistBlade]


@dataclass(frozen=True)
class ParsedBuild:
    is_composite: bool = False
    parts: dict[str, str] = field(default_factory=dict)  # slot -> part name
    line: str = ""  # line whose decomposition succeeded, "" if unrecognized

    @property
    def recognized(self) -> bool:
        return bool(self.parts)

    def get(self, slot: str) -> str | None:
        return self.parts.get(slot)



@dataclass(frozen=True)
class MatchRecord:
    player1_name: str
    player2_name: str
    player1_build: str
    player2_build: str
    winner_name: str
    outcome: str  # e.g. "Burst Finish (2 pts)"
    points_awarded: int = 0
    tournament_id: str = ""
    player1_line: str = ""  # declared line hint from registration
    player2_line: str = ""


@dataclass(frozen=True)
class MatchOutcome:
    player: str
    opponent: str
    build: str
    opponent_build: str
    is_win: bool
    outcome: str
    parsed: ParsedBuild


@dataclass(frozen=True)
class PartStat:
    slot: str
    name: str
    usage: int
    wins: int
    losses: int
    win_rate: float
    wilson_score: float


@dataclass(frozen=True)
class BuildStat:
    build: str
    player: str
    wins: int
    losses: int
    win_rate: float
    wilson_score: float

    @property
    def usage(self) -> int:
        return self.wins + self.losses
