"""Shared pytest fixtures: a small reference catalog and CSV fixtures."""

from pathlib import Path

import pytest

from beymeta.catalog import Catalog
from beymeta.models import MatchRecord

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def tournament_dir() -> Path:
    return FIXTURES_DIR / "tournament"


@pytest.fixture()
def catalog() -> Catalog:
    return Catalog.from_rows(
        blades=[
            {"Blades": "DranSword", "Line": "Basic"},
            {"Blades": "HellsScythe", "Line": "Basic"},
            {"Blades": "WizardRod", "Line": "Basic"},
            {"Blades": "PhoenixWing", "Line": "Unique"},
            {"Blades": "DranBuster", "Line": "X-Over"},
            {"Blades": "Brave", "Line": "Custom"},
            {"Blades": "Arc", "Line": "Custom"},
        ],
        ratchets=[{"Ratchet": r} for r in ("3-60", "4-60", "9-60", "1-60", "5-70")],
        bits=[
            {"Bit": "Rush", "Shortcut": "R"},
            {"Bit": "Flat", "Shortcut": "F"},
            {"Bit": "Low Flat", "Shortcut": "LF"},
            {"Bit": "Ball", "Shortcut": "B"},
            {"Bit": "Accel", "Shortcut": "A"},
            {"Bit": "Hexa", "Shortcut": ""},
        ],
        lockchips=[{"Lockchip": "Dran"}, {"Lockchip": "Pegasus"}],
        assist_blades=[{"Assist Blade": "Slash"}, {"Assist Blade": "Round"}],
    )


def make_match(**overrides) -> MatchRecord:
    defaults = dict(
        player1_name="Alice",
        player2_name="Bob",
        player1_build="DranSword3-60R",
        player2_build="WizardRod9-60LF",
        winner_name="Alice",
        outcome="Burst Finish (2 pts)",
        points_awarded=2,
        tournament_id="t1",
    )
    defaults.update(overrides)
    return MatchRecord(**defaults)


@pytest.fixture()
def match_factory():
    return make_match
