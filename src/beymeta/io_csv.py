"""CSV input (catalog, match results) and output (ranked tables)."""

import csv
import logging
from pathlib import Path

from beymeta.aggregate import MetaAnalysis, parsed_builds
from beymeta.catalog import Catalog
from beymeta.fetch import match_record_from_row
from beymeta.models import SLOTS, MatchRecord
from beymeta.ranking import rank_builds, rank_parts
from beymeta.util import CatalogError

logger = logging.getLogger(__name__)

CATALOG_FILES = {
    "blades": "blades.csv",
    "ratchets": "ratchets.csv",
    "bits": "bits.csv",
    "lockchips": "lockchips.csv",
    "assist_blades": "assist_blades.csv",
}
MATCHES_FILE = "matches.csv"

PART_COLUMNS = [
    "slot", "rank", "name", "usage", "wins", "losses", "win_rate", "wilson_score",
]

BUILD_COLUMNS = [
    "rank", "build", "player", "line", "wins", "losses", "win_rate", "wilson_score",
]

UNPARSED_COLUMNS = ["build", "sides"]


def _read_csv(path: Path) -> list[dict]:
    """Read a CSV file, return list of dicts. Empty list if missing."""
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def _write_csv(path: Path, rows: list[dict], fieldnames: list[str]) -> None:
    """Write rows to CSV with LF line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(
            f, fieldnames=fieldnames, quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        writer.writeheader()
        writer.writerows(rows)


def _fmt(value: float) -> str:
    return f"{value:.4f}"


def load_catalog_csv(directory: Path) -> Catalog:
    """Load the five catalog tables from CSV files; missing files are empty tables."""
    if not directory.is_dir():
        raise CatalogError(f"Catalog directory not found: {directory}")
    tables = {key: _read_csv(directory / name) for key, name in CATALOG_FILES.items()}
    return Catalog.from_rows(**tables)


def load_matches_csv(path: Path, tournament_id: str = "") -> list[MatchRecord]:
    """Load match results stored with the data store's column names."""
    rows = _read_csv(path)
    records = [match_record_from_row(r, tournament_id) for r in rows]
    logger.info("Loaded %d match results from %s", len(records), path)
    return records


def write_part_stats_csv(analysis: MetaAnalysis, path: Path) -> None:
    rows = []
    for slot in SLOTS:
        for i, s in enumerate(rank_parts(analysis, slot), 1):
            rows.append({
                "slot": slot, "rank": i, "name": s.name, "usage": s.usage,
                "wins": s.wins, "losses": s.losses,
                "win_rate": _fmt(s.win_rate), "wilson_score": _fmt(s.wilson_score),
            })
    _write_csv(path, rows, PART_COLUMNS)
    logger.info("Wrote %d part rows to %s", len(rows), path)


def write_build_stats_csv(analysis: MetaAnalysis, path: Path) -> None:
    parsed = parsed_builds(analysis)
    rows = []
    for i, s in enumerate(rank_builds(analysis), 1):
        build = parsed.get(s.build)
        rows.append({
            "rank": i, "build": s.build, "player": s.player,
            "line": build.line if build else "",
            "wins": s.wins, "losses": s.losses,
            "win_rate": _fmt(s.win_rate), "wilson_score": _fmt(s.wilson_score),
        })
    _write_csv(path, rows, BUILD_COLUMNS)
    logger.info("Wrote %d build rows to %s", len(rows), path)


def write_unparsed_csv(analysis: MetaAnalysis, path: Path) -> None:
    items = sorted(analysis.unparsed.items(), key=lambda x: (-x[1], x[0]))
    rows = [{"build": b, "sides": n} for b, n in items]
    _write_csv(path, rows, UNPARSED_COLUMNS)
    logger.info("Wrote %d unparsed builds to %s", len(rows), path)
