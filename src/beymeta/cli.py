"""CLI entry point and main processing flow."""

import argparse
import logging
import sys
import time
from pathlib import Path

from beymeta.aggregate import analyze_matches
from beymeta.config import store_config_from_env
from beymeta.fetch import (
    fetch_catalog,
    fetch_matches,
    fetch_tournaments,
    latest_completed_tournament,
)
from beymeta.io_csv import (
    MATCHES_FILE,
    load_catalog_csv,
    load_matches_csv,
    write_build_stats_csv,
    write_part_stats_csv,
    write_unparsed_csv,
)
from beymeta.models import SLOTS
from beymeta.players import summarize_players
from beymeta.ranking import rank_parts
from beymeta.report import build_report, write_json
from beymeta.util import BeymetaError

logger = logging.getLogger("beymeta")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beymeta",
        description="Parse tournament builds and rank parts and builds by Wilson score.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--tournament",
        help="Tournament id to analyze from the data store",
    )
    source.add_argument(
        "--latest", action="store_true", default=False,
        help="Analyze the most recent completed tournament in the data store",
    )
    source.add_argument(
        "--from-csv", type=Path, default=None,
        help="Directory with catalog CSVs and matches.csv (offline mode)",
    )
    parser.add_argument(
        "--out", type=Path, default=None,
        help="Output directory (default: data/out/<tournament>)",
    )
    parser.add_argument(
        "--raw-cache", choices=["on", "off"], default="on",
        help="Data store response cache mode (default: on)",
    )
    parser.add_argument(
        "--log-level", choices=["INFO", "DEBUG"], default="INFO",
        help="Logging level; DEBUG traces every parse step (default: INFO)",
    )
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def _project_root() -> Path:
    """Find project root (directory containing pyproject.toml or data/)."""
    p = Path.cwd()
    for _ in range(10):
        if (p / "pyproject.toml").exists():
            return p
        if (p / "data").is_dir():
            return p
        parent = p.parent
        if parent == p:
            break
        p = parent
    return Path.cwd()


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.log_level)

    use_cache = args.raw_cache == "on"
    start_time = time.time()

    try:
        # 1. Load catalog and match records
        if args.from_csv:
            label = args.from_csv.name or "csv"
            catalog = load_catalog_csv(args.from_csv)
            records = load_matches_csv(args.from_csv / MATCHES_FILE, label)
        else:
            config = store_config_from_env()
            tournament_id = args.tournament
            if args.latest:
                latest = latest_completed_tournament(fetch_tournaments(config))
                if latest is None:
                    raise BeymetaError("No completed tournament found")
                tournament_id = str(latest["id"])
                logger.info("Selected tournament %s (%s)", latest.get("name", ""), tournament_id)
            label = tournament_id
            catalog = fetch_catalog(config, use_cache)
            records = fetch_matches(config, tournament_id, use_cache)

        if catalog.is_empty:
            logger.warning("Catalog is empty; every build will be unparsed")

        # 2. Parse and aggregate
        analysis = analyze_matches(records, catalog)
        players = summarize_players(records)

        # 3. Output
        out_dir = args.out or _project_root() / "data" / "out" / label
        write_part_stats_csv(analysis, out_dir / "parts.csv")
        write_build_stats_csv(analysis, out_dir / "builds.csv")
        write_unparsed_csv(analysis, out_dir / "unparsed.csv")
        write_json(out_dir / "report.json", build_report(analysis, players))

        # 4. Summary
        elapsed = time.time() - start_time
        logger.info("=== Summary ===")
        logger.info("Source: %s", label)
        logger.info("Matches: %d counted, %d skipped",
                    analysis.matches_counted, analysis.matches_skipped)
        for slot in SLOTS:
            ranked = rank_parts(analysis, slot)
            if ranked:
                top = ranked[0]
                logger.info("Top %s: %s (%d-%d, wilson %.3f)",
                            slot, top.name, top.wins, top.losses, top.wilson_score)
        logger.info("Unparsed build sides: %d", sum(analysis.unparsed.values()))
        logger.info("Elapsed: %.1fs", elapsed)

    except BeymetaError as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)
