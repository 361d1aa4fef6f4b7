"""Read-only data store access with retry, backoff, and caching."""

import json
import logging
import time
from pathlib import Path

import requests

from beymeta.catalog import Catalog
from beymeta.config import StoreConfig
from beymeta.models import MatchRecord
from beymeta.util import FetchError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BACKOFF_BASE = 1  # seconds: 1, 2

CATALOG_TABLES = {
    "blades": "beypart_blade",
    "ratchets": "beypart_ratchet",
    "bits": "beypart_bit",
    "lockchips": "beypart_lockchip",
    "assist_blades": "beypart_assistblade",
}
TOURNAMENTS_TABLE = "tournaments"
MATCHES_TABLE = "match_results"

MATCH_COLUMNS = [
    "player1_name", "player2_name", "player1_beyblade", "player2_beyblade",
    "player1_blade_line", "player2_blade_line", "winner_name", "outcome",
    "points_awarded",
]


def rest_url(base_url: str, table: str) -> str:
    return f"{base_url.rstrip('/')}/rest/v1/{table}"


def fetch_json(
    url: str,
    params: dict | None = None,
    headers: dict | None = None,
    timeout: int = 30,
) -> list[dict]:
    """Fetch a JSON row list with retry and exponential backoff."""
    last_error = None
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            logger.debug("Fetching %s %s (attempt %d/%d)", url, params, attempt, MAX_RETRIES)
            resp = requests.get(url, params=params, headers=headers, timeout=timeout)
            if resp.status_code == 200:
                logger.debug("OK %s", url)
                return resp.json()
            logger.warning(
                "HTTP %d for %s (attempt %d/%d)",
                resp.status_code, url, attempt, MAX_RETRIES,
            )
            last_error = FetchError(
                f"HTTP {resp.status_code} for {url}"
            )
        except requests.RequestException as e:
            logger.warning(
                "Connection error for %s (attempt %d/%d): %s",
                url, attempt, MAX_RETRIES, e,
            )
            last_error = FetchError(f"Connection error for {url}: {e}")

        if attempt < MAX_RETRIES:
            backoff = BACKOFF_BASE * (2 ** (attempt - 1))
            logger.debug("Backoff %ds before retry", backoff)
            time.sleep(backoff)

    raise last_error  # type: ignore[misc]


def fetch_with_cache(
    url: str,
    params: dict | None,
    headers: dict | None,
    cache_path: Path | None,
    use_cache: bool,
    timeout: int = 30,
) -> list[dict]:
    """Fetch rows, optionally using/saving a JSON cache."""
    if use_cache and cache_path and cache_path.exists():
        logger.info("Cache hit: %s", cache_path)
        return json.loads(cache_path.read_text(encoding="utf-8"))

    rows = fetch_json(url, params, headers, timeout)

    if use_cache and cache_path:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(json.dumps(rows, ensure_ascii=False), encoding="utf-8")
        logger.debug("Cached to %s", cache_path)

    return rows


def fetch_catalog(config: StoreConfig, use_cache: bool = True) -> Catalog:
    cache_dir = config.cache_dir / "catalog"
    tables = {}
    for key, table in CATALOG_TABLES.items():
        tables[key] = fetch_with_cache(
            rest_url(config.base_url, table),
            {"select": "*"},
            config.headers,
            cache_dir / f"{table}.json",
            use_cache,
            config.timeout,
        )
    return Catalog.from_rows(**tables)


def fetch_tournaments(config: StoreConfig) -> list[dict]:
    """Tournaments, most recent first. Never cached."""
    return fetch_json(
        rest_url(config.base_url, TOURNAMENTS_TABLE),
        {"select": "id,name,status,tournament_date", "order": "tournament_date.desc"},
        config.headers,
        config.timeout,
    )


def latest_completed_tournament(rows: list[dict]) -> dict | None:
    for row in rows:
        if row.get("status") == "completed":
            return row
    return None


def _int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _str(value) -> str:
    return "" if value is None else str(value)


def match_record_from_row(row: dict, tournament_id: str = "") -> MatchRecord:
    """Map a match_results row to a MatchRecord; missing values become empty."""
    return MatchRecord(
        player1_name=_str(row.get("player1_name")),
        player2_name=_str(row.get("player2_name")),
        player1_build=_str(row.get("player1_beyblade")),
        player2_build=_str(row.get("player2_beyblade")),
        winner_name=_str(row.get("winner_name")),
        outcome=_str(row.get("outcome")),
        points_awarded=_int(row.get("points_awarded")),
        tournament_id=_str(row.get("tournament_id")) or tournament_id,
        player1_line=_str(row.get("player1_blade_line")),
        player2_line=_str(row.get("player2_blade_line")),
    )


def fetch_matches(
    config: StoreConfig,
    tournament_id: str,
    use_cache: bool = True,
) -> list[MatchRecord]:
    rows = fetch_with_cache(
        rest_url(config.base_url, MATCHES_TABLE),
        {"select": ",".join(MATCH_COLUMNS), "tournament_id": f"eq.{tournament_id}"},
        config.headers,
        config.cache_dir / f"tournament-{tournament_id}" / "match_results.json",
        use_cache,
        config.timeout,
    )
    records = [match_record_from_row(r, tournament_id) for r in rows]
    logger.info("Fetched %d match results for tournament %s", len(records), tournament_id)
    return records
