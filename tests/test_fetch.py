"""Tests for beymeta.fetch."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from beymeta.config import StoreConfig
from beymeta.fetch import (
    fetch_catalog,
    fetch_json,
    fetch_matches,
    fetch_with_cache,
    latest_completed_tournament,
    match_record_from_row,
    rest_url,
)
from beymeta.util import FetchError


def _ok(rows: list) -> MagicMock:
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = rows
    return resp


class TestRestUrl:
    def test_table_url(self) -> None:
        assert rest_url("https://abc.supabase.co", "match_results") == (
            "https://abc.supabase.co/rest/v1/match_results"
        )

    def test_trailing_slash(self) -> None:
        assert rest_url("https://abc.supabase.co/", "tournaments") == (
            "https://abc.supabase.co/rest/v1/tournaments"
        )


class TestFetchJson:
    """Tests for fetch_json with mocked HTTP."""

    @patch("beymeta.fetch.time.sleep")
    @patch("beymeta.fetch.requests.get")
    def test_success_returns_rows(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        mock_get.return_value = _ok([{"Ratchet": "3-60"}])

        result = fetch_json("https://example.com", {"select": "*"}, {"apikey": "k"})
        assert result == [{"Ratchet": "3-60"}]
        mock_get.assert_called_once_with(
            "https://example.com", params={"select": "*"}, headers={"apikey": "k"}, timeout=30,
        )

    @patch("beymeta.fetch.time.sleep")
    @patch("beymeta.fetch.requests.get")
    def test_retries_on_500(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        fail_resp = MagicMock()
        fail_resp.status_code = 500
        mock_get.side_effect = [fail_resp, _ok([])]

        assert fetch_json("https://example.com") == []
        assert mock_get.call_count == 2
        mock_sleep.assert_called_once()  # backoff between retries

    @patch("beymeta.fetch.time.sleep")
    @patch("beymeta.fetch.requests.get")
    def test_raises_after_max_retries(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        fail_resp = MagicMock()
        fail_resp.status_code = 503
        mock_get.return_value = fail_resp

        with pytest.raises(FetchError, match="HTTP 503"):
            fetch_json("https://example.com")
        assert mock_get.call_count == 3  # MAX_RETRIES

    @patch("beymeta.fetch.time.sleep")
    @patch("beymeta.fetch.requests.get")
    def test_retries_on_connection_error(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        import requests
        mock_get.side_effect = [
            requests.ConnectionError("timeout"),
            _ok([{"id": 1}]),
        ]

        assert fetch_json("https://example.com") == [{"id": 1}]
        assert mock_get.call_count == 2

    @patch("beymeta.fetch.time.sleep")
    @patch("beymeta.fetch.requests.get")
    def test_exponential_backoff(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        fail_resp = MagicMock()
        fail_resp.status_code = 500
        mock_get.return_value = fail_resp

        with pytest.raises(FetchError):
            fetch_json("https://example.com")

        # Backoff: 1s after attempt 1, 2s after attempt 2
        assert mock_sleep.call_count == 2
        mock_sleep.assert_any_call(1)
        mock_sleep.assert_any_call(2)


class TestFetchWithCache:
    """Tests for fetch_with_cache."""

    @patch("beymeta.fetch.fetch_json")
    def test_cache_hit_skips_fetch(self, mock_fetch: MagicMock, tmp_path: Path) -> None:
        cache_path = tmp_path / "cached.json"
        cache_path.write_text('[{"Bit": "Rush"}]', encoding="utf-8")

        result = fetch_with_cache("https://example.com", None, None, cache_path, use_cache=True)
        assert result == [{"Bit": "Rush"}]
        mock_fetch.assert_not_called()

    @patch("beymeta.fetch.fetch_json", return_value=[{"Bit": "Ball"}])
    def test_cache_miss_fetches_and_saves(self, mock_fetch: MagicMock, tmp_path: Path) -> None:
        cache_path = tmp_path / "sub" / "cached.json"
        assert not cache_path.exists()

        result = fetch_with_cache("https://example.com", None, None, cache_path, use_cache=True)
        assert result == [{"Bit": "Ball"}]
        assert json.loads(cache_path.read_text(encoding="utf-8")) == [{"Bit": "Ball"}]

    @patch("beymeta.fetch.fetch_json", return_value=[])
    def test_cache_off_does_not_save(self, mock_fetch: MagicMock, tmp_path: Path) -> None:
        cache_path = tmp_path / "cached.json"

        fetch_with_cache("https://example.com", None, None, cache_path, use_cache=False)
        assert not cache_path.exists()

    @patch("beymeta.fetch.fetch_json", return_value=[])
    def test_cache_path_none(self, mock_fetch: MagicMock) -> None:
        assert fetch_with_cache("https://example.com", None, None, None, use_cache=True) == []


class TestMatchRecordFromRow:
    def test_maps_store_columns(self) -> None:
        record = match_record_from_row({
            "player1_name": "Alice",
            "player2_name": "Bob",
            "player1_beyblade": "DranSword3-60R",
            "player2_beyblade": "WizardRod9-60LF",
            "player1_blade_line": "Basic",
            "player2_blade_line": None,
            "winner_name": "Alice",
            "outcome": "Burst Finish (2 pts)",
            "points_awarded": 2,
        }, "t1")
        assert record.player1_build == "DranSword3-60R"
        assert record.player1_line == "Basic"
        assert record.player2_line == ""
        assert record.points_awarded == 2
        assert record.tournament_id == "t1"

    def test_missing_values(self) -> None:
        record = match_record_from_row({"points_awarded": "n/a"})
        assert record.winner_name == ""
        assert record.points_awarded == 0


class TestStoreReads:
    def _config(self, tmp_path: Path) -> StoreConfig:
        return StoreConfig(base_url="https://abc.supabase.co", api_key="k", cache_dir=tmp_path)

    @patch("beymeta.fetch.fetch_json")
    def test_fetch_catalog_reads_five_tables(self, mock_fetch: MagicMock, tmp_path: Path) -> None:
        by_table = {
            "beypart_blade": [{"Blades": "DranSword", "Line": "Basic"}],
            "beypart_ratchet": [{"Ratchet": "3-60"}],
            "beypart_bit": [{"Bit": "Rush", "Shortcut": "R"}],
            "beypart_lockchip": [],
            "beypart_assistblade": [],
        }
        mock_fetch.side_effect = lambda url, *a, **kw: by_table[url.rsplit("/", 1)[1]]

        catalog = fetch_catalog(self._config(tmp_path), use_cache=False)
        assert catalog.counts() == {
            "blade": 1, "ratchet": 1, "bit": 1, "lockchip": 0, "assist_blade": 0,
        }
        assert mock_fetch.call_count == 5

    @patch("beymeta.fetch.fetch_json")
    def test_fetch_matches_filters_by_tournament(self, mock_fetch: MagicMock, tmp_path: Path) -> None:
        mock_fetch.return_value = [{"player1_name": "Alice", "player2_name": "Bob",
                                    "winner_name": "Bob"}]

        records = fetch_matches(self._config(tmp_path), "t9", use_cache=False)
        assert records[0].winner_name == "Bob"
        assert records[0].tournament_id == "t9"
        params = mock_fetch.call_args[0][1]
        assert params["tournament_id"] == "eq.t9"


class TestLatestCompletedTournament:
    def test_first_completed(self) -> None:
        rows = [
            {"id": "3", "status": "active"},
            {"id": "2", "status": "completed"},
            {"id": "1", "status": "completed"},
        ]
        assert latest_completed_tournament(rows)["id"] == "2"

    def test_none_completed(self) -> None:
        assert latest_completed_tournament([{"id": "1", "status": "upcoming"}]) is None
