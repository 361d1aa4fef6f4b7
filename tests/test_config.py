"""Tests for beymeta.config."""

from pathlib import Path

import pytest

from beymeta.config import DEFAULT_CACHE_DIR, DEFAULT_TIMEOUT, StoreConfig, store_config_from_env
from beymeta.util import ConfigError


@pytest.fixture()
def store_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    monkeypatch.setenv("BEYMETA_STORE_URL", "https://abc.supabase.co/")
    monkeypatch.setenv("BEYMETA_STORE_KEY", "anon-key")
    monkeypatch.delenv("BEYMETA_CACHE_DIR", raising=False)
    monkeypatch.delenv("BEYMETA_TIMEOUT", raising=False)
    return monkeypatch


class TestStoreConfigFromEnv:
    def test_defaults(self, store_env: pytest.MonkeyPatch) -> None:
        config = store_config_from_env()
        assert config.base_url == "https://abc.supabase.co"
        assert config.api_key == "anon-key"
        assert config.cache_dir == DEFAULT_CACHE_DIR
        assert config.timeout == DEFAULT_TIMEOUT

    def test_overrides(self, store_env: pytest.MonkeyPatch) -> None:
        store_env.setenv("BEYMETA_CACHE_DIR", "/tmp/beycache")
        store_env.setenv("BEYMETA_TIMEOUT", "5")
        config = store_config_from_env()
        assert config.cache_dir == Path("/tmp/beycache")
        assert config.timeout == 5

    def test_missing_key(self, store_env: pytest.MonkeyPatch) -> None:
        store_env.delenv("BEYMETA_STORE_KEY")
        with pytest.raises(ConfigError, match="BEYMETA_STORE_KEY"):
            store_config_from_env()

    def test_bad_timeout(self, store_env: pytest.MonkeyPatch) -> None:
        store_env.setenv("BEYMETA_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="integer"):
            store_config_from_env()


class TestHeaders:
    def test_key_sent_twice(self) -> None:
        headers = StoreConfig(base_url="https://x", api_key="k").headers
        assert headers["apikey"] == "k"
        assert headers["Authorization"] == "Bearer k"
