"""Data store settings from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

from beymeta.util import ConfigError

DEFAULT_CACHE_DIR = Path("data/raw")
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class StoreConfig:
    base_url: str  # e.g. https://<project>.supabase.co
    api_key: str
    cache_dir: Path = DEFAULT_CACHE_DIR
    timeout: int = DEFAULT_TIMEOUT

    @property
    def headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "User-Agent": "beymeta/0.1",
        }


def store_config_from_env() -> StoreConfig:
    base_url = os.environ.get("BEYMETA_STORE_URL", "").rstrip("/")
    api_key = os.environ.get("BEYMETA_STORE_KEY", "")
    if not base_url or not api_key:
        raise ConfigError(
            "BEYMETA_STORE_URL and BEYMETA_STORE_KEY must be set to read from the data store"
        )
    timeout_raw = os.environ.get("BEYMETA_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = int(timeout_raw)
    except ValueError:
        raise ConfigError(f"BEYMETA_TIMEOUT must be an integer, got {timeout_raw!r}") from None
    return StoreConfig(
        base_url=base_url,
        api_key=api_key,
        cache_dir=Path(os.environ.get("BEYMETA_CACHE_DIR", str(DEFAULT_CACHE_DIR))),
        timeout=timeout,
    )
