"""Common utilities and exception classes."""


class BeymetaError(Exception):
    """Base exception for beymeta."""


class FetchError(BeymetaError):
    """Data store request failure after retries."""


class ConfigError(BeymetaError):
    """Missing or invalid configuration."""


class CatalogError(BeymetaError):
    """Unknown part category or unreadable catalog source."""


def clean_name(value: str | None) -> str:
    """Player name with surrounding whitespace removed; None becomes ""."""
    return (value or "").strip()
