"""Market cache store protocol and in-memory implementation.

Markets are cached per exchange under two keys: ``<exchange>`` holds the
tuple of ``Market`` objects and ``<exchange>-index`` holds the derived
``MarketIndex``. Any key/value store implementing ``MarketCacheStore`` can
back the encoders (a shared Redis hash in production deployments).

Architecture:
    - Protocol-based store: encoders depend on get/set/delete only
    - Copy-on-write: values are immutable snapshots replaced wholesale
    - TTL expiry: entries older than their TTL read as misses

Design Decisions:
    - Values are stored by reference; callers only ever store immutable
      tuples and read-only mappings, so readers racing a refresh observe
      either the old snapshot or the new one
    - Expiry is checked lazily on read, no background sweeper
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Protocol

logger = logging.getLogger(__name__)

INDEX_SUFFIX = "-index"


def markets_key(exchange_name: str) -> str:
    """Cache key holding the market list of an exchange."""
    return exchange_name.lower()


def index_key(exchange_name: str) -> str:
    """Cache key holding the derived index of an exchange."""
    return f"{exchange_name.lower()}{INDEX_SUFFIX}"


class MarketCacheStore(Protocol):
    """Key/value store used for market snapshots."""

    def get(self, key: str) -> Any | None:
        """Return the stored value or None on miss/expiry."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store a value, replacing any previous one."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...


class InMemoryMarketCache:
    """Process-local ``MarketCacheStore`` with per-entry TTL."""

    def __init__(self, default_ttl_seconds: float | None = 3600.0) -> None:
        self._values: dict[str, Any] = {}
        # Architecture: Expiry timestamps kept apart from values
        # so a value can be swapped without touching its neighbours
        self._expires_at: dict[str, datetime | None] = {}
        self._default_ttl_seconds = default_ttl_seconds

    def get(self, key: str) -> Any | None:
        if key not in self._values:
            return None
        if not self._is_valid(key):
            logger.debug("Market cache entry expired", extra={"key": key})
            self.delete(key)
            return None
        return self._values[key]

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl_seconds
        expires_at = datetime.now() + timedelta(seconds=ttl) if ttl is not None else None
        # Expiry first: a concurrent reader must never see a new value with an old deadline
        self._expires_at[key] = expires_at
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._expires_at.pop(key, None)

    def clear(self) -> None:
        self._values.clear()
        self._expires_at.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _is_valid(self, key: str) -> bool:
        expires_at = self._expires_at.get(key)
        return expires_at is None or datetime.now() < expires_at
