"""Raw market sources.

An encoder never owns a protocol client. On a cache miss it asks a
``MarketSource`` for raw market records; the ccxt-backed source builds a
short-lived client, loads markets and always closes the client again.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Protocol

import ccxt
import ccxt.async_support as ccxt_async

from ..utils.ccxt import translate_ccxt_error

logger = logging.getLogger(__name__)


class MarketSource(Protocol):
    """Supplies raw market records (ccxt unified market structures)."""

    async def fetch_markets(self) -> list[dict[str, Any]]:
        """Fetch all raw markets.

        Raises:
            ExchangeError: If the upstream call fails
        """
        ...


class CcxtMarketSource:
    """Market source backed by a temporary ccxt async client."""

    def __init__(
        self,
        client_factory: Callable[[], ccxt_async.Exchange],
        *,
        exchange: str | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._exchange = exchange

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[ccxt_async.Exchange]:
        client = self._client_factory()
        try:
            yield client
        finally:
            await client.close()

    async def fetch_markets(self) -> list[dict[str, Any]]:
        async with self._client() as client:
            try:
                markets = await client.load_markets(True)
            except ccxt.BaseError as exc:
                logger.warning(f"Loading markets for {self._exchange or client.id} failed: {exc}")
                raise translate_ccxt_error(exc, exchange=self._exchange) from exc
        logger.debug(
            "Fetched raw markets",
            extra={"exchange": self._exchange, "count": len(markets)},
        )
        return list(markets.values())
