"""Unit tests for market encoders.

Encoders are fed canned raw markets through a fake source; no network.
"""

import asyncio

import pytest

from laakhay.exchange.core import (
    ContractKind,
    ExchangeError,
    MarketNotFoundError,
    SymbolNotFoundError,
    get_capabilities,
)
from laakhay.exchange.handlers import ContractHandler
from laakhay.exchange.markets import (
    AscendexMarketEncoder,
    BinanceFuturesMarketEncoder,
    BinanceMarketEncoder,
    BitmexMarketEncoder,
    InMemoryMarketCache,
    KucoinMarketEncoder,
    VcceMarketEncoder,
    strip_symbol,
)


def test_strip_symbol():
    """Separators and case are normalized."""
    assert strip_symbol(" btc/usdt ") == "BTCUSDT"
    assert strip_symbol("BTC-USDT") == "BTCUSDT"


@pytest.mark.asyncio
async def test_binance_roundtrip(binance_source):
    """Every loaded market translates both ways."""
    encoder = BinanceMarketEncoder(binance_source)
    markets = await encoder.load_markets()

    assert len(markets) == 4
    for market in markets:
        assert await encoder.to_native(market.internal_id) == market.native_symbol
        assert await encoder.from_native(market.native_symbol) == market.internal_id


@pytest.mark.asyncio
async def test_unknown_symbol_raises(binance_source):
    """Unmapped ids raise instead of defaulting."""
    encoder = BinanceMarketEncoder(binance_source)
    with pytest.raises(SymbolNotFoundError, match="Symbol NOPE not found") as exc_info:
        await encoder.to_native("NOPE")
    assert exc_info.value.value == "NOPE"

    with pytest.raises(SymbolNotFoundError):
        await encoder.from_native("NOPE/USDT")


@pytest.mark.asyncio
async def test_legacy_alias(binance_source):
    """YOYOBTC resolves to the YOYOW market."""
    encoder = BinanceMarketEncoder(binance_source)
    assert await encoder.to_native("YOYOBTC") == "YOYOW/BTC"
    assert await encoder.from_native("YOYOW/BTC") == "YOYOWBTC"


@pytest.mark.asyncio
async def test_from_native_with_raw_market_skips_index(binance_source, make_raw_market):
    """A raw market is enough to derive the internal id."""
    encoder = BinanceMarketEncoder(binance_source)
    internal_id = await encoder.from_native("LTC/BTC", make_raw_market("LTC/BTC"))
    assert internal_id == "LTCBTC"
    assert binance_source.fetch_count == 0


@pytest.mark.asyncio
async def test_cache_hit_avoids_fetch(binance_source):
    """Cached snapshots are reused until forced."""
    encoder = BinanceMarketEncoder(binance_source)
    await encoder.load_index()
    await encoder.to_native("BTCUSDT")
    await encoder.load_markets()
    assert binance_source.fetch_count == 1

    await encoder.load_index(force=True)
    assert binance_source.fetch_count == 2


@pytest.mark.asyncio
async def test_encoders_share_cache(binance_source):
    """Two encoders over one store reuse the same snapshot."""
    cache = InMemoryMarketCache()
    first = BinanceMarketEncoder(binance_source, cache)
    second = BinanceMarketEncoder(binance_source, cache)
    await first.load_index()
    await second.to_native("ETHBTC")
    assert binance_source.fetch_count == 1


@pytest.mark.asyncio
async def test_concurrent_loads_fetch_once(binance_source):
    """Concurrent rebuilds are serialized behind the encoder lock."""
    encoder = BinanceMarketEncoder(binance_source)
    await asyncio.gather(*(encoder.load_index() for _ in range(5)))
    assert binance_source.fetch_count == 1


class GatedMarketSource:
    """Market source that can fail or hold its fetch until released."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.error: Exception | None = None
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.release.set()

    async def fetch_markets(self):
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return await self.inner.fetch_markets()


@pytest.mark.asyncio
async def test_failed_forced_reload_keeps_snapshot(binance_source):
    """A reload that fails leaves the previous markets readable."""
    source = GatedMarketSource(binance_source)
    encoder = BinanceMarketEncoder(source)
    await encoder.load_index()
    handler = ContractHandler(encoder, get_capabilities("binance"))

    source.error = ExchangeError("exchange unavailable", exchange="binance")
    with pytest.raises(ExchangeError):
        await encoder.load_index(force=True)

    assert encoder.market("BTCUSDT").native_symbol == "BTC/USDT"
    assert handler.market_limits("BTCUSDT").amount.max == 100.0
    assert await encoder.to_native("ETHBTC") == "ETH/BTC"


@pytest.mark.asyncio
async def test_readers_see_old_snapshot_during_rebuild(make_source, make_raw_market):
    """Sync lookups during a forced reload see the old index, then the new one."""
    inner = make_source([make_raw_market("BTC/USDT")])
    source = GatedMarketSource(inner)
    encoder = BinanceMarketEncoder(source)
    await encoder.load_index()

    inner.markets.append(make_raw_market("SOL/USDT"))
    source.started.clear()
    source.release.clear()
    reload = asyncio.create_task(encoder.load_index(force=True))
    await source.started.wait()

    assert encoder.market("BTCUSDT").native_symbol == "BTC/USDT"
    with pytest.raises(MarketNotFoundError, match="SOLUSDT"):
        encoder.market("SOLUSDT")

    source.release.set()
    await reload
    assert encoder.market("SOLUSDT").native_symbol == "SOL/USDT"


@pytest.mark.asyncio
async def test_forced_markets_load_rebuilds_index(make_source, make_raw_market):
    """load_markets(force=True) refreshes the index in the same step."""
    source = make_source([make_raw_market("BTC/USDT")])
    encoder = BinanceMarketEncoder(source)
    await encoder.load_index()

    source.markets.append(make_raw_market("SOL/USDT"))
    markets = await encoder.load_markets(force=True)

    assert len(markets) == 2
    assert encoder.market("SOLUSDT").native_symbol == "SOL/USDT"
    assert source.fetch_count == 2


@pytest.mark.asyncio
async def test_expired_index_still_serves_sync_readers(binance_source):
    """Sync lookups keep the last index after its cache entry expires."""
    encoder = BinanceMarketEncoder(binance_source, ttl_seconds=0)
    await encoder.load_index()
    assert encoder.market("BTCUSDT").native_symbol == "BTC/USDT"


@pytest.mark.asyncio
async def test_get_market_forces_reload_on_miss(make_source, make_raw_market):
    """A listing added after the first load is picked up by one forced reload."""
    source = make_source([make_raw_market("BTC/USDT")])
    encoder = BinanceMarketEncoder(source)
    await encoder.load_index()

    source.markets.append(make_raw_market("SOL/USDT"))
    market = await encoder.get_market("SOLUSDT")

    assert market.native_symbol == "SOL/USDT"
    assert source.fetch_count == 2


@pytest.mark.asyncio
async def test_get_market_missing_after_reload(binance_source):
    encoder = BinanceMarketEncoder(binance_source)
    with pytest.raises(MarketNotFoundError):
        await encoder.get_market("NOPEUSDT")


def test_market_before_load_raises(binance_source):
    """Sync lookups never load; an empty cache is an error."""
    encoder = BinanceMarketEncoder(binance_source)
    with pytest.raises(MarketNotFoundError, match="not loaded"):
        encoder.market("BTCUSDT")


@pytest.mark.asyncio
async def test_malformed_market_is_skipped(make_source, make_raw_market):
    """Records missing required keys are dropped, not fatal."""
    broken = make_raw_market("ETH/USDT")
    del broken["symbol"]
    source = make_source([make_raw_market("BTC/USDT"), broken])
    encoder = BinanceMarketEncoder(source)

    markets = await encoder.load_markets()
    assert [market.internal_id for market in markets] == ["BTCUSDT"]


@pytest.mark.asyncio
async def test_binance_quote_assets(binance_source):
    """Spot adds BNB to the observed quotes."""
    encoder = BinanceMarketEncoder(binance_source)
    await encoder.load_index()
    assert encoder.valid_quote_assets() == ["USDT", "BTC", "BNB"]
    assert encoder.base_quote("ETH/BTC") == ("ETH", "BTC")


@pytest.mark.asyncio
async def test_binance_futures_imports_perpetuals_only(make_source, make_raw_market):
    """Spot and dated futures are filtered out."""
    source = make_source(
        [
            make_raw_market("BTC/USDT"),
            make_raw_market(
                "BTC/USDT:USDT",
                market_type="swap",
                info={"contractType": "PERPETUAL"},
            ),
            make_raw_market(
                "ETH/USDT:USDT",
                market_id="ETHUSDT_231229",
                market_type="future",
                info={"contractType": "CURRENT_QUARTER"},
            ),
        ]
    )
    encoder = BinanceFuturesMarketEncoder(source)
    markets = await encoder.load_markets()

    assert [market.native_symbol for market in markets] == ["BTC/USDT:USDT"]
    assert markets[0].max_leverage == 125.0


@pytest.mark.asyncio
async def test_bitmex_contract_fields(bitmex_source):
    """Multiplier, leverage and flags come from the raw info blob."""
    encoder = BitmexMarketEncoder(bitmex_source)
    await encoder.load_index()

    xbt = encoder.market("XBTUSD")
    assert xbt.is_inverse and not xbt.is_quanto
    assert xbt.contract_kind == ContractKind.INVERSE
    assert xbt.multiplier == pytest.approx(1.0)
    assert xbt.max_leverage == pytest.approx(100.0)
    assert xbt.base == "XBT"
    assert xbt.units_amount == "USD"
    assert xbt.reference_symbol == ".BXBTUSD"

    eth = encoder.market("ETHUSD")
    assert eth.is_quanto
    assert eth.contract_kind == ContractKind.QUANTO
    assert eth.multiplier == pytest.approx(1e-6)
    assert eth.max_leverage == pytest.approx(50.0)
    assert eth.units_amount == "Cont"

    xrp = encoder.market("XRPZ21")
    assert xrp.max_leverage is None
    assert xrp.contract_kind == ContractKind.LINEAR
    assert xrp.units_amount == "XRP"


@pytest.mark.asyncio
async def test_bitmex_quotes_and_assets(bitmex_source):
    encoder = BitmexMarketEncoder(bitmex_source)
    await encoder.load_index()
    assert encoder.valid_quote_assets() == ["XBT"]
    assert encoder.exchange_settings_quote_assets() == ["BTC"]
    assert encoder.translate_asset("btc") == "XBT"
    assert encoder.display_symbol("XBTUSD") == "XBTUSD"


@pytest.mark.asyncio
async def test_kucoin_renamed_ticker(make_source, make_raw_market):
    """Old BCHABC ids resolve to BCH markets."""
    encoder = KucoinMarketEncoder(make_source([make_raw_market("BCH/USDT", market_id="BCH-USDT")]))
    assert await encoder.to_native("BCHABCUSDT") == "BCH/USDT"


@pytest.mark.asyncio
async def test_vcce_and_ascendex_ids(make_source, make_raw_market):
    """Native ids are stripped of their separators."""
    vcce = VcceMarketEncoder(make_source([make_raw_market("ETH/BTC", market_id="eth_btc")]))
    assert await vcce.to_native("ETHBTC") == "ETH/BTC"

    ascendex = AscendexMarketEncoder(
        make_source([make_raw_market("BTC/USDT", market_id="BTC/USDT")])
    )
    assert await ascendex.to_native("BTCUSDT") == "BTC/USDT"
    assert ascendex.display_symbol("BTCUSDT") == "BTC/USDT"
