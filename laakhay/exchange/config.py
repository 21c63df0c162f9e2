"""Library settings.

Static configuration (proxy range tables, relay functions, clock-skew windows,
broker ids, partner credentials) loaded with pydantic-settings from the
environment:

    LAAKHAY_EXCHANGE_DISPATCH__MODE=proxy
    LAAKHAY_EXCHANGE_DISPATCH__PROXY_RANGES='[{"url_template": "https://r{index}.example/?url=", "index_min": 1, "index_max": 3}]'
    LAAKHAY_EXCHANGE_DISPATCH__CLOCK_SKEW__FIRST_WINDOW=10000

Per-exchange behavior flags live in ``core.capabilities``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .dispatch.clock_skew import ClockSkewWindows
from .dispatch.dispatcher import DispatchMode
from .dispatch.proxy import (
    DEFAULT_FIRST_INDEX,
    DEFAULT_LAST_INDEX,
    DEFAULT_PROXY_URL_TEMPLATE,
    ProxyEndpoint,
    ProxyPool,
)


class DispatchSettings(BaseModel):
    """How outbound requests are relayed."""

    mode: DispatchMode = DispatchMode.DIRECT

    # Explicit range table; when empty the single-range fallback below is used
    proxy_ranges: list[ProxyEndpoint] = Field(default_factory=list)
    proxy_first_index: int = Field(default=DEFAULT_FIRST_INDEX, ge=0)
    proxy_last_index: int = Field(default=DEFAULT_LAST_INDEX, ge=0)
    proxy_url_template: str = DEFAULT_PROXY_URL_TEMPLATE
    proxy_credential_template: str | None = None

    # Relay functions: ranges render function names, the invoker URL renders the endpoint
    function_ranges: list[ProxyEndpoint] = Field(default_factory=list)
    function_url_template: str | None = None
    function_timeout_seconds: float = Field(default=30.0, gt=0)
    pace_function_relay: bool = True

    clock_skew: ClockSkewWindows = Field(default_factory=ClockSkewWindows)

    def proxy_pool(self) -> ProxyPool | None:
        if self.proxy_ranges:
            return ProxyPool(endpoints=tuple(self.proxy_ranges))
        if self.mode != DispatchMode.PROXY:
            return None
        return ProxyPool.from_index_range(
            self.proxy_first_index,
            self.proxy_last_index,
            self.proxy_url_template,
            self.proxy_credential_template,
        )

    def function_pool(self) -> ProxyPool | None:
        if not self.function_ranges:
            return None
        return ProxyPool(endpoints=tuple(self.function_ranges))


class LaakhayExchangeSettings(BaseSettings):
    """Top-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="LAAKHAY_EXCHANGE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    market_cache_ttl_seconds: float | None = Field(default=3600.0, gt=0)

    # Prefix for generated client order ids, keyed by normalized exchange id
    broker_ids: dict[str, str] = Field(default_factory=dict)
    kucoin_partner_id: str | None = None
    kucoin_partner_key: str | None = None

    paper_leverage: int = Field(default=20, ge=1, le=125)
    enable_rate_limit: bool = True


@lru_cache(maxsize=1)
def get_settings() -> LaakhayExchangeSettings:
    """Settings loaded once from the environment."""
    return LaakhayExchangeSettings()
