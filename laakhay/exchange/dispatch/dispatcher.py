"""Relay dispatcher: decides how each outbound request leaves the process.

Modes:
    - DIRECT: untouched, the protocol client paces and sends it
    - PROXY: a relay endpoint/credential is drawn per call and the request is
      wrapped for it; local pacing is skipped
    - FUNCTION: the request is packaged for a relay function

In both relay modes, exchanges flagged ``needs_clock_skew_retry`` get a
pre-signed secondary request attached for the relay to retry with.

Architecture:
    The dispatcher holds only immutable configuration (pools, windows,
    flags). Per-call state lives in the ``OutboundRequest`` and
    ``RequestContext`` values it returns.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING

from ..core.capabilities import DEFAULT_CAPABILITIES, ExchangeCapabilities
from ..core.exceptions import ConfigurationError
from .clock_skew import SIGNATURE_FIELD, ClockSkewWindows, prepare_retry_pair
from .proxy import ProxyPool, select_proxy
from .relay import FunctionInvoker, RelayResponse, dispatch_function_relay
from .request import OutboundRequest, RequestContext

if TYPE_CHECKING:
    from ..config import DispatchSettings

logger = logging.getLogger(__name__)


class DispatchMode(str, Enum):
    DIRECT = "direct"
    PROXY = "proxy"
    FUNCTION = "function"


def is_signed(request: OutboundRequest) -> bool:
    """Whether the request carries a query/body HMAC signature."""
    marker = f"{SIGNATURE_FIELD}="
    encoded = request.body if request.body else request.query
    return any(part.startswith(marker) for part in encoded.split("&"))


class RelayDispatcher:
    """Per-exchange dispatch policy."""

    def __init__(
        self,
        mode: DispatchMode | str = DispatchMode.DIRECT,
        *,
        proxies: ProxyPool | None = None,
        functions: ProxyPool | None = None,
        invoker: FunctionInvoker | None = None,
        windows: ClockSkewWindows | None = None,
        clock_skew_retry: bool = False,
        pace_function_relay: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            mode: How requests leave the process
            proxies: Relay endpoints for PROXY mode (default single range 1..50)
            functions: Relay function ids for FUNCTION mode
            invoker: Invoker for FUNCTION mode
            windows: Clock-skew receive windows
            clock_skew_retry: Attach a pre-signed retry to signed requests
            pace_function_relay: Keep the client's own pacing in FUNCTION mode
            rng: Random source for endpoint draws

        Raises:
            ConfigurationError: If FUNCTION mode lacks functions or an invoker
        """
        self.mode = DispatchMode(mode)
        if self.mode == DispatchMode.FUNCTION and (functions is None or invoker is None):
            raise ConfigurationError("Function relay mode needs a function pool and an invoker")
        if self.mode == DispatchMode.PROXY and proxies is None:
            proxies = ProxyPool.from_index_range()
        self.proxies = proxies
        self.functions = functions
        self.windows = windows or ClockSkewWindows()
        self.clock_skew_retry = clock_skew_retry
        self.pace_function_relay = pace_function_relay
        self._invoker = invoker
        self._rng = rng

    @classmethod
    def from_settings(
        cls,
        settings: DispatchSettings,
        capabilities: ExchangeCapabilities = DEFAULT_CAPABILITIES,
        *,
        invoker: FunctionInvoker | None = None,
        rng: random.Random | None = None,
    ) -> RelayDispatcher:
        """Build from settings, gating clock-skew retries on capabilities."""
        return cls(
            settings.mode,
            proxies=settings.proxy_pool(),
            functions=settings.function_pool(),
            invoker=invoker,
            windows=settings.clock_skew,
            clock_skew_retry=capabilities.needs_clock_skew_retry,
            pace_function_relay=settings.pace_function_relay,
            rng=rng,
        )

    @property
    def is_relayed(self) -> bool:
        return self.mode != DispatchMode.DIRECT

    @property
    def skips_local_pacing(self) -> bool:
        """True when relay rotation absorbs rate limits instead of the client."""
        if self.mode == DispatchMode.PROXY:
            return True
        return self.mode == DispatchMode.FUNCTION and not self.pace_function_relay

    def next_context(self) -> RequestContext:
        """Draw a relay endpoint for one call.

        Raises:
            ConfigurationError: If no proxy pool is configured
        """
        if self.proxies is None:
            raise ConfigurationError("No proxy pool configured")
        return select_proxy(self.proxies, self._rng)

    def prepare(self, request: OutboundRequest, secret: str | None = None) -> OutboundRequest:
        """Apply clock-skew pairing and proxy wrapping to one request."""
        if not self.is_relayed:
            return request
        if self.clock_skew_retry and secret and is_signed(request):
            request = prepare_retry_pair(request, secret, self.windows).attach(request)
        if self.mode == DispatchMode.PROXY:
            context = self.next_context()
            logger.debug(
                "Routing request through proxy",
                extra={"index": context.index, "method": request.method},
            )
            request = context.apply(request)
        return request

    async def relay(self, request: OutboundRequest) -> RelayResponse:
        """Send a prepared request through a relay function.

        Raises:
            ConfigurationError: If not in FUNCTION mode
            UpstreamError: If the relay fails
        """
        if self.mode != DispatchMode.FUNCTION or self._invoker is None or self.functions is None:
            raise ConfigurationError("Dispatcher is not in function relay mode")
        return await dispatch_function_relay(self._invoker, self.functions, request, self._rng)
