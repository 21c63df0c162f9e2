"""Hooks wiring the dispatcher into ccxt clients.

ccxt paces every REST call with its own rate limiter and sends it with
``fetch()``. The relay mixin overrides ``fetch()`` and switches the limiter
off when the dispatcher absorbs rate limits; the partner mixin overrides
``sign()``. Both are combined with concrete ccxt exchange classes in
``adapters.clients``.
"""

from __future__ import annotations

import logging
from typing import Any

from .dispatcher import DispatchMode, RelayDispatcher
from .relay import RelayResponse
from .request import OutboundRequest
from .signing import apply_partner_signature

logger = logging.getLogger(__name__)


class RelayTransportMixin:
    """Route ccxt requests through a ``RelayDispatcher``."""

    _relay_dispatcher: RelayDispatcher | None = None

    @property
    def relay_dispatcher(self) -> RelayDispatcher | None:
        return self._relay_dispatcher

    @relay_dispatcher.setter
    def relay_dispatcher(self, dispatcher: RelayDispatcher | None) -> None:
        self._relay_dispatcher = dispatcher
        if dispatcher is not None and dispatcher.skips_local_pacing:
            # ccxt's limiter is an instance attribute set in __init__, not a method
            self.enableRateLimit = False
            logger.debug(
                "Local rate limiting disabled", extra={"dispatch_mode": dispatcher.mode.value}
            )

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> Any:
        dispatcher = self.relay_dispatcher
        if dispatcher is None or not dispatcher.is_relayed:
            return await super().fetch(url, method, headers, body)

        request = dispatcher.prepare(
            OutboundRequest(url=url, method=method, headers=dict(headers or {}), body=body),
            secret=getattr(self, "secret", None),
        )
        if dispatcher.mode == DispatchMode.PROXY:
            return await super().fetch(request.url, request.method, request.headers, request.body)

        response = await dispatcher.relay(request)
        return self.handle_relay_response(request, response)

    def handle_relay_response(self, request: OutboundRequest, response: RelayResponse) -> Any:
        """Run a relay response through the client's own error handling."""
        http_body = self.on_rest_response(
            response.status_code,
            "",
            request.url,
            request.method,
            response.headers,
            response.body,
            request.headers,
            request.body,
        )
        json_response = self.parse_json(http_body) if self.is_json_encoded_object(http_body) else None
        self.last_http_response = http_body
        self.last_response_headers = response.headers
        self.last_json_response = json_response
        self.handle_errors(
            response.status_code,
            "",
            request.url,
            request.method,
            response.headers,
            http_body,
            json_response,
            request.headers,
            request.body,
        )
        self.handle_http_status_code(
            response.status_code, "", request.url, request.method, http_body
        )
        return json_response if json_response is not None else http_body


class PartnerSignatureMixin:
    """Add KuCoin partner headers after the client signs a request."""

    partner_id: str | None = None
    partner_key: str | None = None

    def sign(self, path, api="public", method="GET", params=None, headers=None, body=None):
        signed = super().sign(path, api, method, params if params is not None else {}, headers, body)
        signed["headers"] = apply_partner_signature(
            signed.get("headers"), self.partner_id, self.partner_key
        )
        return signed
