"""Function-as-a-service relay transport.

Instead of calling the exchange directly, a request can be packaged and
handed to one of a pool of relay functions, each running with its own
egress IP and quota. The function performs the HTTP call and answers with an
envelope describing the exchange response.

Payload (boundary contract):
    {httpMethod, headers, queryStringParameters{url}, url, body, isBase64Encoded}

Envelope:
    {statusCode, headers, body} -- all three required. ``errorType`` marks a
    failed invocation.

Architecture:
    - FunctionInvoker: protocol for "call function X with payload P"
    - HttpFunctionInvoker: aiohttp-backed invoker for HTTP function URLs
    - dispatch_function_relay: select, package, invoke, validate

Design Decisions:
    - Function ids are drawn from a ``ProxyPool`` exactly like proxies
    - Any failure of the relay itself raises ``UpstreamError``, never
      ``ExchangeError``: the exchange may never have seen the request
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from ..core.exceptions import UpstreamError
from ..utils.http import HTTPClient
from .proxy import ProxyPool
from .request import OutboundRequest

logger = logging.getLogger(__name__)

RETRIES_HEADER = "x-relay-retries"
REQUIRED_ENVELOPE_KEYS = ("statusCode", "headers", "body")


class FunctionInvoker(Protocol):
    """Invokes a named relay function."""

    async def invoke(self, function_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke ``function_name`` and return its decoded response.

        Raises:
            UpstreamError: If the invocation fails
        """
        ...


class HttpFunctionInvoker:
    """Invoke relay functions exposed as HTTP endpoints.

    ``url_template`` receives the function name, e.g.
    ``https://{function}.lambda-url.eu-west-1.on.aws/``.
    """

    def __init__(
        self,
        url_template: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        http: HTTPClient | None = None,
    ) -> None:
        self._url_template = url_template
        self._http = http or HTTPClient(timeout=timeout, headers=headers)

    async def invoke(self, function_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = self._url_template.format(function=function_name)
        try:
            return await self._http.post_json(url, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamError(
                f"Invocation of relay function {function_name} failed: {exc}",
                relay=function_name,
            ) from exc

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> HttpFunctionInvoker:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


@dataclass(frozen=True)
class RelayResponse:
    """Exchange response as reported by a relay function."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    function_name: str | None = None
    retries: int = 0


def build_payload(request: OutboundRequest) -> dict[str, Any]:
    """Package a request for a relay function."""
    return {
        "httpMethod": request.method.upper(),
        "headers": dict(request.headers),
        "queryStringParameters": {"url": request.url},
        "url": request.url,
        "body": request.body or "",
        "isBase64Encoded": False,
    }


def parse_envelope(function_name: str, envelope: Any) -> RelayResponse:
    """Validate a relay envelope.

    Raises:
        UpstreamError: On ``errorType`` or a missing status/headers/body
    """
    if not isinstance(envelope, dict):
        raise UpstreamError(
            f"Relay function {function_name} returned a non-object envelope",
            relay=function_name,
        )
    if "errorType" in envelope:
        raise UpstreamError(
            f"Relay function {function_name} failed: "
            f"{envelope.get('errorType')}: {envelope.get('errorMessage', '')}",
            relay=function_name,
        )
    missing = [key for key in REQUIRED_ENVELOPE_KEYS if key not in envelope]
    if missing:
        raise UpstreamError(
            f"Relay function {function_name} envelope missing {', '.join(missing)}",
            relay=function_name,
        )

    headers = {str(key): str(value) for key, value in (envelope["headers"] or {}).items()}
    retries = 0
    for key, value in headers.items():
        if key.lower() == RETRIES_HEADER:
            retries = int(value) if str(value).isdigit() else 0
    if retries:
        logger.warning(
            f"Request retried {retries} times in relay function {function_name}",
            extra={"relay": function_name, "retries": retries},
        )

    try:
        status_code = int(envelope["statusCode"])
    except (TypeError, ValueError) as exc:
        raise UpstreamError(
            f"Relay function {function_name} returned status {envelope['statusCode']!r}",
            relay=function_name,
        ) from exc

    body = envelope["body"]
    return RelayResponse(
        status_code=status_code,
        headers=headers,
        body=body if isinstance(body, str) else json.dumps(body),
        function_name=function_name,
        retries=retries,
    )


async def dispatch_function_relay(
    invoker: FunctionInvoker,
    functions: ProxyPool,
    request: OutboundRequest,
    rng: random.Random | None = None,
) -> RelayResponse:
    """Send ``request`` through one relay function drawn from ``functions``.

    Raises:
        UpstreamError: If the invocation fails or the envelope is malformed
    """
    slot = (rng or random).randrange(functions.size)
    function_name = functions.resolve_slot(slot).url_prefix
    logger.debug(
        "Dispatching via relay function",
        extra={"relay": function_name, "method": request.method},
    )
    try:
        envelope = await invoker.invoke(function_name, build_payload(request))
    except UpstreamError:
        raise
    except Exception as exc:
        raise UpstreamError(
            f"Invocation of relay function {function_name} failed: {exc}",
            relay=function_name,
        ) from exc
    return parse_envelope(function_name, envelope)
