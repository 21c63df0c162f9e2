"""Resilient outbound dispatch: proxy rotation, function relay, clock-skew retries."""

from .clock_skew import (
    SECOND_BODY_HEADER,
    SECOND_URL_HEADER,
    ClockSkewWindows,
    SignedPayload,
    SignedRequestPair,
    hmac_sha256_hex,
    prepare_retry_pair,
    resign,
)
from .dispatcher import DispatchMode, RelayDispatcher, is_signed
from .proxy import ProxyEndpoint, ProxyPool, render_template, select_proxy
from .relay import (
    FunctionInvoker,
    HttpFunctionInvoker,
    RelayResponse,
    build_payload,
    dispatch_function_relay,
    parse_envelope,
)
from .request import API_KEY_HEADER, OutboundRequest, RequestContext
from .signing import apply_partner_signature, partner_signature
from .transport import PartnerSignatureMixin, RelayTransportMixin

__all__ = [
    "API_KEY_HEADER",
    "SECOND_BODY_HEADER",
    "SECOND_URL_HEADER",
    "ClockSkewWindows",
    "DispatchMode",
    "FunctionInvoker",
    "HttpFunctionInvoker",
    "OutboundRequest",
    "PartnerSignatureMixin",
    "ProxyEndpoint",
    "ProxyPool",
    "RelayDispatcher",
    "RelayResponse",
    "RelayTransportMixin",
    "RequestContext",
    "SignedPayload",
    "SignedRequestPair",
    "apply_partner_signature",
    "build_payload",
    "dispatch_function_relay",
    "hmac_sha256_hex",
    "is_signed",
    "parse_envelope",
    "partner_signature",
    "prepare_retry_pair",
    "render_template",
    "resign",
    "select_proxy",
]
