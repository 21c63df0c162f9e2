"""Clock-skew retry pairs.

Exchanges signing ``query|body`` with a shared-secret HMAC reject requests
whose ``timestamp`` drifted past ``recvWindow``. Before sending, we re-sign
the request twice: a primary with the normal window, and a secondary with a
delayed timestamp and a wider window. The secondary rides along in a header
so the relay can retry without coming back to us.

    timestamp=1000&recvWindow=5000&signature=OLD
        primary   -> timestamp=1000&recvWindow=10000&signature=<hmac>
        secondary -> timestamp=10999&recvWindow=20000&signature=<hmac>

Field order and encoding of the original request are preserved; the
signature is always recomputed over the exact string that is sent.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from pydantic import BaseModel, ConfigDict, Field

from .request import OutboundRequest

SIGNATURE_FIELD = "signature"
TIMESTAMP_FIELD = "timestamp"
RECV_WINDOW_FIELD = "recvWindow"

SECOND_URL_HEADER = "X-Relay-Second-Url"
SECOND_BODY_HEADER = "X-Relay-Second-Body"

Signer = Callable[[str, str], str]


class ClockSkewWindows(BaseModel):
    """Receive windows and delay, in milliseconds."""

    first_window: int = Field(10000, gt=0)
    second_delay: int = Field(9999, ge=0)
    second_window: int = Field(20000, gt=0)

    model_config = ConfigDict(frozen=True)


def hmac_sha256_hex(payload: str, secret: str) -> str:
    """Hex HMAC-SHA256, the Binance request signature."""
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def parse_fields(encoded: str) -> dict[str, str]:
    """Split ``a=1&b=2`` into an ordered mapping without decoding values."""
    fields: dict[str, str] = {}
    for part in encoded.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        fields[key] = value
    return fields


def encode_fields(fields: dict[str, str]) -> str:
    return "&".join(f"{key}={value}" for key, value in fields.items())


def resign(
    encoded: str,
    secret: str,
    timestamp: int,
    recv_window: int,
    signer: Signer = hmac_sha256_hex,
) -> str:
    """Re-sign an encoded field string with a new timestamp and window."""
    fields = parse_fields(encoded)
    fields.pop(SIGNATURE_FIELD, None)
    fields[TIMESTAMP_FIELD] = str(timestamp)
    fields[RECV_WINDOW_FIELD] = str(recv_window)
    payload = encode_fields(fields)
    return f"{payload}&{SIGNATURE_FIELD}={signer(payload, secret)}"


@dataclass(frozen=True)
class SignedPayload:
    url: str
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SignedRequestPair:
    """Primary request plus its pre-signed retry."""

    primary: SignedPayload
    secondary: SignedPayload
    signed_body: bool

    def attach(self, request: OutboundRequest) -> OutboundRequest:
        """``request`` rewritten to the primary, carrying the secondary header."""
        if self.signed_body:
            header = {SECOND_BODY_HEADER: self.secondary.body or ""}
        else:
            header = {SECOND_URL_HEADER: self.secondary.url}
        return replace(
            request,
            url=self.primary.url,
            body=self.primary.body,
            headers={**self.primary.headers, **header},
        )


def _base_timestamp(fields: dict[str, str], override: int | None) -> int:
    if override is not None:
        return override
    raw = fields.get(TIMESTAMP_FIELD)
    if raw is not None and raw.isdigit():
        return int(raw)
    return int(time.time() * 1000)


def prepare_retry_pair(
    request: OutboundRequest,
    secret: str,
    windows: ClockSkewWindows | None = None,
    *,
    base_timestamp: int | None = None,
    signer: Signer = hmac_sha256_hex,
) -> SignedRequestPair:
    """Build primary and secondary signatures for a query or form request.

    The base timestamp is ``base_timestamp`` when given, else the request's
    own ``timestamp`` field, else the current time.

    Raises:
        ValueError: If the request carries neither a body nor a query string
    """
    windows = windows or ClockSkewWindows()
    signed_body = bool(request.body)
    encoded = request.body if signed_body else request.query
    if not encoded:
        raise ValueError("Request has no query string or body to sign")

    timestamp = _base_timestamp(parse_fields(encoded), base_timestamp)
    primary = resign(encoded, secret, timestamp, windows.first_window, signer)
    secondary = resign(
        encoded, secret, timestamp + windows.second_delay, windows.second_window, signer
    )

    headers = dict(request.headers)
    if signed_body:
        return SignedRequestPair(
            primary=SignedPayload(url=request.url, body=primary, headers=headers),
            secondary=SignedPayload(url=request.url, body=secondary, headers=headers),
            signed_body=True,
        )
    return SignedRequestPair(
        primary=SignedPayload(url=f"{request.base_url}?{primary}", headers=headers),
        secondary=SignedPayload(url=f"{request.base_url}?{secondary}", headers=headers),
        signed_body=False,
    )
