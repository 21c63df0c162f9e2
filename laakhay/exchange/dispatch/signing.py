"""Partner (broker) request signing.

KuCoin broker partners add two headers to every authenticated request:

    KC-API-PARTNER       partner id
    KC-API-PARTNER-SIGN  base64(HMAC-SHA256(partner_key, timestamp + partner_id + api_key))

A request with ``KC-API-KEY`` but no partner credentials is refused before
it is sent.
"""

from __future__ import annotations

import base64
import hashlib
import hmac

from ..core.exceptions import AuthConfigError

API_KEY_HEADER = "KC-API-KEY"
TIMESTAMP_HEADER = "KC-API-TIMESTAMP"
PARTNER_HEADER = "KC-API-PARTNER"
PARTNER_SIGN_HEADER = "KC-API-PARTNER-SIGN"


def partner_signature(timestamp: str, partner_id: str, api_key: str, partner_key: str) -> str:
    payload = f"{timestamp}{partner_id}{api_key}".encode()
    digest = hmac.new(partner_key.encode(), payload, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def apply_partner_signature(
    headers: dict[str, str] | None,
    partner_id: str | None,
    partner_key: str | None,
    *,
    exchange: str = "KuCoin",
) -> dict[str, str] | None:
    """Return ``headers`` with partner headers added to authenticated requests.

    Raises:
        AuthConfigError: If the request is authenticated and partner
            credentials are missing
    """
    if not headers or API_KEY_HEADER not in headers:
        return headers
    if not partner_id or not partner_key:
        raise AuthConfigError(
            f"{exchange} needs partner id and partner key to sign requests",
            exchange=exchange,
        )
    signed = dict(headers)
    signed[PARTNER_HEADER] = partner_id
    signed[PARTNER_SIGN_HEADER] = partner_signature(
        str(headers.get(TIMESTAMP_HEADER, "")),
        partner_id,
        str(headers[API_KEY_HEADER]),
        partner_key,
    )
    return signed
