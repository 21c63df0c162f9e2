"""Per-call request values threaded through the dispatch layer.

Nothing here is shared between calls: each outbound request gets its own
``OutboundRequest`` and, in proxy mode, its own ``RequestContext``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from urllib.parse import quote

API_KEY_HEADER = "X-API-KEY"


@dataclass(frozen=True)
class OutboundRequest:
    """A signed HTTP request about to leave the process."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    @property
    def query(self) -> str:
        """Raw query string, empty when the URL has none."""
        _, _, query = self.url.partition("?")
        return query

    @property
    def base_url(self) -> str:
        return self.url.partition("?")[0]

    def with_header(self, name: str, value: str) -> OutboundRequest:
        return replace(self, headers={**self.headers, name: value})


@dataclass(frozen=True)
class RequestContext:
    """Relay endpoint and credential chosen for one call."""

    url_prefix: str
    credential: str | None = None
    index: int | None = None

    def wrap_url(self, url: str) -> str:
        """Target URL percent-encoded after the relay prefix."""
        return f"{self.url_prefix}{quote(url, safe='')}"

    def apply(self, request: OutboundRequest) -> OutboundRequest:
        """Route ``request`` through this relay."""
        wrapped = replace(request, url=self.wrap_url(request.url))
        if self.credential:
            wrapped = wrapped.with_header(API_KEY_HEADER, self.credential)
        return wrapped
