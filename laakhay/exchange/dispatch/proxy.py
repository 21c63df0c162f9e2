"""Proxy pool description and selection.

A pool is an ordered list of index ranges. Each range owns a URL template
and an optional credential template; an index drawn from the range is
substituted into both. Selection flattens the ranges into one slot space
``[0, N)``, draws uniformly, and walks the ranges to resolve the slot:

    ranges  [1..3]  [10..12]
    slots    0 1 2   3  4  5
    slot 4 -> range 2, offset 1 -> index 11

Architecture:
    - ProxyEndpoint / ProxyPool: immutable pydantic models, validated once
    - select_proxy: pure function of (pool, rng), O(number of ranges)

Design Decisions:
    - No shared cursor or round-robin state; concurrent callers need no lock
    - Templates accept ``{index}`` placeholders and legacy ``%d`` ones
"""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .request import RequestContext

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL_TEMPLATE = "https://api-{index}.relay.laakhay.com/prod/proxy?url="
DEFAULT_FIRST_INDEX = 1
DEFAULT_LAST_INDEX = 50


def render_template(template: str, index: int) -> str:
    """Substitute ``index`` into a template.

    Examples:
        >>> render_template("https://api-{index}.example.com/", 7)
        'https://api-7.example.com/'
        >>> render_template("key-%03d", 7)
        'key-007'
    """
    if "{index" in template:
        return template.format(index=index)
    if "%" in template:
        return template % index
    return template


class ProxyEndpoint(BaseModel):
    """Inclusive index range sharing URL and credential templates."""

    url_template: str = Field(..., min_length=1)
    credential_template: str | None = None
    index_min: int = Field(..., ge=0)
    index_max: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self) -> ProxyEndpoint:
        if self.index_max < self.index_min:
            raise ValueError(f"index_max {self.index_max} < index_min {self.index_min}")
        return self

    @property
    def size(self) -> int:
        return self.index_max - self.index_min + 1

    def resolve(self, offset: int) -> RequestContext:
        """Context for the ``offset``-th index inside this range."""
        index = self.index_min + offset
        credential = (
            render_template(self.credential_template, index) if self.credential_template else None
        )
        return RequestContext(
            url_prefix=render_template(self.url_template, index),
            credential=credential,
            index=index,
        )


class ProxyPool(BaseModel):
    """Ordered, non-overlapping set of ranges."""

    endpoints: tuple[ProxyEndpoint, ...] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_no_overlap(self) -> ProxyPool:
        ordered = sorted(self.endpoints, key=lambda endpoint: endpoint.index_min)
        for previous, current in zip(ordered, ordered[1:]):
            if current.index_min <= previous.index_max:
                raise ValueError(
                    f"Ranges [{previous.index_min}, {previous.index_max}] and "
                    f"[{current.index_min}, {current.index_max}] overlap"
                )
        return self

    @property
    def size(self) -> int:
        """Number of addressable slots ``N``."""
        return sum(endpoint.size for endpoint in self.endpoints)

    @classmethod
    def from_index_range(
        cls,
        first_index: int = DEFAULT_FIRST_INDEX,
        last_index: int = DEFAULT_LAST_INDEX,
        url_template: str = DEFAULT_PROXY_URL_TEMPLATE,
        credential_template: str | None = None,
    ) -> ProxyPool:
        """Single-range pool."""
        return cls(
            endpoints=(
                ProxyEndpoint(
                    url_template=url_template,
                    credential_template=credential_template,
                    index_min=first_index,
                    index_max=last_index,
                ),
            )
        )

    def resolve_slot(self, slot: int) -> RequestContext:
        """Context for a flattened slot in ``[0, N)``.

        Raises:
            IndexError: If the slot is outside the pool
        """
        if slot < 0:
            raise IndexError(f"Slot {slot} outside pool of {self.size}")
        remaining = slot
        for endpoint in self.endpoints:
            if remaining < endpoint.size:
                return endpoint.resolve(remaining)
            remaining -= endpoint.size
        raise IndexError(f"Slot {slot} outside pool of {self.size}")


def select_proxy(pool: ProxyPool, rng: random.Random | None = None) -> RequestContext:
    """Pick a relay endpoint uniformly over every index in the pool."""
    draw = (rng or random).randrange(pool.size)
    context = pool.resolve_slot(draw)
    logger.debug("Selected relay endpoint", extra={"slot": draw, "index": context.index})
    return context
