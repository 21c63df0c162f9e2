"""Handler selection by exchange capability."""

from __future__ import annotations

from ..core.capabilities import ExchangeCapabilities, get_capabilities
from ..markets.encoder import MarketEncoder
from .inverse import InverseContractHandler
from .linear import ContractHandler


def handler_for(
    exchange_id: str,
    encoder: MarketEncoder,
    capabilities: ExchangeCapabilities | None = None,
) -> ContractHandler:
    """Build the contract handler for a normalized exchange id.

    Exchanges flagged ``has_inverse_contracts`` get the inverse-aware
    handler; every other exchange uses linear arithmetic.

    Raises:
        ConfigurationError: If no capabilities are given and the id is unknown
    """
    capabilities = capabilities if capabilities is not None else get_capabilities(exchange_id)
    if capabilities.has_inverse_contracts:
        return InverseContractHandler(encoder, capabilities)
    return ContractHandler(encoder, capabilities)
