"""Contract arithmetic handlers."""

from .factory import handler_for
from .inverse import InverseContractHandler, contract_power, powered_price
from .linear import FUNDING_FEE_INCOME_TYPE, ContractHandler

__all__ = [
    "FUNDING_FEE_INCOME_TYPE",
    "ContractHandler",
    "InverseContractHandler",
    "contract_power",
    "handler_for",
    "powered_price",
]
