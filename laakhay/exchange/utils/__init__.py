"""Utility functions."""

from .ccxt import extract_error_code, translate_ccxt_error
from .http import HTTPClient

__all__ = ["HTTPClient", "extract_error_code", "translate_ccxt_error"]
