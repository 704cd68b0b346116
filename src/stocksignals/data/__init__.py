"""
Data module for stocksignals.

Provides the PriceBar model and adapters from market-data records and
OHLCV DataFrames.
"""

from .models import (
    OHLCV_FIELDS,
    PriceBar,
    bars_from_dataframe,
    bars_from_records,
    closes,
)

__all__ = [
    "PriceBar",
    "OHLCV_FIELDS",
    "bars_from_records",
    "bars_from_dataframe",
    "closes",
]
