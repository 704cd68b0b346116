"""
Analysis module for stocksignals.

Provides the indicator engine (SMA, EMA, RSI, MACD, Bollinger Bands) and the
signal interpreter that reads those series into a trading-signal summary.
"""

from .indicators import (
    SENTINEL,
    BollingerResult,
    IndicatorBundle,
    MACDResult,
    bollinger_bands,
    compute_indicators,
    ema,
    is_sentinel,
    macd,
    parse_indicator_list,
    rsi,
    sma,
)
from .signals import (
    MACDReading,
    SignalInterpreter,
    SignalSummary,
    analyze,
    generate_signals,
)

__all__ = [
    # Indicator Engine
    "SENTINEL",
    "is_sentinel",
    "sma",
    "ema",
    "rsi",
    "macd",
    "bollinger_bands",
    "MACDResult",
    "BollingerResult",
    "IndicatorBundle",
    "compute_indicators",
    "parse_indicator_list",
    # Signal Interpreter
    "SignalInterpreter",
    "SignalSummary",
    "MACDReading",
    "generate_signals",
    "analyze",
]
