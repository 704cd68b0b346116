"""
Indicator and Signal Constants for stocksignals.

This module defines the default lookback windows, smoothing parameters and
signal thresholds used throughout the indicator engine and the signal
interpreter. These are the conventional values dashboard consumers expect;
settings may override them per deployment.

All constants are immutable (Final) to prevent accidental modification during runtime.
"""

from typing import Final


# =============================================================================
# Moving Averages
# =============================================================================

SMA_SHORT_PERIOD: Final[int] = 20
"""
Short simple moving average window (20 trading days, about one month).
Also the lower bound used for support/resistance levels.
"""

SMA_MEDIUM_PERIOD: Final[int] = 50
"""
Medium simple moving average window (50 trading days).
The fast leg of the golden/death cross.
"""

SMA_LONG_PERIOD: Final[int] = 200
"""
Long simple moving average window (200 trading days, about one year).
The slow leg of the golden/death cross.
"""

EMA_FAST_PERIOD: Final[int] = 12
"""Fast exponential moving average window, charted alongside price."""

EMA_SLOW_PERIOD: Final[int] = 26
"""Slow exponential moving average window, charted alongside price."""


# =============================================================================
# Oscillators
# =============================================================================

RSI_PERIOD: Final[int] = 14
"""
Relative Strength Index lookback in price changes.
Averages are simple sums over the window divided by the full period.
"""

RSI_OVERBOUGHT: Final[float] = 70.0
"""RSI level above which the instrument is reported as overbought."""

RSI_OVERSOLD: Final[float] = 30.0
"""RSI level below which the instrument is reported as oversold."""

MACD_FAST_PERIOD: Final[int] = 12
"""Fast EMA period of the MACD line."""

MACD_SLOW_PERIOD: Final[int] = 26
"""Slow EMA period of the MACD line."""

MACD_SIGNAL_PERIOD: Final[int] = 9
"""
EMA period of the MACD signal line.
Its warm-up starts at the first defined MACD value, not at the series start.
"""


# =============================================================================
# Volatility Bands
# =============================================================================

BOLLINGER_PERIOD: Final[int] = 20
"""Bollinger middle band window (an SMA of this length)."""

BOLLINGER_MULTIPLIER: Final[float] = 2.0
"""Number of population standard deviations between middle and outer bands."""

SQUEEZE_RATIO: Final[float] = 0.7
"""
Bandwidth contraction threshold.
A squeeze is reported when the current band width falls below this fraction
of the width observed SQUEEZE_LOOKBACK bars earlier.
"""

SQUEEZE_LOOKBACK: Final[int] = 20
"""Number of bars between the two band widths compared by the squeeze rule."""


# =============================================================================
# Indicator Selection
# =============================================================================

INDICATOR_GROUPS: Final[tuple[str, ...]] = ("sma", "ema", "rsi", "macd", "bollinger")
"""Indicator groups the engine knows how to compute, in output order."""

DEFAULT_INDICATORS: Final[str] = "sma,ema,rsi,macd,bollinger"
"""Default comma-separated selection when a caller does not specify one."""
