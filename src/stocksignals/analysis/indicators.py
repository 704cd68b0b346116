"""Technical Analysis Indicators Module.

This module provides the indicator engine for stocksignals: pure functions that
transform a closing-price sequence into derived series aligned with the input.

Indicators:
    - SMA (Simple Moving Average)
    - EMA (Exponential Moving Average)
    - RSI (Relative Strength Index)
    - MACD (Moving Average Convergence Divergence)
    - Bollinger Bands

Every output series has exactly the length of its input. Positions without
enough history hold ``SENTINEL`` (NaN), never zero, so index ``i`` of any
output always refers to bar ``i``. No function raises on short input or a
non-positive period.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

import numpy as np
import pandas as pd

from stocksignals.config.constants import (
    BOLLINGER_MULTIPLIER,
    BOLLINGER_PERIOD,
    INDICATOR_GROUPS,
    MACD_FAST_PERIOD,
    MACD_SIGNAL_PERIOD,
    MACD_SLOW_PERIOD,
    RSI_PERIOD,
)
from stocksignals.config.settings import IndicatorSettings
from stocksignals.data.models import PriceBar, closes as bar_closes
from stocksignals.utils import get_logger

logger = get_logger(__name__)

SENTINEL: float = float("nan")


def is_sentinel(value: float | None) -> bool:
    """Return True when ``value`` marks an undefined indicator position."""
    return value is None or bool(np.isnan(value))


def _as_array(data: Sequence[float] | np.ndarray | pd.Series) -> np.ndarray:
    # Always copy so callers' buffers are never touched
    return np.array(data, dtype=np.float64, copy=True).reshape(-1)


def _sequential_sum(window: np.ndarray) -> float:
    # Accumulate strictly left to right; np.sum is pairwise and rounds differently
    if len(window) == 0:
        return 0.0
    return float(np.cumsum(window)[-1])


def _window_mean(window: np.ndarray, period: int) -> float:
    return _sequential_sum(window) / period


def _latest(series: np.ndarray) -> float | None:
    if len(series) == 0 or np.isnan(series[-1]):
        return None
    return float(series[-1])


def _to_optional_list(series: np.ndarray) -> list[float | None]:
    return [None if np.isnan(value) else float(value) for value in series]


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram aligned to the input length."""

    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray

    def latest(self) -> dict[str, float | None]:
        """Last value of each series, None where undefined."""
        return {
            "value": _latest(self.macd),
            "signal": _latest(self.signal),
            "histogram": _latest(self.histogram),
        }

    def to_dict(self) -> dict[str, list[float | None]]:
        return {
            "macd": _to_optional_list(self.macd),
            "signal": _to_optional_list(self.signal),
            "histogram": _to_optional_list(self.histogram),
        }


@dataclass(frozen=True)
class BollingerResult:
    """Upper, middle and lower Bollinger bands aligned to the input length."""

    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray

    def latest(self) -> dict[str, float | None]:
        """Last value of each band, None where undefined."""
        return {
            "upper": _latest(self.upper),
            "middle": _latest(self.middle),
            "lower": _latest(self.lower),
        }

    def to_dict(self) -> dict[str, list[float | None]]:
        return {
            "upper": _to_optional_list(self.upper),
            "middle": _to_optional_list(self.middle),
            "lower": _to_optional_list(self.lower),
        }


# ==================== Moving Averages ====================


def sma(data: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average.

    Args:
        data: Price sequence, oldest first
        period: Window length

    Returns:
        Array where ``result[i]`` is the mean of ``data[i-period+1 : i+1]``,
        SENTINEL for ``i < period - 1`` (everywhere when ``period < 1``)
    """
    values = _as_array(data)
    result = np.full(len(values), SENTINEL)
    if period < 1:
        return result

    for i in range(period - 1, len(values)):
        result[i] = _window_mean(values[i - period + 1 : i + 1], period)

    return result


def ema(data: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average.

    Seeded at ``period - 1`` with the SMA of the first ``period`` values, then
    ``ema[i] = (data[i] - ema[i-1]) * k + ema[i-1]`` with ``k = 2 / (period + 1)``.
    The recurrence is path dependent, so the seeding rule fixes the output.

    Args:
        data: Price sequence, oldest first
        period: Smoothing period

    Returns:
        Array aligned with ``data``, SENTINEL before the seed index
    """
    values = _as_array(data)
    result = np.full(len(values), SENTINEL)
    if period < 1 or len(values) < period:
        return result

    k = 2 / (period + 1)
    current = _window_mean(values[:period], period)
    result[period - 1] = current

    for i in range(period, len(values)):
        current = (values[i] - current) * k + current
        result[i] = current

    return result


# ==================== RSI ====================


def rsi(data: Sequence[float] | np.ndarray, period: int = RSI_PERIOD) -> np.ndarray:
    """Relative Strength Index (simple average variant).

    Gains and losses over the window are summed and divided by the full
    ``period`` rather than by the number of gaining or losing days, and no
    Wilder smoothing is applied. The window for each position is the
    ``period`` price changes preceding the latest change, so the first defined
    value sits at index ``period + 1``.

    Args:
        data: Price sequence, oldest first
        period: Number of price changes per window (default: 14)

    Returns:
        Array aligned with ``data`` with values in [0, 100] or SENTINEL
    """
    values = _as_array(data)
    if len(values) == 0 or period < 1:
        return np.full(len(values), SENTINEL)

    changes = np.diff(values)
    change_rsi = np.full(len(changes), SENTINEL)

    for i in range(period, len(changes)):
        window = changes[i - period : i]
        avg_gain = _sequential_sum(window[window > 0]) / period
        avg_loss = _sequential_sum(-window[window < 0]) / period

        if avg_loss == 0:
            change_rsi[i] = 100.0
        else:
            rs = avg_gain / avg_loss
            change_rsi[i] = 100 - (100 / (1 + rs))

    # The first bar has no change; restore alignment with the input
    return np.concatenate(([SENTINEL], change_rsi))


# ==================== MACD ====================


def macd(
    data: Sequence[float] | np.ndarray,
    fast: int = MACD_FAST_PERIOD,
    slow: int = MACD_SLOW_PERIOD,
    signal_period: int = MACD_SIGNAL_PERIOD,
) -> MACDResult:
    """Moving Average Convergence Divergence.

    The signal line is the EMA of the defined MACD values only, so its warm-up
    is anchored to the first defined MACD value rather than to the start of
    the series. It is then left-padded with SENTINEL to the input length.

    Args:
        data: Price sequence, oldest first
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal_period: Signal line EMA period (default: 9)

    Returns:
        MACDResult with macd, signal and histogram series
    """
    values = _as_array(data)
    fast_ema = ema(values, fast)
    slow_ema = ema(values, slow)

    # NaN propagates through subtraction, so undefined operands stay SENTINEL
    macd_line = fast_ema - slow_ema

    defined = macd_line[~np.isnan(macd_line)]
    signal_line = np.concatenate(
        (np.full(len(values) - len(defined), SENTINEL), ema(defined, signal_period))
    )

    histogram = macd_line - signal_line

    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


# ==================== Bollinger Bands ====================


def bollinger_bands(
    data: Sequence[float] | np.ndarray,
    period: int = BOLLINGER_PERIOD,
    multiplier: float = BOLLINGER_MULTIPLIER,
) -> BollingerResult:
    """Bollinger Bands.

    The middle band is the SMA; the outer bands sit ``multiplier`` population
    standard deviations away. The deviation is computed around a mean taken
    afresh from each window.

    Args:
        data: Price sequence, oldest first
        period: Window length (default: 20)
        multiplier: Standard deviation multiplier (default: 2.0)

    Returns:
        BollingerResult with upper, middle and lower bands
    """
    values = _as_array(data)
    middle = sma(values, period)
    upper = np.full(len(values), SENTINEL)
    lower = np.full(len(values), SENTINEL)
    if period < 1:
        return BollingerResult(upper=upper, middle=middle, lower=lower)

    for i in range(period - 1, len(values)):
        window = values[i - period + 1 : i + 1]
        mean = _window_mean(window, period)
        std_dev = float(np.sqrt(_sequential_sum((window - mean) ** 2) / period))

        upper[i] = middle[i] + multiplier * std_dev
        lower[i] = middle[i] - multiplier * std_dev

    return BollingerResult(upper=upper, middle=middle, lower=lower)


# ==================== Indicator Bundle ====================


@dataclass
class IndicatorBundle:
    """All indicator series computed for one bar sequence.

    Groups that were not requested are None. Periods are recorded so that
    consumers can label the series.
    """

    dates: list[date]
    closes: np.ndarray
    settings: IndicatorSettings
    sma_short: np.ndarray | None = None
    sma_medium: np.ndarray | None = None
    sma_long: np.ndarray | None = None
    ema_fast: np.ndarray | None = None
    ema_slow: np.ndarray | None = None
    rsi: np.ndarray | None = None
    macd: MACDResult | None = None
    bollinger: BollingerResult | None = None

    def __len__(self) -> int:
        return len(self.closes)

    def _named_series(self) -> dict[str, np.ndarray]:
        s = self.settings
        named = {
            f"sma{s.sma_short}": self.sma_short,
            f"sma{s.sma_medium}": self.sma_medium,
            f"sma{s.sma_long}": self.sma_long,
            f"ema{s.ema_fast}": self.ema_fast,
            f"ema{s.ema_slow}": self.ema_slow,
            "rsi": self.rsi,
        }
        return {name: series for name, series in named.items() if series is not None}

    def to_dict(self, bars: Sequence[PriceBar] | None = None) -> dict[str, Any]:
        """JSON-ready representation; SENTINEL positions become None.

        Args:
            bars: Optional bars to embed as ``historical_data``

        Returns:
            Mapping of series name to list of values
        """
        result: dict[str, Any] = {}
        if bars is not None:
            result["historical_data"] = [bar.to_dict() for bar in bars]
        result["dates"] = [d.isoformat() for d in self.dates]
        for name, series in self._named_series().items():
            result[name] = _to_optional_list(series)
        if self.macd is not None:
            result["macd"] = self.macd.to_dict()
        if self.bollinger is not None:
            result["bollinger"] = self.bollinger.to_dict()
        return result

    def to_frame(self) -> pd.DataFrame:
        """DataFrame indexed by date with one column per computed series."""
        columns: dict[str, np.ndarray] = {"close": self.closes}
        columns.update(self._named_series())
        if self.macd is not None:
            columns["macd"] = self.macd.macd
            columns["macd_signal"] = self.macd.signal
            columns["macd_histogram"] = self.macd.histogram
        if self.bollinger is not None:
            columns["bb_upper"] = self.bollinger.upper
            columns["bb_middle"] = self.bollinger.middle
            columns["bb_lower"] = self.bollinger.lower
        index = pd.DatetimeIndex(pd.to_datetime(self.dates), name="date")
        return pd.DataFrame(columns, index=index)


def parse_indicator_list(value: str | Iterable[str] | None, default: str) -> list[str]:
    """Normalise an indicator selection into known group names.

    Accepts a comma-separated string or an iterable of names. Names are
    case-insensitive; unknown names are dropped with a warning. The result
    keeps the engine's canonical order and has no duplicates.

    Args:
        value: Requested indicators, or None for ``default``
        default: Comma-separated fallback selection

    Returns:
        List of recognised group names
    """
    if value is None:
        value = default
    raw = value.split(",") if isinstance(value, str) else list(value)
    requested = {name.strip().lower() for name in raw if name and name.strip()}

    unknown = requested - set(INDICATOR_GROUPS)
    if unknown:
        logger.warning("unknown_indicators_ignored", indicators=sorted(unknown))

    return [group for group in INDICATOR_GROUPS if group in requested]


def compute_indicators(
    bars: Sequence[PriceBar],
    indicators: str | Iterable[str] | None = None,
    settings: IndicatorSettings | None = None,
) -> IndicatorBundle:
    """Compute the requested indicator groups over a bar sequence.

    Args:
        bars: Price bars, oldest first
        indicators: Groups to compute (sma, ema, rsi, macd, bollinger);
            defaults to ``settings.default_indicators``
        settings: Indicator periods; defaults to IndicatorSettings()

    Returns:
        IndicatorBundle with the requested series populated
    """
    settings = settings or IndicatorSettings()
    groups = parse_indicator_list(indicators, settings.default_indicators)
    prices = bar_closes(bars)

    bundle = IndicatorBundle(
        dates=[bar.date for bar in bars],
        closes=prices,
        settings=settings,
    )

    if "sma" in groups:
        bundle.sma_short = sma(prices, settings.sma_short)
        bundle.sma_medium = sma(prices, settings.sma_medium)
        bundle.sma_long = sma(prices, settings.sma_long)

    if "ema" in groups:
        bundle.ema_fast = ema(prices, settings.ema_fast)
        bundle.ema_slow = ema(prices, settings.ema_slow)

    if "rsi" in groups:
        bundle.rsi = rsi(prices, settings.rsi_period)

    if "macd" in groups:
        bundle.macd = macd(prices, settings.macd_fast, settings.macd_slow, settings.macd_signal)

    if "bollinger" in groups:
        bundle.bollinger = bollinger_bands(
            prices, settings.bollinger_period, settings.bollinger_multiplier
        )

    logger.debug("indicators_computed", bars=len(bars), groups=groups)
    return bundle
