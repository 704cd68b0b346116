"""Signal Interpreter.

Turns an IndicatorBundle into a qualitative SignalSummary at the latest bar:
trend direction and strength, support/resistance levels from the moving
averages, a list of human-readable events, and the latest RSI/MACD readings.

Rules are applied in a fixed order and later rules may overwrite the trend or
strength set by earlier ones:

    1. Golden/death cross (medium SMA vs long SMA)
    2. Price vs. all three SMAs
    3. SMA ordering reinforcement
    4. Support/resistance from the SMAs
    5. RSI overbought/oversold
    6. MACD / signal line cross
    7. MACD histogram zero cross
    8. Close outside the Bollinger bands
    9. Bollinger squeeze
   10. Fallback when nothing fired

A rule whose inputs (including the prior bar or the squeeze lookback bar) are
missing or undefined is skipped. The interpreter only reads existing series;
it never recomputes an indicator.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

import numpy as np

from stocksignals.analysis.indicators import IndicatorBundle, compute_indicators
from stocksignals.config.settings import Settings, SignalSettings, get_settings
from stocksignals.data.models import PriceBar
from stocksignals.utils import get_logger

logger = get_logger(__name__)

Trend = Literal["bullish", "bearish", "neutral"]
Strength = Literal["strong", "moderate", "weak"]

NO_CLEAR_SIGNAL = "No clear signal: indicators are mixed or neutral"


@dataclass(frozen=True)
class MACDReading:
    """Latest MACD values, None where undefined."""

    value: float | None = None
    signal: float | None = None
    histogram: float | None = None


@dataclass(frozen=True)
class SignalSummary:
    """Qualitative reading of the indicators at the latest bar.

    Attributes:
        trend: Overall direction
        strength: Conviction of the trend reading
        support: Lowest of the three SMAs, when all are defined
        resistance: Highest of the three SMAs, when all are defined
        events: Human-readable signal events in rule order
        last_rsi: Latest RSI value
        last_macd: Latest MACD, signal and histogram values
    """

    trend: Trend
    strength: Strength
    support: float | None
    resistance: float | None
    events: list[str]
    last_rsi: float | None
    last_macd: MACDReading = field(default_factory=MACDReading)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trend": self.trend,
            "strength": self.strength,
            "support": self.support,
            "resistance": self.resistance,
            "events": list(self.events),
            "last_rsi": self.last_rsi,
            "last_macd": {
                "value": self.last_macd.value,
                "signal": self.last_macd.signal,
                "histogram": self.last_macd.histogram,
            },
        }


@dataclass
class _Assessment:
    """Working state threaded through the rules for one interpretation."""

    trend: Trend = "neutral"
    strength: Strength = "moderate"
    support: float | None = None
    resistance: float | None = None
    events: list[str] = field(default_factory=list)


def _value_at(series: np.ndarray | None, index: int) -> float | None:
    if series is None or index < 0 or index >= len(series):
        return None
    value = series[index]
    if np.isnan(value):
        return None
    return float(value)


def _values_at(index: int, *series: np.ndarray | None) -> tuple[float, ...] | None:
    """Values of every series at ``index``, or None if any is undefined."""
    values = [_value_at(s, index) for s in series]
    if any(v is None for v in values):
        return None
    return tuple(values)  # type: ignore[arg-type]


class SignalInterpreter:
    """Derives a SignalSummary from an IndicatorBundle.

    Stateless apart from its thresholds, so one instance can be shared.
    """

    def __init__(self, settings: SignalSettings | None = None):
        """Initialize interpreter.

        Args:
            settings: RSI thresholds and squeeze parameters (default: SignalSettings())
        """
        self.settings = settings or SignalSettings()
        self._rules: list[Callable[[IndicatorBundle, int, _Assessment], None]] = [
            self._sma_cross,
            self._price_vs_smas,
            self._sma_alignment,
            self._support_resistance,
            self._rsi_extremes,
            self._macd_cross,
            self._histogram_flip,
            self._bollinger_extremes,
            self._bollinger_squeeze,
        ]

    def interpret(self, bundle: IndicatorBundle) -> SignalSummary:
        """Apply every rule at the latest bar and build the summary.

        Args:
            bundle: Indicator series for one bar sequence

        Returns:
            SignalSummary for the latest bar
        """
        last = len(bundle) - 1
        state = _Assessment()

        for rule in self._rules:
            rule(bundle, last, state)

        if not state.events:
            state.events.append(NO_CLEAR_SIGNAL)
            state.trend = "neutral"
            state.strength = "weak"

        macd_latest = bundle.macd.latest() if bundle.macd is not None else {}
        summary = SignalSummary(
            trend=state.trend,
            strength=state.strength,
            support=state.support,
            resistance=state.resistance,
            events=state.events,
            last_rsi=_value_at(bundle.rsi, last),
            last_macd=MACDReading(**macd_latest),
        )

        logger.debug(
            "signals_generated",
            trend=summary.trend,
            strength=summary.strength,
            events=len(summary.events),
        )
        return summary

    # ==================== Moving Average Rules ====================

    def _sma_cross(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        prev = _values_at(i - 1, bundle.sma_medium, bundle.sma_long)
        cur = _values_at(i, bundle.sma_medium, bundle.sma_long)
        if prev is None or cur is None:
            return

        medium, long_ = bundle.settings.sma_medium, bundle.settings.sma_long
        (prev_medium, prev_long), (cur_medium, cur_long) = prev, cur

        if prev_medium <= prev_long and cur_medium > cur_long:
            state.trend, state.strength = "bullish", "strong"
            state.events.append(
                f"Golden Cross: {medium}-day SMA crossed above {long_}-day SMA (bullish)"
            )
        elif prev_medium >= prev_long and cur_medium < cur_long:
            state.trend, state.strength = "bearish", "strong"
            state.events.append(
                f"Death Cross: {medium}-day SMA crossed below {long_}-day SMA (bearish)"
            )

    def _price_vs_smas(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        values = _values_at(i, bundle.closes, bundle.sma_short, bundle.sma_medium, bundle.sma_long)
        if values is None:
            return

        close, *averages = values
        periods = self._sma_labels(bundle)
        if all(close > avg for avg in averages):
            state.trend = "bullish"
            state.events.append(f"Price is above the {periods}-day SMAs")
        elif all(close < avg for avg in averages):
            state.trend = "bearish"
            state.events.append(f"Price is below the {periods}-day SMAs")

    def _sma_alignment(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        values = _values_at(i, bundle.sma_short, bundle.sma_medium, bundle.sma_long)
        if values is None:
            return

        short, medium, long_ = values
        s = bundle.settings
        if short > medium > long_ and state.trend == "bullish":
            state.strength = "strong"
            state.events.append(
                f"SMAs in bullish alignment ({s.sma_short} > {s.sma_medium} > {s.sma_long})"
            )
        elif short < medium < long_ and state.trend == "bearish":
            state.strength = "strong"
            state.events.append(
                f"SMAs in bearish alignment ({s.sma_short} < {s.sma_medium} < {s.sma_long})"
            )

    def _support_resistance(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        values = _values_at(i, bundle.sma_short, bundle.sma_medium, bundle.sma_long)
        if values is None:
            return
        state.support = min(values)
        state.resistance = max(values)

    # ==================== Oscillator Rules ====================

    def _rsi_extremes(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        value = _value_at(bundle.rsi, i)
        if value is None:
            return

        if value > self.settings.rsi_overbought:
            state.events.append(f"RSI at {value:.1f} indicates overbought conditions")
            if state.trend == "bullish":
                state.strength = "weak"
        elif value < self.settings.rsi_oversold:
            state.events.append(f"RSI at {value:.1f} indicates oversold conditions")
            if state.trend == "bearish":
                state.strength = "weak"

    def _macd_cross(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        if bundle.macd is None:
            return
        prev = _values_at(i - 1, bundle.macd.macd, bundle.macd.signal)
        cur = _values_at(i, bundle.macd.macd, bundle.macd.signal)
        if prev is None or cur is None:
            return

        (prev_macd, prev_signal), (cur_macd, cur_signal) = prev, cur
        if prev_macd <= prev_signal and cur_macd > cur_signal:
            state.events.append("MACD crossed above signal line (bullish momentum)")
            if state.trend == "bullish":
                state.strength = "moderate"
        elif prev_macd >= prev_signal and cur_macd < cur_signal:
            state.events.append("MACD crossed below signal line (bearish momentum)")
            if state.trend == "bearish":
                state.strength = "moderate"

    def _histogram_flip(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        if bundle.macd is None:
            return
        prev = _value_at(bundle.macd.histogram, i - 1)
        cur = _value_at(bundle.macd.histogram, i)
        if prev is None or cur is None:
            return

        if prev <= 0 < cur:
            state.events.append("MACD histogram turned positive (momentum shifting up)")
        elif prev >= 0 > cur:
            state.events.append("MACD histogram turned negative (momentum shifting down)")

    # ==================== Volatility Rules ====================

    def _bollinger_extremes(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        if bundle.bollinger is None:
            return
        values = _values_at(i, bundle.closes, bundle.bollinger.upper, bundle.bollinger.lower)
        if values is None:
            return

        close, upper, lower = values
        if close > upper:
            state.events.append("Price closed above the upper Bollinger Band (overextended)")
            if state.trend == "bullish":
                state.strength = "weak"
        elif close < lower:
            state.events.append("Price closed below the lower Bollinger Band (oversold stretch)")
            if state.trend == "bearish":
                state.strength = "weak"

    def _bollinger_squeeze(self, bundle: IndicatorBundle, i: int, state: _Assessment) -> None:
        if bundle.bollinger is None:
            return
        current = self._band_width(bundle, i)
        earlier = self._band_width(bundle, i - self.settings.squeeze_lookback)
        if current is None or earlier is None:
            return

        if current < self.settings.squeeze_ratio * earlier:
            state.events.append(
                "Bollinger Band squeeze: volatility is contracting, watch for a breakout"
            )

    # ==================== Helpers ====================

    @staticmethod
    def _band_width(bundle: IndicatorBundle, i: int) -> float | None:
        bands = bundle.bollinger
        if bands is None:
            return None
        values = _values_at(i, bands.upper, bands.middle, bands.lower)
        if values is None:
            return None
        upper, middle, lower = values
        if middle == 0:
            return None
        return (upper - lower) / middle

    @staticmethod
    def _sma_labels(bundle: IndicatorBundle) -> str:
        s = bundle.settings
        return f"{s.sma_short}, {s.sma_medium} and {s.sma_long}"


def generate_signals(
    bundle: IndicatorBundle, settings: SignalSettings | None = None
) -> SignalSummary:
    """Interpret ``bundle`` with a one-off SignalInterpreter."""
    return SignalInterpreter(settings).interpret(bundle)


def analyze(
    bars: Sequence[PriceBar],
    indicators: str | Iterable[str] | None = None,
    settings: Settings | None = None,
) -> tuple[IndicatorBundle, SignalSummary]:
    """Compute indicators for ``bars`` and interpret them in one pass.

    Args:
        bars: Price bars, oldest first
        indicators: Indicator groups to compute (default: all)
        settings: Application settings (default: get_settings())

    Returns:
        Tuple of (IndicatorBundle, SignalSummary)
    """
    settings = settings or get_settings()
    bundle = compute_indicators(bars, indicators, settings.indicators)
    return bundle, SignalInterpreter(settings.signals).interpret(bundle)
