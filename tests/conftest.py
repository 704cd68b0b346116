"""
Shared pytest fixtures for the stocksignals test suite.

This module provides fixtures for:
- Sample market data (price bars, OHLCV DataFrames)
- Bar factories for hand-built close sequences
- Indicator and signal settings
"""

from datetime import date, timedelta
import os

import numpy as np
import pandas as pd
import pytest

from stocksignals.config import IndicatorSettings, SignalSettings, get_settings
from stocksignals.data import PriceBar

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    """Isolate tests from the host environment and the cached settings."""
    for prefix in ("INDICATOR_", "SIGNAL_", "LOG_"):
        for key in list(os.environ):
            if key.startswith(prefix):
                monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def indicator_settings() -> IndicatorSettings:
    """Default indicator periods (20/50/200, 12/26, 14, 12/26/9, 20/2)."""
    return IndicatorSettings()


@pytest.fixture
def signal_settings() -> SignalSettings:
    """Default signal thresholds (70/30 RSI, 0.7 squeeze over 20 bars)."""
    return SignalSettings()


# ============================================================================
# Market Data Fixtures
# ============================================================================


def make_bars(closes, start: date = date(2024, 1, 1)) -> list[PriceBar]:
    """Build daily bars around a close sequence."""
    return [
        PriceBar(
            date=start + timedelta(days=i),
            open=float(close),
            high=float(close) + 1.0,
            low=float(close) - 1.0,
            close=float(close),
            volume=1_000_000.0 + i,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def bar_factory():
    """Factory fixture turning a close sequence into PriceBar records."""
    return make_bars


@pytest.fixture
def trending_closes() -> np.ndarray:
    """260 closes: a slow decline followed by a steady rally."""
    decline = np.linspace(150.0, 100.0, 130)
    rally = np.linspace(100.5, 180.0, 130)
    wiggle = np.sin(np.arange(260) / 3.0) * 0.8
    return np.concatenate((decline, rally)) + wiggle


@pytest.fixture
def sample_bars(trending_closes) -> list[PriceBar]:
    """Bars long enough for every default indicator, including SMA200."""
    return make_bars(trending_closes)


@pytest.fixture
def sample_ohlcv_dataframe() -> pd.DataFrame:
    """Generate sample OHLCV DataFrame indexed by timestamp."""
    base_time = pd.Timestamp("2024-01-01")
    rows = []
    for i in range(100):
        open_price = 100 + i * 0.1
        rows.append(
            {
                "timestamp": base_time + pd.Timedelta(days=i),
                "open": open_price,
                "high": open_price + 0.5,
                "low": open_price - 0.5,
                "close": open_price + 0.2,
                "volume": 1000 + i * 10,
            }
        )
    df = pd.DataFrame(rows)
    df.set_index("timestamp", inplace=True)
    return df
