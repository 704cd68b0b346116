"""
Price bar model and adapters for market data records.

The indicator engine consumes an ordered sequence of daily ``PriceBar``
records, oldest first. Bars are produced by the market-data collaborator,
either as plain mappings (one per day) or as an OHLCV DataFrame; the helpers
here normalise both shapes. Ordering is assumed, not checked.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

OHLCV_FIELDS: tuple[str, ...] = ("open", "high", "low", "close", "volume")


@dataclass(frozen=True)
class PriceBar:
    """A single daily OHLCV bar.

    Attributes:
        date: Trading day
        open: Opening price
        high: Session high
        low: Session low
        close: Closing price
        volume: Traded volume
    """

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PriceBar":
        """Build a bar from a market-data mapping.

        Missing or null numeric fields are normalised to 0.0, the same way
        the history endpoint fills gaps in provider data.

        Args:
            record: Mapping with a ``date`` (or ``timestamp``) key and OHLCV fields

        Returns:
            PriceBar instance

        Raises:
            ValueError: If the record has no parseable date
        """
        raw_date = record.get("date")
        if raw_date is None:
            raw_date = record.get("timestamp")
        values = {name: _to_float(record.get(name)) for name in OHLCV_FIELDS}
        return cls(date=_to_date(raw_date), **values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready mapping with an ISO date."""
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    result = float(value)
    if np.isnan(result):
        return 0.0
    return result


def _to_date(value: Any) -> date:
    if value is None:
        raise ValueError("Price bar record is missing a date")
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Provider timestamps arrive as full ISO strings; only the day matters
            return date.fromisoformat(value[:10])
        except ValueError as e:
            raise ValueError(f"Unparseable price bar date: {value!r}") from e
    raise ValueError(f"Unsupported price bar date type: {type(value).__name__}")


def bars_from_records(records: Iterable[Mapping[str, Any]]) -> list[PriceBar]:
    """Convert an iterable of market-data mappings into bars, preserving order."""
    return [PriceBar.from_record(record) for record in records]


def bars_from_dataframe(df: pd.DataFrame) -> list[PriceBar]:
    """Convert an OHLCV DataFrame into bars, preserving row order.

    The date is taken from a ``date`` or ``timestamp`` column when present,
    otherwise from a DatetimeIndex.

    Args:
        df: DataFrame with columns open, high, low, close, volume

    Returns:
        List of PriceBar

    Raises:
        ValueError: If required OHLCV columns are missing or no date source exists
    """
    missing = set(OHLCV_FIELDS) - set(df.columns)
    if missing:
        raise ValueError(f"DataFrame is missing columns: {sorted(missing)}")

    if "date" in df.columns:
        dates = df["date"]
    elif "timestamp" in df.columns:
        dates = df["timestamp"]
    elif isinstance(df.index, pd.DatetimeIndex):
        dates = df.index.to_series()
    else:
        raise ValueError("DataFrame has no date column or datetime index")

    return [
        PriceBar(
            date=_to_date(pd.Timestamp(raw_date)),
            open=_to_float(row.open),
            high=_to_float(row.high),
            low=_to_float(row.low),
            close=_to_float(row.close),
            volume=_to_float(row.volume),
        )
        for raw_date, row in zip(dates, df[list(OHLCV_FIELDS)].itertuples(index=False))
    ]


def closes(bars: Sequence[PriceBar]) -> np.ndarray:
    """Closing prices as a float64 array aligned with ``bars``."""
    return np.array([bar.close for bar in bars], dtype=np.float64)
