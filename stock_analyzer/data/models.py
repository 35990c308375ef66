from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional
import pandas as pd
from pydantic import BaseModel, ConfigDict


# Core market data models
class Quote(BaseModel):
    """Latest-session price snapshot for one symbol."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    open: float
    high: float
    low: float
    close: float
    volume: int


class SymbolMatch(BaseModel):
    """One hit from a symbol search."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    type: str = ""
    region: str = ""
    currency: str = ""
    match_score: Optional[float] = None


class DailyBar(BaseModel):
    """One day's open/high/low/close."""
    model_config = ConfigDict(frozen=True)

    date: date
    open: float
    high: float
    low: float
    close: float


class OHLCSeries(BaseModel):
    """A bar series split into parallel price lists."""
    model_config = ConfigDict(frozen=True)

    open: List[float]
    high: List[float]
    low: List[float]
    close: List[float]


class LevelSet(BaseModel):
    """Support, resistance and target price levels."""
    model_config = ConfigDict(frozen=True)

    supports: List[float]
    resistances: List[float]
    upward_targets: List[float]
    downward_targets: List[float]


class StockAnalysis(BaseModel):
    """Everything the chart and summary views need for one symbol."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    quote: Quote
    dates: List[date]
    ohlc: OHLCSeries
    levels: LevelSet

    @property
    def bars(self) -> List[DailyBar]:
        return [
            DailyBar(date=d, open=o, high=h, low=l, close=c)
            for d, o, h, l, c in zip(
                self.dates, self.ohlc.open, self.ohlc.high, self.ohlc.low, self.ohlc.close
            )
        ]

    @property
    def current_session(self) -> DailyBar:
        """The most recent bar, which mirrors the real quote."""
        return self.bars[-1]

    def to_chart_series(self) -> List[Dict[str, Any]]:
        """Candlestick points as ``{"x": epoch millis, "y": [open, high, low, close]}``."""
        points = []
        for bar in self.bars:
            midnight = datetime.combine(bar.date, time.min, tzinfo=timezone.utc)
            points.append({
                "x": int(midnight.timestamp() * 1000),
                "y": [bar.open, bar.high, bar.low, bar.close],
            })
        return points

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame({
            'date': self.dates,
            'open': self.ohlc.open,
            'high': self.ohlc.high,
            'low': self.ohlc.low,
            'close': self.ohlc.close,
        })
        return df.set_index('date')
