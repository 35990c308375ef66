"""
Synthetic Price Series Module

Builds a plausible 30-trading-day OHLC history that ends in a real quote.
Only the final bar is real market data; the earlier bars are fabricated from
the quote's own session range so the chart has some context to draw.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple
import numpy as np

from stock_analyzer.config.settings import analysis_config
from stock_analyzer.data.models import DailyBar, Quote
from .utils import round2

logger = logging.getLogger(__name__)


def generate_trading_dates(end: Optional[date] = None, count: int = analysis_config.SERIES_LENGTH) -> List[date]:
    """Generate `count` weekday dates ending at `end`, oldest first.

    Each offset from `end` is stepped back past any weekend on its own, so
    two offsets can land on the same Friday. Duplicates are kept.

    Args:
        end: Last calendar day of the axis (defaults to today)
        count: Number of dates to produce

    Returns:
        Ascending list of weekday dates
    """
    end = end or date.today()

    dates = []
    for offset in range(count):
        candidate = end - timedelta(days=offset)
        # Monday=0 ... Saturday=5, Sunday=6
        while candidate.weekday() >= 5:
            candidate -= timedelta(days=1)
        dates.append(candidate)

    dates.reverse()
    return dates


def calculate_volatility_parameters(quote: Quote) -> Tuple[float, float]:
    """Derive (average_daily_range, base_volatility) from the quote's session range."""
    session_range = quote.high - quote.low
    average_daily_range = round2(session_range * analysis_config.AVERAGE_RANGE_FACTOR)
    base_volatility = round2(session_range / quote.low)
    return average_daily_range, base_volatility


def _synthesize_bar(
    day: date,
    prev_close: float,
    average_daily_range: float,
    base_volatility: float,
    rng: np.random.Generator,
) -> DailyBar:
    day_volatility = round2(base_volatility * (0.5 + rng.random()))
    price_range = round2(average_daily_range * (0.5 + rng.random()))
    trend_direction = round2(rng.random() * 2 - 1)

    day_open = round2(prev_close)
    day_close = round2(day_open * (1 + day_volatility * trend_direction))

    if day_close > day_open:
        # Up day: longer upper wick
        day_high = round2(max(day_open, day_close) + price_range * rng.random())
        day_low = round2(min(day_open, day_close) - price_range * rng.random() * 0.5)
    else:
        day_high = round2(max(day_open, day_close) + price_range * rng.random() * 0.5)
        day_low = round2(min(day_open, day_close) - price_range * rng.random())

    day_high = round2(max(day_high, day_open, day_close))
    day_low = round2(min(day_low, day_open, day_close))

    return DailyBar(date=day, open=day_open, high=day_high, low=day_low, close=day_close)


def sanitize_bars(bars: List[DailyBar]) -> List[DailyBar]:
    """Re-clamp high/low and floor prices at the minimum tick.

    The last bar is real market data and is returned untouched.
    """
    if not bars:
        return []

    floor = analysis_config.MIN_PRICE
    cleaned = []
    for bar in bars[:-1]:
        high = round2(max(bar.high, bar.open, bar.close))
        low = round2(min(bar.low, bar.open, bar.close))
        cleaned.append(bar.model_copy(update={
            'open': round2(max(floor, bar.open)),
            'high': round2(max(floor, high)),
            'low': round2(max(floor, low)),
            'close': round2(max(floor, bar.close)),
        }))

    cleaned.append(bars[-1])
    return cleaned


def generate_price_series(
    quote: Quote,
    dates: List[date],
    rng: np.random.Generator,
) -> List[DailyBar]:
    """Fabricate one bar per date, anchored on the quote as the final bar.

    Args:
        quote: Real latest-session quote
        dates: Ascending date axis (see generate_trading_dates)
        rng: Random source; pass a seeded generator for reproducible output

    Returns:
        List of DailyBar, one per date, last bar equal to the quote
    """
    if not dates:
        return []

    average_daily_range, base_volatility = calculate_volatility_parameters(quote)

    # Start one volatility step below the current price
    prev_close = round2(quote.close * (1 - base_volatility))

    bars = []
    for day in dates[:-1]:
        bar = _synthesize_bar(day, prev_close, average_daily_range, base_volatility, rng)
        bars.append(bar)
        prev_close = bar.close

    bars.append(DailyBar(
        date=dates[-1],
        open=quote.open,
        high=quote.high,
        low=quote.low,
        close=quote.close,
    ))

    logger.debug(f"Synthesized {len(bars)} bars for {quote.symbol} "
                 f"(range={average_daily_range}, volatility={base_volatility})")

    return sanitize_bars(bars)
