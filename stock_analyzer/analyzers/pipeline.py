"""
Quote-to-Series Pipeline

Turns one real quote into the full analysis payload handed to the chart:
a synthetic 30-day OHLC series ending in the quote plus support,
resistance and target levels.
"""

import logging
from datetime import date
from typing import Optional
import numpy as np

from stock_analyzer.data.models import OHLCSeries, Quote, StockAnalysis
from .synthetic_series import calculate_volatility_parameters, generate_price_series, generate_trading_dates
from .technical_levels import calculate_levels
from .utils import validate_quote_prices

logger = logging.getLogger(__name__)


def generate(
    quote: Quote,
    rng: Optional[np.random.Generator] = None,
    today: Optional[date] = None,
) -> StockAnalysis:
    """Build a StockAnalysis from a single quote.

    Args:
        quote: Real latest-session quote (quote.low must be positive)
        rng: Random source for the synthetic bars; a fresh unseeded
            generator is used when omitted
        today: Last date of the axis (defaults to today)

    Returns:
        StockAnalysis with 30 dates/bars and 3 levels of each kind
    """
    if rng is None:
        rng = np.random.default_rng()

    # Malformed quotes are still charted; the synthetic bars stay well-formed regardless
    if not validate_quote_prices(quote.open, quote.high, quote.low, quote.close):
        logger.warning(f"Charting {quote.symbol} from an inconsistent quote")

    dates = generate_trading_dates(today)
    bars = generate_price_series(quote, dates, rng)

    _, base_volatility = calculate_volatility_parameters(quote)
    levels = calculate_levels(bars, quote.close, base_volatility)

    logger.info(f"Generated analysis for {quote.symbol}: supports={levels.supports}, "
                f"resistances={levels.resistances}")

    return StockAnalysis(
        symbol=quote.symbol,
        quote=quote,
        dates=[bar.date for bar in bars],
        ohlc=OHLCSeries(
            open=[bar.open for bar in bars],
            high=[bar.high for bar in bars],
            low=[bar.low for bar in bars],
            close=[bar.close for bar in bars],
        ),
        levels=levels,
    )
