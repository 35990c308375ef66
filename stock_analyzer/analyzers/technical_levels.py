"""
Technical Levels Module

Derives support, resistance and price-target levels from a bar series.
Supports and resistances are point samples of the pooled price distribution
rather than detected clusters.
"""

import logging
import math
from typing import Iterable, List, Sequence, Tuple
import numpy as np
import pandas as pd

from stock_analyzer.config.settings import analysis_config
from stock_analyzer.data.models import DailyBar, LevelSet
from .utils import round2

logger = logging.getLogger(__name__)


def _pool_prices(bars: Sequence[DailyBar]) -> np.ndarray:
    """Flatten open/high/low/close of every bar into one ascending array."""
    df = pd.DataFrame([{
        'high': bar.high,
        'low': bar.low,
        'close': bar.close,
        'open': bar.open,
    } for bar in bars])

    return np.sort(df[['high', 'low', 'close', 'open']].to_numpy().ravel())


def sample_price_levels(sorted_prices: np.ndarray, quantiles: Iterable[float]) -> List[float]:
    """Pick prices at floor(q * n) for each quantile q.

    Args:
        sorted_prices: Ascending price pool
        quantiles: Fractions in [0, 1)

    Returns:
        Rounded price at each sampled index
    """
    n = len(sorted_prices)
    return [round2(sorted_prices[math.floor(n * q)]) for q in quantiles]


def calculate_support_resistance(bars: Sequence[DailyBar]) -> Tuple[List[float], List[float]]:
    """Calculate (supports, resistances) from the pooled bar prices.

    The lowest support (index 0) is the strongest; the highest resistance
    (index 2) is the strongest.
    """
    if not bars:
        logger.warning("No bars provided for support/resistance calculation")
        return [], []

    prices = _pool_prices(bars)
    supports = sample_price_levels(prices, analysis_config.SUPPORT_QUANTILES)
    resistances = sample_price_levels(prices, analysis_config.RESISTANCE_QUANTILES)
    return supports, resistances


def calculate_price_targets(current_price: float, base_volatility: float) -> Tuple[List[float], List[float]]:
    """Calculate (upward_targets, downward_targets) for short, medium and long term.

    Args:
        current_price: Latest close
        base_volatility: Session range relative to the low

    Returns:
        Upward targets ascending and downward targets descending
    """
    upward = [
        round2(current_price * (1 + base_volatility * multiplier))
        for multiplier in analysis_config.TARGET_MULTIPLIERS
    ]
    downward = [
        round2(current_price * (1 - base_volatility * multiplier))
        for multiplier in analysis_config.TARGET_MULTIPLIERS
    ]
    return upward, downward


def calculate_levels(bars: Sequence[DailyBar], current_price: float, base_volatility: float) -> LevelSet:
    """Calculate the full level set for a series."""
    supports, resistances = calculate_support_resistance(bars)
    upward, downward = calculate_price_targets(current_price, base_volatility)

    return LevelSet(
        supports=supports,
        resistances=resistances,
        upward_targets=upward,
        downward_targets=downward,
    )
