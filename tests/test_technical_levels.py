import pytest
import numpy as np
from datetime import date, timedelta

from stock_analyzer.analyzers.technical_levels import (
    sample_price_levels,
    calculate_support_resistance,
    calculate_price_targets,
    calculate_levels,
)
from stock_analyzer.data.models import DailyBar, LevelSet


class TestTechnicalLevels:
    """Test suite for support, resistance and target calculations."""

    def create_test_bars(self, num_days: int, start_price: float = 100.0) -> list[DailyBar]:
        """Create bars whose pooled prices are easy to reason about."""
        bars = []
        base_date = date(2024, 1, 1)

        for i in range(num_days):
            close_price = start_price + i
            bars.append(DailyBar(
                date=base_date + timedelta(days=i),
                open=close_price - 0.25,
                high=close_price + 0.5,
                low=close_price - 0.5,
                close=close_price,
            ))

        return bars

    def test_sample_price_levels_indices(self):
        """Test sampling at floor(q * n)."""
        prices = np.arange(120, dtype=float)

        result = sample_price_levels(prices, (0.10, 0.25, 0.40, 0.60, 0.75, 0.90))

        assert result == [12.0, 30.0, 48.0, 72.0, 90.0, 108.0]

    def test_support_resistance_from_pool(self):
        """Test that levels are taken from the sorted pool of all four price fields."""
        bars = self.create_test_bars(30)
        pool = sorted(
            price for bar in bars for price in (bar.open, bar.high, bar.low, bar.close)
        )

        supports, resistances = calculate_support_resistance(bars)

        assert supports == [pool[12], pool[30], pool[48]]
        assert resistances == [pool[72], pool[90], pool[108]]

    def test_levels_ascending(self):
        """Test that supports sit below resistances and both ascend."""
        bars = self.create_test_bars(30)

        supports, resistances = calculate_support_resistance(bars)

        assert supports == sorted(supports)
        assert resistances == sorted(resistances)
        assert supports[-1] <= resistances[0]

    def test_support_resistance_no_bars(self):
        """Test that an empty series yields no levels."""
        supports, resistances = calculate_support_resistance([])

        assert supports == []
        assert resistances == []

    def test_price_targets_scenario(self):
        """Test targets for a close of 102 and volatility of 0.11."""
        upward, downward = calculate_price_targets(102.0, 0.11)

        assert upward == [107.61, 113.22, 118.83]
        assert downward == [96.39, 90.78, 85.17]

    def test_price_targets_monotonic(self):
        """Test that upward targets rise and downward targets fall."""
        upward, downward = calculate_price_targets(2500.0, 0.04)

        assert upward[0] < upward[1] < upward[2]
        assert downward[0] > downward[1] > downward[2]
        assert downward[0] < 2500.0 < upward[0]

    def test_price_targets_zero_volatility(self):
        """Test that zero volatility collapses every target to the current price."""
        upward, downward = calculate_price_targets(50.0, 0.0)

        assert upward == [50.0, 50.0, 50.0]
        assert downward == [50.0, 50.0, 50.0]

    def test_calculate_levels(self):
        """Test the combined level set."""
        bars = self.create_test_bars(30)

        result = calculate_levels(bars, current_price=129.0, base_volatility=0.02)

        assert isinstance(result, LevelSet)
        assert len(result.supports) == 3
        assert len(result.resistances) == 3
        assert result.upward_targets == [round(129.0 * 1.01, 2), round(129.0 * 1.02, 2), round(129.0 * 1.03, 2)]
        assert result.downward_targets == [round(129.0 * 0.99, 2), round(129.0 * 0.98, 2), round(129.0 * 0.97, 2)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
