import pytest
import os
import sys
from pathlib import Path

import numpy as np

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set up test environment variables if not already set
if "ALPHA_VANTAGE_API_KEY" not in os.environ:
    os.environ["ALPHA_VANTAGE_API_KEY"] = "test_api_key"

from stock_analyzer.data.models import Quote


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and other settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


@pytest.fixture
def sample_quote():
    """The quote used throughout the level calculations."""
    return Quote(symbol="RELIANCE.NS", open=100.0, high=105.0, low=95.0, close=102.0, volume=1000)


@pytest.fixture
def rng():
    """Seeded random source for reproducible synthetic bars."""
    return np.random.default_rng(42)
