"""
Exception types raised while looking up and analysing a stock symbol.
"""

from typing import Dict, Optional


class StockAnalyzerError(Exception):
    """Base error for anything the user should see as a single message."""


class SymbolNotFoundError(StockAnalyzerError):
    """No symbol variation returned quote data."""

    def __init__(self, symbol: str, attempts: Optional[Dict[str, str]] = None, message: str = None):
        self.symbol = symbol
        self.attempts = dict(attempts or {})
        super().__init__(message or self._build_message())

    def _build_message(self) -> str:
        if not self.attempts:
            return f"No matching symbols found for {self.symbol}"

        details = "\n".join(f"{variant}: {error}" for variant, error in self.attempts.items())
        return (
            f"Unable to fetch stock data. Please check:\n"
            f"1. Your API key is correct\n"
            f"2. The stock symbol \"{self.symbol}\" is valid\n"
            f"3. You haven't exceeded the API rate limit\n\n"
            f"Attempted variations:\n{details}"
        )


class RateLimitError(StockAnalyzerError):
    """The upstream API asked us to slow down."""

    def __init__(self, message: str = "API rate limit exceeded. Please wait a minute and try again."):
        super().__init__(message)


class TransientError(StockAnalyzerError):
    """A single request failed at the network or HTTP level."""
