import asyncio
import logging
from typing import Callable, Optional

import numpy as np

from stock_analyzer.analyzers.pipeline import generate
from stock_analyzer.data.models import StockAnalysis
from stock_analyzer.integrations.alpha_vantage_client import AlphaVantageClient
from stock_analyzer.utils.exceptions import RateLimitError, StockAnalyzerError, SymbolNotFoundError

logger = logging.getLogger(__name__)


def describe_error(error: BaseException, symbol: str) -> str:
    """Turn a lookup failure into the single message shown to the user."""
    if isinstance(error, RateLimitError):
        return "API rate limit exceeded. Please wait a minute before trying again."
    if isinstance(error, SymbolNotFoundError):
        # Keep the per-variation detail so the user can see what was tried
        return f"No data available for {symbol}. Please check if the symbol is correct.\n\n{error}"
    if isinstance(error, StockAnalyzerError):
        return str(error)
    return "Failed to fetch stock data"


class StockLookupManager:
    """Runs symbol lookups so that only the newest one can update visible state.

    Selecting a new symbol cancels the in-flight lookup. A generation counter
    guards the final state update as well, so a response that slips past the
    cancellation is still discarded.
    """

    def __init__(
        self,
        client: AlphaVantageClient,
        rng: np.random.Generator = None,
        debounce: float = 0.5,
        on_update: Callable[[StockAnalysis], None] = None,
        on_error: Callable[[str], None] = None,
    ):
        self.client = client
        self.rng = rng if rng is not None else np.random.default_rng()
        self.debounce = debounce
        self.on_update = on_update
        self.on_error = on_error

        # Visible state
        self.selected_symbol: str = ""
        self.analysis: Optional[StockAnalysis] = None
        self.error: str = ""
        self.loading: bool = False

        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    def select(self, symbol: str) -> Optional[asyncio.Task]:
        """Start a lookup for `symbol`, superseding any lookup in flight."""
        symbol = symbol.strip().upper()
        if not symbol:
            return None

        self._cancel_in_flight()

        self._generation += 1
        self.selected_symbol = symbol
        self.error = ""
        self.analysis = None
        self.loading = True

        logger.info(f"Initiating lookup for symbol: {symbol}")
        self._task = asyncio.create_task(self._lookup(symbol, self._generation))
        return self._task

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _lookup(self, symbol: str, generation: int) -> Optional[StockAnalysis]:
        if self.debounce > 0:
            await asyncio.sleep(self.debounce)

        try:
            quote = await self.client.resolve_quote(symbol)
            analysis = generate(quote, self.rng)
        except asyncio.CancelledError:
            logger.info(f"Lookup for {symbol} cancelled")
            raise
        except Exception as e:
            if not self.is_current(generation):
                logger.info(f"Discarding stale error for {symbol}: {e}")
                return None
            logger.error(f"Error fetching stock data for {symbol}: {e}")
            self._apply_error(describe_error(e, symbol))
            return None

        if not self.is_current(generation):
            logger.info(f"Discarding stale result for {symbol}")
            return None

        logger.info(f"Successfully received data for: {symbol}")
        self.analysis = analysis
        self.loading = False
        if self.on_update:
            self.on_update(analysis)
        return analysis

    def _apply_error(self, message: str):
        self.error = message
        self.analysis = None
        self.selected_symbol = ""
        self.loading = False
        if self.on_error:
            self.on_error(message)

    def _cancel_in_flight(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def close(self):
        """Cancel any in-flight lookup and wait for it to unwind."""
        task = self._task
        self._cancel_in_flight()
        self._generation += 1
        self.loading = False
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
