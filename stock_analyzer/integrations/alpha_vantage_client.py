import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional
import httpx
from stock_analyzer.analyzers.utils import round2
from stock_analyzer.data.models import Quote, SymbolMatch
from stock_analyzer.utils.exceptions import (
    RateLimitError,
    StockAnalyzerError,
    SymbolNotFoundError,
    TransientError,
)


logger = logging.getLogger(__name__)

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"

_EXCHANGE_SUFFIX = re.compile(r"\.(NS|BSE)$", re.IGNORECASE)


class AlphaVantageClient:
    """Async client for the Alpha Vantage quote and symbol search API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        timeout: float = 30.0,
        retry_delay: float = 12.0,
        max_rate_limit_retries: int = 1,
        primary_suffix: str = ".NS",
        alternate_suffix: str = ".BSE",
        target_region: str = "India",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.max_rate_limit_retries = max_rate_limit_retries
        self.primary_suffix = primary_suffix
        self.alternate_suffix = alternate_suffix
        self.target_region = target_region

        self._sleep = sleep
        self._transport = transport

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "AlphaVantageClient":
        """Build a client from a Settings object."""
        return cls(
            api_key=settings.alpha_vantage_api_key,
            base_url=settings.alpha_vantage_base_url,
            timeout=settings.request_timeout,
            retry_delay=settings.retry_delay_seconds,
            max_rate_limit_retries=settings.max_rate_limit_retries,
            primary_suffix=settings.primary_exchange_suffix,
            alternate_suffix=settings.alternate_exchange_suffix,
            target_region=settings.target_region,
            **kwargs
        )

    async def _make_request(self, params: Dict) -> Dict[Any, Any]:
        """Make an async GET request to the Alpha Vantage query endpoint."""
        query = dict(params, apikey=self.api_key)

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.get(self.base_url, params=query)
                response.raise_for_status()
                data = response.json()

            except httpx.HTTPStatusError as e:
                logger.error(f"HTTP error {e.response.status_code}: {e.response.text}")
                if e.response.status_code == 429:
                    raise RateLimitError() from e
                raise TransientError(f"HTTP error {e.response.status_code}") from e
            except httpx.HTTPError as e:
                logger.error(f"Request failed: {str(e)}")
                raise TransientError(f"Request failed: {str(e) or type(e).__name__}") from e
            except ValueError as e:
                logger.error(f"Invalid JSON response: {str(e)}")
                raise TransientError("Invalid response from API") from e

        # Alpha Vantage reports throttling with a 200 and an informational body
        notice = data.get("Note") or data.get("Information")
        if notice:
            logger.warning(f"API notice: {notice}")
            if "rate limit" in notice.lower() or "call frequency" in notice.lower():
                raise RateLimitError()
            raise TransientError(notice)

        if "Error Message" in data:
            logger.error(f"API error: {data['Error Message']}")
            raise TransientError(data["Error Message"])

        return data

    async def _call_with_backoff(self, description: str, call: Callable[[], Awaitable[Any]]) -> Any:
        """Run `call`, waiting and retrying when rate limited.

        Gives up with RateLimitError after max_rate_limit_retries waits.
        """
        attempt = 0
        while True:
            try:
                return await call()
            except RateLimitError:
                if attempt >= self.max_rate_limit_retries:
                    logger.error(f"Rate limit persisted for {description}, giving up")
                    raise
                attempt += 1
                logger.warning(f"Rate limit hit for {description}, waiting {self.retry_delay} seconds...")
                await self._sleep(self.retry_delay)

    @staticmethod
    def clean_symbol(symbol: str) -> str:
        """Strip any exchange suffix and normalize a user-entered symbol."""
        return _EXCHANGE_SUFFIX.sub("", symbol.strip()).strip().upper()

    async def search_symbols(self, keywords: str) -> List[SymbolMatch]:
        """Search for symbols matching the given keywords."""
        params = {"function": "SYMBOL_SEARCH", "keywords": keywords}
        data = await self._make_request(params)

        matches = []
        for match_data in data.get("bestMatches") or []:
            try:
                score = match_data.get("9. matchScore")
                matches.append(SymbolMatch(
                    symbol=match_data["1. symbol"],
                    name=match_data.get("2. name", ""),
                    type=match_data.get("3. type", ""),
                    region=match_data.get("4. region", ""),
                    currency=match_data.get("8. currency", ""),
                    match_score=float(score) if score is not None else None,
                ))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse search match {match_data}: {e}")

        logger.debug(f"Search for {keywords} returned {len(matches)} matches")
        return matches

    async def get_quote(self, symbol: str) -> Optional[Quote]:
        """Get the latest quote for a symbol, or None when the API has no data for it."""
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol}
        data = await self._make_request(params)

        quote_data = data.get("Global Quote")
        if not quote_data:
            return None

        try:
            quote = Quote(
                symbol=quote_data.get("01. symbol", symbol),
                open=round2(quote_data["02. open"]),
                high=round2(quote_data["03. high"]),
                low=round2(quote_data["04. low"]),
                close=round2(quote_data["05. price"]),
                volume=int(float(quote_data["06. volume"])),
            )
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Failed to parse quote for {symbol}: {e}")
            raise TransientError(f"Malformed quote data: {e}") from e

        # Volatility is measured relative to the low, so it must survive rounding
        if quote.low <= 0:
            logger.warning(f"Quote for {symbol} has non-positive low after rounding: {quote.low}")
            raise TransientError(f"Malformed quote data: low price {quote.low}")

        return quote

    def symbol_variations(self, symbol: str, matches: List[SymbolMatch]) -> List[str]:
        """Order the ticker spellings to try, most likely exchange first."""
        regional = [match.symbol for match in matches if match.region == self.target_region]

        variations = [
            f"{symbol}{self.primary_suffix}",
            *regional,
            f"{symbol}{self.alternate_suffix}",
            symbol,
        ]

        # Remove duplicates, keep order
        return list(dict.fromkeys(variations))

    async def resolve_quote(self, symbol: str) -> Quote:
        """Find a quote for a user-entered symbol by trying exchange variations in turn.

        Raises:
            SymbolNotFoundError: search found nothing, or every variation failed
            RateLimitError: the API kept rate limiting after the back-off
            StockAnalyzerError: the symbol search itself failed
        """
        cleaned = self.clean_symbol(symbol)
        logger.info(f"Attempting to fetch data for cleaned symbol: {cleaned}")

        try:
            matches = await self._call_with_backoff(
                f"search {cleaned}", lambda: self.search_symbols(cleaned)
            )
        except TransientError as e:
            raise StockAnalyzerError(f"Failed to fetch stock data: {e}") from e

        if not matches:
            raise SymbolNotFoundError(cleaned)

        variations = self.symbol_variations(cleaned, matches)
        logger.info(f"Trying symbol variations: {variations}")

        errors: Dict[str, str] = {}
        for index, variation in enumerate(variations):
            is_last = index == len(variations) - 1
            try:
                quote = await self._call_with_backoff(
                    f"quote {variation}", lambda: self.get_quote(variation)
                )
            except TransientError as e:
                logger.error(f"Error fetching quote for {variation}: {e}")
                errors[variation] = str(e)
                continue

            if quote is not None:
                logger.info(f"Successfully found quote data for: {variation}")
                return quote

            logger.info(f"No quote data available for: {variation}")
            errors[variation] = "No quote data available"
            if not is_last:
                await self._sleep(self.retry_delay)

        raise SymbolNotFoundError(symbol, attempts=errors)
