import asyncio
import logging

from stock_analyzer.analyzers.utils import get_analysis_summary
from stock_analyzer.config.settings import settings
from stock_analyzer.integrations.alpha_vantage_client import AlphaVantageClient
from stock_analyzer.utils.stock_lookup import StockLookupManager

logger = logging.getLogger(__name__)


def setup_logging(level: str = None, log_file: str = None):
    """Send log records to the log file so they don't interleave with the prompt."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        filename=log_file or settings.log_file,
    )


def create_lookup_manager() -> StockLookupManager:
    client = AlphaVantageClient.from_settings(settings)

    def show_error(message: str):
        print(f"❌ {message}\n")

    def show_analysis(analysis):
        print(get_analysis_summary(analysis, currency=settings.currency_symbol))

    return StockLookupManager(
        client,
        debounce=settings.lookup_debounce_seconds,
        on_update=show_analysis,
        on_error=show_error,
    )


async def run_stock_analyzer():
    manager = create_lookup_manager()

    try:
        print("📈 Indian Stock Analyzer")
        print("Enter a stock symbol (e.g., RELIANCE, TCS, INFY). Type 'quit' to exit.\n")

        while True:
            try:
                user_input = input("Symbol: ")
                if user_input.strip().lower() in ["q", "quit", "exit"]:
                    print("Exiting...")
                    break

                task = manager.select(user_input)
                if task is None:
                    continue

                print(f"Fetching data for {manager.selected_symbol}...")
                await task

            except KeyboardInterrupt:
                print("\nExiting...")
                break

    except Exception as e:
        logger.error(f"Stock analyzer failed: {e}")
        raise
    finally:
        await manager.close()


def main():
    """CLI entry point."""
    setup_logging()
    asyncio.run(run_stock_analyzer())


if __name__ == "__main__":
    main()
