from typing import List
import logging

from stock_analyzer.data.models import StockAnalysis

logger = logging.getLogger(__name__)


def round2(value: float) -> float:
    """Round a monetary value to 2 decimal places.

    Every price in the pipeline goes through this so the rounding rule
    stays consistent from the first synthetic bar to the final targets.
    """
    return round(float(value), 2)


def validate_quote_prices(open_: float, high: float, low: float, close: float) -> bool:
    """Check that a quote's high/low bracket its open and close.

    Args:
        open_: Session open
        high: Session high
        low: Session low
        close: Session close / current price

    Returns:
        True if the prices are well-formed, False otherwise
    """
    if low <= 0:
        logger.warning(f"Non-positive low price: {low}")
        return False

    if high < max(open_, close) or low > min(open_, close):
        logger.warning(f"Inconsistent quote prices: open={open_} high={high} low={low} close={close}")
        return False

    return True


def _format_levels(label: str, levels: List[float], currency: str) -> str:
    lines = ""
    for index, level in enumerate(levels, 1):
        lines += f"• {label} {index}: {currency}{level:.2f}\n"
    return lines


def get_analysis_summary(analysis: StockAnalysis, currency: str = "₹") -> str:
    """Generate a human-readable summary of a stock analysis.

    Args:
        analysis: Result of the quote-to-series pipeline
        currency: Symbol prefixed to every price

    Returns:
        Formatted summary string
    """
    session = analysis.current_session
    levels = analysis.levels

    summary = f"{analysis.symbol} Analysis (Current Price: {currency}{session.close:.2f}):\n\n"

    summary += "📊 CURRENT SESSION:\n"
    summary += f"• Open: {currency}{session.open:.2f}\n"
    summary += f"• High: {currency}{session.high:.2f}\n"
    summary += f"• Low: {currency}{session.low:.2f}\n"
    summary += f"• Close: {currency}{session.close:.2f}\n"

    summary += "\n📈 UPWARD TARGETS:\n"
    summary += _format_levels("Target", levels.upward_targets, currency)

    summary += "\n📉 DOWNWARD TARGETS:\n"
    summary += _format_levels("Target", levels.downward_targets, currency)

    summary += "\n🟦 SUPPORT LEVELS:\n"
    summary += _format_levels("Support", levels.supports, currency)

    summary += "\n🟪 RESISTANCE LEVELS:\n"
    summary += _format_levels("Resistance", levels.resistances, currency)

    return summary
