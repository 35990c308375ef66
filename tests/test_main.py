import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from stock_analyzer import main
from stock_analyzer.data.models import Quote
from stock_analyzer.utils.exceptions import SymbolNotFoundError


class TestRunStockAnalyzer:
    """Test suite for the interactive prompt loop."""

    @pytest.fixture
    def client(self, monkeypatch):
        monkeypatch.setattr(main.settings, "lookup_debounce_seconds", 0)
        client = MagicMock()
        client.resolve_quote = AsyncMock(return_value=Quote(
            symbol="TCS.NS", open=3850.0, high=3902.4, low=3841.05, close=3890.75, volume=1200000
        ))
        with patch.object(main.AlphaVantageClient, "from_settings", return_value=client):
            yield client

    @pytest.mark.asyncio
    async def test_prints_analysis_then_quits(self, client, capsys):
        with patch("builtins.input", side_effect=["tcs", "quit"]):
            await main.run_stock_analyzer()

        output = capsys.readouterr().out
        assert "Fetching data for TCS..." in output
        assert "TCS.NS Analysis" in output
        assert "Exiting..." in output
        client.resolve_quote.assert_awaited_once_with("TCS")

    @pytest.mark.asyncio
    async def test_prints_error(self, client, capsys):
        client.resolve_quote.side_effect = SymbolNotFoundError("NOPE")

        with patch("builtins.input", side_effect=["nope", "", "q"]):
            await main.run_stock_analyzer()

        output = capsys.readouterr().out
        assert "❌ No data available for NOPE. Please check if the symbol is correct." in output
        client.resolve_quote.assert_awaited_once_with("NOPE")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
