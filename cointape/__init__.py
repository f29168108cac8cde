"""CoinTape: crypto quote strip and TradingView chart dashboard."""

__version__ = "0.1.0"
