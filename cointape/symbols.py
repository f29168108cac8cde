"""Coin list and the TradingView / CoinGecko symbol tables."""
from __future__ import annotations

import re
from typing import Dict, List, NamedTuple, Optional, Tuple


class Coin(NamedTuple):
    provider_id: str
    label: str


# Display order of the quote strip.
COINS: Tuple[Coin, ...] = (
    Coin("bitcoin", "BTC"),
    Coin("ethereum", "ETH"),
    Coin("binancecoin", "BNB"),
    Coin("solana", "SOL"),
    Coin("ripple", "XRP"),
    Coin("dogecoin", "DOGE"),
    Coin("cardano", "ADA"),
    Coin("litecoin", "LTC"),
    Coin("avalanche-2", "AVAX"),
)

_PROVIDER_IDS: Dict[str, str] = {coin.label: coin.provider_id for coin in COINS}

# UI interval code -> technical-analysis widget interval
_TA_INTERVALS: Dict[str, str] = {
    "1": "1m",
    "3": "3m",
    "5": "5m",
    "15": "15m",
    "30": "30m",
    "60": "1h",
    "240": "4h",
    "D": "1D",
    "W": "1W",
}
_TA_DEFAULT = "1h"

INTERVAL_CHOICES: List[Tuple[str, str]] = [
    ("1", "1m"),
    ("3", "3m"),
    ("5", "5m"),
    ("15", "15m"),
    ("30", "30m"),
    ("60", "1h"),
    ("240", "4h"),
    ("D", "1D"),
    ("W", "1W"),
]
INTERVAL_CODES = [code for code, _ in INTERVAL_CHOICES]
INTERVAL_LABELS = dict(INTERVAL_CHOICES)

SYMBOL_CHOICES: List[str] = [f"BINANCE:{coin.label}USDT" for coin in COINS]

_SYMBOL_CHARS = re.compile(r"[^A-Z0-9:._\-]")


def provider_id_for(vendor_symbol: str) -> Optional[str]:
    """Map ``EXCHANGE:BASEQUOTE`` to a CoinGecko id, or None when unknown."""
    try:
        base = vendor_symbol.split(":")[1].replace("USDT", "", 1).replace("USD", "", 1)
        return _PROVIDER_IDS.get(base.upper())
    except (AttributeError, IndexError, TypeError):
        return None


def ta_interval(code: str) -> str:
    return _TA_INTERVALS.get(code, _TA_DEFAULT)


def normalize_vendor_symbol(raw) -> str:
    if raw is None:
        return ""
    return _SYMBOL_CHARS.sub("", str(raw).strip().upper())
