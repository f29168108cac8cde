from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from threading import Lock
from typing import Dict, Iterable, Optional

import requests

from cointape.config import Settings, settings as default_settings
from cointape.symbols import COINS, Coin

logger = logging.getLogger(__name__)

_MARKETS_PATH = "/coins/markets"


class QuoteFetchError(Exception):
    pass


@dataclass(frozen=True)
class MarketRecord:
    current_price: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    image: Optional[str] = None
    name: str = ""
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class MarketSnapshot:
    records: Dict[str, MarketRecord] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None

    def get(self, provider_id: Optional[str]) -> Optional[MarketRecord]:
        if not provider_id:
            return None
        return self.records.get(provider_id)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class AppState:
    """Page-lifetime state shared by the fetch and render callbacks."""

    snapshot: MarketSnapshot = field(default_factory=MarketSnapshot)
    last_error: Optional[str] = None
    last_attempt: Optional[datetime] = None
    refresh_count: int = 0


def _as_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (OverflowError, TypeError, ValueError):
        return None


def _parse_record(item: dict) -> MarketRecord:
    image = item.get("image") or None
    return MarketRecord(
        current_price=_as_float(item.get("current_price")),
        price_change_percentage_24h=_as_float(item.get("price_change_percentage_24h")),
        image=str(image) if image else None,
        name=str(item.get("name") or ""),
        last_updated=item.get("last_updated"),
    )


def parse_markets(payload) -> Dict[str, MarketRecord]:
    if not isinstance(payload, list):
        raise QuoteFetchError(f"Unexpected payload type: {type(payload).__name__}")
    records: Dict[str, MarketRecord] = {}
    for item in payload:
        if not isinstance(item, dict):
            continue
        coin_id = item.get("id")
        if not coin_id:
            continue
        records[str(coin_id)] = _parse_record(item)
    return records


class QuoteFetcher:
    def __init__(self, config: Settings = default_settings, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def markets_url(self) -> str:
        return f"{self.config.api_base}{_MARKETS_PATH}"

    def fetch(self, coins: Iterable[Coin] = COINS) -> MarketSnapshot:
        ids = ",".join(coin.provider_id for coin in coins)
        params = {
            "vs_currency": "usd",
            "ids": ids,
            "price_change_percentage": "24h",
        }
        try:
            resp = self.session.get(
                self.markets_url(),
                params=params,
                headers={"accept": "application/json"},
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as exc:
            raise QuoteFetchError(str(exc)) from exc
        if not resp.ok:
            raise QuoteFetchError(f"HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise QuoteFetchError("Malformed JSON") from exc
        records = parse_markets(payload)
        return MarketSnapshot(records=records, fetched_at=datetime.now(timezone.utc))


class QuoteService:
    def __init__(self, fetcher: QuoteFetcher, coins: Iterable[Coin] = COINS):
        self.fetcher = fetcher
        self.coins = tuple(coins)
        self._inflight = Lock()

    def refresh(self, state: AppState) -> bool:
        # Overlapping ticks are dropped rather than raced.
        if not self._inflight.acquire(blocking=False):
            logger.debug("Quote refresh already in flight, skipping tick")
            return False
        try:
            state.last_attempt = datetime.now(timezone.utc)
            try:
                snapshot = self.fetcher.fetch(self.coins)
            except QuoteFetchError as exc:
                state.last_error = str(exc)
                logger.error("Failed to fetch quotes: %s", exc)
                return False
            state.snapshot = snapshot
            state.last_error = None
            state.refresh_count += 1
            logger.debug("Fetched %d market records", len(snapshot))
            return True
        finally:
            self._inflight.release()
