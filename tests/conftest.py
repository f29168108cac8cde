import pytest

from cointape.config import Settings

MARKETS_PAYLOAD = [
    {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "image": "https://assets.coingecko.com/coins/images/1/large/bitcoin.png",
        "current_price": 43250.5,
        "price_change_percentage_24h": 2.34,
        "last_updated": "2026-10-19T12:00:00.000Z",
    },
    {
        "id": "ethereum",
        "symbol": "eth",
        "name": "Ethereum",
        "image": "https://assets.coingecko.com/coins/images/279/large/ethereum.png",
        "current_price": 2301.12,
        "price_change_percentage_24h": -1.1,
        "last_updated": "2026-10-19T12:00:00.000Z",
    },
    {
        "id": "dogecoin",
        "symbol": "doge",
        "name": "Dogecoin",
        "image": None,
        "current_price": 0.12345678,
        "price_change_percentage_24h": None,
        "last_updated": None,
    },
]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(api_base="https://api.example.test/api/v3", http_timeout=3)


@pytest.fixture
def markets_payload() -> list[dict]:
    return [dict(item) for item in MARKETS_PAYLOAD]
