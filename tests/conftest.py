"""
Market Quotes - Test Configuration
Shared fixtures and test configuration.
"""
import os
import asyncio
from typing import Any
import pytest
from unittest.mock import AsyncMock

# Set test environment
os.environ["FINNHUB_API_KEY"] = "test-finnhub-key"
os.environ["ALPHA_VANTAGE_API_KEY"] = "test-alpha-vantage-key"
os.environ["POLYGON_API_KEY"] = "test-polygon-key"


class FakeClock:
    """Monotonic clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(0.0, seconds)
        # Yield so other tasks can contend for locks
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# =========================
# Settings Fixtures
# =========================

@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    from market_quotes.config import Settings
    return Settings(
        _env_file=None,
        FINNHUB_API_KEY="test-finnhub-key",
        ALPHA_VANTAGE_API_KEY="test-alpha-vantage-key",
        POLYGON_API_KEY="test-polygon-key",
        DEFAULT_QUOTE_PROVIDER="finnhub",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    from market_quotes.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =========================
# Upstream Payload Fixtures
# =========================

@pytest.fixture
def finnhub_payload() -> dict[str, Any]:
    """Finnhub /quote response for AAPL."""
    return {
        "c": 150.25,
        "d": 1.5,
        "dp": 1.01,
        "h": 151,
        "l": 149,
        "o": 149.5,
        "pc": 148.75,
        "t": 1700000000,
    }


@pytest.fixture
def alpha_vantage_payload() -> dict[str, Any]:
    """Alpha Vantage GLOBAL_QUOTE response for AAPL."""
    return {
        "Global Quote": {
            "01. symbol": "AAPL",
            "02. open": "149.5000",
            "03. high": "151.0000",
            "04. low": "149.0000",
            "05. price": "150.2500",
            "06. volume": "51234567",
            "07. latest trading day": "2024-01-12",
            "08. previous close": "148.7500",
            "09. change": "1.5000",
            "10. change percent": "1.0100%",
        }
    }


@pytest.fixture
def polygon_payload() -> dict[str, Any]:
    """Polygon snapshot response for AAPL."""
    return {
        "status": "OK",
        "ticker": {
            "ticker": "AAPL",
            "todaysChange": 1.5,
            "todaysChangePerc": 1.01,
            "day": {"o": 149.5, "h": 151, "l": 149, "c": 150.1, "v": 51234567},
            "lastTrade": {"p": 150.25, "s": 100},
            "prevDay": {"o": 147.0, "h": 149.2, "l": 146.8, "c": 148.75},
        },
    }


# =========================
# Aggregator Fixtures
# =========================

@pytest.fixture
def aggregator(settings, fake_clock):
    """Fully wired aggregator driven by the fake clock."""
    from market_quotes.data_providers.provider_init import create_aggregator
    return create_aggregator(settings, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def mock_upstream(aggregator):
    """Replace a provider's live fetch with an AsyncMock."""
    def _mock(provider, **kwargs) -> AsyncMock:
        adapter = aggregator.registry.get(provider)
        adapter.fetch_raw = AsyncMock(**kwargs)
        return adapter.fetch_raw
    return _mock
