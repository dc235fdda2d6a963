"""
Finnhub Adapter

Provides access to the Finnhub quote endpoint for US stocks.

API Documentation: https://finnhub.io/docs/api/quote
Free tier: 60 API calls/minute, real-time US stock quotes
"""
from typing import Any

from market_quotes.data_providers.adapters.base import (
    BaseAdapter,
    ProviderConfig,
    Provider,
    ErrorCode,
    Quote,
    ProviderError,
    to_finite,
)


FINNHUB_BASE_URL = "https://finnhub.io/api/v1"

# Finnhub field -> canonical Quote field
FIELD_MAP = {
    "d": "change",
    "dp": "percent_change",
    "h": "high",
    "l": "low",
    "o": "open",
    "pc": "previous_close",
}


def create_finnhub_config(api_key: str, timeout_seconds: float = 15.0) -> ProviderConfig:
    """Create configuration for Finnhub adapter."""
    return ProviderConfig(
        name=Provider.FINNHUB,
        api_key=api_key,
        base_url=FINNHUB_BASE_URL,
        requests_per_minute=60,  # Free tier limit
        min_request_interval=0.1,
        timeout_seconds=timeout_seconds,
    )


class FinnhubAdapter(BaseAdapter):
    """
    Finnhub data provider adapter.

    Authenticates with the X-Finnhub-Token header and reads the flat
    quote document returned by /quote:

        {"c": 150.25, "d": 1.5, "dp": 1.01, "h": 151, "l": 149,
         "o": 149.5, "pc": 148.75, "t": 1700000000}
    """

    def _get_auth_headers(self) -> dict[str, str]:
        return {"X-Finnhub-Token": self.config.api_key}

    async def fetch_raw(self, symbol: str) -> dict[str, Any]:
        """Get latest quote document for a symbol."""
        return await self._get_json(
            f"{self.config.base_url}/quote",
            params={"symbol": symbol},
        )

    def normalize(self, symbol: str, raw: dict[str, Any]) -> Quote:
        """Parse REST API quote response."""
        price = raw.get("c") if isinstance(raw, dict) else None

        # Current price must be a real number
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ProviderError(
                Provider.FINNHUB,
                f"Invalid response data for {symbol}",
                code=ErrorCode.INVALID_RESPONSE,
                retryable=False,
            )

        fields = {
            target: to_finite(Provider.FINNHUB, source, raw.get(source))
            for source, target in FIELD_MAP.items()
        }

        return self._build_quote(
            symbol,
            price=to_finite(Provider.FINNHUB, "c", price),
            **fields,
        )
