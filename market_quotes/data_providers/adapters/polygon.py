"""
Polygon.io Adapter

Provides access to the Polygon.io single-ticker snapshot endpoint for US stocks.

API Documentation: https://polygon.io/docs/stocks/get_v2_snapshot_locale_us_markets_stocks_tickers__stocksticker
Free tier: 5 API calls/minute
"""
from typing import Any
from urllib.parse import quote as url_quote

from market_quotes.data_providers.adapters.base import (
    BaseAdapter,
    ProviderConfig,
    Provider,
    ErrorCode,
    Quote,
    ProviderError,
    to_finite,
)


POLYGON_BASE_URL = "https://api.polygon.io"

REQUIRED_PARTS = ("lastTrade", "todaysChange", "day", "prevDay")


def create_polygon_config(api_key: str, timeout_seconds: float = 15.0) -> ProviderConfig:
    """Create configuration for Polygon adapter."""
    return ProviderConfig(
        name=Provider.POLYGON,
        api_key=api_key,
        base_url=POLYGON_BASE_URL,
        requests_per_minute=5,  # Free tier
        min_request_interval=0.2,
        timeout_seconds=timeout_seconds,
    )


class PolygonAdapter(BaseAdapter):
    """
    Polygon.io data provider adapter.

    Authenticates with a bearer token. The snapshot document nests the
    quote under "ticker":

        {"ticker": {"lastTrade": {"p": ...}, "todaysChange": ...,
                    "todaysChangePerc": ..., "day": {"o", "h", "l"},
                    "prevDay": {"c"}}}
    """

    def _get_auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    async def fetch_raw(self, symbol: str) -> dict[str, Any]:
        """Get the snapshot document for a symbol."""
        return await self._get_json(
            f"{self.config.base_url}/v2/snapshot/locale/us/markets/stocks/tickers/"
            f"{url_quote(symbol, safe='')}"
        )

    def normalize(self, symbol: str, raw: dict[str, Any]) -> Quote:
        """Parse snapshot ticker data."""
        ticker = raw.get("ticker") if isinstance(raw, dict) else None

        if not ticker:
            raise ProviderError(
                Provider.POLYGON,
                f"No data available for {symbol} from Polygon",
                code=ErrorCode.NO_DATA,
                retryable=True,
            )

        if not isinstance(ticker, dict):
            raise ProviderError(
                Provider.POLYGON,
                f"Malformed snapshot for {symbol} from Polygon",
                code=ErrorCode.INVALID_RESPONSE,
                retryable=False,
            )

        # todaysChange is numeric and may legitimately be 0
        if any(ticker.get(part) is None for part in REQUIRED_PARTS):
            raise ProviderError(
                Provider.POLYGON,
                f"Incomplete data for {symbol} from Polygon",
                code=ErrorCode.INCOMPLETE_DATA,
                retryable=False,
            )

        last_trade = ticker["lastTrade"]
        day = ticker["day"]
        prev_day = ticker["prevDay"]
        if not all(isinstance(part, dict) for part in (last_trade, day, prev_day)):
            raise ProviderError(
                Provider.POLYGON,
                f"Malformed snapshot for {symbol} from Polygon",
                code=ErrorCode.INVALID_RESPONSE,
                retryable=False,
            )

        return self._build_quote(
            symbol,
            price=to_finite(Provider.POLYGON, "lastTrade.p", last_trade.get("p")),
            change=to_finite(Provider.POLYGON, "todaysChange", ticker["todaysChange"]),
            percent_change=to_finite(
                Provider.POLYGON, "todaysChangePerc", ticker.get("todaysChangePerc")
            ),
            high=to_finite(Provider.POLYGON, "day.h", day.get("h")),
            low=to_finite(Provider.POLYGON, "day.l", day.get("l")),
            open=to_finite(Provider.POLYGON, "day.o", day.get("o")),
            previous_close=to_finite(Provider.POLYGON, "prevDay.c", prev_day.get("c")),
        )
