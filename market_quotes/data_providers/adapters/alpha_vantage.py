"""
Alpha Vantage Adapter

Provides access to the Alpha Vantage GLOBAL_QUOTE function.
Free tier is strictly rate limited (5 requests/minute).

API Documentation: https://www.alphavantage.co/documentation/#latestprice
"""
from typing import Any

from loguru import logger

from market_quotes.data_providers.adapters.base import (
    BaseAdapter,
    ProviderConfig,
    Provider,
    ErrorCode,
    Quote,
    ProviderError,
    to_finite,
)


ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"

# Required "Global Quote" fields -> canonical Quote field
REQUIRED_FIELDS = {
    "05. price": "price",
    "09. change": "change",
    "10. change percent": "percent_change",
    "03. high": "high",
    "04. low": "low",
    "02. open": "open",
    "08. previous close": "previous_close",
}


def create_alpha_vantage_config(api_key: str, timeout_seconds: float = 15.0) -> ProviderConfig:
    """Create configuration for Alpha Vantage adapter."""
    return ProviderConfig(
        name=Provider.ALPHA_VANTAGE,
        api_key=api_key,
        base_url=ALPHA_VANTAGE_BASE_URL,
        requests_per_minute=5,  # Free tier: 5/min
        min_request_interval=1.0,
        timeout_seconds=timeout_seconds,
    )


class AlphaVantageAdapter(BaseAdapter):
    """
    Alpha Vantage data provider adapter.

    Limitations:
    - Strict rate limiting (5 req/min free)
    - One symbol per request
    - Every quote field is string encoded; change percent carries a '%' suffix
    - Errors are reported in a 200 response body ("Error Message")
    """

    def _get_auth_params(self) -> dict[str, str]:
        return {"apikey": self.config.api_key}

    async def fetch_raw(self, symbol: str) -> dict[str, Any]:
        """Get the GLOBAL_QUOTE document for a symbol."""
        return await self._get_json(
            self.config.base_url,
            params={"function": "GLOBAL_QUOTE", "symbol": symbol},
        )

    def normalize(self, symbol: str, raw: dict[str, Any]) -> Quote:
        data = raw if isinstance(raw, dict) else {}
        quote_data = data.get("Global Quote")

        if not quote_data:
            if data.get("Error Message"):
                raise ProviderError(
                    Provider.ALPHA_VANTAGE,
                    str(data["Error Message"]),
                    code=ErrorCode.PROVIDER_ERROR,
                    retryable=False,
                )

            # Throttling notices arrive as "Note"/"Information" with no quote
            notice = data.get("Note") or data.get("Information")
            if notice:
                logger.warning(f"Alpha Vantage notice for {symbol}: {notice}")

            raise ProviderError(
                Provider.ALPHA_VANTAGE,
                f"No quote data available for {symbol} from Alpha Vantage",
                code=ErrorCode.NO_DATA,
                retryable=True,
            )

        if not isinstance(quote_data, dict):
            raise ProviderError(
                Provider.ALPHA_VANTAGE,
                f"Malformed Global Quote for {symbol} from Alpha Vantage",
                code=ErrorCode.INVALID_RESPONSE,
                retryable=False,
            )

        for field_name in REQUIRED_FIELDS:
            if not quote_data.get(field_name):
                raise ProviderError(
                    Provider.ALPHA_VANTAGE,
                    f"Missing field {field_name} in Alpha Vantage response",
                    code=ErrorCode.INCOMPLETE_DATA,
                    retryable=False,
                )

        fields = {}
        for source, target in REQUIRED_FIELDS.items():
            value = str(quote_data[source]).strip()
            if target == "percent_change":
                value = value.rstrip("%").strip()
            fields[target] = to_finite(Provider.ALPHA_VANTAGE, source, value)

        return self._build_quote(symbol, **fields)
