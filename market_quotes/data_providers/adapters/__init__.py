"""
Provider Adapters Package

Contains adapters for all supported quote providers.
Each adapter implements the BaseAdapter interface for consistent data access.
"""
from market_quotes.data_providers.adapters.base import (
    BaseAdapter,
    ProviderConfig,
    Provider,
    ErrorCode,
    Quote,
    ErrorPayload,
    QuoteResult,
    ProviderError,
)
from market_quotes.data_providers.adapters.finnhub import (
    FinnhubAdapter,
    create_finnhub_config,
)
from market_quotes.data_providers.adapters.alpha_vantage import (
    AlphaVantageAdapter,
    create_alpha_vantage_config,
)
from market_quotes.data_providers.adapters.polygon import (
    PolygonAdapter,
    create_polygon_config,
)

__all__ = [
    # Base
    "BaseAdapter",
    "ProviderConfig",
    "Provider",
    "ErrorCode",
    "Quote",
    "ErrorPayload",
    "QuoteResult",
    "ProviderError",
    # Providers
    "FinnhubAdapter",
    "create_finnhub_config",
    "AlphaVantageAdapter",
    "create_alpha_vantage_config",
    "PolygonAdapter",
    "create_polygon_config",
]
