"""
Data Providers Package

This package contains the quote provider adapters and the infrastructure
(throttling, caching, health tracking, fallback) used to query them.
"""
from market_quotes.data_providers.rate_limiter import ThrottleController, ThrottleConfig, ThrottleState
from market_quotes.data_providers.cache_manager import ResponseCache, CacheEntry
from market_quotes.data_providers.health_monitor import ProviderHealthTracker, ProviderHealth
from market_quotes.data_providers.failover import select_fallback
from market_quotes.data_providers.registry import ProviderRegistry
from market_quotes.data_providers.orchestrator import QuoteAggregator
from market_quotes.data_providers.provider_init import create_aggregator, PROVIDER_FACTORIES

__all__ = [
    # Rate Limiter
    "ThrottleController",
    "ThrottleConfig",
    "ThrottleState",
    # Cache
    "ResponseCache",
    "CacheEntry",
    # Health
    "ProviderHealthTracker",
    "ProviderHealth",
    # Failover
    "select_fallback",
    # Registry
    "ProviderRegistry",
    # Aggregator
    "QuoteAggregator",
    "create_aggregator",
    "PROVIDER_FACTORIES",
]
