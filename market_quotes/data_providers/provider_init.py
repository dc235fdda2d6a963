"""
Provider Initialization Module

Builds a fully wired QuoteAggregator from application settings.
Every supported provider is registered and throttled with the limits from
its ProviderConfig; API keys come from the environment.
"""
from typing import Optional, Callable, Awaitable
from loguru import logger

from market_quotes.config import Settings, get_settings
from market_quotes.data_providers.adapters.base import Provider
from market_quotes.data_providers.adapters.finnhub import FinnhubAdapter, create_finnhub_config
from market_quotes.data_providers.adapters.alpha_vantage import (
    AlphaVantageAdapter,
    create_alpha_vantage_config,
)
from market_quotes.data_providers.adapters.polygon import PolygonAdapter, create_polygon_config
from market_quotes.data_providers.rate_limiter import ThrottleController, ThrottleConfig
from market_quotes.data_providers.cache_manager import ResponseCache
from market_quotes.data_providers.health_monitor import ProviderHealthTracker
from market_quotes.data_providers.registry import ProviderRegistry
from market_quotes.data_providers.orchestrator import QuoteAggregator


# Map of providers to (adapter_class, config_factory)
PROVIDER_FACTORIES = {
    Provider.FINNHUB: (FinnhubAdapter, create_finnhub_config),
    Provider.ALPHA_VANTAGE: (AlphaVantageAdapter, create_alpha_vantage_config),
    Provider.POLYGON: (PolygonAdapter, create_polygon_config),
}


def get_api_keys(settings: Settings) -> dict[Provider, str]:
    return {
        Provider.FINNHUB: settings.FINNHUB_API_KEY,
        Provider.ALPHA_VANTAGE: settings.ALPHA_VANTAGE_API_KEY,
        Provider.POLYGON: settings.POLYGON_API_KEY,
    }


def create_aggregator(
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], float]] = None,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> QuoteAggregator:
    """
    Create a QuoteAggregator with all providers registered.

    Args:
        settings: Application settings, defaults to get_settings()
        clock: Monotonic clock shared by the throttle and cache
        sleep: Coroutine used by the throttle to wait

    Returns:
        QuoteAggregator (call initialize() or use it as an async context manager)
    """
    settings = settings or get_settings()

    registry = ProviderRegistry()
    throttle = ThrottleController(clock=clock, sleep=sleep)
    cache = ResponseCache(ttl_seconds=settings.QUOTE_CACHE_TTL_SECONDS, clock=clock)
    health = ProviderHealthTracker(failure_threshold=settings.HEALTH_FAILURE_THRESHOLD)

    for provider, api_key in get_api_keys(settings).items():
        adapter_class, config_factory = PROVIDER_FACTORIES[provider]

        if not api_key:
            logger.warning(f"No API key configured for {provider.value}; requests will likely fail")

        config = config_factory(api_key, timeout_seconds=settings.PROVIDER_TIMEOUT_SECONDS)
        registry.register(adapter_class(config))

        # Free tier limits come from the provider config
        throttle.configure(provider.value, ThrottleConfig(
            requests_per_minute=config.requests_per_minute,
            min_interval_seconds=config.min_request_interval,
        ))
        health.register(provider.value)

    return QuoteAggregator(
        registry=registry,
        throttle=throttle,
        cache=cache,
        health=health,
        default_provider=settings.DEFAULT_QUOTE_PROVIDER,
    )
