"""
Quote Aggregator

Central coordinator for quote requests.
Handles symbol validation, caching, throttling, provider dispatch,
health tracking and single-hop fallback away from a failing default provider.
"""
from dataclasses import replace
from typing import Optional, Any, Union
from loguru import logger

from market_quotes.data_providers.adapters.base import (
    Provider,
    ErrorCode,
    ErrorPayload,
    QuoteResult,
    ProviderError,
    utcnow,
)
from market_quotes.data_providers.rate_limiter import ThrottleController
from market_quotes.data_providers.cache_manager import ResponseCache
from market_quotes.data_providers.health_monitor import ProviderHealthTracker
from market_quotes.data_providers.failover import select_fallback
from market_quotes.data_providers.registry import ProviderRegistry
from market_quotes.utils.exceptions import ValidationError, ConfigurationError


CACHE_OPERATION = "getQuote"

ProviderLike = Union[Provider, str]


def normalize_symbol(symbol: Any) -> str:
    """
    Canonicalize a ticker symbol (trimmed, upper case).

    Raises:
        ValidationError: If the symbol is missing or blank
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Symbol is required", details={"symbol": symbol})
    return symbol.strip().upper()


def resolve_provider(name: ProviderLike) -> Provider:
    """
    Resolve a provider name to a Provider.

    Raises:
        ConfigurationError: If the name is not a supported provider
    """
    if isinstance(name, Provider):
        return name
    try:
        return Provider(str(name).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown provider: {name}",
            details={
                "provider": name,
                "supported": [p.value for p in Provider],
            },
        )


class QuoteAggregator:
    """
    Main interface for fetching quotes.

    It coordinates:
    - Response caching
    - Per-provider throttling
    - Provider health tracking
    - Fallback when the default provider fails

    Usage:
        async with create_aggregator() as aggregator:
            result = await aggregator.get_quote("aapl")
            if result.ok:
                print(result.quote.price)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        throttle: ThrottleController,
        cache: ResponseCache,
        health: ProviderHealthTracker,
        default_provider: ProviderLike = Provider.FINNHUB,
    ):
        self.registry = registry
        self.throttle = throttle
        self.cache = cache
        self.health = health
        self._default_provider = resolve_provider(default_provider)
        self._initialized = False

    # ==================== Lifecycle ====================

    async def initialize(self) -> None:
        """Initialize all registered providers."""
        if self._initialized:
            return
        await self.registry.initialize_all()
        self._initialized = True
        logger.info(
            f"Quote aggregator initialized (default provider: {self._default_provider.value})"
        )

    async def close(self) -> None:
        """Shutdown all providers."""
        await self.registry.close_all()
        self._initialized = False

    async def __aenter__(self) -> "QuoteAggregator":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ==================== Default Provider ====================

    @property
    def default_provider(self) -> Provider:
        return self._default_provider

    def set_default_provider(self, name: ProviderLike) -> Provider:
        """
        Change the default provider.

        Raises:
            ConfigurationError: If the name is not a supported provider. The
                current default is left unchanged.
        """
        provider = resolve_provider(name)
        self._default_provider = provider
        logger.info(f"Default quote provider set to {provider.value}")
        return provider

    # ==================== Quote Operations ====================

    async def get_quote(
        self,
        symbol: str,
        provider: Optional[ProviderLike] = None,
        use_cache: bool = True,
    ) -> QuoteResult:
        """
        Get a quote for a symbol.

        Args:
            symbol: Ticker symbol (case and surrounding whitespace are ignored)
            provider: Provider to query, defaults to the current default provider
            use_cache: Read from and write to the response cache

        Returns:
            QuoteResult carrying either a Quote or an ErrorPayload

        Raises:
            ValidationError: If the symbol is empty
            ConfigurationError: If the provider is unknown
        """
        canonical = normalize_symbol(symbol)
        target = self._default_provider if provider is None else resolve_provider(provider)
        return await self._fetch(canonical, target, use_cache, allow_fallback=True)

    def cache_key(self, symbol: str, provider: Provider) -> str:
        return self.cache.make_key(
            CACHE_OPERATION,
            {"symbol": symbol, "provider": provider.value},
        )

    async def _fetch(
        self,
        symbol: str,
        provider: Provider,
        use_cache: bool,
        allow_fallback: bool,
    ) -> QuoteResult:
        key = self.cache_key(symbol, provider)

        if use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for quote: {symbol} ({provider.value})")
                return QuoteResult.success(replace(cached, cached=True, timestamp=utcnow()))

        adapter = self.registry.get(provider)

        try:
            await self.throttle.acquire(provider.value)
            quote = await adapter.get_quote(symbol)
        except Exception as e:
            payload = self._to_payload(symbol, provider, e)
            logger.error(
                f"Quote request failed for {symbol} via {provider.value}: "
                f"{payload.code.value} {payload.message}"
            )
            await self.health.record_outcome(provider.value, success=False, error=payload.message)

            if allow_fallback and provider == self._default_provider:
                fallback = select_fallback(provider, self.health)
                logger.warning(
                    f"Default provider {provider.value} failed for {symbol}, "
                    f"falling back to {fallback.value}"
                )
                return await self._fetch(symbol, fallback, use_cache, allow_fallback=False)

            return QuoteResult.failure(payload)

        quote.data_retrieval_success = True
        quote.retrieval_time = utcnow()
        await self.health.record_outcome(provider.value, success=True)

        if use_cache:
            self.cache.put(key, replace(quote))

        return QuoteResult.success(quote)

    @staticmethod
    def _to_payload(symbol: str, provider: Provider, error: Exception) -> ErrorPayload:
        if isinstance(error, ProviderError):
            return error.to_payload(symbol)
        return ErrorPayload(
            symbol=symbol,
            message=str(error) or error.__class__.__name__,
            code=ErrorCode.UNKNOWN_ERROR,
            provider=provider,
        )

    # ==================== Status & Monitoring ====================

    def get_status(self) -> dict[str, Any]:
        """Get comprehensive status of the aggregator."""
        return {
            "initialized": self._initialized,
            "default_provider": self._default_provider.value,
            "providers": {
                provider.value: {
                    "health": self.health.get_health(provider.value),
                    "throttle": self.throttle.get_stats(provider.value),
                }
                for provider in self.registry.providers
            },
            "cache": self.cache.get_stats(),
        }
