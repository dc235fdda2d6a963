"""
Provider Registry

Maps each Provider to its adapter instance.
"""
from typing import Iterator
from loguru import logger

from market_quotes.data_providers.adapters.base import BaseAdapter, Provider
from market_quotes.utils.exceptions import ConfigurationError


class ProviderRegistry:
    """Registered quote adapters, keyed by provider."""

    def __init__(self):
        self._adapters: dict[Provider, BaseAdapter] = {}

    def register(self, adapter: BaseAdapter) -> None:
        """Register an adapter, replacing any adapter for the same provider."""
        if adapter.name in self._adapters:
            logger.warning(f"Replacing adapter for {adapter.name.value}")
        self._adapters[adapter.name] = adapter
        logger.info(f"Registered provider: {adapter.name.value}")

    def get(self, provider: Provider) -> BaseAdapter:
        """
        Get the adapter for a provider.

        Raises:
            ConfigurationError: If no adapter is registered for the provider
        """
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise ConfigurationError(
                f"Provider {provider.value} is not registered",
                details={"provider": provider.value},
            )
        return adapter

    @property
    def providers(self) -> list[Provider]:
        return list(self._adapters.keys())

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters

    def __iter__(self) -> Iterator[BaseAdapter]:
        return iter(list(self._adapters.values()))

    def __len__(self) -> int:
        return len(self._adapters)

    async def initialize_all(self) -> None:
        """Open an HTTP session for every adapter."""
        for adapter in self:
            await adapter.initialize()

    async def close_all(self) -> None:
        """Close every adapter's HTTP session."""
        for adapter in self:
            try:
                await adapter.close()
            except Exception as e:
                logger.error(f"Error closing provider {adapter.name.value}: {e}")
