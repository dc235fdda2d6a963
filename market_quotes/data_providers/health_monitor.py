"""
Provider Health Monitor

Tracks consecutive failures per provider and flags a provider as
non-operational once the failure threshold is reached. A single success
restores it.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from collections import defaultdict
from loguru import logger

from market_quotes.data_providers.adapters.base import utcnow


DEFAULT_FAILURE_THRESHOLD = 3


@dataclass
class ProviderHealth:
    """Health state for a provider."""
    provider: str
    operational: bool = True
    error_count: int = 0
    last_checked: datetime = field(default_factory=utcnow)
    last_error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "operational": self.operational,
            "error_count": self.error_count,
            "last_checked": self.last_checked.isoformat(),
            "last_error": self.last_error,
        }


class ProviderHealthTracker:
    """
    Monitors health status of quote providers.

    Updates for a provider are serialized with one lock per provider.
    Providers that have never been seen are considered operational.
    """

    def __init__(self, failure_threshold: int = DEFAULT_FAILURE_THRESHOLD):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        self.failure_threshold = failure_threshold
        self._health: dict[str, ProviderHealth] = {}
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def register(self, provider: str) -> None:
        """Start tracking a provider."""
        self._get_or_create(provider)

    def _get_or_create(self, provider: str) -> ProviderHealth:
        if provider not in self._health:
            self._health[provider] = ProviderHealth(provider=provider)
        return self._health[provider]

    async def record_outcome(
        self,
        provider: str,
        success: bool,
        error: Optional[str] = None,
    ) -> None:
        """Record the outcome of a request to a provider."""
        async with self._locks[provider]:
            health = self._get_or_create(provider)
            health.last_checked = utcnow()

            if success:
                if not health.operational:
                    logger.info(f"Provider {provider} is operational again")
                health.operational = True
                health.error_count = 0
                return

            health.error_count += 1
            health.last_error = error

            if health.error_count >= self.failure_threshold:
                if health.operational:
                    logger.warning(
                        f"Provider {provider} marked non-operational after "
                        f"{health.error_count} consecutive errors. Last error: {error}"
                    )
                health.operational = False

    def is_operational(self, provider: str) -> bool:
        health = self._health.get(provider)
        return health.operational if health else True

    def get_health(self, provider: str) -> dict:
        """Get health status for a provider."""
        health = self._health.get(provider)
        if not health:
            return {
                "provider": provider,
                "configured": False,
                "operational": True,
                "error_count": 0,
            }
        return {"configured": True, **health.to_dict()}

    def get_all_health(self) -> dict[str, dict]:
        return {
            provider: self.get_health(provider)
            for provider in self._health.keys()
        }

    def reset(self, provider: str) -> None:
        """Reset health state for a provider."""
        if provider in self._health:
            self._health[provider] = ProviderHealth(provider=provider)
            logger.info(f"Health state reset for {provider}")
