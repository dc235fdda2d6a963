"""
Failover Selection

Chooses the alternate provider tried after the default provider fails.
"""
from market_quotes.data_providers.adapters.base import Provider
from market_quotes.data_providers.health_monitor import ProviderHealthTracker


def fallback_candidates(failed: Provider) -> list[Provider]:
    """Other providers, in declaration order."""
    return [provider for provider in Provider if provider != failed]


def select_fallback(failed: Provider, health: ProviderHealthTracker) -> Provider:
    """
    Select the provider to try after `failed`.

    The first candidate is used when operational, otherwise the next one
    is used without checking its own health.
    """
    candidates = fallback_candidates(failed)
    for candidate in candidates[:-1]:
        if health.is_operational(candidate.value):
            return candidate
    return candidates[-1]
