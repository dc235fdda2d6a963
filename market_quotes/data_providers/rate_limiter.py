"""
Rate Limiter

Fixed-window request throttling with per-provider minimum spacing.
Each provider gets a per-minute request budget and a minimum delay
between consecutive requests; callers are suspended, never rejected.
"""
import asyncio
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Callable, Awaitable
from loguru import logger


WINDOW_SECONDS = 60.0

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class ThrottleConfig:
    """Throttle limits for a provider."""
    requests_per_minute: int
    min_interval_seconds: float = 0.0


@dataclass
class ThrottleState:
    """Mutable throttle counters for a provider."""
    last_request: Optional[float] = None
    request_count: int = 0
    window_reset: Optional[float] = None

    def window_expired(self, now: float) -> bool:
        return self.window_reset is None or now > self.window_reset

    def start_window(self, now: float) -> None:
        self.request_count = 0
        self.window_reset = now + WINDOW_SECONDS


class ThrottleController:
    """
    Per-provider request throttle.

    Two limits apply to every acquire:
    - a fixed 60 second window capped at requests_per_minute
    - a minimum interval since the previous request

    The whole acquire, sleeps included, runs under one lock per provider so
    concurrent callers cannot both observe spare capacity.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None,
    ):
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._configs: dict[str, ThrottleConfig] = {}
        self._states: dict[str, ThrottleState] = {}
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def configure(self, provider: str, config: ThrottleConfig) -> None:
        """Configure throttle limits for a provider."""
        if config.requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        if config.min_interval_seconds < 0:
            raise ValueError("min_interval_seconds cannot be negative")

        self._configs[provider] = config
        self._states.setdefault(provider, ThrottleState())
        logger.info(f"Throttle configured for {provider}: {config}")

    def is_configured(self, provider: str) -> bool:
        return provider in self._configs

    async def acquire(self, provider: str) -> None:
        """
        Wait until a request to the provider may be issued.

        Args:
            provider: Provider name
        """
        config = self._configs.get(provider)
        if config is None:
            # No throttle configured, allow all
            return

        async with self._locks[provider]:
            state = self._states[provider]
            now = self._clock()

            if state.window_expired(now):
                state.start_window(now)

            if state.request_count >= config.requests_per_minute:
                wait_time = max(0.0, state.window_reset - now)
                logger.debug(
                    f"Throttle: {provider} window exhausted, waiting {wait_time:.2f}s"
                )
                await self._sleep(wait_time)
                now = self._clock()
                state.start_window(now)

            if state.last_request is not None:
                elapsed = now - state.last_request
                if elapsed < config.min_interval_seconds:
                    delay = config.min_interval_seconds - elapsed
                    logger.debug(f"Throttle: spacing {provider} by {delay:.3f}s")
                    await self._sleep(delay)
                    now = self._clock()

            state.last_request = now
            state.request_count += 1

    def get_stats(self, provider: str) -> dict:
        """Get throttle statistics for a provider."""
        config = self._configs.get(provider)
        if not config:
            return {"configured": False}

        state = self._states[provider]
        now = self._clock()
        if state.window_expired(now):
            count = 0
            reset_in = 0.0
        else:
            count = state.request_count
            reset_in = state.window_reset - now

        return {
            "configured": True,
            "limits": {
                "per_minute": config.requests_per_minute,
                "min_interval_seconds": config.min_interval_seconds,
            },
            "requests_in_window": count,
            "remaining": max(0, config.requests_per_minute - count),
            "window_reset_in": round(reset_in, 3),
        }

    def reset(self, provider: str) -> None:
        """Reset throttle counters for a provider."""
        if provider in self._states:
            self._states[provider] = ThrottleState()
            logger.info(f"Throttle state reset for {provider}")
