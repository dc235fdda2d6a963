"""
Base Provider Adapter Interface

Defines the closed provider set, the canonical quote record, the provider
error taxonomy and the abstract interface every quote adapter implements:
fetch_raw() performs the live upstream call, normalize() validates the raw
payload and maps it to a canonical Quote.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Any
import asyncio
import math
import aiohttp
from loguru import logger

from market_quotes.utils.exceptions import MarketDataError


class Provider(str, Enum):
    """Supported upstream quote providers."""
    FINNHUB = "finnhub"
    ALPHA_VANTAGE = "alpha_vantage"
    POLYGON = "polygon"


class ErrorCode(str, Enum):
    """Error codes reported by adapters and the aggregator."""
    INVALID_RESPONSE = "INVALID_RESPONSE"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NO_DATA = "NO_DATA"
    INCOMPLETE_DATA = "INCOMPLETE_DATA"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProviderConfig:
    """Configuration for a quote provider."""
    name: Provider
    api_key: str = ""
    base_url: str = ""

    # Rate limiting
    requests_per_minute: int = 60
    min_request_interval: float = 0.0  # seconds between requests

    # Timeouts
    timeout_seconds: float = 15.0


@dataclass
class Quote:
    """Normalized quote data structure."""
    symbol: str
    price: float
    change: float
    percent_change: float
    high: float
    low: float
    open: float
    previous_close: float
    source: Provider
    timestamp: datetime = field(default_factory=utcnow)

    # Set by the aggregator
    data_retrieval_success: bool = False
    retrieval_time: Optional[datetime] = None
    cached: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "change": self.change,
            "percent_change": self.percent_change,
            "high": self.high,
            "low": self.low,
            "open": self.open,
            "previous_close": self.previous_close,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source.value,
            "data_retrieval_success": self.data_retrieval_success,
            "retrieval_time": self.retrieval_time.isoformat() if self.retrieval_time else None,
            "cached": self.cached,
        }


@dataclass
class ErrorPayload:
    """Structured description of a failed quote request."""
    symbol: str
    message: str
    code: ErrorCode
    provider: Provider
    retryable: bool = True
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "error": True,
            "message": self.message,
            "code": self.code.value,
            "provider": self.provider.value,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
            "data_retrieval_success": False,
        }


@dataclass
class QuoteResult:
    """Outcome of a quote request: exactly one of quote or error is set."""
    quote: Optional[Quote] = None
    error: Optional[ErrorPayload] = None

    def __post_init__(self) -> None:
        if (self.quote is None) == (self.error is None):
            raise ValueError("QuoteResult requires exactly one of quote or error")

    @classmethod
    def success(cls, quote: Quote) -> "QuoteResult":
        return cls(quote=quote)

    @classmethod
    def failure(cls, error: ErrorPayload) -> "QuoteResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.quote is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def kind(self) -> str:
        return "quote" if self.ok else "error"

    @property
    def symbol(self) -> str:
        return self.quote.symbol if self.quote is not None else self.error.symbol

    def to_dict(self) -> dict[str, Any]:
        if self.quote is not None:
            return self.quote.to_dict()
        return self.error.to_dict()


class ProviderError(MarketDataError):
    """Upstream fetch or normalization failure."""
    def __init__(
        self,
        provider: Provider,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        retryable: bool = True,
    ):
        self.provider = provider
        self.retryable = retryable
        self.timestamp = utcnow()
        super().__init__(message=message, code=code)

    def __str__(self) -> str:
        return f"[{self.provider.value}] {self.message}"

    def to_payload(self, symbol: str) -> ErrorPayload:
        return ErrorPayload(
            symbol=symbol,
            message=self.message,
            code=self.code,
            provider=self.provider,
            retryable=self.retryable,
            timestamp=self.timestamp,
        )


def to_finite(provider: Provider, field_name: str, value: Any) -> float:
    """
    Convert a raw upstream value to a finite float.

    Raises:
        ProviderError: INVALID_RESPONSE if the value is missing, boolean,
            unparseable, NaN or infinite
    """
    if value is None or isinstance(value, bool):
        number = None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = None

    if number is None or not math.isfinite(number):
        raise ProviderError(
            provider,
            f"Invalid value for field {field_name}: {value!r}",
            code=ErrorCode.INVALID_RESPONSE,
            retryable=False,
        )
    return number


class BaseAdapter(ABC):
    """
    Abstract base class for all quote provider adapters.

    Each provider adapter must implement:
    - fetch_raw(): Perform the upstream call and return the decoded payload
    - normalize(): Validate a raw payload and map it to a canonical Quote
    - _get_auth_headers() / _get_auth_params(): Provider authentication
    """

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.name = config.name
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Initialize HTTP session."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers=self._get_auth_headers(),
            )
            logger.info(f"{self.name.value} adapter initialized")

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
            logger.info(f"{self.name.value} adapter closed")

    def _get_auth_headers(self) -> dict[str, str]:
        """Authentication headers sent with every request."""
        return {}

    def _get_auth_params(self) -> dict[str, str]:
        """Authentication query parameters sent with every request."""
        return {}

    @abstractmethod
    async def fetch_raw(self, symbol: str) -> dict[str, Any]:
        """
        Fetch the raw quote payload for a symbol.

        Args:
            symbol: Canonical (uppercase, trimmed) ticker symbol

        Returns:
            Decoded JSON payload

        Raises:
            ProviderError: If the request fails
        """
        pass

    @abstractmethod
    def normalize(self, symbol: str, raw: dict[str, Any]) -> Quote:
        """
        Validate a raw payload and map it to a canonical Quote.

        Raises:
            ProviderError: If the payload is missing data or malformed
        """
        pass

    async def get_quote(self, symbol: str) -> Quote:
        """Fetch and normalize a quote for a single symbol."""
        raw = await self.fetch_raw(symbol)
        return self.normalize(symbol, raw)

    async def _get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a JSON document, mapping transport failures to ProviderError."""
        if self._session is None:
            await self.initialize()

        query = {**(params or {}), **self._get_auth_params()}

        try:
            async with self._session.get(url, params=query) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise ProviderError(
                        self.name,
                        f"API error {response.status}: {error_text[:200]}",
                        code=ErrorCode.PROVIDER_ERROR,
                        retryable=response.status == 429 or response.status >= 500,
                    )

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ProviderError(
                        self.name,
                        f"Invalid JSON response: {e}",
                        code=ErrorCode.INVALID_RESPONSE,
                        retryable=False,
                    )

        except aiohttp.ClientError as e:
            raise ProviderError(self.name, f"Connection error: {e}")
        except asyncio.TimeoutError:
            raise ProviderError(
                self.name,
                f"Request timed out after {self.config.timeout_seconds}s",
            )

    def _build_quote(self, symbol: str, **fields: float) -> Quote:
        return Quote(symbol=symbol, source=self.name, **fields)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name.value})>"
