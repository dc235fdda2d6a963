"""
Command-line quote lookup.

Usage:
    python -m market_quotes AAPL MSFT --provider polygon --no-cache

Prints one JSON document per symbol on stdout. Logs go to stderr.
Exit codes: 0 all quotes retrieved, 1 at least one error result,
2 invalid arguments or configuration.
"""
import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from loguru import logger
from pydantic import ValidationError as SettingsValidationError

from market_quotes import __version__
from market_quotes.config import VALID_LOG_LEVELS
from market_quotes.data_providers.adapters.base import Provider, QuoteResult
from market_quotes.data_providers.orchestrator import normalize_symbol
from market_quotes.data_providers.provider_init import create_aggregator
from market_quotes.utils.exceptions import MarketQuotesException
from market_quotes.utils.logger import setup_logging


EXIT_OK = 0
EXIT_QUOTE_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="market_quotes",
        description="Fetch normalized stock quotes from Finnhub, Alpha Vantage or Polygon",
    )
    parser.add_argument("symbols", nargs="+", metavar="SYMBOL", help="Ticker symbols to quote")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in Provider],
        help="Default provider for this run (overrides DEFAULT_QUOTE_PROVIDER)",
    )
    parser.add_argument("--no-cache", action="store_true", help="Bypass the response cache")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help="Console log level (overrides LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def fetch_quotes(
    symbols: Sequence[str],
    provider: Optional[str] = None,
    use_cache: bool = True,
) -> list[QuoteResult]:
    """Fetch every symbol concurrently through one aggregator."""
    canonical = [normalize_symbol(symbol) for symbol in symbols]

    async with create_aggregator() as aggregator:
        if provider:
            aggregator.set_default_provider(provider)

        return list(await asyncio.gather(*(
            aggregator.get_quote(symbol, use_cache=use_cache)
            for symbol in canonical
        )))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        setup_logging(level=args.log_level)
        results = asyncio.run(fetch_quotes(
            args.symbols,
            provider=args.provider,
            use_cache=not args.no_cache,
        ))
    except (MarketQuotesException, SettingsValidationError) as e:
        logger.error(f"{e}")
        return EXIT_USAGE_ERROR

    for result in results:
        print(json.dumps(result.to_dict()))

    failed = [result.symbol for result in results if result.is_error]
    if failed:
        logger.warning(f"Quote retrieval failed for: {', '.join(failed)}")
        return EXIT_QUOTE_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
