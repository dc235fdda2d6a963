"""
Market Quotes

Normalized stock quotes from multiple upstream providers with caching,
throttling, health tracking and fallback.
"""
__version__ = "1.0.0"
