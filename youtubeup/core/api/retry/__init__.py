"""Retry strategies using Strategy Pattern."""
from .retry_strategy import RetryStrategy, FixedDelayStrategy

__all__ = [
    'RetryStrategy',
    'FixedDelayStrategy',
]
