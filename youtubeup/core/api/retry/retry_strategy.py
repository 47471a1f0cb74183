"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Optional

from ..errors import NetworkErrorKind


class RetryStrategy(ABC):
    """Abstract retry strategy."""
    
    @abstractmethod
    def should_retry(self, kind: Optional[NetworkErrorKind]) -> bool:
        """Determines if a failure of the given kind is retried."""
        pass
    
    @abstractmethod
    def delay(self, attempt: int) -> float:
        """Returns seconds to wait before the given retry attempt."""
        pass
    
    async def wait_async(self, attempt: int):
        """Waits before retry."""
        await asyncio.sleep(self.delay(attempt))


class FixedDelayStrategy(RetryStrategy):
    """
    Retries qualifying network failures forever with a fixed delay.
    
    There is no attempt limit: a long upload keeps going until the network
    comes back or a non-qualifying error ends it.
    """
    
    def __init__(self, retry_delay: float, retry_on: Iterable[NetworkErrorKind]):
        self._retry_delay = retry_delay
        self._retry_on: FrozenSet[NetworkErrorKind] = frozenset(retry_on)
    
    @property
    def retry_on(self) -> FrozenSet[NetworkErrorKind]:
        return self._retry_on
    
    def should_retry(self, kind: Optional[NetworkErrorKind]) -> bool:
        """Only network failures in the qualifying set are retried."""
        return kind is not None and kind in self._retry_on
    
    def delay(self, attempt: int) -> float:
        return self._retry_delay
