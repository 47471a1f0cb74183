"""Network-level error taxonomy for the HTTP transport."""
import asyncio
import errno
from enum import Enum
from typing import FrozenSet

import aiohttp

from ...exceptions import UploaderException


class NetworkErrorKind(str, Enum):
    """Closed set of network failure kinds."""
    
    RESET = 'reset'
    TIMEOUT = 'timeout'
    OS_RESET = 'os_reset'
    CONNECT = 'connect'
    OTHER = 'other'


RESET_ERRNOS: FrozenSet[int] = frozenset({
    errno.ECONNRESET,
    errno.ECONNABORTED,
    errno.EPIPE,
    errno.ETIMEDOUT,
})


class TransportError(UploaderException):
    """Raised by a transport when a request fails below the HTTP layer."""
    
    def __init__(self, kind: NetworkErrorKind, cause: BaseException) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"{kind.value}: {cause!r}")


def classify_network_error(exc: BaseException) -> NetworkErrorKind:
    """
    Map a raw network exception onto a NetworkErrorKind.
    
    Order matters: several aiohttp errors inherit from OSError or
    asyncio.TimeoutError.
    """
    if isinstance(exc, aiohttp.ClientConnectorError):
        return NetworkErrorKind.CONNECT
    if isinstance(exc, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
        return NetworkErrorKind.TIMEOUT
    if isinstance(exc, (aiohttp.ServerDisconnectedError, ConnectionResetError, BrokenPipeError)):
        return NetworkErrorKind.RESET
    if isinstance(exc, OSError) and exc.errno in RESET_ERRNOS:
        return NetworkErrorKind.OS_RESET
    return NetworkErrorKind.OTHER
