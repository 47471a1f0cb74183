"""
Authenticated HTTP transport.

The upload engine only talks to the network through a Transport. The
aiohttp implementation lives here; tests inject fakes with the same shape.
"""
import asyncio
import json
from dataclasses import dataclass, field
from typing import (
    Any, AsyncIterator, Mapping, Optional, Protocol, Union, runtime_checkable
)

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from ..logging import get_logger
from .auth import Credentials
from .config import UploaderConfig
from .errors import TransportError, classify_network_error


Body = Union[bytes, AsyncIterator[bytes], None]


@dataclass(frozen=True)
class TransportRequest:
    """
    A single HTTP request.

    Attributes:
        method: HTTP verb
        url: Absolute URL
        headers: Request headers
        body: Raw bytes, an async iterator of chunks (streamed), or None
        timeout: Optional per-request timeout overriding the session default
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Body = None
    timeout: Optional[aiohttp.ClientTimeout] = None


@dataclass(frozen=True)
class TransportResponse:
    """
    A fully read HTTP response.

    Headers are case-insensitive.
    """
    status: int
    headers: CIMultiDictProxy = field(default_factory=lambda: CIMultiDictProxy(CIMultiDict()))
    body: bytes = b''

    @classmethod
    def build(
        cls,
        status: int,
        headers: Optional[Mapping[str, str]] = None,
        body: Union[bytes, str] = b''
    ) -> 'TransportResponse':
        """Create a response from plain values."""
        if isinstance(body, str):
            body = body.encode('utf-8')
        return cls(status, CIMultiDictProxy(CIMultiDict(headers or {})), body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> Optional[str]:
        """Get a header value, case-insensitively."""
        return self.headers.get(name)

    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body.decode('utf-8'))


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for authenticated HTTP executors.

    Implementations must be safe to use from concurrent tasks and must
    raise TransportError for failures below the HTTP layer.
    """

    async def send(self, request: TransportRequest) -> TransportResponse:
        """
        Execute a request.

        Args:
            request: Request to execute

        Returns:
            Response with the whole body read

        Raises:
            TransportError: On connection, timeout or socket failures
        """
        ...


class AiohttpTransport:
    """
    Transport backed by an aiohttp ClientSession.

    The session is created lazily and closed on exit unless it was passed
    in by the caller.

    Example:
        >>> async with AiohttpTransport(credentials) as transport:
        ...     response = await transport.send(TransportRequest('GET', url))
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        config: Optional[UploaderConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            credentials: Supplies the Authorization header
            config: Uploader configuration (user agent, proxy, timeouts)
            session: Optional shared aiohttp session
        """
        self._credentials = credentials
        self._config = config or UploaderConfig.default()
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger('youtubeup.api')

    async def __aenter__(self) -> 'AiohttpTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(**self._config.get_session_kwargs())
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _build_headers(self, request: TransportRequest) -> CIMultiDict:
        headers = CIMultiDict(request.headers)
        if self._credentials is not None:
            headers['Authorization'] = self._credentials.authorization_header()
        return headers

    async def send(self, request: TransportRequest) -> TransportResponse:
        session = await self._ensure_session()
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

        kwargs = {}
        if request.timeout is not None:
            kwargs['timeout'] = request.timeout

        self._logger.debug(f"{request.method} {request.url}")

        try:
            async with session.request(
                request.method,
                request.url,
                headers=self._build_headers(request),
                data=request.body,
                proxy=proxy,
                # 308 is "resume incomplete" here, not a redirect
                allow_redirects=False,
                **kwargs
            ) as response:
                body = await response.read()
                self._logger.debug(f"{request.method} {request.url} -> HTTP {response.status}")
                return TransportResponse(
                    status=response.status,
                    headers=CIMultiDictProxy(CIMultiDict(response.headers)),
                    body=body
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            kind = classify_network_error(e)
            self._logger.debug(f"{request.method} {request.url} failed ({kind.value}): {e!r}")
            raise TransportError(kind, e) from e
