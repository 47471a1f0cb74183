"""
Uploader configuration module.

Configuration is plain dataclasses handed to the transport and the
coordinator by value. Nothing here is process-global.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, FrozenSet

import aiohttp
from yarl import URL

from ..exceptions import ConfigurationError
from .errors import NetworkErrorKind
from .retry import FixedDelayStrategy


UPLOAD_URL = (
    "https://www.googleapis.com/upload/youtube/v3/videos"
    "?uploadType=resumable&part=snippet,status,contentDetails"
)
API_URL = "https://www.googleapis.com/youtube/v3/"


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            return str(URL(self.url).with_user(self.username).with_password(self.password))

        return self.url


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    The transfer PUT can run for hours, so it has no total timeout by
    default. Probes and metadata requests are short and get one.
    """
    total: Optional[float] = None  # Transfer request timeout
    connect: float = 30.0  # Connection timeout
    sock_read: Optional[float] = None  # Socket read timeout
    probe_total: float = 60.0  # Probe, session and playlist request timeout

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        """Convert to aiohttp ClientTimeout for the transfer request."""
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read
        )

    def to_probe_timeout(self) -> aiohttp.ClientTimeout:
        """Convert to aiohttp ClientTimeout for short requests."""
        return aiohttp.ClientTimeout(total=self.probe_total, connect=self.connect)


@dataclass
class RetryConfig:
    """
    Retry configuration.

    Attributes:
        poll_interval: Seconds between progress probes during a transfer
        retry_delay: Seconds to wait before re-probing after a network failure
        retry_on: Network failure kinds that trigger a retry
    """
    poll_interval: float = 10.0
    retry_delay: float = 60.0
    retry_on: FrozenSet[NetworkErrorKind] = frozenset({
        NetworkErrorKind.RESET,
        NetworkErrorKind.TIMEOUT,
        NetworkErrorKind.OS_RESET,
    })

    def create_strategy(self) -> FixedDelayStrategy:
        """Build the retry strategy described by this config."""
        return FixedDelayStrategy(self.retry_delay, self.retry_on)


@dataclass
class UploaderConfig:
    """
    Complete uploader configuration.

    Attributes:
        upload_url: Session initiation endpoint (resumable upload mode)
        api_url: Base URL of the data API, used for playlists
        content_type: Media type declared for the uploaded bytes
        user_agent: User-Agent header sent with every request
        chunk_size: Read size used while streaming the request body
        timeout: Timeouts for transfer and short requests
        retry: Poll interval and retry policy
        proxy: Optional proxy
    """
    upload_url: str = UPLOAD_URL
    api_url: str = API_URL
    content_type: str = 'video/*'
    user_agent: str = 'youtube-up/1.0.0'
    chunk_size: int = 256 * 1024
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    proxy: Optional[ProxyConfig] = None
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> 'UploaderConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'UploaderConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    def validate(self) -> 'UploaderConfig':
        """
        Check the endpoint URLs and sizes.

        Raises:
            ConfigurationError: If a URL is not absolute http(s) or a size is invalid
        """
        for name in ('upload_url', 'api_url'):
            value = getattr(self, name)
            try:
                url = URL(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Malformed {name}: {value!r} ({e})")
            if url.scheme not in ('http', 'https') or not url.host:
                raise ConfigurationError(f"Malformed {name}: {value!r}")

        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.retry.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.retry.retry_delay < 0:
            raise ConfigurationError("retry_delay cannot be negative")

        return self

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
