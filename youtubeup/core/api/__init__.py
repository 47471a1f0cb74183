"""Transport, configuration and playlist API."""
from .config import (
    UploaderConfig,
    ProxyConfig,
    TimeoutConfig,
    RetryConfig,
    UPLOAD_URL,
    API_URL
)
from .errors import NetworkErrorKind, TransportError, classify_network_error
from .retry import RetryStrategy, FixedDelayStrategy
from .auth import Credentials, BearerCredentials, DEFAULT_TOKEN_FILE
from .transport import Transport, TransportRequest, TransportResponse, AiohttpTransport
from .playlist import Playlist, PlaylistService

__all__ = [
    # Configuration
    'UploaderConfig',
    'ProxyConfig',
    'TimeoutConfig',
    'RetryConfig',
    'UPLOAD_URL',
    'API_URL',

    # Errors
    'NetworkErrorKind',
    'TransportError',
    'classify_network_error',

    # Retry
    'RetryStrategy',
    'FixedDelayStrategy',

    # Transport
    'Credentials',
    'BearerCredentials',
    'DEFAULT_TOKEN_FILE',
    'Transport',
    'TransportRequest',
    'TransportResponse',
    'AiohttpTransport',

    # Playlists
    'Playlist',
    'PlaylistService',
]
