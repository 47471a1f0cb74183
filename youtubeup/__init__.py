"""
youtubeup - Resumable video uploads over HTTP.

Usage:
    >>> from youtubeup import YouTubeUploader, BearerCredentials, VideoMetadata
    >>>
    >>> async with YouTubeUploader(BearerCredentials(token)) as uploader:
    ...     result = await uploader.upload("talk.mp4", VideoMetadata(title="Talk"))
    ...     print(result.video_id)
"""
import logging
from .client import YouTubeUploader

# Configuration and transport
from .core.api import (
    UploaderConfig,
    ProxyConfig,
    TimeoutConfig,
    RetryConfig,
    BearerCredentials,
    AiohttpTransport,
    NetworkErrorKind,
    Playlist
)

# Sessions
from .core.session import SessionStore, SidecarSessionStore, UploadSession

# Upload engine
from .core.upload import (
    UploadCoordinator,
    UploadProgress,
    UploadResult,
    UploadState,
    VideoMetadata
)

from .core.exceptions import (
    UploaderException,
    ConfigurationError,
    ProtocolError,
    RangeHeaderError,
    SessionError,
    UploadFailedError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for youtubeup modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'youtubeup',
        'youtubeup.api',
        'youtubeup.session',
        'youtubeup.playlist',
        'youtubeup.upload.file',
        'youtubeup.upload.probe',
        'youtubeup.upload.transfer',
        'youtubeup.upload.coordinator',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'YouTubeUploader',
    'UploaderConfig',
    'ProxyConfig',
    'TimeoutConfig',
    'RetryConfig',
    'BearerCredentials',
    'AiohttpTransport',
    'NetworkErrorKind',
    'Playlist',
    'SessionStore',
    'SidecarSessionStore',
    'UploadSession',
    'UploadCoordinator',
    'UploadProgress',
    'UploadResult',
    'UploadState',
    'VideoMetadata',
    'UploaderException',
    'ConfigurationError',
    'ProtocolError',
    'RangeHeaderError',
    'SessionError',
    'UploadFailedError',
    'setup_logging',
]
